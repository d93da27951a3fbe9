"""GitHub API data models."""

from pydantic import BaseModel


class GitHubUser(BaseModel):
    """A GitHub account."""

    login: str
    name: str | None = None


class GitHubRepository(BaseModel):
    """The subset of a GitHub repository the wizard uses."""

    name: str
    full_name: str
    default_branch: str = "main"
    owner: GitHubUser
    forks_count: int = 0
    stargazers_count: int = 0
    is_template: bool = False


class GitHubFile(BaseModel):
    """A decoded file from the contents API.

    ``sha`` is the blob sha at read time; writes are conditioned on it.
    """

    path: str
    content: str
    sha: str


class RepositoryPublicKey(BaseModel):
    """Public key used to seal Actions secrets for a repository."""

    key: str
    key_id: str
