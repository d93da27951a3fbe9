"""Page contexts handed to the renderer."""

from pydantic import BaseModel

from quick_deploy.models.deploy_config import DeployConfigSpec
from quick_deploy.models.fastly import FastlyUser
from quick_deploy.models.github import GitHubRepository, GitHubUser


class IndexPage(BaseModel):
    button_nwo: str | None = None


class DeployPage(BaseModel):
    """Everything the deploy wizard shows for a source repository."""

    src: GitHubRepository
    dest_nwo: str | None = None
    github_user: GitHubUser | None = None
    fastly_user: FastlyUser | None = None
    can_fork: bool = False
    can_deploy: bool = False
    config_spec: DeployConfigSpec | None = None


class SuccessPage(BaseModel):
    application_url: str
    actions_url: str
    repo_nwo: str
    service_id: str


class DeploymentStatusPage(BaseModel):
    service_id: str
    domain: str | None = None
    active: bool
    application_url: str | None = None
