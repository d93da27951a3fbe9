"""GitHub REST API client."""

import base64
import binascii

import httpx

from quick_deploy.core.exceptions import AuthError, ExternalApiError
from quick_deploy.models.github import (
    GitHubFile,
    GitHubRepository,
    GitHubUser,
    RepositoryPublicKey,
)
from quick_deploy.services.base import ApiClient


class GitHubClient(ApiClient):
    """GitHub client acting as the signed-in user, or anonymously.

    Anonymous clients can only read public data.
    """

    provider = "github"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        user_agent: str = "Quick Deploy",
    ):
        super().__init__(http_client, base_url, user_agent)
        self.token = token

    def with_token(self, token: str | None) -> "GitHubClient":
        """A client for the same API acting with ``token``."""
        return GitHubClient(
            self._http, token=token, base_url=self._base_url, user_agent=self._user_agent
        )

    def anonymous(self) -> "GitHubClient":
        """A client for the same API without the user's credential."""
        return self.with_token(None)

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _require_token(self) -> None:
        if not self.token:
            raise AuthError("Sign in with GitHub to continue", provider=self.provider)

    async def fetch_user(self) -> GitHubUser:
        self._require_token()
        resp = await self._send("GET", "/user")
        self._raise_for_status(resp, "Unable to fetch logged in user from GitHub")
        return GitHubUser.model_validate(resp.json())

    async def fetch_repository(self, nwo: str) -> GitHubRepository | None:
        """Fetch a repository, or ``None`` if it does not exist."""
        resp = await self._send("GET", f"/repos/{nwo}")
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp, f"Unable to fetch GitHub repository {nwo}")
        return GitHubRepository.model_validate(resp.json())

    async def generate_repository(self, template_nwo: str, name: str) -> GitHubRepository:
        """Create a new repository from a template repository."""
        self._require_token()
        resp = await self._send(
            "POST", f"/repos/{template_nwo}/generate", json={"name": name}
        )
        self._raise_for_status(resp, f"Unable to fork GitHub repository {template_nwo}")
        return GitHubRepository.model_validate(resp.json())

    async def fork_repository(self, nwo: str, name: str) -> GitHubRepository:
        self._require_token()
        resp = await self._send("POST", f"/repos/{nwo}/forks", json={"name": name})
        self._raise_for_status(resp, f"Unable to fork GitHub repository {nwo}")
        return GitHubRepository.model_validate(resp.json())

    async def enable_workflow(self, nwo: str, workflow: str) -> None:
        self._require_token()
        resp = await self._send(
            "PUT", f"/repos/{nwo}/actions/workflows/{workflow}/enable"
        )
        self._raise_for_status(resp, f"Unable to enable workflow {workflow} in {nwo}")

    async def get_file(self, nwo: str, path: str) -> GitHubFile | None:
        """Read and decode a file, or ``None`` if it does not exist."""
        resp = await self._send("GET", f"/repos/{nwo}/contents/{path}")
        if resp.status_code == 404:
            return None
        self._raise_for_status(
            resp, f"Unable to fetch {path} file from GitHub repository {nwo}"
        )

        body = resp.json()
        # Directories come back as a list of entries
        if not isinstance(body, dict) or not isinstance(body.get("content"), str):
            raise ExternalApiError(
                f"{path} in GitHub repository {nwo} is not a file",
                self.provider,
                resp.status_code,
            )

        try:
            content = base64.b64decode(body["content"].replace("\n", "")).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            raise ExternalApiError(
                f"{path} in GitHub repository {nwo} is not a UTF-8 text file",
                self.provider,
                resp.status_code,
            ) from None

        return GitHubFile(path=body.get("path", path), content=content, sha=body["sha"])

    async def update_file(
        self, nwo: str, file: GitHubFile, content: str, message: str
    ) -> None:
        """Overwrite ``file`` only if it still has the sha it was read with."""
        self._require_token()
        resp = await self._send(
            "PUT",
            f"/repos/{nwo}/contents/{file.path}",
            json={
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "message": message,
                "sha": file.sha,
            },
        )
        self._raise_for_status(resp, f"Unable to update {file.path} in {nwo}")

    async def get_repository_public_key(self, nwo: str) -> RepositoryPublicKey:
        self._require_token()
        resp = await self._send("GET", f"/repos/{nwo}/actions/secrets/public-key")
        self._raise_for_status(resp, f"Unable to fetch public key for {nwo}")
        return RepositoryPublicKey.model_validate(resp.json())

    async def create_secret(
        self, nwo: str, name: str, encrypted_value: str, key_id: str
    ) -> None:
        """Create or update an Actions secret from an already sealed value."""
        self._require_token()
        resp = await self._send(
            "PUT",
            f"/repos/{nwo}/actions/secrets/{name}",
            json={"encrypted_value": encrypted_value, "key_id": key_id},
        )
        self._raise_for_status(resp, "Unable to create secret")
