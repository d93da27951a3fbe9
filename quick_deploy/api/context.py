"""Request-scoped context.

Each request rebuilds its session from the cookie, works on that copy and
writes it back explicitly. Two requests sent with the same cookie do not see
each other's changes; whichever response the browser stores last wins.
"""

from dataclasses import dataclass, field

from fastapi import Response

from quick_deploy.config import Settings
from quick_deploy.core.auth import AuthCoordinator, IdentityView
from quick_deploy.core.exceptions import AuthError
from quick_deploy.core.session import encode_session
from quick_deploy.models.deploy_config import DeployConfigSpec
from quick_deploy.models.github import GitHubFile
from quick_deploy.models.session import DeploymentState, SessionState
from quick_deploy.parsers.deploy_spec import parse_deploy_spec
from quick_deploy.services.fastly import FastlyClient
from quick_deploy.services.github import GitHubClient


@dataclass
class RequestContext:
    """Session state and provider clients for one request."""

    session: SessionState
    settings: Settings
    github: GitHubClient
    fastly: FastlyClient
    auth: AuthCoordinator
    _identity: IdentityView | None = field(default=None, repr=False)

    async def identity(self) -> IdentityView:
        """Resolve both identities once per request."""
        if self._identity is None:
            self._identity = await self.auth.resolve_identities(self.session.login)
        return self._identity

    def require_github(self) -> str:
        token = self.session.login.github_token
        if not token:
            raise AuthError("Sign in with GitHub to continue", provider="github")
        return token

    def require_fastly(self) -> str:
        token = self.session.login.fastly_token
        if not token:
            raise AuthError("Sign in with Fastly to continue", provider="fastly")
        return token

    async def fetch_deploy_spec(
        self,
        nwo: str,
        manifest: GitHubFile | None = None,
        github: GitHubClient | None = None,
    ) -> DeployConfigSpec | None:
        """Read the deploy configuration of a repository.

        ``quick-deploy.toml`` wins; otherwise the manifest's own ``[setup]``
        table is used. ``None`` if the repository has neither file.
        Reads go through ``github`` when given, else the user's client.
        """
        github = github or self.github
        spec_file = await github.get_file(nwo, self.settings.deploy_spec_path)
        if spec_file is not None:
            return parse_deploy_spec(spec_file.content)

        if manifest is None:
            manifest = await github.get_file(nwo, self.settings.manifest_path)
        if manifest is not None:
            return parse_deploy_spec(manifest.content)
        return None

    def update_deployment(self, deployment: DeploymentState) -> None:
        self.session = self.session.model_copy(update={"deployment": deployment})

    def set_return_to(self, nwo: str) -> None:
        self.session = self.session.model_copy(update={"return_to": nwo})

    def return_location(self) -> str:
        """Where to send the browser after an auth round trip."""
        src = self.session.return_to or self.session.deployment.src
        return f"/{src}" if src else "/"

    def write_session(self, response: Response) -> Response:
        """Store the current session state in the response cookie."""
        response.set_cookie(
            key=self.settings.session_cookie_name,
            value=encode_session(self.session),
            secure=True,
            httponly=True,
            path="/",
        )
        return response
