"""Authentication against GitHub and Fastly.

The coordinator owns both OAuth handshakes and is the only place that writes
credentials into :class:`LoginState`. Identity lookups degrade to anonymous
when a stored credential has expired, so a stale cookie never breaks a page.
"""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

import httpx

from quick_deploy.config import Settings
from quick_deploy.core.exceptions import AuthError, ExternalApiError
from quick_deploy.models.fastly import FastlyUser
from quick_deploy.models.github import GitHubUser
from quick_deploy.models.session import LoginState, SessionState
from quick_deploy.services.base import extract_error_message
from quick_deploy.services.fastly import FastlyClient
from quick_deploy.services.github import GitHubClient
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)

# Statuses meaning "this credential is no good", not "the provider is broken"
_UNAUTHORIZED_STATUSES = frozenset({401, 403})


class Provider(str, Enum):
    """Identity providers the wizard signs users into."""

    GITHUB = "github"
    FASTLY = "fastly"


@dataclass
class OAuthProvider:
    """OAuth application registered with a provider."""

    name: Provider
    authorize_url: str
    token_url: str
    client_id: str
    client_secret: str = field(repr=False)
    scopes: list[str] = field(default_factory=list)

    # Sent form-encoded when set; GitHub takes a JSON body without one
    grant_type: str | None = None

    @classmethod
    def from_settings(cls, provider: Provider, settings: Settings) -> "OAuthProvider":
        if provider is Provider.GITHUB:
            return cls(
                name=provider,
                authorize_url=settings.github_authorize_url,
                token_url=settings.github_token_url,
                client_id=settings.github_client_id,
                client_secret=settings.github_client_secret,
                scopes=list(settings.github_oauth_scopes),
            )
        return cls(
            name=provider,
            authorize_url=settings.fastly_authorize_url,
            token_url=settings.fastly_token_url,
            client_id=settings.fastly_client_id,
            client_secret=settings.fastly_client_secret,
            scopes=list(settings.fastly_oauth_scopes),
            grant_type="authorization_code",
        )


@dataclass
class IdentityView:
    """Who the current request is signed in as, per provider."""

    github_user: GitHubUser | None = None
    fastly_user: FastlyUser | None = None


class AuthCoordinator:
    """Drives OAuth flows and resolves identities for a request."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        providers: dict[Provider, OAuthProvider],
        github: GitHubClient,
        fastly: FastlyClient,
    ):
        self._http = http_client
        self._providers = providers
        self._github = github
        self._fastly = fastly

    def _provider(self, provider: Provider) -> OAuthProvider:
        try:
            return self._providers[provider]
        except KeyError:
            raise AuthError(f"Unknown provider {provider}") from None

    def begin_authorize_flow(self, provider: Provider) -> str:
        """Build the provider URL the browser is sent to."""
        config = self._provider(provider)
        query = urlencode(
            {"client_id": config.client_id, "scope": " ".join(config.scopes)}
        )
        return f"{config.authorize_url}?{query}"

    async def complete_authorize_flow(self, provider: Provider, code: str) -> str:
        """Exchange a one-time code for a bearer credential."""
        if not code:
            raise AuthError("No auth 'code' param provided", provider=provider.value)

        config = self._provider(provider)
        params = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
        }
        try:
            if config.grant_type:
                # Standard OAuth2 token endpoints take a form-encoded body
                resp = await self._http.post(
                    config.token_url,
                    data={**params, "grant_type": config.grant_type},
                    headers={"Accept": "application/json"},
                )
            else:
                resp = await self._http.post(
                    config.token_url,
                    json=params,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            raise ExternalApiError(str(e), provider.value) from e

        if not resp.is_success:
            raise ExternalApiError(
                extract_error_message(resp), provider.value, resp.status_code
            )

        try:
            body = resp.json()
        except ValueError:
            raise ExternalApiError(resp.text, provider.value, resp.status_code) from None

        # GitHub reports a bad or expired code with a 200 and an error body
        if not isinstance(body, dict) or "error" in body or not body.get("access_token"):
            raise ExternalApiError(
                extract_error_message(resp), provider.value, resp.status_code
            )

        logger.info("auth.code_exchanged", provider=provider.value)
        return body["access_token"]

    async def resolve_identity(
        self, provider: Provider, credential: str | None
    ) -> GitHubUser | FastlyUser | None:
        """Look up the user behind a credential; ``None`` means anonymous."""
        if not credential:
            return None

        try:
            if provider is Provider.GITHUB:
                return await self._github.with_token(credential).fetch_user()
            return await self._fastly.with_token(credential).fetch_user()
        except ExternalApiError as e:
            if e.upstream_status in _UNAUTHORIZED_STATUSES:
                logger.info(
                    "auth.credential_rejected",
                    provider=provider.value,
                    status=e.upstream_status,
                )
                return None
            raise

    async def resolve_identities(self, login: LoginState) -> IdentityView:
        github_user = await self.resolve_identity(Provider.GITHUB, login.github_token)
        fastly_user = await self.resolve_identity(Provider.FASTLY, login.fastly_token)
        return IdentityView(github_user=github_user, fastly_user=fastly_user)

    def record_credential(
        self, session: SessionState, provider: Provider, token: str
    ) -> SessionState:
        """Return ``session`` with ``token`` stored for ``provider``."""
        if provider is Provider.GITHUB:
            login = session.login.model_copy(update={"github_token": token})
        else:
            login = session.login.model_copy(update={"fastly_token": token})
        return session.model_copy(update={"login": login})

    def sign_out(self, session: SessionState) -> SessionState:
        return session.model_copy(update={"login": LoginState()})
