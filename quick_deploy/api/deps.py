"""Dependency injection for API endpoints."""

from typing import Annotated, AsyncIterator

import httpx
from fastapi import Depends, Request

from quick_deploy.api.context import RequestContext
from quick_deploy.config import Settings, get_settings
from quick_deploy.core.auth import AuthCoordinator, OAuthProvider, Provider
from quick_deploy.core.session import decode_session
from quick_deploy.services.fastly import FastlyClient
from quick_deploy.services.github import GitHubClient


async def get_app_settings() -> Settings:
    """Get the application settings."""
    return get_settings()


async def get_http_client(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AsyncIterator[httpx.AsyncClient]:
    """Outbound HTTP client scoped to one request."""
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


async def get_request_context(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> RequestContext:
    """Rebuild the session from the cookie and attach credentials."""
    session = decode_session(request.cookies.get(settings.session_cookie_name))

    github = GitHubClient(
        http_client,
        token=session.login.github_token,
        base_url=settings.github_api_url,
        user_agent=settings.user_agent,
    )
    fastly = FastlyClient(
        http_client,
        token=session.login.fastly_token,
        base_url=settings.fastly_api_url,
        user_agent=settings.user_agent,
    )
    auth = AuthCoordinator(
        http_client,
        {provider: OAuthProvider.from_settings(provider, settings) for provider in Provider},
        github=github,
        fastly=fastly,
    )

    return RequestContext(
        session=session,
        settings=settings,
        github=github,
        fastly=fastly,
        auth=auth,
    )


# Type aliases for cleaner signatures
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ContextDep = Annotated[RequestContext, Depends(get_request_context)]
