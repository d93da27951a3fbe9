"""Sign-in endpoints for GitHub and Fastly."""

from typing import Annotated

from fastapi import APIRouter, Form, status
from fastapi.responses import RedirectResponse

from quick_deploy.api.deps import ContextDep
from quick_deploy.core.auth import Provider
from quick_deploy.core.exceptions import AuthError
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/oauth/{provider}", summary="Start an OAuth sign-in")
async def authorize(provider: Provider, ctx: ContextDep) -> RedirectResponse:
    """Redirect to the provider's authorization page."""
    return RedirectResponse(
        ctx.auth.begin_authorize_flow(provider),
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/oauth/{provider}/callback", summary="Finish an OAuth sign-in")
async def authorize_callback(
    provider: Provider,
    ctx: ContextDep,
    code: str | None = None,
) -> RedirectResponse:
    """Exchange the code for a token and return to the wizard."""
    token = await ctx.auth.complete_authorize_flow(provider, code or "")
    ctx.session = ctx.auth.record_credential(ctx.session, provider, token)

    logger.info("auth.callback.completed", provider=provider.value)

    response = RedirectResponse(ctx.return_location(), status_code=status.HTTP_302_FOUND)
    return ctx.write_session(response)


@router.post("/auth/fastly", summary="Sign in with a Fastly API token")
async def fastly_token_login(
    ctx: ContextDep,
    token: Annotated[str, Form()],
) -> RedirectResponse:
    """Accept a pasted Fastly API token after checking it works."""
    user = await ctx.auth.resolve_identity(Provider.FASTLY, token)
    if user is None:
        raise AuthError("Invalid Fastly API token provided", provider="fastly")

    logger.info(
        "auth.fastly_token_accepted",
        user=user.name,
        customer_id=user.customer_id,
    )
    ctx.session = ctx.auth.record_credential(ctx.session, Provider.FASTLY, token)

    response = RedirectResponse(ctx.return_location(), status_code=status.HTTP_302_FOUND)
    return ctx.write_session(response)


@router.post("/auth/reset", summary="Sign out of both providers")
async def reset_auth(ctx: ContextDep) -> RedirectResponse:
    ctx.session = ctx.auth.sign_out(ctx.session)
    response = RedirectResponse(
        ctx.return_location(), status_code=status.HTTP_303_SEE_OTHER
    )
    return ctx.write_session(response)
