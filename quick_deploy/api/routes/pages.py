"""Wizard pages."""

from fastapi import APIRouter, Response

from quick_deploy.api.deps import ContextDep
from quick_deploy.core.exceptions import RepositoryNotFoundError
from quick_deploy.models.pages import DeployPage, IndexPage
from quick_deploy.models.session import DeploymentState
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=IndexPage, summary="Landing page")
async def index(repository: str | None = None) -> IndexPage:
    return IndexPage(button_nwo=repository)


@router.get(
    "/{owner}/{repo}",
    response_model=DeployPage,
    summary="Deploy wizard for a source repository",
)
async def deploy_page(
    owner: str,
    repo: str,
    response: Response,
    ctx: ContextDep,
) -> DeployPage:
    """Show the wizard for ``owner/repo`` and remember it as the return page.

    A fork or service already recorded for another source is kept; it only
    stops counting as this source's fork.
    """
    src_nwo = f"{owner}/{repo}"

    # Only public data here, so never send the user's token
    anonymous = ctx.github.anonymous()
    src = await anonymous.fetch_repository(src_nwo)
    if src is None:
        raise RepositoryNotFoundError(src_nwo)

    identity = await ctx.identity()
    deployment = ctx.session.deployment
    dest_nwo = deployment.dest_for(src_nwo)
    config_spec = await ctx.fetch_deploy_spec(src_nwo, github=anonymous)

    changed = False
    if ctx.session.return_to != src_nwo:
        ctx.set_return_to(src_nwo)
        changed = True
    if deployment.src != src_nwo and not (deployment.dest or deployment.service_id):
        logger.info("wizard.source_selected", repository=src_nwo)
        ctx.update_deployment(DeploymentState(src=src_nwo))
        changed = True
    if changed:
        ctx.write_session(response)

    return DeployPage(
        src=src,
        dest_nwo=dest_nwo,
        github_user=identity.github_user,
        fastly_user=identity.fastly_user,
        can_fork=identity.github_user is not None and dest_nwo is None,
        can_deploy=(
            identity.github_user is not None
            and identity.fastly_user is not None
            and dest_nwo is not None
        ),
        config_spec=config_spec,
    )
