"""Fork, provision and status endpoints."""

from typing import Annotated, Mapping

from fastapi import APIRouter, Form, Request, Response, status
from fastapi.responses import RedirectResponse

from quick_deploy.api.deps import ContextDep
from quick_deploy.core.exceptions import (
    NotATemplateError,
    PreconditionError,
    RepositoryNotFoundError,
)
from quick_deploy.core.pipeline import ProvisioningPipeline
from quick_deploy.core.status import DeploymentStatusPoller
from quick_deploy.models.deploy_config import DeployConfigSpec
from quick_deploy.models.deployment import ProvisioningRequest
from quick_deploy.models.pages import DeploymentStatusPage, SuccessPage
from quick_deploy.models.session import DeploymentState
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Form fields carrying dictionary values look like "dict.<dictionary>.<key>"
DICTIONARY_FIELD_PREFIX = "dict."


def collect_dictionary_params(form: Mapping[str, object]) -> dict[str, str]:
    """Map ``dict.<dictionary>.<key>`` form fields to ``<dictionary>.<key>``."""
    return {
        name[len(DICTIONARY_FIELD_PREFIX):]: value
        for name, value in form.items()
        if name.startswith(DICTIONARY_FIELD_PREFIX) and isinstance(value, str)
    }


@router.post("/fork", summary="Create the user's copy of the source repository")
async def fork(
    ctx: ContextDep,
    repository: Annotated[str | None, Form()] = None,
    name: Annotated[str | None, Form()] = None,
) -> RedirectResponse:
    """Generate (or fork) the source repository into the user's account."""
    ctx.require_github()

    src = repository or ctx.session.deployment.src
    if not src:
        raise PreconditionError("No source repository has been selected")

    repo = await ctx.github.fetch_repository(src)
    if repo is None:
        raise RepositoryNotFoundError(src)

    dest_name = name or repo.name
    logger.info("deploy.forking", repository=src, template=repo.is_template)

    if repo.is_template:
        created = await ctx.github.generate_repository(src, dest_name)
    elif ctx.settings.require_template:
        raise NotATemplateError(src)
    else:
        created = await ctx.github.fork_repository(src, dest_name)

    ctx.update_deployment(DeploymentState(src=src, dest=created.full_name))

    response = RedirectResponse(f"/{src}", status_code=status.HTTP_302_FOUND)
    return ctx.write_session(response)


@router.post("/deploy", response_model=SuccessPage, summary="Provision the service")
async def deploy(request: Request, response: Response, ctx: ContextDep) -> SuccessPage:
    """Run the provisioning pipeline against the user's fork."""
    ctx.require_github()
    fastly_token = ctx.require_fastly()

    form = await request.form()
    deployment = ctx.session.deployment
    src = form.get("repository") or deployment.src
    if not isinstance(src, str) or not src:
        raise PreconditionError("No source repository has been selected")

    dest = deployment.dest_for(src)
    if not dest:
        raise PreconditionError(f"{src} has not been forked yet")
    if deployment.service_id:
        raise PreconditionError(
            f"Service {deployment.service_id} was already provisioned; reset the deployment first"
        )

    manifest = await ctx.github.get_file(dest, ctx.settings.manifest_path)
    if manifest is None:
        raise PreconditionError(
            f"The repository does not contain a {ctx.settings.manifest_path} file, "
            "so cannot be deployed via Quick Deploy"
        )
    spec = await ctx.fetch_deploy_spec(dest, manifest=manifest)

    service_name = form.get("service_name")
    pipeline = ProvisioningPipeline(ctx.github, ctx.fastly, ctx.settings)
    service = await pipeline.run(
        ProvisioningRequest(
            repository=dest,
            manifest=manifest,
            spec=spec or DeployConfigSpec(),
            params=collect_dictionary_params(form),
            fastly_token=fastly_token,
            service_name=service_name if isinstance(service_name, str) and service_name else None,
        )
    )

    ctx.update_deployment(
        deployment.model_copy(
            update={"src": src, "service_id": service.id, "domain": service.domain}
        )
    )
    ctx.write_session(response)

    return SuccessPage(
        application_url=f"https://{service.domain}",
        actions_url=f"https://github.com/{dest}/actions",
        repo_nwo=dest,
        service_id=service.id,
    )


@router.get(
    "/deploy/status",
    response_model=DeploymentStatusPage,
    summary="Check whether the service is live",
)
async def deployment_status(response: Response, ctx: ContextDep) -> DeploymentStatusPage:
    """Poll once; a live service ends the workflow."""
    deployment = ctx.session.deployment
    if not deployment.service_id:
        raise PreconditionError("No service has been provisioned yet")
    ctx.require_fastly()

    active = await DeploymentStatusPoller(ctx.fastly).is_active(deployment.service_id)
    if active:
        ctx.update_deployment(DeploymentState())
        ctx.write_session(response)

    return DeploymentStatusPage(
        service_id=deployment.service_id,
        domain=deployment.domain,
        active=active,
        application_url=f"https://{deployment.domain}" if deployment.domain else None,
    )


@router.post("/deploy/reset", summary="Forget the deployment in progress")
async def reset_deployment(ctx: ContextDep) -> RedirectResponse:
    location = ctx.return_location()
    ctx.update_deployment(DeploymentState())
    response = RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)
    return ctx.write_session(response)
