"""Provisioning Pipeline.

Turns a freshly generated repository and its deploy configuration into a
live Fastly service.

Pipeline steps, run strictly in order and each attempted once:
1. name - pick the service slug
2. service - create the service
3. domain - bind ``<slug>.<suffix>`` to version 1
4. backends - create declared backends (or a loopback default)
5. dictionaries - create dictionaries and bulk-load their items
6. workflow - enable the repository's deploy workflow
7. secret - store the sealed Fastly token as an Actions secret
8. manifest - push ``fastly.toml`` with the new ``service_id``

The first failing step aborts the run and its exception propagates as is.
Resources created by earlier steps are left in place; the failure log lists
them so they can be cleaned up by hand.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from quick_deploy.config import Settings, get_settings
from quick_deploy.core.exceptions import MissingValueError, PreconditionError
from quick_deploy.models.deploy_config import (
    BackendSpec,
    DictionaryItemSpec,
    DictionarySpec,
)
from quick_deploy.models.deployment import CreatedService, ProvisioningRequest
from quick_deploy.models.fastly import DictionaryItemAction, FastlyBackend
from quick_deploy.parsers.manifest import (
    EditableManifest,
    load_manifest,
    render_manifest,
    set_service_id,
)
from quick_deploy.services.fastly import FastlyClient
from quick_deploy.services.github import GitHubClient
from quick_deploy.utils.crypto import seal_secret
from quick_deploy.utils.logging import get_logger
from quick_deploy.utils.slug import generate_slug

# New services are configured on their draft version
SERVICE_VERSION = 1

DEFAULT_BACKEND_PORT = 80

LOOPBACK_BACKEND = BackendSpec(name="127.0.0.1", address="127.0.0.1")


@dataclass
class ProvisioningRun:
    """Resources created so far by one pipeline invocation."""

    request: ProvisioningRequest
    manifest: EditableManifest
    slug: str | None = None
    service_id: str | None = None
    domain: str | None = None
    backends: list[str] = field(default_factory=list)
    dictionaries: dict[str, str] = field(default_factory=dict)
    public_key_id: str | None = None

    def created_resources(self) -> dict[str, Any]:
        return {
            "service_id": self.service_id,
            "domain": self.domain,
            "backends": list(self.backends),
            "dictionaries": dict(self.dictionaries),
        }


StepFn = Callable[[ProvisioningRun], Awaitable[None]]


def resolve_backends(backends: list[BackendSpec]) -> list[BackendSpec]:
    """Backends to create; a service always gets at least one."""
    return list(backends) or [LOOPBACK_BACKEND]


def resolve_item_value(
    dictionary: DictionarySpec,
    item: DictionaryItemSpec,
    params: dict[str, str],
) -> str:
    """Submitted value wins over the declared default."""
    submitted = params.get(f"{dictionary.name}.{item.key}")
    if submitted is not None:
        return submitted
    if item.value is not None:
        return item.value
    raise MissingValueError(item.key, dictionary=dictionary.name)


class ProvisioningPipeline:
    """Runs the provisioning steps against GitHub and Fastly."""

    def __init__(
        self,
        github: GitHubClient,
        fastly: FastlyClient,
        settings: Settings | None = None,
        slug_factory: Callable[[], str] = generate_slug,
    ):
        self.github = github
        self.fastly = fastly
        self.settings = settings or get_settings()
        self.slug_factory = slug_factory
        self.logger = get_logger("pipeline")

    @property
    def steps(self) -> list[tuple[str, StepFn]]:
        return [
            ("name", self._choose_name),
            ("service", self._create_service),
            ("domain", self._create_domain),
            ("backends", self._create_backends),
            ("dictionaries", self._create_dictionaries),
            ("workflow", self._enable_workflow),
            ("secret", self._create_secret),
            ("manifest", self._push_manifest),
        ]

    async def run(self, request: ProvisioningRequest) -> CreatedService:
        """Run every step in order.

        Raises:
            ManifestParseError: If the manifest is malformed (before any side effect)
            QuickDeployError: Whatever the first failing step raised
        """
        run = ProvisioningRun(
            request=request,
            manifest=load_manifest(request.manifest.content),
        )

        self.logger.info("pipeline.started", repository=request.repository)

        for name, step in self.steps:
            start_time = time.perf_counter()
            self.logger.info("pipeline.step.started", step=name)
            try:
                await step(run)
            except Exception as e:
                self.logger.error(
                    "pipeline.step.failed",
                    step=name,
                    repository=request.repository,
                    error=str(e),
                    orphaned=run.created_resources(),
                )
                raise
            self.logger.info(
                "pipeline.step.completed",
                step=name,
                duration_ms=int((time.perf_counter() - start_time) * 1000),
            )

        self.logger.info(
            "pipeline.completed",
            repository=request.repository,
            service_id=run.service_id,
            domain=run.domain,
        )
        return CreatedService(id=run.service_id, domain=run.domain)

    async def _choose_name(self, run: ProvisioningRun) -> None:
        run.slug = run.request.service_name or self.slug_factory()

    async def _create_service(self, run: ProvisioningRun) -> None:
        service = await self.fastly.create_service(f"{run.slug} via Quick Deploy")
        run.service_id = service.id

    async def _create_domain(self, run: ProvisioningRun) -> None:
        domain = await self.fastly.create_domain(
            run.service_id,
            SERVICE_VERSION,
            f"{run.slug}.{self.settings.service_domain_suffix}",
        )
        run.domain = domain.name

    async def _create_backends(self, run: ProvisioningRun) -> None:
        for backend in resolve_backends(run.request.spec.backends):
            await self.fastly.create_backend(
                run.service_id,
                SERVICE_VERSION,
                FastlyBackend(
                    name=backend.name,
                    address=backend.address,
                    port=backend.port or DEFAULT_BACKEND_PORT,
                ),
            )
            run.backends.append(backend.name)

    async def _create_dictionaries(self, run: ProvisioningRun) -> None:
        for dictionary in run.request.spec.dictionaries:
            created = await self.fastly.create_dictionary(
                run.service_id, SERVICE_VERSION, dictionary.name
            )
            run.dictionaries[dictionary.name] = created.id

            # Resolve everything before touching items so a gap leaves them untouched
            items = [
                DictionaryItemAction(
                    op="create",
                    item_key=item.key,
                    item_value=resolve_item_value(dictionary, item, run.request.params),
                )
                for item in dictionary.items
            ]
            if not items:
                continue

            await self.fastly.update_dictionary_items(run.service_id, created.id, items)
            self.logger.info(
                "pipeline.dictionary_populated",
                dictionary=dictionary.name,
                items=len(items),
            )

    async def _enable_workflow(self, run: ProvisioningRun) -> None:
        await self.github.enable_workflow(
            run.request.repository, self.settings.deploy_workflow
        )

    async def _create_secret(self, run: ProvisioningRun) -> None:
        public_key = await self.github.get_repository_public_key(run.request.repository)
        run.public_key_id = public_key.key_id
        await self.github.create_secret(
            run.request.repository,
            self.settings.deploy_secret_name,
            seal_secret(public_key.key, run.request.fastly_token),
            public_key.key_id,
        )

    async def _push_manifest(self, run: ProvisioningRun) -> None:
        original = run.request.manifest
        set_service_id(run.manifest, run.service_id)
        output = render_manifest(run.manifest)

        current = await self.github.get_file(run.request.repository, original.path)
        if current is None or current.sha != original.sha:
            raise PreconditionError(
                f"{original.path} changed since it was read; refusing to overwrite it",
                {"path": original.path, "expected_sha": original.sha},
            )

        await self.github.update_file(
            run.request.repository, original, output, self.settings.commit_message
        )
