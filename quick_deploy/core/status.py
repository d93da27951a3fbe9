"""Deployment status polling."""

from quick_deploy.core.pipeline import SERVICE_VERSION
from quick_deploy.services.fastly import FastlyClient
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class DeploymentStatusPoller:
    """Checks once whether a provisioned service has gone live.

    The browser re-polls; nothing here waits.
    """

    def __init__(self, fastly: FastlyClient):
        self.fastly = fastly

    async def is_active(self, service_id: str) -> bool:
        version = await self.fastly.get_service_version(service_id, SERVICE_VERSION)
        logger.info("deployment.polled", service_id=service_id, active=version.active)
        return version.active
