"""Deployment data models."""

from pydantic import BaseModel, Field

from quick_deploy.models.deploy_config import DeployConfigSpec
from quick_deploy.models.github import GitHubFile


class ProvisioningRequest(BaseModel):
    """Input for the provisioning pipeline."""

    repository: str
    manifest: GitHubFile
    spec: DeployConfigSpec = Field(default_factory=DeployConfigSpec)

    # Submitted dictionary values keyed "<dictionary>.<key>"
    params: dict[str, str] = Field(default_factory=dict)

    fastly_token: str = Field(repr=False)
    service_name: str | None = None


class CreatedService(BaseModel):
    """Result of a successful provisioning run."""

    id: str
    domain: str
