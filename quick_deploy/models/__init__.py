"""Data models for Quick Deploy."""

from quick_deploy.models.deploy_config import (
    BackendSpec,
    DeployConfigSpec,
    DictionaryItemSpec,
    DictionarySpec,
)
from quick_deploy.models.deployment import CreatedService, ProvisioningRequest
from quick_deploy.models.fastly import (
    DictionaryItemAction,
    FastlyBackend,
    FastlyDictionary,
    FastlyDomain,
    FastlyService,
    FastlyServiceVersion,
    FastlyUser,
)
from quick_deploy.models.github import (
    GitHubFile,
    GitHubRepository,
    GitHubUser,
    RepositoryPublicKey,
)
from quick_deploy.models.pages import (
    DeployPage,
    DeploymentStatusPage,
    IndexPage,
    SuccessPage,
)
from quick_deploy.models.session import (
    DeploymentState,
    LoginState,
    SessionState,
    WorkflowPhase,
)

__all__ = [
    # Session models
    "SessionState",
    "LoginState",
    "DeploymentState",
    "WorkflowPhase",
    # Deploy configuration models
    "DeployConfigSpec",
    "BackendSpec",
    "DictionarySpec",
    "DictionaryItemSpec",
    # Provisioning models
    "ProvisioningRequest",
    "CreatedService",
    # GitHub models
    "GitHubUser",
    "GitHubRepository",
    "GitHubFile",
    "RepositoryPublicKey",
    # Fastly models
    "FastlyUser",
    "FastlyService",
    "FastlyDomain",
    "FastlyBackend",
    "FastlyDictionary",
    "DictionaryItemAction",
    "FastlyServiceVersion",
    # Page contexts
    "IndexPage",
    "DeployPage",
    "SuccessPage",
    "DeploymentStatusPage",
]
