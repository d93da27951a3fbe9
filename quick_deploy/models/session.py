"""Client-held session state models."""

from enum import Enum

from pydantic import BaseModel, Field


class WorkflowPhase(str, Enum):
    """Phase of the deploy wizard, inferred from the deployment state."""

    IDLE = "idle"
    SOURCE_SELECTED = "source_selected"
    FORKED = "forked"
    PROVISIONED = "provisioned"


class LoginState(BaseModel):
    """Bearer credentials for both providers. Either may be absent."""

    github_token: str | None = None
    fastly_token: str | None = None


class DeploymentState(BaseModel):
    """Facts learned so far about the deployment in progress."""

    src: str | None = None
    dest: str | None = None
    service_id: str | None = None
    domain: str | None = None

    def dest_for(self, src: str) -> str | None:
        """Return the fork destination only if it was produced from ``src``."""
        if self.src != src:
            return None
        return self.dest

    @property
    def phase(self) -> WorkflowPhase:
        if self.service_id:
            return WorkflowPhase.PROVISIONED
        if self.src and self.dest:
            return WorkflowPhase.FORKED
        if self.src:
            return WorkflowPhase.SOURCE_SELECTED
        return WorkflowPhase.IDLE


class SessionState(BaseModel):
    """Everything the server knows about a user, carried by the client."""

    login: LoginState = Field(default_factory=LoginState)
    deployment: DeploymentState = Field(default_factory=DeploymentState)

    # Source page the browser returns to after sign-in or a reset
    return_to: str | None = None
