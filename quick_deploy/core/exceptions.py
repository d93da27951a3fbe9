"""Custom exceptions for Quick Deploy."""

from typing import Any


class QuickDeployError(Exception):
    """Base exception for Quick Deploy."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthError(QuickDeployError):
    """Missing or invalid credential, or an unusable authorization code."""

    status_code = 401

    def __init__(self, message: str, provider: str | None = None):
        details = {}
        if provider is not None:
            details["provider"] = provider
        super().__init__(message, details)
        self.provider = provider


class ExternalApiError(QuickDeployError):
    """A provider answered with a non-success response.

    The provider's own message is kept verbatim.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        provider: str,
        upstream_status: int | None = None,
    ):
        details: dict[str, Any] = {"provider": provider}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(message, details)
        self.provider = provider
        self.upstream_status = upstream_status


class SpecParseError(QuickDeployError):
    """The deployment configuration document is malformed."""

    status_code = 422

    def __init__(self, message: str, line: int | None = None):
        details = {}
        if line is not None:
            details["line"] = line
        super().__init__(f"Deploy configuration error: {message}", details)


class ManifestParseError(QuickDeployError):
    """The service manifest is not a well-formed document."""

    status_code = 422

    def __init__(self, message: str, line: int | None = None):
        details = {}
        if line is not None:
            details["line"] = line
        super().__init__(f"Manifest parsing error: {message}", details)


class MissingValueError(QuickDeployError):
    """A dictionary item has neither a submitted value nor a default."""

    status_code = 422

    def __init__(self, key: str, dictionary: str | None = None):
        details = {"key": key}
        if dictionary is not None:
            details["dictionary"] = dictionary
        super().__init__(f"No value provided for dictionary key {key}", details)
        self.key = key
        self.dictionary = dictionary


class PreconditionError(QuickDeployError):
    """A workflow step was invoked before the facts it needs exist."""

    status_code = 409


class NotATemplateError(QuickDeployError):
    """The source repository is not flagged as a template."""

    status_code = 400

    def __init__(self, nwo: str):
        super().__init__(
            f"Repository {nwo} is not a template repository",
            {"repository": nwo},
        )
        self.nwo = nwo


class RepositoryNotFoundError(QuickDeployError):
    """Repository not found on GitHub."""

    status_code = 404

    def __init__(self, nwo: str):
        super().__init__(
            f"No repository was found at github.com/{nwo}",
            {"repository": nwo},
        )
