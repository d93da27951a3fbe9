"""Core functionality for Quick Deploy.

The auth, pipeline and status modules depend on the provider clients, which
in turn raise the exceptions defined here; import them from their modules.
"""

from quick_deploy.core.exceptions import (
    AuthError,
    ExternalApiError,
    ManifestParseError,
    MissingValueError,
    NotATemplateError,
    PreconditionError,
    QuickDeployError,
    RepositoryNotFoundError,
    SpecParseError,
)
from quick_deploy.core.session import SessionStateCodec, decode_session, encode_session

__all__ = [
    "QuickDeployError",
    "AuthError",
    "ExternalApiError",
    "ManifestParseError",
    "MissingValueError",
    "NotATemplateError",
    "PreconditionError",
    "RepositoryNotFoundError",
    "SpecParseError",
    "SessionStateCodec",
    "decode_session",
    "encode_session",
]
