"""Deploy configuration and manifest parsers."""

from quick_deploy.parsers.deploy_spec import DeploySpecParser, parse_deploy_spec
from quick_deploy.parsers.manifest import (
    EditableManifest,
    load_manifest,
    render_manifest,
    set_service_id,
)

__all__ = [
    "DeploySpecParser",
    "parse_deploy_spec",
    "EditableManifest",
    "load_manifest",
    "render_manifest",
    "set_service_id",
]
