"""Service manifest editing.

The manifest is edited through tomlkit's document model so comments,
ordering and whitespace survive the rewrite; only ``service_id`` changes.
"""

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import ParseError, TOMLKitError

from quick_deploy.core.exceptions import ManifestParseError

SERVICE_ID_KEY = "service_id"

EditableManifest = TOMLDocument


def load_manifest(content: str) -> EditableManifest:
    """Parse manifest text into an editable document."""
    try:
        return tomlkit.parse(content)
    except ParseError as e:
        raise ManifestParseError(str(e), line=e.line) from e
    except TOMLKitError as e:
        raise ManifestParseError(str(e)) from e


def set_service_id(manifest: EditableManifest, service_id: str) -> None:
    """Point the manifest at ``service_id``, adding the key if needed."""
    manifest[SERVICE_ID_KEY] = service_id


def render_manifest(manifest: EditableManifest) -> str:
    return tomlkit.dumps(manifest)
