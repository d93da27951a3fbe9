"""Session token codec.

The server keeps no session store: the whole :class:`SessionState` travels
in a single cookie as URL-safe base64 of its compact JSON form. The token is
not signed, so a client can rewrite any field it likes.
"""

import base64
import binascii

from pydantic import ValidationError

from quick_deploy.models.session import SessionState
from quick_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class SessionStateCodec:
    """Serializes session state to and from the cookie token."""

    def encode(self, state: SessionState) -> str:
        """Encode state into a transport-safe token."""
        payload = state.model_dump_json(exclude_none=True).encode("utf-8")
        return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")

    def decode(self, token: str | None) -> SessionState:
        """Decode a token, falling back to an empty state.

        A missing, truncated or tampered token never fails the request.
        """
        if not token:
            return SessionState()

        try:
            padded = token + "=" * (-len(token) % 4)
            payload = base64.urlsafe_b64decode(padded.encode("ascii"))
            return SessionState.model_validate_json(payload)
        except (binascii.Error, ValueError, ValidationError) as e:
            logger.debug("session.decode_failed", error=type(e).__name__)
            return SessionState()


_codec = SessionStateCodec()


def encode_session(state: SessionState) -> str:
    """Encode using the shared codec."""
    return _codec.encode(state)


def decode_session(token: str | None) -> SessionState:
    """Decode using the shared codec."""
    return _codec.decode(token)
