"""Sealed-box encryption of repository secrets."""

import base64

from nacl.public import PublicKey, SealedBox


def seal_secret(public_key: str, value: str) -> str:
    """Encrypt ``value`` for the holder of a base64 libsodium public key.

    Returns the base64 ciphertext expected by the Actions secrets API.
    """
    box = SealedBox(PublicKey(base64.b64decode(public_key)))
    sealed = box.encrypt(value.encode("utf-8"))
    return base64.b64encode(sealed).decode("ascii")
