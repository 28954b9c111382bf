# oauth_store/adapters/outbound/security/encrypt.py

from typing import Union

from passlib.hash import hex_sha256


def hash(value: Union[str, bytes]) -> bytes:
    """
    sha256 digest of ``value``.

    Used for client secrets and access tokens: only the digest is ever
    stored, the plaintext is handed out once.
    """
    return bytes.fromhex(hex_sha256.hash(value))
