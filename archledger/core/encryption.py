"""Encryption at rest for repository access tokens.

Uses Fernet symmetric encryption (AES-128-CBC + HMAC-SHA256).
"""

from __future__ import annotations

import base64
import hashlib
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from archledger.core.config import get_settings
from archledger.core.structured_logging import log_json

logger = logging.getLogger(__name__)

_DEV_KEY_SEED = b"archledger-development-only-key"


class DecryptionError(ValueError):
    """Ciphertext could not be decrypted with the configured key."""


def _derive_key(secret: str | bytes) -> bytes:
    """Accept a ready Fernet key, or derive one from an arbitrary secret."""
    raw = secret.encode() if isinstance(secret, str) else secret
    try:
        Fernet(raw)
        return raw
    except ValueError:
        return base64.urlsafe_b64encode(hashlib.sha256(raw).digest())


@lru_cache
def _get_fernet() -> Fernet:
    """Get the Fernet cipher for the configured key."""
    key = get_settings().encryption_key
    if not key:
        log_json(
            logger,
            logging.WARNING,
            "encryption_key_not_set",
            message="Using the development key. Set ENCRYPTION_KEY outside development.",
        )
        return Fernet(_derive_key(_DEV_KEY_SEED))
    return Fernet(_derive_key(key))


def encrypt(value: str) -> str:
    """Encrypt a string value. Returns base64-encoded ciphertext."""
    return _get_fernet().encrypt(value.encode("utf-8")).decode("utf-8")


def decrypt(value: str) -> str:
    """Decrypt a base64-encoded ciphertext. Returns plaintext string.

    Raises:
        DecryptionError: key mismatch or corrupted ciphertext
    """
    try:
        return _get_fernet().decrypt(value.encode("utf-8")).decode("utf-8")
    except InvalidToken as exc:
        raise DecryptionError("Invalid token: key mismatch or corrupted data") from exc
