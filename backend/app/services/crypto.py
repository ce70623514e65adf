"""AES-256-GCM encryption for stored credentials.

Database passwords and runtime environment variable values are stored as
``IV (12 bytes) || ciphertext || tag (16 bytes)``. Every call binds an AAD
context (column or variable identity) to the ciphertext.
"""

import logging
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core import settings

logger = logging.getLogger(__name__)

IV_LENGTH = 12

# 12 bytes IV + 16 bytes auth tag
MIN_ENCRYPTED_LENGTH = 28


class CryptoError(Exception):
    """Base exception for cryptographic operations."""


class InvalidKeyError(CryptoError):
    """Raised when the configured encryption key is unusable."""


class DecryptionError(CryptoError):
    """Raised when ciphertext cannot be decrypted with any configured key."""


def _parse_key(key_hex: str, env_name: str) -> bytes:
    if len(key_hex) != 64:
        raise InvalidKeyError(
            f"{env_name} must be exactly 64 hex characters (32 bytes). "
            f"Got {len(key_hex)} characters."
        )
    try:
        return bytes.fromhex(key_hex)
    except ValueError as e:
        raise InvalidKeyError(f"{env_name} must be valid hexadecimal: {e}") from e


def get_encryption_key() -> bytes:
    """Current encryption key as raw bytes.

    Raises:
        InvalidKeyError: If the key has the wrong length or is not hex.
    """
    return _parse_key(settings.redisbox_encryption_key, "REDISBOX_ENCRYPTION_KEY")


def encrypt(plaintext: str, aad: str) -> bytes:
    """Encrypt ``plaintext`` bound to the ``aad`` context."""
    aesgcm = AESGCM(get_encryption_key())
    iv = secrets.token_bytes(IV_LENGTH)
    return iv + aesgcm.encrypt(iv, plaintext.encode("utf-8"), aad.encode("utf-8"))


def decrypt(encrypted: bytes, aad: str) -> str:
    """Decrypt a value produced by :func:`encrypt`.

    Falls back to REDISBOX_ENCRYPTION_KEY_OLD while a key rotation is in
    progress.

    Raises:
        DecryptionError: If the data is malformed or no key matches.
    """
    if len(encrypted) < MIN_ENCRYPTED_LENGTH:
        raise DecryptionError(
            f"Encrypted data too short: {len(encrypted)} bytes, "
            f"minimum {MIN_ENCRYPTED_LENGTH} bytes required"
        )

    iv, ciphertext = encrypted[:IV_LENGTH], encrypted[IV_LENGTH:]
    aad_bytes = aad.encode("utf-8")

    keys = [get_encryption_key()]
    if settings.redisbox_encryption_key_old:
        keys.append(
            _parse_key(settings.redisbox_encryption_key_old, "REDISBOX_ENCRYPTION_KEY_OLD")
        )

    for index, key in enumerate(keys):
        try:
            plaintext = AESGCM(key).decrypt(iv, ciphertext, aad_bytes)
        except InvalidTag:
            continue
        if index > 0:
            logger.info("Decrypted with old key, value should be re-encrypted")
        return plaintext.decode("utf-8")

    raise DecryptionError(f"Decryption failed for context '{aad}'")
