"""Tests for cryptographic operations."""

import pytest

from app.services import crypto
from app.services.crypto import (
    DecryptionError,
    InvalidKeyError,
    decrypt,
    encrypt,
    get_encryption_key,
)

CONTEXT = "standalone_redis:redis_password"


class TestEncryption:
    """Test suite for encryption functionality."""

    def test_get_encryption_key_valid(self):
        """Test that a valid key is returned as bytes."""
        key = get_encryption_key()
        assert isinstance(key, bytes)
        assert len(key) == 32  # 256 bits

    def test_encrypt_decrypt_roundtrip(self):
        """Test that encrypt/decrypt preserves data."""
        encrypted = encrypt("p@ss w0rd üñí", CONTEXT)
        assert decrypt(encrypted, CONTEXT) == "p@ss w0rd üñí"

    def test_encrypt_produces_different_output(self):
        """Test that encryption produces different ciphertext each time (IV)."""
        assert encrypt("same", CONTEXT) != encrypt("same", CONTEXT)

    def test_ciphertext_is_bound_to_context(self):
        """Test that a value cannot be decrypted under another context."""
        encrypted = encrypt("s3cret", "environment_variable:a:REDIS_PASSWORD")

        with pytest.raises(DecryptionError):
            decrypt(encrypted, "environment_variable:b:REDIS_PASSWORD")

    def test_decrypt_tampered_data(self):
        """Test that modified ciphertext is rejected."""
        encrypted = bytearray(encrypt("s3cret", CONTEXT))
        encrypted[-1] ^= 0x01

        with pytest.raises(DecryptionError):
            decrypt(bytes(encrypted), CONTEXT)

    def test_decrypt_too_short(self):
        """Test that decryption fails on too-short data."""
        with pytest.raises(DecryptionError, match="too short"):
            decrypt(b"short", CONTEXT)


class TestKeyRotation:
    """Test decryption while an old key is still configured."""

    def test_old_key_fallback(self, monkeypatch):
        old_key = "b" * 64
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", old_key)
        encrypted = encrypt("s3cret", CONTEXT)

        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", "c" * 64)
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key_old", old_key)

        assert decrypt(encrypted, CONTEXT) == "s3cret"

    def test_no_matching_key(self, monkeypatch):
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", "b" * 64)
        encrypted = encrypt("s3cret", CONTEXT)

        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", "c" * 64)
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key_old", "d" * 64)

        with pytest.raises(DecryptionError, match=CONTEXT):
            decrypt(encrypted, CONTEXT)


class TestKeyValidation:
    """Test encryption key validation."""

    def test_short_key_raises(self, monkeypatch):
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", "tooshort")

        with pytest.raises(InvalidKeyError, match="64 hex characters"):
            get_encryption_key()

    def test_non_hex_key_raises(self, monkeypatch):
        monkeypatch.setattr(crypto.settings, "redisbox_encryption_key", "z" * 64)

        with pytest.raises(InvalidKeyError, match="hexadecimal"):
            get_encryption_key()
