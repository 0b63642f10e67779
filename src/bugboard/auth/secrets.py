"""
bugboard.auth.secrets

Authenticated encryption for secrets stored at rest (the profile GitHub token).

Responsibilities:
- Load and validate the process-wide AES-256 key.
- Encrypt to the `nonce.tag.ciphertext` token format (each part base64).
- Decrypt fail-closed: any malformed or tampered token raises.
"""

from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
DELIMITER = "."


class SecretKeyConfigError(RuntimeError):
    """The encryption key is missing or not a base64-encoded 32-byte key."""


class SecretDecodeError(ValueError):
    """The token is malformed or failed authentication."""


def _b64decode(part: str) -> bytes:
    try:
        return base64.b64decode(part.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise SecretDecodeError("Invalid encrypted payload") from e


class SecretCodec:
    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise SecretKeyConfigError(f"encryption key must be {KEY_SIZE} bytes")
        self._aead = AESGCM(key)

    @classmethod
    def from_base64(cls, raw: str | None) -> SecretCodec:
        if not raw:
            raise SecretKeyConfigError("BUGBOARD_ENCRYPTION_KEY is not configured")
        try:
            key = base64.b64decode(raw.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise SecretKeyConfigError(
                "BUGBOARD_ENCRYPTION_KEY must be a base64-encoded 32-byte key"
            ) from e
        if len(key) != KEY_SIZE:
            raise SecretKeyConfigError(
                "BUGBOARD_ENCRYPTION_KEY must be a base64-encoded 32-byte key"
            )
        return cls(key)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        # AESGCM appends the 16-byte tag to the ciphertext.
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
        return DELIMITER.join(
            base64.b64encode(part).decode("ascii") for part in (nonce, tag, ciphertext)
        )

    def decrypt(self, token: str) -> str:
        parts = token.split(DELIMITER)
        if len(parts) != 3:
            raise SecretDecodeError("Invalid encrypted payload")
        nonce, tag, ciphertext = (_b64decode(p) for p in parts)
        if len(nonce) != NONCE_SIZE or len(tag) != TAG_SIZE:
            raise SecretDecodeError("Invalid encrypted payload")
        try:
            plaintext = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as e:
            raise SecretDecodeError("Encrypted payload failed authentication") from e
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SecretDecodeError("Invalid encrypted payload") from e


@lru_cache(maxsize=4)
def get_secret_codec(raw_key: str | None) -> SecretCodec:
    # Keyed on the configured value so the key is parsed once per process.
    return SecretCodec.from_base64(raw_key)


def encrypt_secret(plaintext: str, *, raw_key: str | None) -> str:
    return get_secret_codec(raw_key).encrypt(plaintext)


def decrypt_secret(token: str, *, raw_key: str | None) -> str:
    return get_secret_codec(raw_key).decrypt(token)


# --- Module Notes -----------------------------------------------------------
# Callers pass `settings.encryption_key`; a missing key only fails when a secret
# is actually written or read, so deployments without GitHub tokens still boot.
