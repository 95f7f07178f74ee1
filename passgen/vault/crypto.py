"""
Key derivation and AES-256-GCM sealing for the vault file.

The master key is derived from the passphrase with PBKDF2-HMAC-SHA256 and a
per-vault 16-byte salt. Every write seals the whole payload under a fresh
12-byte nonce; the 16-byte GCM tag is appended to the ciphertext.
"""

from __future__ import annotations

import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from passgen.config import DEFAULT_KDF_ITERATIONS
from passgen.errors import AuthenticationError

KEY_LENGTH = 32
SALT_LENGTH = 16
NONCE_LENGTH = 12
TAG_LENGTH = 16

KDF_NAME = "pbkdf2-sha256"


def generate_salt() -> bytes:
    """Fresh random salt for a new vault or a rotated key."""
    return secrets.token_bytes(SALT_LENGTH)


def derive_key(passphrase: str, salt: bytes, iterations: int = DEFAULT_KDF_ITERATIONS) -> bytes:
    """Stretch a passphrase into a 32-byte key. Deterministic for identical inputs."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def seal(plaintext: bytes, key: bytes) -> tuple[bytes, bytes]:
    """Encrypt plaintext with AES-256-GCM. Returns (nonce, ciphertext + tag)."""
    nonce = secrets.token_bytes(NONCE_LENGTH)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return nonce, ciphertext


def unseal(nonce: bytes, ciphertext: bytes, key: bytes) -> bytes:
    """Decrypt and verify. Raises AuthenticationError if the tag does not match."""
    if len(ciphertext) < TAG_LENGTH:
        raise AuthenticationError()
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise AuthenticationError() from e
