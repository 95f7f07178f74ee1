"""Vault data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PasswordEntry(BaseModel):
    """A stored credential. Identity is its position in the vault list."""

    model_config = ConfigDict(frozen=True)

    name: str
    password: str
    created_at: str  # whole seconds since the epoch, as text


class VaultEnvelope(BaseModel):
    """The on-disk record. Binary fields are base64 text."""

    model_config = ConfigDict(frozen=True)

    version: int
    kdf: str
    iterations: int
    salt: str
    nonce: str
    ciphertext: str
