"""
passgen vault — single-file credential store, AES-256-GCM under a
PBKDF2-derived master key.

Public API:
    VaultStore.open(passphrase)   → store bound to the derived key
    store.load()                  → list[PasswordEntry]
    store.save(entry)             → append and rewrite
    store.update(index, entry)    → replace and rewrite
    store.delete(index)           → remove and rewrite
    store.change_master_password(new) → store bound to the new key
"""

from __future__ import annotations

from passgen.vault.models import PasswordEntry, VaultEnvelope
from passgen.vault.store import VaultStore

__all__ = ["PasswordEntry", "VaultEnvelope", "VaultStore"]
