"""Exception hierarchy shared by the vault, generator and session layers."""

from __future__ import annotations


class PassgenError(Exception):
    """Base class for every error the session turns into a message."""


class ValidationError(PassgenError, ValueError):
    """Bad generator input (name, length, character classes)."""


class VaultError(PassgenError):
    """Base class for vault storage failures."""


class AuthenticationError(VaultError):
    """The ciphertext tag did not verify.

    Raised for a wrong passphrase and for a corrupted file alike; the two
    cannot be told apart.
    """

    def __init__(self, message: str = "Decryption failed - wrong master password?") -> None:
        super().__init__(message)


class FormatError(VaultError, ValueError):
    """Malformed envelope or decrypted payload."""


class EntryIndexError(VaultError, IndexError):
    """CRUD index outside the loaded entry list."""

    def __init__(self, message: str = "Invalid index") -> None:
        super().__init__(message)


class VaultIOError(VaultError, OSError):
    """Reading or writing the vault file failed."""


class ConfigError(PassgenError, ValueError):
    """Malformed PASSGEN_* environment setting."""
