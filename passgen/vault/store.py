"""
VaultStore — CRUD over the single encrypted vault file.

Every mutation is a full load → modify → rewrite of the whole file. Nothing
is cached between calls except the path, salt, iteration count and derived
key, so a second process writing the same file simply wins (no locking).
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Sequence
from pathlib import Path

from passgen.config import get_config
from passgen.errors import AuthenticationError, EntryIndexError, VaultIOError
from passgen.vault.codec import (
    build_envelope,
    decode_entries,
    dump_envelope,
    encode_entries,
    envelope_payload,
    envelope_salt,
    parse_envelope,
)
from passgen.vault.crypto import derive_key, generate_salt, seal, unseal
from passgen.vault.models import PasswordEntry, VaultEnvelope

logger = logging.getLogger(__name__)


class VaultStore:
    """A vault file bound to one derived key."""

    def __init__(self, path: Path, key: bytes, salt: bytes, iterations: int) -> None:
        self._path = path
        self._key = key
        self._salt = salt
        self._iterations = iterations

    @classmethod
    def open(
        cls,
        passphrase: str,
        *,
        path: Path | str | None = None,
        iterations: int | None = None,
    ) -> VaultStore:
        """Derive the key for the vault at ``path``.

        An existing file supplies its salt and iteration count. A missing file
        gets a fresh salt; nothing is written until the first save. The
        passphrase is not checked here; the first load() does that.
        """
        cfg = get_config()
        vault_path = Path(path) if path is not None else cfg.vault_path

        envelope = _read_envelope(vault_path)
        if envelope is not None:
            salt = envelope_salt(envelope)
            rounds = envelope.iterations
        else:
            salt = generate_salt()
            rounds = iterations if iterations is not None else cfg.kdf_iterations

        logger.info("Opening vault at %s (%s)", vault_path, "existing" if envelope else "new")
        return cls(vault_path, derive_key(passphrase, salt, rounds), salt, rounds)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def iterations(self) -> int:
        return self._iterations

    def load(self) -> list[PasswordEntry]:
        """Decrypt every entry. A missing file is an empty vault."""
        envelope = _read_envelope(self._path)
        if envelope is None:
            return []
        nonce, ciphertext = envelope_payload(envelope)
        try:
            plaintext = unseal(nonce, ciphertext, self._key)
        except AuthenticationError:
            logger.warning("Vault authentication failed for %s", self._path)
            raise
        return decode_entries(plaintext)

    def save(self, entry: PasswordEntry) -> None:
        """Append one entry and rewrite the file."""
        entries = self.load()
        entries.append(entry)
        self._write(entries)

    def delete(self, index: int) -> None:
        entries = self.load()
        _check_index(index, entries)
        del entries[index]
        self._write(entries)

    def update(self, index: int, entry: PasswordEntry) -> None:
        entries = self.load()
        _check_index(index, entries)
        entries[index] = entry
        self._write(entries)

    def change_master_password(self, new_passphrase: str) -> VaultStore:
        """Re-seal every entry under a new salt and key.

        Returns the store bound to the new key. This store stops working for
        the file afterwards, since the file's salt no longer matches its key.
        """
        entries = self.load()
        salt = generate_salt()
        rounds = get_config().kdf_iterations
        rotated = VaultStore(self._path, derive_key(new_passphrase, salt, rounds), salt, rounds)
        rotated._write(entries)
        logger.info("Master password changed for %s (%d entries re-sealed)", self._path, len(entries))
        return rotated

    def _write(self, entries: Sequence[PasswordEntry]) -> None:
        nonce, ciphertext = seal(encode_entries(entries), self._key)
        envelope = build_envelope(self._salt, nonce, ciphertext, self._iterations)
        _write_atomic(self._path, dump_envelope(envelope))
        logger.info("Wrote vault %s (%d entries)", self._path, len(entries))


def _check_index(index: int, entries: Sequence[PasswordEntry]) -> None:
    if index < 0 or index >= len(entries):
        raise EntryIndexError()


def _read_envelope(path: Path) -> VaultEnvelope | None:
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VaultIOError(f"Failed to read file: {e}") from e
    return parse_envelope(text)


def _write_atomic(path: Path, text: str) -> None:
    """Write to a sibling temp file (mode 600) and rename it over the target."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, stat.S_IRUSR | stat.S_IWUSR)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise VaultIOError(f"Failed to write file: {e}") from e
