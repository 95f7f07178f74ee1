"""
Serialization for the vault file.

Two layers:
  - the inner payload: a JSON array of PasswordEntry objects (order preserved)
  - the outer envelope: a JSON object holding the KDF parameters plus the
    base64 salt, nonce and ciphertext

Both decoders raise FormatError on anything malformed.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from passgen.config import MAX_KDF_ITERATIONS
from passgen.errors import FormatError
from passgen.vault.crypto import KDF_NAME, NONCE_LENGTH, SALT_LENGTH
from passgen.vault.models import PasswordEntry, VaultEnvelope

FORMAT_VERSION = 1

_entry_list = TypeAdapter(list[PasswordEntry])


def encode_entries(entries: Sequence[PasswordEntry]) -> bytes:
    """Serialize entries to UTF-8 JSON bytes."""
    return _entry_list.dump_json(list(entries))


def decode_entries(plaintext: bytes) -> list[PasswordEntry]:
    """Parse decrypted bytes back into entries."""
    try:
        return _entry_list.validate_json(plaintext)
    except PydanticValidationError as e:
        raise FormatError(f"Invalid vault contents: {e.error_count()} error(s)") from e


def encode_for_storage(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_from_storage(data: str, field: str) -> bytes:
    try:
        return base64.b64decode(data.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise FormatError(f"Invalid {field}: not base64") from e


def build_envelope(salt: bytes, nonce: bytes, ciphertext: bytes, iterations: int) -> VaultEnvelope:
    return VaultEnvelope(
        version=FORMAT_VERSION,
        kdf=KDF_NAME,
        iterations=iterations,
        salt=encode_for_storage(salt),
        nonce=encode_for_storage(nonce),
        ciphertext=encode_for_storage(ciphertext),
    )


def dump_envelope(envelope: VaultEnvelope) -> str:
    return envelope.model_dump_json(indent=2)


def parse_envelope(text: str) -> VaultEnvelope:
    """Parse and sanity-check the on-disk record.

    Checks the format version, the KDF name and the decoded salt and nonce
    sizes so that later decoding of the binary fields cannot fail.
    """
    try:
        envelope = VaultEnvelope.model_validate_json(text)
    except PydanticValidationError as e:
        raise FormatError(f"Invalid file format: {e.error_count()} error(s)") from e

    if envelope.version != FORMAT_VERSION:
        raise FormatError(f"Unsupported vault format version: {envelope.version}")
    if envelope.kdf != KDF_NAME:
        raise FormatError(f"Unsupported key derivation: {envelope.kdf}")
    if not 1 <= envelope.iterations <= MAX_KDF_ITERATIONS:
        raise FormatError(f"Invalid iteration count: {envelope.iterations}")
    if len(decode_from_storage(envelope.salt, "salt")) != SALT_LENGTH:
        raise FormatError(f"Invalid salt: expected {SALT_LENGTH} bytes")
    if len(decode_from_storage(envelope.nonce, "nonce")) != NONCE_LENGTH:
        raise FormatError(f"Invalid nonce: expected {NONCE_LENGTH} bytes")
    decode_from_storage(envelope.ciphertext, "ciphertext")
    return envelope


def envelope_salt(envelope: VaultEnvelope) -> bytes:
    return decode_from_storage(envelope.salt, "salt")


def envelope_payload(envelope: VaultEnvelope) -> tuple[bytes, bytes]:
    """Return (nonce, ciphertext) as raw bytes."""
    return (
        decode_from_storage(envelope.nonce, "nonce"),
        decode_from_storage(envelope.ciphertext, "ciphertext"),
    )
