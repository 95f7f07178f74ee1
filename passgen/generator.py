"""
Password generation.

Characters are drawn independently and uniformly, with replacement, from the
enabled classes using the ``secrets`` CSPRNG.
"""

from __future__ import annotations

import secrets
import string

from passgen.errors import ValidationError

LETTERS = string.ascii_lowercase + string.ascii_uppercase
DIGITS = string.digits
SPECIAL = "!@#$%^&*()_+-=[]{}|;:,.<>?"

MIN_LENGTH = 1
MAX_LENGTH = 128


def build_charset(use_letters: bool, use_digits: bool, use_special: bool) -> str:
    """Concatenate the enabled classes in fixed order: letters, digits, symbols."""
    charset = ""
    if use_letters:
        charset += LETTERS
    if use_digits:
        charset += DIGITS
    if use_special:
        charset += SPECIAL
    return charset


def parse_length(length_text: str) -> int:
    # ASCII decimal with at most one leading "+"; no "-", no surrounding whitespace
    digits = length_text.removeprefix("+")
    if not (digits.isascii() and digits.isdigit()):
        raise ValidationError("invalid length")
    length = int(digits)
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValidationError(f"length must be {MIN_LENGTH}-{MAX_LENGTH}")
    return length


def generate_password(
    name: str,
    length_text: str,
    use_letters: bool,
    use_digits: bool,
    use_special: bool,
) -> str:
    """Validate the form inputs and return a fresh password.

    Raises ValidationError for an empty name, a bad length or an empty
    character set. Persisting the result is up to the caller.
    """
    if not name.strip():
        raise ValidationError("name required")
    length = parse_length(length_text)
    charset = build_charset(use_letters, use_digits, use_special)
    if not charset:
        raise ValidationError("no character class enabled")
    return "".join(secrets.choice(charset) for _ in range(length))
