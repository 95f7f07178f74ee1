"""
passgen — local password generator and encrypted vault.

The vault is a single AES-256-GCM encrypted file keyed by a master
passphrase; the terminal UI lives in passgen.tui.
"""

__version__ = "0.1.0"
