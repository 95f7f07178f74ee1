"""
Centralized configuration for passgen.

All configuration is loaded from environment variables with sensible defaults.

Usage:
    from passgen.config import get_config
    cfg = get_config()
    print(cfg.vault_path)      # "/home/user/.passgen_vault.enc" or $PASSGEN_VAULT_PATH
    print(cfg.kdf_iterations)  # 600000
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from passgen.errors import ConfigError

VAULT_FILENAME = ".passgen_vault.enc"
DEFAULT_KDF_ITERATIONS = 600_000
MAX_KDF_ITERATIONS = 10_000_000
DEFAULT_PASSWORD_LENGTH = 16
MAX_PASSWORD_LENGTH = 128


@dataclass(frozen=True)
class Config:
    """Top-level passgen configuration."""

    vault_path: Path = field(default_factory=lambda: Path.home() / VAULT_FILENAME)

    # Only applies to new vaults and rotations; existing files carry their own count
    kdf_iterations: int = DEFAULT_KDF_ITERATIONS

    default_length: int = DEFAULT_PASSWORD_LENGTH

    # Logging (file only, the TUI owns the terminal)
    log_file: Path | None = None
    log_level: str = "INFO"


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    vault_path = os.environ.get("PASSGEN_VAULT_PATH")
    log_file = os.environ.get("PASSGEN_LOG_FILE")

    return Config(
        vault_path=Path(vault_path).expanduser() if vault_path else Path.home() / VAULT_FILENAME,
        kdf_iterations=_int_env("PASSGEN_KDF_ITERATIONS", DEFAULT_KDF_ITERATIONS, MAX_KDF_ITERATIONS),
        default_length=_int_env("PASSGEN_DEFAULT_LENGTH", DEFAULT_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH),
        log_file=Path(log_file).expanduser() if log_file else None,
        log_level=os.environ.get("PASSGEN_LOG_LEVEL", "INFO").upper(),
    )


def _int_env(name: str, default: int, maximum: int) -> int:
    """Read a whole number from the environment, bounded to 1..maximum."""
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a whole number, got {raw!r}") from e
    if not 1 <= value <= maximum:
        raise ConfigError(f"{name} must be between 1 and {maximum}, got {value}")
    return value


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
