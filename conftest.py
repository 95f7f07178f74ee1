"""
Root-level shared test fixtures.

Every test gets its own vault path under tmp_path and a cheap KDF so that
nothing touches ~/.passgen_vault.enc and key derivation stays fast.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from passgen.config import reset_config

TEST_KDF_ITERATIONS = 1_000


@pytest.fixture(autouse=True)
def isolated_vault(tmp_path: Path, monkeypatch) -> Path:
    """Point the config at a per-test vault file."""
    vault_path = tmp_path / "vault.enc"
    monkeypatch.setenv("PASSGEN_VAULT_PATH", str(vault_path))
    monkeypatch.setenv("PASSGEN_KDF_ITERATIONS", str(TEST_KDF_ITERATIONS))
    for key in ["PASSGEN_DEFAULT_LENGTH", "PASSGEN_LOG_FILE", "PASSGEN_LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield vault_path
    reset_config()


@pytest.fixture
def vault_path(isolated_vault: Path) -> Path:
    return isolated_vault
