"""Tests for the main PassgenApp — Textual pilot tests."""

from __future__ import annotations

import itertools
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from passgen.config import get_config
from passgen.session import EnteringMasterPassword, MainMenu, RotatingMasterPassword, ViewingEntries
from passgen.tui.app import PassgenApp, TextualClipboard, unix_timestamp
from passgen.vault.models import PasswordEntry
from passgen.vault.store import VaultStore


class TestAppInit:
    def test_uses_global_config(self, vault_path):
        app = PassgenApp()
        assert app.settings.vault_path == vault_path
        assert isinstance(app.session.phase, EnteringMasterPassword)

    def test_default_length_from_config(self):
        app = PassgenApp(config=replace(get_config(), default_length=24))
        assert app.session.form.length == "24"

    def test_unix_timestamp(self):
        assert unix_timestamp().isdigit()


class TestTextualClipboard:
    def test_copy(self):
        app = MagicMock()
        assert TextualClipboard(app).set_text("pw") is True
        app.copy_to_clipboard.assert_called_once_with("pw")

    def test_copy_failure(self):
        app = MagicMock()
        app.copy_to_clipboard.side_effect = OSError("no tty")
        assert TextualClipboard(app).set_text("pw") is False


class TestAppPilot:
    @pytest.mark.asyncio
    async def test_starts_on_master_prompt(self):
        app = PassgenApp()
        async with app.run_test() as _pilot:
            assert app.query_one("#master-prompt").display
            assert not app.query_one("#generator").display
            assert not app.query_one("#entries").display

    @pytest.mark.asyncio
    async def test_unlock_shows_generator(self):
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter")
            await pilot.pause()
            assert isinstance(app.session.phase, MainMenu)
            assert app.query_one("#generator").display
            assert not app.query_one("#master-prompt").display

    @pytest.mark.asyncio
    async def test_escape_exits(self):
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press("escape")
            assert app.session.finished

    @pytest.mark.asyncio
    async def test_generate_and_save(self, vault_path):
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter")
            await pilot.press(*"github", "enter")
            await pilot.pause()
            assert app.session.status == f"✓ Saved to {vault_path}"
        entries = VaultStore.open("hunter2").load()
        assert [e.name for e in entries] == ["github"]

    @pytest.mark.asyncio
    async def test_viewer_and_rotation_keys(self):
        VaultStore.open("hunter2").save(PasswordEntry(name="github", password="pw", created_at="1"))
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter", "v")
            await pilot.pause()
            assert isinstance(app.session.phase, ViewingEntries)
            assert app.query_one("#entries").display
            assert "github" in app.query_one("#entries")._format().plain

            await pilot.press("q", "c")
            await pilot.pause()
            assert isinstance(app.session.phase, RotatingMasterPassword)
            assert "current master password" in app.query_one("#master-prompt")._format().plain

    @pytest.mark.asyncio
    async def test_wrong_password_shows_error(self):
        VaultStore.open("hunter2").save(PasswordEntry(name="github", password="pw", created_at="1"))
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"nope", "enter")
            await pilot.pause()
            assert isinstance(app.session.phase, EnteringMasterPassword)
            assert "wrong master password" in app.query_one("#master-prompt")._format().plain

    @pytest.mark.asyncio
    async def test_reveal_password_with_brackets(self):
        secret = "2.ts[F*-0Qv=|p]*"
        VaultStore.open("hunter2").save(PasswordEntry(name="[B]ank", password=secret, created_at="1"))
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter", "v", "enter")
            await pilot.pause()
            assert app.return_code is None
            assert app.session.phase.viewer.revealed == {0}
            assert f"> [B]ank  {secret}  1" in app.query_one("#entries")._format().plain

    @pytest.mark.asyncio
    async def test_generated_passwords_render(self, monkeypatch):
        draws = itertools.cycle("[B]$|[/]")
        monkeypatch.setattr("passgen.generator.secrets.choice", lambda charset: next(draws))
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter", *"site", "enter")
            await pilot.pause()
            assert app.return_code is None
            generated = app.session.form.generated
            assert generated in app.query_one("#generator")._format().plain

    @pytest.mark.asyncio
    async def test_copy_goes_through_textual_clipboard(self):
        VaultStore.open("hunter2").save(PasswordEntry(name="github", password="p[a]ss", created_at="1"))
        app = PassgenApp()
        async with app.run_test() as pilot:
            await pilot.press(*"hunter2", "enter", "v", "y")
            await pilot.pause()
            assert app.clipboard == "p[a]ss"
            assert app.session.phase.viewer.status == "✓ Copied to clipboard!"
