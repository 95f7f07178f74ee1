"""
PassgenApp — main Textual application for the passgen TUI.

The app is only the renderer, the input source and the clipboard. It owns a
single Session value, feeds every key press through the keymap and the state
machine, and redraws from whatever session comes back.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Header

from passgen.config import Config, get_config
from passgen.session import (
    Collaborators,
    EnteringMasterPassword,
    MainMenu,
    RotatingMasterPassword,
    RotationStep,
    ViewingEntries,
    help_text,
    initial_session,
    resolve,
    step,
)
from passgen.tui.widgets import EntryList, GeneratorPanel, HelpBar, MasterPrompt
from passgen.vault.store import VaultStore

logger = logging.getLogger(__name__)

CSS_PATH = Path(__file__).parent / "theme.tcss"

ROTATION_PROMPTS = {
    RotationStep.ENTER_OLD: "Enter current master password:",
    RotationStep.ENTER_NEW: "Enter NEW master password:",
    RotationStep.CONFIRM_NEW: "Confirm NEW master password:",
}


def unix_timestamp() -> str:
    """Whole seconds since the epoch, as text."""
    return str(int(time.time()))


class TextualClipboard:
    """Clipboard sink backed by the terminal (OSC 52) through Textual.

    OSC 52 is fire-and-forget: a terminal that ignores it is indistinguishable
    from one that honours it, so only an OSError counts as a failure.
    """

    def __init__(self, app: App) -> None:
        self._app = app

    def set_text(self, text: str) -> bool:
        try:
            self._app.copy_to_clipboard(text)
        except OSError as e:
            logger.warning("Clipboard copy failed: %s", e)
            return False
        return True


class PassgenApp(App):
    """Terminal UI for the passgen vault."""

    TITLE = "passgen"
    CSS_PATH = CSS_PATH

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        config: Config | None = None,
        collaborators: Collaborators | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.settings = config or get_config()
        self.collaborators = collaborators or Collaborators(
            open_store=self._open_store,
            clipboard=TextualClipboard(self),
            clock=unix_timestamp,
        )
        self.session = initial_session(self.settings.default_length)

    def _open_store(self, passphrase: str) -> VaultStore:
        return VaultStore.open(
            passphrase,
            path=self.settings.vault_path,
            iterations=self.settings.kdf_iterations,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="body"):
            yield MasterPrompt(id="master-prompt")
            yield GeneratorPanel(id="generator")
            yield EntryList(id="entries")
        yield HelpBar(vault_path=str(self.settings.vault_path), id="help-bar")

    def on_mount(self) -> None:
        self.refresh_session()

    async def on_key(self, event: events.Key) -> None:
        """Route every key press through the session state machine."""
        event.prevent_default()
        event.stop()
        intent = resolve(self.session.phase, event.key, event.character)
        if intent is None:
            return

        self.session = step(self.session, intent, self.collaborators)
        if self.session.finished:
            self.exit()
            return
        self.refresh_session()

    def refresh_session(self) -> None:
        """Show the widget for the current phase and push its data into it."""
        session = self.session
        phase = session.phase

        prompt = self.query_one("#master-prompt", MasterPrompt)
        generator = self.query_one("#generator", GeneratorPanel)
        entries = self.query_one("#entries", EntryList)

        prompt.display = isinstance(phase, (EnteringMasterPassword, RotatingMasterPassword))
        generator.display = isinstance(phase, MainMenu)
        entries.display = isinstance(phase, ViewingEntries)

        if isinstance(phase, EnteringMasterPassword):
            prompt.show_prompt(
                "Enter master password to unlock your vault:", phase.input, session.error
            )
        elif isinstance(phase, RotatingMasterPassword):
            prompt.show_prompt(ROTATION_PROMPTS[phase.step], phase.current_input, session.error)
        elif isinstance(phase, MainMenu):
            generator.show_form(session.form, session.error, session.status)
        elif isinstance(phase, ViewingEntries):
            entries.show_entries(phase.viewer, phase.mode)

        self.query_one("#help-bar", HelpBar).set_hints(help_text(phase))
