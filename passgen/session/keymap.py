"""
Key bindings for each phase.

Translates a Textual key press (key name + printable character) into an
``Intent`` for the state machine. Bindings are looked up by key name first,
then by character; any other printable character becomes a TYPE intent in
phases that accept text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from passgen.session.models import (
    EnteringMasterPassword,
    MainMenu,
    Phase,
    RotatingMasterPassword,
    ViewerMode,
    ViewingEntries,
)


class IntentKind(StrEnum):
    SUBMIT = "submit"
    CANCEL = "cancel"
    TYPE = "type"
    BACKSPACE = "backspace"
    # main menu
    QUIT = "quit"
    START_ROTATION = "start_rotation"
    START_VIEWER = "start_viewer"
    NEXT_FIELD = "next_field"
    PREV_FIELD = "prev_field"
    TOGGLE = "toggle"
    # viewer
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    TOGGLE_REVEAL = "toggle_reveal"
    REVEAL_ALL = "reveal_all"
    HIDE_ALL = "hide_all"
    COPY = "copy"
    REQUEST_DELETE = "request_delete"
    EDIT_NAME = "edit_name"
    EDIT_PASSWORD = "edit_password"
    CONFIRM = "confirm"
    DECLINE = "decline"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    char: str = ""


# Binding tables: key → (intent, help text). Help text "" keeps a binding out
# of the help line.
TEXT_ENTRY_KEYS: dict[str, tuple[IntentKind, str]] = {
    "enter": (IntentKind.SUBMIT, "submit"),
    "escape": (IntentKind.CANCEL, "cancel"),
    "backspace": (IntentKind.BACKSPACE, ""),
}

MAIN_KEYS: dict[str, tuple[IntentKind, str]] = {
    "tab": (IntentKind.NEXT_FIELD, "next field"),
    "down": (IntentKind.NEXT_FIELD, ""),
    "shift+tab": (IntentKind.PREV_FIELD, "prev field"),
    "up": (IntentKind.PREV_FIELD, ""),
    "space": (IntentKind.TOGGLE, "toggle"),
    "enter": (IntentKind.SUBMIT, "generate & save"),
    "backspace": (IntentKind.BACKSPACE, ""),
    "escape": (IntentKind.QUIT, ""),
    "q": (IntentKind.QUIT, "quit"),
    "c": (IntentKind.START_ROTATION, "change master"),
    "v": (IntentKind.START_VIEWER, "view saved"),
}

BROWSE_KEYS: dict[str, tuple[IntentKind, str]] = {
    "up": (IntentKind.MOVE_UP, ""),
    "k": (IntentKind.MOVE_UP, "up"),
    "down": (IntentKind.MOVE_DOWN, ""),
    "j": (IntentKind.MOVE_DOWN, "down"),
    "enter": (IntentKind.TOGGLE_REVEAL, "show/hide"),
    "space": (IntentKind.TOGGLE_REVEAL, ""),
    "r": (IntentKind.REVEAL_ALL, "reveal all"),
    "H": (IntentKind.HIDE_ALL, "hide all"),
    "y": (IntentKind.COPY, "copy"),
    "d": (IntentKind.REQUEST_DELETE, "delete"),
    "e": (IntentKind.EDIT_NAME, "edit name"),
    "p": (IntentKind.EDIT_PASSWORD, "edit password"),
    "q": (IntentKind.CANCEL, "back"),
    "escape": (IntentKind.CANCEL, ""),
}

CONFIRM_KEYS: dict[str, tuple[IntentKind, str]] = {
    "y": (IntentKind.CONFIRM, "delete"),
    "enter": (IntentKind.CONFIRM, ""),
    "n": (IntentKind.DECLINE, "cancel"),
    "escape": (IntentKind.DECLINE, ""),
}

EDIT_KEYS: dict[str, tuple[IntentKind, str]] = {
    "enter": (IntentKind.SUBMIT, "save"),
    "escape": (IntentKind.CANCEL, "cancel"),
    "backspace": (IntentKind.BACKSPACE, ""),
}


def bindings_for(phase: Phase) -> tuple[dict[str, tuple[IntentKind, str]], bool]:
    """Return (binding table, accepts free text) for the phase."""
    if isinstance(phase, (EnteringMasterPassword, RotatingMasterPassword)):
        return TEXT_ENTRY_KEYS, True
    if isinstance(phase, MainMenu):
        return MAIN_KEYS, True
    if isinstance(phase, ViewingEntries):
        if phase.mode is ViewerMode.BROWSE:
            return BROWSE_KEYS, False
        if phase.mode is ViewerMode.CONFIRM_DELETE:
            return CONFIRM_KEYS, False
        return EDIT_KEYS, True
    raise TypeError(f"Unknown phase: {phase!r}")


def resolve(phase: Phase, key: str, character: str | None = None) -> Intent | None:
    """Map a key press to an intent, or None if the phase ignores it."""
    table, accepts_text = bindings_for(phase)

    # Text prompts treat space as a character, not a named key
    if accepts_text and not isinstance(phase, MainMenu) and key == "space":
        return Intent(IntentKind.TYPE, " ")

    if key in table:
        return Intent(table[key][0])
    if character and character in table:
        return Intent(table[character][0])
    if accepts_text and character and character.isprintable():
        return Intent(IntentKind.TYPE, character)
    return None


def help_text(phase: Phase) -> str:
    """One-line summary of the phase's bindings."""
    table, _ = bindings_for(phase)
    labels = {"enter": "Enter", "escape": "Esc", "space": "Space", "tab": "Tab", "shift+tab": "S-Tab"}
    return "  ".join(
        f"{labels.get(key, key)} {description}" for key, (_, description) in table.items() if description
    )
