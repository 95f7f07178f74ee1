"""
Interactive session: phases, key bindings and the transition function.

    session = initial_session()
    intent = resolve(session.phase, key, character)
    if intent is not None:
        session = step(session, intent, collaborators)
"""

from __future__ import annotations

from passgen.session.keymap import Intent, IntentKind, help_text, resolve
from passgen.session.machine import Clipboard, Collaborators, initial_session, step
from passgen.session.models import (
    EnteringMasterPassword,
    Field,
    GeneratorForm,
    MainMenu,
    RotatingMasterPassword,
    RotationStep,
    Session,
    ViewerMode,
    ViewerState,
    ViewingEntries,
)

__all__ = [
    "Clipboard",
    "Collaborators",
    "EnteringMasterPassword",
    "Field",
    "GeneratorForm",
    "Intent",
    "IntentKind",
    "MainMenu",
    "RotatingMasterPassword",
    "RotationStep",
    "Session",
    "ViewerMode",
    "ViewerState",
    "ViewingEntries",
    "help_text",
    "initial_session",
    "resolve",
    "step",
]
