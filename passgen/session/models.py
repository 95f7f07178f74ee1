"""
Session state for the interactive vault.

All state is immutable. The event loop owns exactly one ``Session`` value and
replaces it with whatever ``passgen.session.machine.step`` returns. Each phase
carries its own payload; the viewer's reveal set and edit buffer exist only
inside ``ViewingEntries``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from passgen.vault.models import PasswordEntry

if TYPE_CHECKING:
    from passgen.vault.store import VaultStore


class Field(StrEnum):
    """Focusable fields of the generator form, in ring order."""

    NAME = "name"
    LENGTH = "length"
    TOGGLE_SPECIAL = "toggle_special"
    TOGGLE_LETTERS = "toggle_letters"
    TOGGLE_NUMBERS = "toggle_numbers"
    GENERATE = "generate"

    def next(self) -> Field:
        ring = list(Field)
        return ring[(ring.index(self) + 1) % len(ring)]

    def prev(self) -> Field:
        ring = list(Field)
        return ring[(ring.index(self) - 1) % len(ring)]


class RotationStep(StrEnum):
    ENTER_OLD = "enter_old"
    ENTER_NEW = "enter_new"
    CONFIRM_NEW = "confirm_new"


class ViewerMode(StrEnum):
    BROWSE = "browse"
    CONFIRM_DELETE = "confirm_delete"
    EDIT_NAME = "edit_name"
    EDIT_PASSWORD = "edit_password"


@dataclass(frozen=True)
class GeneratorForm:
    """Main-menu inputs plus the last generated password."""

    name: str = ""
    length: str = "16"
    use_special: bool = True
    use_letters: bool = True
    use_numbers: bool = True
    active: Field = Field.NAME
    generated: str | None = None


@dataclass(frozen=True)
class EnteringMasterPassword:
    input: str = ""


@dataclass(frozen=True)
class MainMenu:
    pass


@dataclass(frozen=True)
class RotatingMasterPassword:
    step: RotationStep = RotationStep.ENTER_OLD
    old_input: str = ""
    new_input: str = ""
    confirm_input: str = ""
    # Store opened with the old passphrase; only becomes the session's store
    # once the rotation succeeds
    candidate: VaultStore | None = None

    @property
    def current_input(self) -> str:
        if self.step is RotationStep.ENTER_OLD:
            return self.old_input
        if self.step is RotationStep.ENTER_NEW:
            return self.new_input
        return self.confirm_input


@dataclass(frozen=True)
class ViewerState:
    """Snapshot of the vault plus view-only scratch state."""

    entries: tuple[PasswordEntry, ...] = ()
    selected: int = 0
    revealed: frozenset[int] = frozenset()
    status: str | None = None
    edit_buffer: str = ""

    @property
    def current(self) -> PasswordEntry | None:
        if not self.entries:
            return None
        return self.entries[self.selected]


@dataclass(frozen=True)
class ViewingEntries:
    mode: ViewerMode = ViewerMode.BROWSE
    viewer: ViewerState = field(default_factory=ViewerState)


Phase = EnteringMasterPassword | MainMenu | RotatingMasterPassword | ViewingEntries


@dataclass(frozen=True)
class Session:
    phase: Phase = field(default_factory=EnteringMasterPassword)
    form: GeneratorForm = field(default_factory=GeneratorForm)
    store: VaultStore | None = None
    error: str | None = None
    status: str | None = None
    finished: bool = False
