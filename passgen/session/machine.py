"""
Session state machine.

``step(session, intent, collaborators)`` is the only entry point: it applies
one intent to one session value and returns the next value. Storage and
generator failures never escape; they are turned into the session's error
text (main menu, prompts) or the viewer's status line.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from passgen.errors import PassgenError
from passgen.generator import generate_password
from passgen.session.keymap import Intent, IntentKind
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
from passgen.vault.models import PasswordEntry
from passgen.vault.store import VaultStore

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    def set_text(self, text: str) -> bool: ...


@dataclass(frozen=True)
class Collaborators:
    """External services the machine calls into."""

    open_store: Callable[[str], VaultStore]
    clipboard: Clipboard
    clock: Callable[[], str]


def initial_session(default_length: int = 16) -> Session:
    return Session(form=GeneratorForm(length=str(default_length)))


def step(session: Session, intent: Intent, deps: Collaborators) -> Session:
    """Apply one intent. Returns the (possibly unchanged) next session."""
    phase = session.phase
    if session.finished:
        return session
    if isinstance(phase, EnteringMasterPassword):
        return _master_password(session, phase, intent, deps)
    if isinstance(phase, MainMenu):
        return _main_menu(session, intent, deps)
    if isinstance(phase, RotatingMasterPassword):
        return _rotation(session, phase, intent, deps)
    if isinstance(phase, ViewingEntries):
        return _viewer(session, phase, intent, deps)
    raise TypeError(f"Unknown phase: {phase!r}")


def _edit_text(text: str, intent: Intent) -> str:
    if intent.kind is IntentKind.BACKSPACE:
        return text[:-1]
    if intent.kind is IntentKind.TYPE:
        return text + intent.char
    return text


def _unlock(passphrase: str, deps: Collaborators) -> VaultStore:
    """Open the vault and prove the passphrase by decrypting it."""
    store = deps.open_store(passphrase)
    store.load()
    return store


# ── Master password ──────────────────────────────────────────────────


def _master_password(
    session: Session, phase: EnteringMasterPassword, intent: Intent, deps: Collaborators
) -> Session:
    kind = intent.kind
    if kind is IntentKind.CANCEL:
        return replace(session, finished=True)
    if kind is IntentKind.SUBMIT:
        if not phase.input:
            return session
        try:
            store = _unlock(phase.input, deps)
        except PassgenError as e:
            return replace(session, phase=EnteringMasterPassword(), error=str(e))
        logger.info("Vault unlocked")
        return replace(session, phase=MainMenu(), store=store, error=None)
    if kind in (IntentKind.TYPE, IntentKind.BACKSPACE):
        return replace(session, phase=EnteringMasterPassword(_edit_text(phase.input, intent)))
    return session


# ── Main menu ────────────────────────────────────────────────────────


def _main_menu(session: Session, intent: Intent, deps: Collaborators) -> Session:
    form = session.form
    kind = intent.kind

    if kind is IntentKind.QUIT:
        return replace(session, finished=True)
    if kind is IntentKind.START_ROTATION:
        return replace(session, phase=RotatingMasterPassword(), error=None, status=None)
    if kind is IntentKind.START_VIEWER:
        return _open_viewer(session)
    if kind is IntentKind.NEXT_FIELD:
        return replace(session, form=replace(form, active=form.active.next()))
    if kind is IntentKind.PREV_FIELD:
        return replace(session, form=replace(form, active=form.active.prev()))
    if kind is IntentKind.SUBMIT:
        return _generate_and_save(session, deps)
    if kind is IntentKind.TOGGLE:
        if form.active is Field.GENERATE:
            return _generate_and_save(session, deps)
        return replace(session, form=_toggle(form))
    if kind in (IntentKind.TYPE, IntentKind.BACKSPACE):
        if form.active is Field.NAME:
            return replace(session, form=replace(form, name=_edit_text(form.name, intent)))
        if form.active is Field.LENGTH:
            return replace(session, form=replace(form, length=_edit_text(form.length, intent)))
    return session


def _toggle(form: GeneratorForm) -> GeneratorForm:
    if form.active is Field.TOGGLE_SPECIAL:
        return replace(form, use_special=not form.use_special)
    if form.active is Field.TOGGLE_LETTERS:
        return replace(form, use_letters=not form.use_letters)
    if form.active is Field.TOGGLE_NUMBERS:
        return replace(form, use_numbers=not form.use_numbers)
    return form


def _generate_and_save(session: Session, deps: Collaborators) -> Session:
    form = session.form
    session = replace(session, form=replace(form, generated=None), error=None, status=None)
    try:
        password = generate_password(
            form.name, form.length, form.use_letters, form.use_numbers, form.use_special
        )
    except PassgenError as e:
        return replace(session, error=str(e))

    session = replace(session, form=replace(session.form, generated=password))
    if session.store is None:
        return session

    entry = PasswordEntry(name=form.name, password=password, created_at=deps.clock())
    try:
        session.store.save(entry)
    except PassgenError as e:
        logger.warning("Saving generated password failed: %s", e)
        return replace(session, error=f"Save failed: {e}")
    return replace(session, status=f"✓ Saved to {session.store.path}")


def _open_viewer(session: Session) -> Session:
    if session.store is None:
        return session
    try:
        entries = session.store.load()
    except PassgenError as e:
        return replace(session, error=f"Failed to load: {e}")
    viewer = ViewerState(entries=tuple(entries))
    return replace(session, phase=ViewingEntries(ViewerMode.BROWSE, viewer), error=None)


# ── Master password rotation ─────────────────────────────────────────


def _rotation(
    session: Session, phase: RotatingMasterPassword, intent: Intent, deps: Collaborators
) -> Session:
    kind = intent.kind

    if kind is IntentKind.CANCEL:
        return replace(session, phase=MainMenu(), error=None)

    if kind in (IntentKind.TYPE, IntentKind.BACKSPACE):
        if phase.step is RotationStep.ENTER_OLD:
            phase = replace(phase, old_input=_edit_text(phase.old_input, intent))
        elif phase.step is RotationStep.ENTER_NEW:
            phase = replace(phase, new_input=_edit_text(phase.new_input, intent))
        else:
            phase = replace(phase, confirm_input=_edit_text(phase.confirm_input, intent))
        return replace(session, phase=phase)

    if kind is not IntentKind.SUBMIT:
        return session

    if phase.step is RotationStep.ENTER_OLD:
        try:
            candidate = _unlock(phase.old_input, deps)
        except PassgenError as e:
            return replace(session, phase=replace(phase, old_input=""), error=str(e))
        return replace(
            session,
            phase=replace(phase, step=RotationStep.ENTER_NEW, candidate=candidate),
            error=None,
        )

    if phase.step is RotationStep.ENTER_NEW:
        if not phase.new_input:
            return replace(session, error="Password cannot be empty")
        return replace(session, phase=replace(phase, step=RotationStep.CONFIRM_NEW), error=None)

    if phase.confirm_input != phase.new_input:
        return replace(session, phase=replace(phase, confirm_input=""), error="Passwords don't match")

    current = phase.candidate or session.store
    if current is None:
        return replace(session, phase=MainMenu(), error="Vault is not open")
    try:
        rotated = current.change_master_password(phase.new_input)
    except PassgenError as e:
        return replace(session, error=f"Failed: {e}")
    return replace(
        session,
        phase=MainMenu(),
        store=rotated,
        error=None,
        status="✓ Master password changed!",
    )


# ── Entry viewer ─────────────────────────────────────────────────────


def _viewer(session: Session, phase: ViewingEntries, intent: Intent, deps: Collaborators) -> Session:
    if phase.mode is ViewerMode.BROWSE:
        if intent.kind is IntentKind.CANCEL:
            return replace(session, phase=MainMenu())
        mode, viewer = _browse(phase.viewer, intent, deps)
    elif phase.mode is ViewerMode.CONFIRM_DELETE:
        mode, viewer = _confirm_delete(phase.viewer, intent, session.store)
    else:
        mode, viewer = _edit(phase.mode, phase.viewer, intent, session.store)
    return replace(session, phase=ViewingEntries(mode, viewer))


def _browse(viewer: ViewerState, intent: Intent, deps: Collaborators) -> tuple[ViewerMode, ViewerState]:
    kind = intent.kind
    count = len(viewer.entries)
    browse = ViewerMode.BROWSE

    if kind is IntentKind.MOVE_UP:
        return browse, replace(viewer, selected=max(viewer.selected - 1, 0), status=None)
    if kind is IntentKind.MOVE_DOWN:
        return browse, replace(viewer, selected=min(viewer.selected + 1, max(count - 1, 0)), status=None)
    if kind is IntentKind.REVEAL_ALL:
        return browse, replace(viewer, revealed=frozenset(range(count)))
    if kind is IntentKind.HIDE_ALL:
        return browse, replace(viewer, revealed=frozenset())

    entry = viewer.current
    if entry is None:
        return browse, viewer

    if kind is IntentKind.TOGGLE_REVEAL:
        return browse, replace(viewer, revealed=viewer.revealed ^ {viewer.selected})
    if kind is IntentKind.COPY:
        ok = deps.clipboard.set_text(entry.password)
        return browse, replace(viewer, status="✓ Copied to clipboard!" if ok else "✗ Failed to copy")
    if kind is IntentKind.REQUEST_DELETE:
        return ViewerMode.CONFIRM_DELETE, viewer
    if kind is IntentKind.EDIT_NAME:
        return ViewerMode.EDIT_NAME, replace(viewer, edit_buffer=entry.name)
    if kind is IntentKind.EDIT_PASSWORD:
        return ViewerMode.EDIT_PASSWORD, replace(
            viewer,
            edit_buffer=entry.password,
            revealed=viewer.revealed | {viewer.selected},
        )
    return browse, viewer


def _confirm_delete(
    viewer: ViewerState, intent: Intent, store: VaultStore | None
) -> tuple[ViewerMode, ViewerState]:
    if intent.kind is IntentKind.DECLINE:
        return ViewerMode.BROWSE, replace(viewer, status=None)
    if intent.kind is not IntentKind.CONFIRM:
        return ViewerMode.CONFIRM_DELETE, viewer
    if store is None:
        return ViewerMode.BROWSE, viewer

    try:
        store.delete(viewer.selected)
    except PassgenError as e:
        return ViewerMode.BROWSE, replace(viewer, status=f"✗ {e}")

    entries = viewer.entries[: viewer.selected] + viewer.entries[viewer.selected + 1 :]
    return ViewerMode.BROWSE, replace(
        viewer,
        entries=entries,
        selected=max(min(viewer.selected, len(entries) - 1), 0),
        revealed=frozenset(),
        status="✓ Deleted!",
    )


def _edit(
    mode: ViewerMode, viewer: ViewerState, intent: Intent, store: VaultStore | None
) -> tuple[ViewerMode, ViewerState]:
    kind = intent.kind
    if kind is IntentKind.CANCEL:
        return ViewerMode.BROWSE, replace(viewer, edit_buffer="", status=None)
    if kind in (IntentKind.TYPE, IntentKind.BACKSPACE):
        return mode, replace(viewer, edit_buffer=_edit_text(viewer.edit_buffer, intent))
    if kind is not IntentKind.SUBMIT:
        return mode, viewer

    done = replace(viewer, edit_buffer="")
    entry = viewer.current
    buffer = viewer.edit_buffer
    if mode is ViewerMode.EDIT_NAME:
        valid, changes, message = bool(buffer.strip()), {"name": buffer}, "✓ Name updated!"
    else:
        valid, changes, message = bool(buffer), {"password": buffer}, "✓ Password updated!"
    if not valid or entry is None or store is None:
        return ViewerMode.BROWSE, done

    updated = entry.model_copy(update=changes)
    try:
        store.update(viewer.selected, updated)
    except PassgenError as e:
        return ViewerMode.BROWSE, replace(done, status=f"✗ {e}")

    entries = list(viewer.entries)
    entries[viewer.selected] = updated
    return ViewerMode.BROWSE, replace(done, entries=tuple(entries), status=message)
