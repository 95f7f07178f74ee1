"""Test fixtures for the session state machine."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from passgen.session import Collaborators, Intent, IntentKind, Session, step
from passgen.vault.store import VaultStore


@dataclass
class FakeClipboard:
    ok: bool = True
    copied: list[str] = field(default_factory=list)

    def set_text(self, text: str) -> bool:
        if self.ok:
            self.copied.append(text)
        return self.ok


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def deps(clipboard: FakeClipboard) -> Collaborators:
    return Collaborators(
        open_store=lambda passphrase: VaultStore.open(passphrase),
        clipboard=clipboard,
        clock=lambda: "1700000000",
    )


class Driver:
    """Feeds intents into step() and keeps the latest session."""

    def __init__(self, deps: Collaborators, session: Session | None = None) -> None:
        self.deps = deps
        self.session = session or Session()

    def send(self, kind: IntentKind, char: str = "") -> Session:
        self.session = step(self.session, Intent(kind, char), self.deps)
        return self.session

    def type(self, text: str) -> Session:
        for ch in text:
            self.send(IntentKind.TYPE, ch)
        return self.session

    def unlock(self, passphrase: str) -> Session:
        self.type(passphrase)
        return self.send(IntentKind.SUBMIT)

    @property
    def phase(self):
        return self.session.phase


@pytest.fixture
def driver(deps: Collaborators) -> Driver:
    return Driver(deps)


@pytest.fixture
def make_driver(deps: Collaborators):
    """Build a Driver around a custom starting session."""

    def _make(session: Session | None = None) -> Driver:
        return Driver(deps, session)

    return _make
