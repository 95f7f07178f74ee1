"""
Custom Textual widgets for the passgen TUI.

MasterPrompt — masked passphrase prompt (unlock and rotation steps).
GeneratorPanel — the generator form with the focused field highlighted.
EntryList — saved entries with masked/revealed passwords and mode prompts.
HelpBar — bottom bar with the vault path and the current key bindings.

Widgets hold no logic; the app pushes session data into them. Names,
passwords and messages are placed into Content as plain text, never parsed
as markup: generated passwords contain "[", "]", "$" and "|".
"""

from __future__ import annotations

from textual.content import Content
from textual.widgets import Static

from passgen.session.models import Field, GeneratorForm, ViewerMode, ViewerState

MASK = "•"
NEWLINE = Content("\n")


def _mask(secret: str) -> str:
    return MASK * len(secret)


def _status_line(status: str) -> Content:
    return Content.styled(status, "red" if status.startswith("✗") else "green")


class MasterPrompt(Static):
    """Masked single-line passphrase prompt."""

    DEFAULT_CSS = """
    MasterPrompt {
        border: solid $warning;
        padding: 1 2;
        height: auto;
    }
    """

    def __init__(
        self,
        prompt: str = "Enter master password to unlock your vault:",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._prompt = prompt
        self._input = ""
        self._error: str | None = None
        super().__init__(self._format(), name=name, id=id, classes=classes)

    def _format(self) -> Content:
        lines = [
            Content.styled(self._prompt, "bold"),
            Content(""),
            Content(f"> {_mask(self._input)}_"),
        ]
        if self._error:
            lines += [Content(""), Content.styled(self._error, "red")]
        return NEWLINE.join(lines)

    def show_prompt(self, prompt: str, value: str, error: str | None = None) -> None:
        self._prompt = prompt
        self._input = value
        self._error = error
        self.update(self._format())


class GeneratorPanel(Static):
    """Generator form: name, length, class toggles, generate button, result."""

    DEFAULT_CSS = """
    GeneratorPanel {
        border: solid $accent;
        padding: 1 2;
        height: auto;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._form = GeneratorForm()
        self._error: str | None = None
        self._status: str | None = None
        super().__init__(self._format(), name=name, id=id, classes=classes)

    def _field(self, field: Field, text: str) -> tuple[str, str]:
        return text, "reverse" if self._form.active is field else ""

    def _format(self) -> Content:
        form = self._form

        def check(flag: bool) -> str:
            return "[x]" if flag else "[ ]"

        lines = [
            Content.styled("Password Name", "bold"),
            Content.assemble(self._field(Field.NAME, f" {form.name}_ ")),
            Content.styled("Length", "bold"),
            Content.assemble(self._field(Field.LENGTH, f" {form.length}_ ")),
            Content(""),
            Content.assemble(
                self._field(Field.TOGGLE_SPECIAL, f"{check(form.use_special)} Special"),
                "  ",
                self._field(Field.TOGGLE_LETTERS, f"{check(form.use_letters)} Letters"),
                "  ",
                self._field(Field.TOGGLE_NUMBERS, f"{check(form.use_numbers)} Numbers"),
            ),
            Content(""),
            Content.assemble(self._field(Field.GENERATE, "[ Generate & Save ]")),
            Content(""),
        ]
        if form.generated:
            lines.append(Content.styled(form.generated, "bold green"))
        if self._error:
            lines.append(Content.styled(self._error, "red"))
        elif self._status:
            lines.append(Content.styled(self._status, "green"))
        return NEWLINE.join(lines)

    def show_form(self, form: GeneratorForm, error: str | None = None, status: str | None = None) -> None:
        self._form = form
        self._error = error
        self._status = status
        self.update(self._format())


class EntryList(Static):
    """Saved entries. Passwords stay masked unless their index is revealed."""

    DEFAULT_CSS = """
    EntryList {
        border: solid $accent;
        padding: 1 2;
        height: auto;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._viewer = ViewerState()
        self._mode = ViewerMode.BROWSE
        super().__init__(self._format(), name=name, id=id, classes=classes)

    def _row(self, index: int) -> Content:
        viewer = self._viewer
        entry = viewer.entries[index]
        selected = index == viewer.selected
        secret = entry.password if index in viewer.revealed else _mask(entry.password)
        row = Content.assemble(
            f"{'>' if selected else ' '} {entry.name}  {secret}  ",
            (entry.created_at, "dim"),
        )
        return row.stylize("reverse") if selected else row

    def _format(self) -> Content:
        viewer = self._viewer
        lines = [Content.styled(f"Saved passwords ({len(viewer.entries)})", "bold"), Content("")]
        if not viewer.entries:
            lines.append(Content.styled("No saved passwords yet.", "dim"))
        lines += [self._row(i) for i in range(len(viewer.entries))]

        lines.append(Content(""))
        if self._mode is ViewerMode.CONFIRM_DELETE and viewer.current is not None:
            lines.append(Content.styled(f"Delete '{viewer.current.name}'? (y/n)", "yellow"))
        elif self._mode is ViewerMode.EDIT_NAME:
            lines.append(Content(f"New name: {viewer.edit_buffer}_"))
        elif self._mode is ViewerMode.EDIT_PASSWORD:
            lines.append(Content(f"New password: {viewer.edit_buffer}_"))
        if viewer.status:
            lines.append(_status_line(viewer.status))
        return NEWLINE.join(lines)

    def show_entries(self, viewer: ViewerState, mode: ViewerMode) -> None:
        self._viewer = viewer
        self._mode = mode
        self.update(self._format())


class HelpBar(Static):
    """Bottom bar with the vault path and key hints for the current phase."""

    DEFAULT_CSS = """
    HelpBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        vault_path: str = "",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._vault_path = vault_path
        self._hints = ""
        super().__init__(self._format(), name=name, id=id, classes=classes)

    def _format(self) -> Content:
        parts = []
        if self._vault_path:
            parts.append(Content.styled(self._vault_path, "dim"))
        if self._hints:
            parts.append(Content(self._hints))
        return Content(" | ").join(parts)

    def set_hints(self, hints: str) -> None:
        self._hints = hints
        self.update(self._format())
