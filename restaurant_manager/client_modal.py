"""Client id entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

_MAX_DIGITS = 6


def parse_client_id(value: str) -> tuple[int | None, str]:
    """Validate typed digits; returns the id or an error message."""
    if not value:
        return (None, "Client id is required.")
    parsed = int(value)
    if parsed <= 0:
        return (None, "Client id must be greater than 0.")
    return (parsed, "")


class ClientIdModal(ModalScreen[int | None]):
    """Prompt for the client whose check should be printed."""

    CSS = """
    ClientIdModal {
        align: center middle;
        background: $background 60%;
    }

    #client-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #client-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #client-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #client-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #client-help {
        color: #dddddd;
    }
    """

    def __init__(self, title: str = "Client Check") -> None:
        super().__init__()
        self.title_text = title
        self.value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="client-dialog"):
            yield Static(self.title_text, id="client-title")
            yield Static(id="client-value")
            yield Static(id="client-error")
            yield Static("Digits only. Enter confirm. Backspace delete. Esc/q cancel.", id="client-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            parsed, self.error = parse_client_id(self.value)
            if parsed is not None:
                self.dismiss(parsed)
            else:
                self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character.isdigit():
            if len(self.value) < _MAX_DIGITS:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#client-value", Static).update(self.value or "")
        self.query_one("#client-error", Static).update(self.error or "")
