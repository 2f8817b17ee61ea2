"""Free-text entry modal screen and the parsers behind its prompts."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restaurant_manager.config import DATETIME_FORMAT

_MAX_CHARS = 120


def parse_virtual_now(value: str) -> tuple[datetime | None, str]:
    """Blank means "follow the real clock" and returns (None, "")."""
    value = value.strip()
    if not value:
        return (None, "")
    try:
        return (datetime.strptime(value, DATETIME_FORMAT), "")
    except ValueError:
        return (None, f"Use {DATETIME_FORMAT.replace('%', '')}, e.g. 2026-03-10 19:30.")


def parse_table_id(value: str) -> tuple[int | None, str]:
    value = value.strip()
    if not value.isdigit():
        return (None, "Table number must be digits.")
    parsed = int(value)
    if parsed <= 0:
        return (None, "Table number must be greater than 0.")
    return (parsed, "")


class TextPromptModal(ModalScreen[str | None]):
    """Single-line prompt; dismisses with the typed text or None on cancel."""

    CSS = """
    TextPromptModal {
        align: center middle;
        background: $background 60%;
    }

    #prompt-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #prompt-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #prompt-help {
        color: #dddddd;
    }
    """

    def __init__(self, title: str, value: str = "", help_text: str = "") -> None:
        super().__init__()
        self.title_text = title
        self.value = value
        self.help_text = help_text

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(id="prompt-value")
            yield Static(f"{self.help_text}\nEnter confirm. Backspace delete. Esc cancel.".lstrip(), id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(self.value)
            event.stop()
            return

        if event.key == "backspace":
            self.value = self.value[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(self.value) < _MAX_CHARS:
                self.value += event.character
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#prompt-value", Static).update(Text(f"{self.value}_"))
