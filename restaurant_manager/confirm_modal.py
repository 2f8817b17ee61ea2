"""Yes/no confirmation modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static


class ConfirmModal(ModalScreen[bool]):
    """Ask before a destructive action."""

    BINDINGS = [
        ("y", "answer(True)", "Yes"),
        ("enter", "answer(True)", "Yes"),
        ("n", "answer(False)", "No"),
        ("escape", "answer(False)", "No"),
    ]

    CSS = """
    ConfirmModal {
        align: center middle;
        background: $background 60%;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        border: round $warning;
        background: $panel;
        padding: 1 2;
    }

    #confirm-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static(self.question)
            yield Static("Y/Enter confirm, N/Esc cancel", id="confirm-help")

    def action_answer(self, value: bool) -> None:
        self.dismiss(value)
