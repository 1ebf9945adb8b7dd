"""Input row containing the message field and the send button."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Input

SEND_LABEL = "Send"
PENDING_LABEL = "..."


class InputBox(Horizontal):
    """Message field plus a send button that shows ``...`` while a reply is pending."""

    def __init__(self, placeholder: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        yield Input(placeholder=self._placeholder, id="message_input")
        yield Button(SEND_LABEL, id="send_button", variant="success")

    def set_pending(self, pending: bool) -> None:
        """Reflect the pending flag on the send button."""
        button = self.query_one("#send_button", Button)
        button.label = PENDING_LABEL if pending else SEND_LABEL
