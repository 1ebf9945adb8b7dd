"""Chat bubble widget for one conversation entry."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..message_store import ChatEntry, Sender


class MessageBubble(Vertical):
    """Render a single chat entry with a sender label above its text."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
    }
    MessageBubble > #header-block {
        padding: 0;
        text-style: bold;
    }
    MessageBubble > #content-block {
        height: auto;
    }
    """

    def __init__(self, entry: ChatEntry, **kwargs: Any) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.entry = entry
        self.add_class(f"sender-{entry.sender.value}")

    @property
    def sender_label(self) -> str:
        """Return a human-friendly sender label."""
        return "You" if self.entry.sender == Sender.USER else "Rex"

    @property
    def message_content(self) -> str:
        return self.entry.text

    def _render_body(self) -> Markdown | Text:
        # User text is shown verbatim; bot replies may carry Markdown code samples.
        if self.entry.is_user:
            return Text(self.entry.text)
        return Markdown(self.entry.text)

    def compose(self) -> ComposeResult:
        yield Static(Text(self.sender_label), id="header-block")
        yield Static(self._render_body(), id="content-block")
