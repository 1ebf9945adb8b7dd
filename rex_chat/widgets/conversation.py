"""Scrollable conversation view widget."""

from __future__ import annotations

from textual.containers import VerticalScroll

from ..message_store import ChatEntry
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that hosts message bubbles in entry order."""

    async def add_entry(self, entry: ChatEntry) -> MessageBubble:
        """Create, mount, and scroll to a bubble for ``entry``."""
        bubble = MessageBubble(entry)
        bubble.add_class(f"message-{entry.sender.value}")
        await self.mount(bubble)
        self.scroll_end(animate=False)
        return bubble

    @property
    def rendered_entry_ids(self) -> list[str]:
        return [child.entry.id for child in self.query(MessageBubble)]
