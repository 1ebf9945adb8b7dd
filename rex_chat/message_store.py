"""Append-only storage for the chat entries of one session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator
from uuid import uuid4


class Sender(str, Enum):
    """Who produced a chat entry."""

    USER = "user"
    BOT = "bot"


def _new_entry_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class ChatEntry:
    """One immutable message unit in the conversation."""

    sender: Sender
    text: str
    id: str = field(default_factory=_new_entry_id)

    @property
    def is_user(self) -> bool:
        return self.sender == Sender.USER


class MessageStore:
    """Keep chat entries in insertion order; entries are never removed or edited."""

    def __init__(self) -> None:
        self._entries: list[ChatEntry] = []

    @property
    def entries(self) -> tuple[ChatEntry, ...]:
        """Return a snapshot of all entries in display order."""
        return tuple(self._entries)

    @property
    def message_count(self) -> int:
        """Return the number of stored entries."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChatEntry]:
        return iter(tuple(self._entries))

    def append(self, sender: Sender, text: str) -> ChatEntry:
        """Create, store, and return a new entry."""
        entry = ChatEntry(sender=Sender(sender), text=text)
        self._entries.append(entry)
        return entry
