"""Conversation state manager: the ordered chat transcript plus its single in-flight request."""

from __future__ import annotations

import logging
from typing import Protocol

from .client import ExchangeResult
from .exceptions import ServerConnectionError
from .message_store import ChatEntry, MessageStore, Sender
from .state import ConversationState, StateManager

LOGGER = logging.getLogger(__name__)


class ChatTransport(Protocol):
    async def send_message(self, text: str) -> ExchangeResult[str | None]: ...


class ConversationManager:
    """Own the chat entries, the input buffer, and the pending flag for one screen.

    A send appends the user's entry immediately, then exactly one bot entry
    once the request resolves: the server's reply, the fallback reply when the
    server gave none, or the offline notice when the request failed.
    """

    def __init__(
        self,
        transport: ChatTransport,
        fallback_reply: str,
        offline_notice: str,
        greeting: str = "",
    ) -> None:
        self._transport = transport
        self.fallback_reply = fallback_reply
        self.offline_notice = offline_notice
        self.message_store = MessageStore()
        self.state = StateManager()
        self._input_buffer = ""
        self._detached = False
        if greeting.strip():
            self.message_store.append(Sender.BOT, greeting.strip())

    @property
    def entries(self) -> tuple[ChatEntry, ...]:
        """Expose the transcript for UI and tests."""
        return self.message_store.entries

    @property
    def input_buffer(self) -> str:
        return self._input_buffer

    @property
    def pending(self) -> bool:
        return self.state.is_pending

    @property
    def detached(self) -> bool:
        return self._detached

    def set_input(self, value: str) -> None:
        """Replace the input buffer with what the user has typed so far."""
        self._input_buffer = value

    def detach(self) -> None:
        """Stop accepting replies; an in-flight request resolves into nothing."""
        self._detached = True

    async def begin_submit(self, text: str | None = None) -> ChatEntry | None:
        """Append the user's entry and mark a request pending.

        Returns ``None`` without touching any state when the trimmed text is
        empty or another request is still pending.
        """
        candidate = self._input_buffer if text is None else text
        normalized = candidate.strip()
        if not normalized:
            return None
        if not await self.state.transition_if(
            ConversationState.IDLE, ConversationState.PENDING
        ):
            LOGGER.info(
                "conversation.submit.rejected",
                extra={"event": "conversation.submit.rejected", "reason": "pending"},
            )
            return None

        entry = self.message_store.append(Sender.USER, normalized)
        self._input_buffer = ""
        LOGGER.info(
            "conversation.submit",
            extra={
                "event": "conversation.submit",
                "entry_id": entry.id,
                "chars": len(normalized),
            },
        )
        return entry

    async def finish_submit(self, user_entry: ChatEntry) -> ChatEntry | None:
        """Send the user's entry to the server and append the bot's answer.

        Returns the bot entry, or ``None`` when the manager was detached while
        the request was in flight.
        """
        try:
            try:
                result = await self._transport.send_message(user_entry.text)
            except Exception as exc:  # noqa: BLE001 - transports may still raise.
                result = ExchangeResult.failure(ServerConnectionError(str(exc)))
            if self._detached:
                LOGGER.info(
                    "conversation.reply.discarded",
                    extra={
                        "event": "conversation.reply.discarded",
                        "entry_id": user_entry.id,
                    },
                )
                return None
            return self._append_reply(result)
        finally:
            await self.state.transition_to(ConversationState.IDLE)

    async def submit(self, text: str | None = None) -> ChatEntry | None:
        """Run a full send: user entry first, then the bot's answer."""
        user_entry = await self.begin_submit(text)
        if user_entry is None:
            return None
        return await self.finish_submit(user_entry)

    def _append_reply(self, result: ExchangeResult[str | None]) -> ChatEntry:
        if not result.ok:
            LOGGER.warning(
                "conversation.offline",
                extra={
                    "event": "conversation.offline",
                    "error_type": result.error.__class__.__name__,
                },
            )
            return self.message_store.append(Sender.BOT, self.offline_notice)

        reply = result.value
        if reply is None:
            LOGGER.info(
                "conversation.reply.fallback",
                extra={"event": "conversation.reply.fallback"},
            )
            reply = self.fallback_reply
        entry = self.message_store.append(Sender.BOT, reply)
        LOGGER.info(
            "conversation.reply",
            extra={"event": "conversation.reply", "entry_id": entry.id},
        )
        return entry
