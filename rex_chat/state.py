"""Pending-request state machine with lock-protected transitions."""

from __future__ import annotations

import asyncio
from enum import Enum
import logging

LOGGER = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """Lifecycle of a single outbound request: idle -> pending -> idle."""

    IDLE = "IDLE"
    PENDING = "PENDING"


class StateManager:
    """Manage state transitions with async lock semantics."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._state = ConversationState.IDLE

    @property
    def state(self) -> ConversationState:
        """Return the current state without waiting for the lock."""
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state == ConversationState.PENDING

    async def transition_to(self, new_state: ConversationState) -> ConversationState:
        """Transition to a new state and return it."""
        async with self._lock:
            self._log_transition(self._state, new_state)
            self._state = new_state
            return self._state

    async def transition_if(
        self,
        expected_state: ConversationState,
        new_state: ConversationState,
    ) -> bool:
        """Transition only when current state matches expected state."""
        async with self._lock:
            if self._state != expected_state:
                return False
            self._log_transition(self._state, new_state)
            self._state = new_state
            return True

    @staticmethod
    def _log_transition(
        from_state: ConversationState, to_state: ConversationState
    ) -> None:
        LOGGER.debug(
            "app.state.transition",
            extra={
                "event": "app.state.transition",
                "from_state": from_state.value,
                "to_state": to_state.value,
            },
        )
