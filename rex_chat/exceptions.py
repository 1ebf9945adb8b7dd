"""Domain exception hierarchy for the Rex chat client."""

from __future__ import annotations


class RexChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class ServerConnectionError(RexChatError):
    """Raised when the chat server cannot be reached or answers with an error status."""


class ServerResponseError(RexChatError):
    """Raised when the chat server answers with a body that is not valid JSON."""


class ConfigValidationError(RexChatError):
    """Raised when configuration cannot be validated safely."""
