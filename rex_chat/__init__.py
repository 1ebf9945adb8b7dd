"""Top-level package for rex-chat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import RexChatApp
    from .catalog import CommandCatalog, CommandCatalogFetcher
    from .client import ChatServerClient, ExchangeResult
    from .config import ensure_config_dir, load_config
    from .conversation import ConversationManager
    from .exceptions import (
        ConfigValidationError,
        RexChatError,
        ServerConnectionError,
        ServerResponseError,
    )
    from .message_store import ChatEntry, MessageStore, Sender
    from .state import ConversationState, StateManager

__all__ = [
    "ChatEntry",
    "ChatServerClient",
    "CommandCatalog",
    "CommandCatalogFetcher",
    "ConfigValidationError",
    "ConversationManager",
    "ConversationState",
    "ExchangeResult",
    "MessageStore",
    "RexChatApp",
    "RexChatError",
    "Sender",
    "ServerConnectionError",
    "ServerResponseError",
    "StateManager",
    "ensure_config_dir",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "RexChatApp": ".app",
    "CommandCatalog": ".catalog",
    "CommandCatalogFetcher": ".catalog",
    "ChatServerClient": ".client",
    "ExchangeResult": ".client",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ConversationManager": ".conversation",
    "ConfigValidationError": ".exceptions",
    "RexChatError": ".exceptions",
    "ServerConnectionError": ".exceptions",
    "ServerResponseError": ".exceptions",
    "ChatEntry": ".message_store",
    "MessageStore": ".message_store",
    "Sender": ".message_store",
    "ConversationState": ".state",
    "StateManager": ".state",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the Textual UI optional at import time."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
