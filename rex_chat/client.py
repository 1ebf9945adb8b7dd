"""Async HTTP client for the Rex chat server's two JSON endpoints."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Generic, TypeVar

import httpx

from .exceptions import RexChatError, ServerConnectionError, ServerResponseError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExchangeResult(Generic[T]):
    """Outcome of one request: either a value or the error that replaced it."""

    value: T | None = None
    error: RexChatError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ExchangeResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RexChatError) -> ExchangeResult[T]:
        return cls(error=error)


def extract_reply(payload: Any) -> str | None:
    """Return the ``reply`` field when it is a non-empty string."""
    if isinstance(payload, dict):
        reply = payload.get("reply")
        if isinstance(reply, str) and reply:
            return reply
    return None


def extract_commands(payload: Any) -> list[str]:
    """Return the ``commands`` field as a list of strings in server order.

    A missing or non-list field counts as empty; non-string items are dropped.
    """
    if not isinstance(payload, dict):
        return []
    commands = payload.get("commands")
    if not isinstance(commands, list):
        return []
    return [item for item in commands if isinstance(item, str)]


class ChatServerClient:
    """Issue chat and command-list requests without retries or cancellation."""

    def __init__(
        self,
        chat_url: str,
        commands_url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.chat_url = chat_url
        self.commands_url = commands_url
        if client is not None:
            self._client = client
        elif timeout is not None:
            self._client = httpx.AsyncClient(timeout=timeout)
        else:
            self._client = httpx.AsyncClient()

    @classmethod
    def from_config(
        cls, server_config: Any, client: httpx.AsyncClient | None = None
    ) -> ChatServerClient:
        """Build a client from a :class:`~rex_chat.config.ServerConfig`."""
        return cls(
            chat_url=server_config.chat_url,
            commands_url=server_config.commands_url,
            timeout=server_config.timeout_seconds,
            client=client,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _map_exception(self, exc: Exception, url: str) -> RexChatError:
        if isinstance(exc, RexChatError):
            return exc
        if isinstance(exc, httpx.HTTPStatusError):
            return ServerConnectionError(
                f"{url} answered with HTTP {exc.response.status_code}."
            )
        if isinstance(exc, httpx.HTTPError):
            return ServerConnectionError(f"Unable to reach {url}: {exc}")
        if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError)):
            return ServerResponseError(f"{url} did not answer with JSON.")
        return ServerResponseError(f"Unexpected response from {url}: {exc}")

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, **kwargs)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ServerResponseError(f"{url} did not answer with a JSON object.")
        return payload

    async def _exchange(self, method: str, url: str, **kwargs: Any) -> ExchangeResult[Any]:
        try:
            payload = await self._request_json(method, url, **kwargs)
        except Exception as exc:  # noqa: BLE001 - every failure becomes a value.
            mapped = self._map_exception(exc, url)
            LOGGER.warning(
                "client.request.failed",
                extra={
                    "event": "client.request.failed",
                    "method": method,
                    "url": url,
                    "error_type": mapped.__class__.__name__,
                },
            )
            return ExchangeResult.failure(mapped)
        return ExchangeResult.success(payload)

    async def send_message(self, text: str) -> ExchangeResult[str | None]:
        """POST ``{"message": text}`` and return the reply text, if the server gave one."""
        result = await self._exchange("POST", self.chat_url, json={"message": text})
        if not result.ok:
            return ExchangeResult.failure(result.error)  # type: ignore[arg-type]
        return ExchangeResult.success(extract_reply(result.value))

    async def fetch_commands(self) -> ExchangeResult[list[str]]:
        """GET the command list."""
        result = await self._exchange("GET", self.commands_url)
        if not result.ok:
            return ExchangeResult.failure(result.error)  # type: ignore[arg-type]
        return ExchangeResult.success(extract_commands(result.value))
