"""Command catalog fetched from the server and shown in a dismissible popup."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol

from .client import ExchangeResult

LOGGER = logging.getLogger(__name__)


class CommandsTransport(Protocol):
    async def fetch_commands(self) -> ExchangeResult[list[str]]: ...


@dataclass(frozen=True)
class CommandCatalog:
    """Snapshot of the command names and whether the popup is showing."""

    commands: tuple[str, ...] = ()
    visible: bool = False


class CommandCatalogFetcher:
    """Load the command list on demand; failures leave the catalog as it was."""

    def __init__(self, transport: CommandsTransport) -> None:
        self._transport = transport
        self._catalog = CommandCatalog()
        self._loading = False

    @property
    def catalog(self) -> CommandCatalog:
        return self._catalog

    @property
    def commands(self) -> tuple[str, ...]:
        return self._catalog.commands

    @property
    def visible(self) -> bool:
        return self._catalog.visible

    @property
    def loading(self) -> bool:
        return self._loading

    async def load_commands(self) -> bool:
        """Fetch and replace the catalog, then show it.

        Returns ``True`` when the catalog was replaced. A call made while a
        previous load is in flight does nothing.
        """
        if self._loading:
            return False
        self._loading = True
        try:
            try:
                result = await self._transport.fetch_commands()
            except Exception as exc:  # noqa: BLE001 - failures are diagnostics only.
                LOGGER.warning(
                    "catalog.load.failed",
                    extra={
                        "event": "catalog.load.failed",
                        "error_type": exc.__class__.__name__,
                    },
                )
                return False
        finally:
            self._loading = False

        if not result.ok:
            LOGGER.warning(
                "catalog.load.failed",
                extra={
                    "event": "catalog.load.failed",
                    "error_type": result.error.__class__.__name__,
                    "error": str(result.error),
                },
            )
            return False

        self._catalog = CommandCatalog(commands=tuple(result.value or ()), visible=True)
        LOGGER.info(
            "catalog.load.complete",
            extra={"event": "catalog.load.complete", "count": len(self._catalog.commands)},
        )
        return True

    def dismiss(self) -> None:
        """Hide the popup; the loaded commands stay as they are."""
        if self._catalog.visible:
            self._catalog = CommandCatalog(commands=self._catalog.commands, visible=False)
