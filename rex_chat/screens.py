"""Modal screens: the Settings alert and the command catalog popup."""

from __future__ import annotations

from typing import Any

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class InfoScreen(ModalScreen[None]):
    """Alert dialog with a title, a block of text, and an OK button."""

    CSS = """
    InfoScreen {
        align: center middle;
    }

    #info-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #info-title {
        padding-bottom: 1;
        text-style: bold;
    }

    #info-actions {
        height: 3;
        align: right middle;
    }
    """

    def __init__(self, title: str, text: str) -> None:
        super().__init__()
        self._title = title
        self._text = text

    def compose(self) -> ComposeResult:
        with Container(id="info-dialog"):
            yield Static(self._title, id="info-title")
            yield Static(self._text, id="info-body")
            with Container(id="info-actions"):
                yield Button("OK", id="info-ok", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "info-ok":
            event.stop()
            self.dismiss(None)

    def on_key(self, event: Any) -> None:  # noqa: ANN401
        key = str(getattr(event, "key", "")).lower()
        if key in {"escape", "enter"}:
            self.dismiss(None)


class CommandsScreen(ModalScreen[None]):
    """Popup listing the server's commands over a dimmed overlay.

    Clicking the overlay outside the dialog, or pressing Escape, closes it.
    """

    BINDINGS = [Binding("escape", "close", "Close", show=False)]

    CSS = """
    CommandsScreen {
        align: center middle;
        background: $background 60%;
    }

    #commands-dialog {
        width: 60;
        height: auto;
        max-height: 24;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #commands-title {
        padding-bottom: 1;
        text-style: bold;
        text-align: center;
        width: 100%;
    }

    #commands-list {
        height: auto;
        max-height: 16;
    }

    .command-item {
        margin-bottom: 1;
    }
    """

    def __init__(self, commands: tuple[str, ...] | list[str]) -> None:
        super().__init__()
        self._commands = tuple(commands)

    @property
    def commands(self) -> tuple[str, ...]:
        return self._commands

    def compose(self) -> ComposeResult:
        with Container(id="commands-dialog"):
            yield Static("Rex Commands", id="commands-title")
            with VerticalScroll(id="commands-list"):
                for command in self._commands:
                    yield Static(f"• {command}", classes="command-item", markup=False)

    def on_click(self, event: events.Click) -> None:
        widget, _ = self.get_widget_at(event.screen_x, event.screen_y)
        if widget is self:
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
