"""Status bar widget for server and conversation telemetry."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import Label, Static


class StatusBar(Static):
    """Render compact runtime status information.

    Segments (left to right):
        Server: http://192.168.1.19:9090  |  idle  |  Messages: 4
    """

    DEFAULT_CSS = """
    StatusBar {
        layout: horizontal;
        height: auto;
    }
    StatusBar Label {
        margin-right: 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose child labels for each status segment."""
        yield Label("Server: —", id="status_server")
        yield Label("|", id="status_sep1")
        yield Label("idle", id="status_state")
        yield Label("|", id="status_sep2")
        yield Label("Messages: 0", id="status_messages")

    def set_status(self, *, server: str, pending: bool, message_count: int) -> None:
        """Update all status segment labels."""
        self.query_one("#status_server", Label).update(f"Server: {server}")
        self.query_one("#status_state", Label).update(
            "⏳ waiting for Rex" if pending else "idle"
        )
        self.query_one("#status_messages", Label).update(f"Messages: {message_count}")
