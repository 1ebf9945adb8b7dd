"""Main Textual application: Home, Settings, and Chat tabs around the Rex chat server."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Static,
    TabbedContent,
    TabPane,
)

from .catalog import CommandCatalogFetcher
from .client import ChatServerClient
from .config import load_config, server_settings
from .conversation import ConversationManager
from .logging_utils import configure_logging
from .message_store import ChatEntry
from .screens import CommandsScreen, InfoScreen
from .task_manager import TaskManager
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)


class RexChatApp(App[None]):
    """Three-tab shell whose Chat tab talks to the Rex C# mentor server."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    Header {
        border-bottom: solid $panel;
        background: $surface;
    }

    Footer {
        border-top: solid $panel;
        background: $surface;
    }

    #tabs {
        height: 1fr;
    }

    #home-placeholder {
        width: 100%;
        height: 100%;
        content-align: center middle;
        color: $accent;
        text-style: bold;
    }

    #settings-pane {
        align: center middle;
    }

    #conversation {
        height: 1fr;
        padding: 1;
    }

    InputBox {
        height: auto;
        padding: 0 1;
        border-top: solid $panel;
        background: $surface;
    }

    #message_input {
        width: 1fr;
    }

    #send_button {
        margin-left: 1;
        min-width: 10;
    }

    #commands_button {
        width: 100%;
        margin: 1 1 0 1;
    }

    #status_bar {
        height: auto;
        padding: 0 1;
        border-top: solid $panel;
        background: $surface;
    }

    MessageBubble {
        width: 80%;
        margin: 1 0 0 0;
        padding: 0 2;
        border: round $panel;
    }

    .message-user {
        margin-left: 16;
        background: $primary-darken-2;
    }

    .message-bot {
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "show_commands": "Commands",
        "quit": "Quit",
        "scroll_up": "Scroll Up",
        "scroll_down": "Scroll Down",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        client: Any | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.window_title = str(self.config["app"]["title"])
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )

        server = server_settings(self.config)
        self.server_url = server.base_url
        self._owns_client = client is None
        self.client = client if client is not None else ChatServerClient.from_config(server)

        chat_config = self.config["chat"]
        self.conversation = ConversationManager(
            transport=self.client,
            fallback_reply=str(chat_config["fallback_reply"]),
            offline_notice=str(chat_config["offline_notice"]),
            greeting=str(chat_config.get("greeting", "")),
        )
        self.catalog = CommandCatalogFetcher(self.client)
        self._task_manager = TaskManager()
        self._binding_specs = self._binding_specs_from_config(self.config)
        super().__init__()

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        yield Header()
        with TabbedContent(initial="home-tab", id="tabs"):
            with TabPane("Home", id="home-tab"):
                yield Static("Placeholder text", id="home-placeholder")
            with TabPane("Settings", id="settings-tab"):
                with Container(id="settings-pane"):
                    yield Button("Show Alert", id="alert_button", variant="primary")
            with TabPane("Chat", id="chat-tab"):
                yield ConversationView(id="conversation")
                yield InputBox(
                    placeholder=str(self.config["chat"]["input_placeholder"]),
                    id="input_box",
                )
                yield Button("Show Commands", id="commands_button")
        yield StatusBar(id="status_bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Register runtime keybindings and render the initial transcript."""
        self.title = self.window_title
        self.sub_title = "Ready"
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )
        conversation = self.query_one(ConversationView)
        for entry in self.conversation.entries:
            await conversation.add_entry(entry)
        self._update_status_bar()

    async def on_unmount(self) -> None:
        """Drop late replies, stop background tasks, and close the HTTP client."""
        self.conversation.detach()
        await self._task_manager.cancel_all()
        if self._owns_client:
            await self.client.aclose()

    def _update_status_bar(self) -> None:
        self.query_one("#status_bar", StatusBar).set_status(
            server=self.server_url,
            pending=self.conversation.pending,
            message_count=len(self.conversation.entries),
        )

    def _set_pending_ui(self, pending: bool) -> None:
        self.query_one("#input_box", InputBox).set_pending(pending)
        self._update_status_bar()

    async def _render_entry(self, entry: ChatEntry) -> None:
        await self.query_one(ConversationView).add_entry(entry)
        self._update_status_bar()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Mirror the input field into the conversation's input buffer."""
        if event.input.id == "message_input":
            self.conversation.set_input(event.input.value)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            await self.send_user_message()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "send_button":
            await self.send_user_message()
        elif button_id == "commands_button":
            await self.action_show_commands()
        elif button_id == "alert_button":
            settings = self.config["settings"]
            self.push_screen(
                InfoScreen(str(settings["alert_title"]), str(settings["alert_message"]))
            )

    async def send_user_message(self) -> asyncio.Task[Any] | None:
        """Show the user's entry now and fetch the reply in the background.

        Returns the background task, or ``None`` when the send was rejected.
        """
        input_widget = self.query_one("#message_input", Input)
        self.conversation.set_input(input_widget.value)
        user_entry = await self.conversation.begin_submit()
        if user_entry is None:
            if self.conversation.pending:
                self.sub_title = "Busy. Wait for Rex to answer."
            else:
                self.sub_title = "Cannot send an empty message."
            return None

        input_widget.value = ""
        self.sub_title = "Sending message..."
        await self._render_entry(user_entry)
        self._set_pending_ui(True)
        return self._task_manager.spawn(
            self._deliver_reply(user_entry), name=f"chat-{user_entry.id}"
        )

    async def _deliver_reply(self, user_entry: ChatEntry) -> None:
        try:
            bot_entry = await self.conversation.finish_submit(user_entry)
        finally:
            if not self.conversation.detached:
                self._set_pending_ui(False)
        if bot_entry is None:
            return
        await self._render_entry(bot_entry)
        self.sub_title = "Ready"

    async def action_show_commands(self) -> asyncio.Task[Any] | None:
        """Fetch the command list in the background and pop it up when it arrives."""
        if self._task_manager.is_running("load_commands"):
            return None
        return self._task_manager.spawn(self._load_and_show_commands(), name="load_commands")

    async def _load_and_show_commands(self) -> None:
        loaded = await self.catalog.load_commands()
        if loaded and self.catalog.visible:
            self.push_screen(
                CommandsScreen(self.catalog.commands),
                callback=self._on_commands_dismissed,
            )

    def _on_commands_dismissed(self, _result: None) -> None:
        self.catalog.dismiss()

    async def action_quit(self) -> None:
        """Exit the app."""
        self.exit()

    def action_scroll_up(self) -> None:
        """Scroll conversation up."""
        self.query_one(ConversationView).scroll_relative(y=-10, animate=False)

    def action_scroll_down(self) -> None:
        """Scroll conversation down."""
        self.query_one(ConversationView).scroll_relative(y=10, animate=False)
