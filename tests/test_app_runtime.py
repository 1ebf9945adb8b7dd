"""Runtime-style tests for the real Textual app class."""

from __future__ import annotations

import asyncio
from copy import deepcopy
import logging
from typing import Any
import unittest

from rex_chat.client import ExchangeResult
from rex_chat.config import DEFAULT_CONFIG
from rex_chat.exceptions import ServerConnectionError
from rex_chat.message_store import Sender

try:
    from textual.widgets import Button, Input, TabbedContent

    from rex_chat.app import RexChatApp
    from rex_chat.screens import CommandsScreen, InfoScreen
    from rex_chat.widgets.conversation import ConversationView
    from rex_chat.widgets.message import MessageBubble
except ModuleNotFoundError:
    RexChatApp = None  # type: ignore[assignment,misc]


class _FakeServerClient:
    """Stand-in for ChatServerClient with scripted results."""

    def __init__(
        self,
        reply: ExchangeResult[str | None] | None = None,
        commands: ExchangeResult[list[str]] | None = None,
    ) -> None:
        self.reply = reply or ExchangeResult.success("hello")
        self.commands = commands or ExchangeResult.success(["help", "quiz"])
        self.gate: asyncio.Event | None = None
        self.sent: list[str] = []
        self.closed = False

    async def send_message(self, text: str) -> ExchangeResult[str | None]:
        self.sent.append(text)
        if self.gate is not None:
            await self.gate.wait()
        return self.reply

    async def fetch_commands(self) -> ExchangeResult[list[str]]:
        return self.commands

    async def aclose(self) -> None:
        self.closed = True


def _test_config() -> dict[str, dict[str, Any]]:
    config = deepcopy(DEFAULT_CONFIG)
    config["logging"]["level"] = "WARNING"
    config["logging"]["log_to_file"] = False
    return config


@unittest.skipIf(RexChatApp is None, "textual is not installed")
class AppRuntimeTests(unittest.IsolatedAsyncioTestCase):
    """Exercise the chat flow against the real app class."""

    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def _build_app(self, client: _FakeServerClient | None = None) -> RexChatApp:
        return RexChatApp(config=_test_config(), client=client or _FakeServerClient())

    async def test_greeting_is_rendered_on_mount(self) -> None:
        app = self._build_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            view = app.query_one(ConversationView)
            self.assertEqual(len(view.rendered_entry_ids), 1)
            self.assertEqual(app.conversation.entries[0].sender, Sender.BOT)
            self.assertEqual(app.conversation.entries[0].text, DEFAULT_CONFIG["chat"]["greeting"])

    async def test_send_renders_user_then_reply(self) -> None:
        client = _FakeServerClient()
        client.gate = asyncio.Event()
        app = self._build_app(client)
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "hi"
            task = await app.send_user_message()
            assert task is not None
            await pilot.pause()

            self.assertEqual(app.query_one("#message_input", Input).value, "")
            self.assertEqual(str(app.query_one("#send_button", Button).label), "...")
            self.assertTrue(app.conversation.pending)
            self.assertEqual(len(app.conversation.entries), 2)

            client.gate.set()
            await task
            await pilot.pause()

            texts = [entry.text for entry in app.conversation.entries]
            self.assertEqual(texts[1:], ["hi", "hello"])
            self.assertEqual(str(app.query_one("#send_button", Button).label), "Send")
            self.assertFalse(app.conversation.pending)
            self.assertEqual(len(app.query_one(ConversationView).rendered_entry_ids), 3)
            self.assertEqual(client.sent, ["hi"])

    async def test_user_bubbles_are_indented_from_the_left(self) -> None:
        app = self._build_app()
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "hi"
            task = await app.send_user_message()
            assert task is not None
            await task
            await pilot.pause()

            bubbles = list(app.query_one(ConversationView).query(MessageBubble))
            self.assertEqual(bubbles[1].styles.margin.left, 16)
            self.assertEqual(bubbles[2].styles.margin.left, 0)

    async def test_send_while_pending_is_rejected(self) -> None:
        client = _FakeServerClient()
        client.gate = asyncio.Event()
        app = self._build_app(client)
        async with app.run_test() as pilot:
            input_widget = app.query_one("#message_input", Input)
            input_widget.value = "first"
            task = await app.send_user_message()
            input_widget.value = "second"
            self.assertIsNone(await app.send_user_message())
            self.assertEqual(app.sub_title, "Busy. Wait for Rex to answer.")
            self.assertEqual(input_widget.value, "second")

            client.gate.set()
            assert task is not None
            await task
            await pilot.pause()
            self.assertEqual(client.sent, ["first"])

    async def test_empty_input_is_rejected(self) -> None:
        client = _FakeServerClient()
        app = self._build_app(client)
        async with app.run_test():
            app.query_one("#message_input", Input).value = "   "
            self.assertIsNone(await app.send_user_message())
            self.assertEqual(app.sub_title, "Cannot send an empty message.")
            self.assertEqual(len(app.conversation.entries), 1)
            self.assertEqual(client.sent, [])

    async def test_offline_server_shows_notice(self) -> None:
        client = _FakeServerClient(reply=ExchangeResult.failure(ServerConnectionError("down")))
        app = self._build_app(client)
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "test"
            task = await app.send_user_message()
            assert task is not None
            await task
            await pilot.pause()
            self.assertEqual(
                app.conversation.entries[-1].text, DEFAULT_CONFIG["chat"]["offline_notice"]
            )

    async def test_enter_key_submits_from_chat_tab(self) -> None:
        client = _FakeServerClient()
        app = self._build_app(client)
        async with app.run_test() as pilot:
            app.query_one(TabbedContent).active = "chat-tab"
            await pilot.pause()
            app.query_one("#message_input", Input).focus()
            await pilot.press("h", "i", "enter")
            for _ in range(20):
                if len(app.conversation.entries) == 3:
                    break
                await pilot.pause()
            self.assertEqual(client.sent, ["hi"])
            self.assertEqual(app.conversation.entries[-1].text, "hello")

    async def test_show_commands_opens_and_dismisses_popup(self) -> None:
        app = self._build_app()
        async with app.run_test() as pilot:
            task = await app.action_show_commands()
            assert task is not None
            await task
            await pilot.pause()

            self.assertIsInstance(app.screen, CommandsScreen)
            self.assertEqual(app.screen.commands, ("help", "quiz"))
            self.assertTrue(app.catalog.visible)

            app.screen.action_close()
            await pilot.pause()
            self.assertNotIsInstance(app.screen, CommandsScreen)
            self.assertFalse(app.catalog.visible)
            self.assertEqual(app.catalog.commands, ("help", "quiz"))

    async def test_failed_commands_fetch_shows_nothing(self) -> None:
        client = _FakeServerClient(
            commands=ExchangeResult.failure(ServerConnectionError("down"))
        )
        app = self._build_app(client)
        async with app.run_test() as pilot:
            task = await app.action_show_commands()
            assert task is not None
            await task
            await pilot.pause()
            self.assertNotIsInstance(app.screen, CommandsScreen)
            self.assertFalse(app.catalog.visible)

    async def test_settings_alert_button_opens_info_screen(self) -> None:
        app = self._build_app()
        async with app.run_test() as pilot:
            app.query_one(TabbedContent).active = "settings-tab"
            await pilot.pause()
            await pilot.click("#alert_button")
            await pilot.pause()
            self.assertIsInstance(app.screen, InfoScreen)

    async def test_unmount_detaches_and_keeps_borrowed_client_open(self) -> None:
        client = _FakeServerClient()
        client.gate = asyncio.Event()
        app = self._build_app(client)
        async with app.run_test():
            app.query_one("#message_input", Input).value = "hi"
            await app.send_user_message()
        self.assertTrue(app.conversation.detached)
        self.assertFalse(client.closed)
        self.assertEqual(len(app.conversation.entries), 2)

    def test_blank_keybinds_are_not_registered(self) -> None:
        config = _test_config()
        config["keybinds"]["scroll_up"] = ""
        bindings = RexChatApp._binding_specs_from_config(config)
        actions = {binding.action for binding in bindings}
        self.assertNotIn("scroll_up", actions)
        self.assertIn("show_commands", actions)


if __name__ == "__main__":
    unittest.main()
