"""Tests for the TaskManager lifecycle helper."""

from __future__ import annotations

import asyncio
import unittest

from rex_chat.task_manager import TaskManager


class TaskManagerTests(unittest.IsolatedAsyncioTestCase):
    """Validate named task lifecycle management."""

    async def test_spawn_tracks_until_done(self) -> None:
        tm = TaskManager()
        release = asyncio.Event()

        async def _worker() -> str:
            await release.wait()
            return "done"

        task = tm.spawn(_worker(), name="worker")
        self.assertIs(tm.get("worker"), task)
        self.assertTrue(tm.is_running("worker"))

        release.set()
        self.assertEqual(await task, "done")
        await asyncio.sleep(0)
        self.assertIsNone(tm.get("worker"))
        self.assertFalse(tm.is_running("worker"))

    async def test_cancel_all_cancels_running_tasks(self) -> None:
        tm = TaskManager()
        cancelled: list[bool] = []

        async def _worker() -> None:
            try:
                await asyncio.sleep(9999)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        first = tm.spawn(_worker(), name="first")
        second = tm.spawn(_worker(), name="second")
        await asyncio.sleep(0)
        await tm.cancel_all()

        self.assertTrue(first.cancelled())
        self.assertTrue(second.cancelled())
        self.assertEqual(cancelled, [True, True])
        self.assertFalse(tm.is_running("first"))

    async def test_failed_task_is_logged(self) -> None:
        tm = TaskManager()

        async def _broken() -> None:
            raise RuntimeError("kaboom")

        with self.assertLogs("rex_chat.task_manager", level="ERROR") as logs:
            task = tm.spawn(_broken(), name="broken")
            with self.assertRaises(RuntimeError):
                await task
            await asyncio.sleep(0)

        self.assertTrue(any("app.task.failed" in line for line in logs.output))
        self.assertIsNone(tm.get("broken"))

    async def test_cancel_all_with_nothing_running(self) -> None:
        tm = TaskManager()
        await tm.cancel_all()
        self.assertIsNone(tm.get("anything"))


if __name__ == "__main__":
    unittest.main()
