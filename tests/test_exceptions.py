"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from rex_chat.exceptions import (
    ConfigValidationError,
    RexChatError,
    ServerConnectionError,
    ServerResponseError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(RexChatError, RuntimeError))
        self.assertTrue(issubclass(ServerConnectionError, RexChatError))
        self.assertTrue(issubclass(ServerResponseError, RexChatError))
        self.assertTrue(issubclass(ConfigValidationError, RexChatError))


if __name__ == "__main__":
    unittest.main()
