"""CLI entrypoint for rex-chat."""

from __future__ import annotations

import argparse
from importlib import metadata
from pathlib import Path
from typing import Any, Sequence

from .app import RexChatApp
from .config import ensure_config_dir, load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rex-chat", description="Rex C# mentor chat")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternate config.toml",
    )
    parser.add_argument(
        "--server-url",
        default=None,
        help="Base URL of the chat server, e.g. http://192.168.1.19:9090",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("rex-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"rex-chat {version}")
        return

    ensure_config_dir()
    overrides: dict[str, Any] = {}
    if args.server_url:
        overrides["server"] = {"base_url": args.server_url}
    config = load_config(config_path=args.config, overrides=overrides or None)
    app = RexChatApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
