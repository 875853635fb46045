"""Logging setup.

Diagnostics always go to stderr: when the MCP server runs, stdout carries
the protocol stream and must stay clean.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


_HANDLER_NAME = "act-testing-mcp"


def configure_logging(level: str | int = "WARNING") -> None:
    """Install a single rich stderr handler on the root logger."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
