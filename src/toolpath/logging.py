# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logging setup and user-facing console helpers with optional emoji support."""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.text import Text

LOGGER_NAME = "toolpath"


def configure_logging(*, verbose: bool) -> logging.Logger:
    """Stream package diagnostics to stderr; DEBUG when *verbose*, else WARNING."""

    logger = logging.getLogger(LOGGER_NAME)
    # The previous stream may already be closed, so never flush or reuse it.
    previous = getattr(logger, "_toolpath_handler", None)
    if previous is not None:
        logger.removeHandler(previous)
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    setattr(logger, "_toolpath_handler", handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(console: Console, msg: str, *, style: str) -> None:
    text = Text(msg)
    text.stylize(style)
    console.print(text)


def ok(console: Console, msg: str, *, use_emoji: bool = True) -> None:
    """Emit a success message."""

    _print_line(console, f"{emoji('✅ ', use_emoji)}{msg}", style="green")


def fail(console: Console, msg: str, *, use_emoji: bool = True) -> None:
    """Emit an error message."""

    _print_line(console, f"{emoji('❌ ', use_emoji)}{msg}", style="red")


__all__ = ["configure_logging", "emoji", "fail", "ok"]
