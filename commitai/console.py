"""Coloured terminal output helpers."""

from __future__ import annotations

import os
import sys

from .git import ChangeStatus

RESET = "\033[0m"
BOLD = "\033[1m"
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"

RULE = "─" * 60

_ICONS = {
    ChangeStatus.ADDED: ("✚", GREEN),
    ChangeStatus.MODIFIED: ("●", YELLOW),
    ChangeStatus.DELETED: ("✖", RED),
    ChangeStatus.RENAMED: ("→", CYAN),
}


def _use_color() -> bool:
    return not os.environ.get("NO_COLOR")


def colorize(text: str, color: str) -> str:
    if not _use_color():
        return text
    return f"{color}{text}{RESET}"


def info(text: str) -> None:
    print(colorize(text, CYAN))


def success(text: str) -> None:
    print(colorize(text, GREEN))


def warn(text: str) -> None:
    print(colorize(text, YELLOW))


def error(text: str) -> None:
    print(colorize(text, RED), file=sys.stderr)


def status_icon(status: ChangeStatus) -> str:
    icon = _ICONS.get(status)
    if icon is None:
        return "?"
    return colorize(*icon)


def boxed(text: str) -> None:
    """Print ``text`` between two horizontal rules."""
    print(RULE)
    print(text)
    print(RULE)
