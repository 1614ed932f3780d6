"""Presentation helpers for confirm CLI output."""

from __future__ import annotations

from typing import List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

PROGRAM_NAME = "confirm"

_OPTIONS = (
    ("--icon <path>", "Path to icon file"),
    ("--auth", "Require authentication (Touch ID/Password)"),
    ("--help", "Show this help message"),
)
_EXAMPLES = (
    '{0} "Do you want to proceed?"'.format(PROGRAM_NAME),
    '{0} --auth --icon /path/to/icon.png "Delete important file?"'.format(PROGRAM_NAME),
)


def render_notice(level: str, text: str) -> str:
    prefix_map = {
        "info": "Info",
        "warn": "Warning",
        "error": "Error",
    }
    return "{0}: {1}".format(prefix_map.get(level, "Info"), text)


def usage_lines() -> List[str]:
    lines = [
        "Usage: {0} [options] <message>".format(PROGRAM_NAME),
        "Options:",
    ]
    for flag, description in _OPTIONS:
        lines.append("  {0} {1}".format(flag.ljust(18), description))
    lines.append("")
    lines.append("Example:")
    for example in _EXAMPLES:
        lines.append("  {0}".format(example))
    return lines


def _is_tty(stream: TextIO, forced: Optional[bool]) -> bool:
    if forced is not None:
        return forced
    isatty = getattr(stream, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except Exception:
            return False
    return False


def render_usage(stream: TextIO, is_tty: Optional[bool] = None) -> None:
    if not _is_tty(stream, is_tty):
        stream.write("\n".join(usage_lines()) + "\n")
        stream.flush()
        return

    options = Table(box=None, show_header=False, padding=(0, 2))
    options.add_column(style="bold cyan", no_wrap=True)
    options.add_column()
    for flag, description in _OPTIONS:
        options.add_row(flag, description)

    console = Console(file=stream, highlight=False, soft_wrap=True)
    console.print("Usage: [bold]{0}[/bold] \\[options] <message>".format(PROGRAM_NAME))
    console.print(Panel(options, title="Options", title_align="left", box=box.ROUNDED))
    console.print("Example:")
    for example in _EXAMPLES:
        console.print("  {0}".format(example), markup=False)
