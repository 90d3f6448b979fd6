from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape

console = Console()


def _status(label: str, msg: str) -> None:
    console.print(f"{label} {escape(msg)}")


def info(msg: str) -> None:
    _status("[bold cyan]•[/]", msg)


def ok(msg: str) -> None:
    _status("[bold green]OK[/]", msg)


def warn(msg: str) -> None:
    _status("[bold yellow]WARN[/]", msg)


def err(msg: str) -> None:
    _status("[bold red]ERR[/]", msg)


def print_json(data: Any) -> None:
    console.print_json(data=data)


def field(name: str, value: Any) -> None:
    """Print a ``name: value`` line; ``None`` and empty values show as ``-``."""
    text = "-" if value is None or value == "" else str(value)
    console.print(f"[bold]{escape(name)}:[/] {escape(text)}", highlight=False)


def raw(text: str) -> None:
    """Print ``text`` unstyled on one line, for values meant to be copied."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)
