from __future__ import annotations

from typing import Any

from ecomail_client import ApiResult, RemoteError, SuccessText
from rich.console import Console
from rich.markup import escape

from .formatting import to_jsonable

console = Console()


def print_json(data: Any) -> None:
    console.print_json(data=to_jsonable(data))


def info(msg: str) -> None:
    console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    console.print(f"[bold green]OK[/] {msg}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/] {msg}")


def err(msg: str) -> None:
    console.print(f"[bold red]ERR[/] {escape(msg)}")


def raw(text: str) -> None:
    """Print text as-is: no markup, no highlighting."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def emit_result(result: ApiResult) -> None:
    """Print a successful API result: text bodies as-is, JSON otherwise."""
    if isinstance(result, SuccessText):
        raw(result.value)
    else:
        print_json(result.value)


def remote_error(e: RemoteError) -> None:
    """Report a non-2xx answer with its decoded error body."""
    err(str(e))
    if e.details is not None and not isinstance(e.details, str):
        print_json(e.details)
