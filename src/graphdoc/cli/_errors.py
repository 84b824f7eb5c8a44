"""CLI error handling and decorators."""

from __future__ import annotations

import functools
from typing import Any, Callable

import typer

from graphdoc.errors import GraphdocError


def handle_error(msg: str) -> None:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def graphdoc_errors(f: Callable) -> Callable:
    """Decorator turning graphdoc errors into `Error: ...` and exit code 1."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except GraphdocError as e:
            handle_error(str(e))
        except FileNotFoundError as e:
            handle_error(f"file not found: {e.filename}")

    return wrapper
