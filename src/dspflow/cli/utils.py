"""Shared CLI utilities — Rich console, logging setup, progress, error handling."""

from __future__ import annotations

import functools
import logging
import traceback
from typing import Any, Callable

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

console = Console()

# Set by the --verbose flag on the top-level CLI group.
verbose: bool = False


def configure_logging(debug: bool = False) -> None:
    """Route dspflow log records through Rich.

    Warnings and above by default; everything with --verbose.
    """
    logger = logging.getLogger("dspflow")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_path=debug, rich_tracebacks=debug)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False


def make_progress() -> Progress:
    """Progress bar for multi-file operations."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    )


def _report_internal(e: Exception) -> None:
    if verbose:
        console.print(f"[red]Internal error:[/red] {type(e).__name__}: {e}")
        console.print(traceback.format_exc())
    else:
        console.print(
            f"[red]Internal error:[/red] {type(e).__name__}: {e}\n"
            "[dim]Use --verbose for the full traceback.[/dim]"
        )


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Map exceptions escaping a command to a message and an exit status.

    Exit 1 for DspFlowError; a failure to reach the processing service
    also suggests checking ``dspflow config``. Exit 2 for anything else.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from dspflow.core.exceptions import DspFlowError, RemoteServiceError

        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except RemoteServiceError as e:
            console.print(f"[red]Error:[/red] {e}")
            if e.status_code is None:
                console.print("[dim]Is the processing service running? "
                              "See 'dspflow config' for the URL in use.[/dim]")
            raise SystemExit(1)
        except DspFlowError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except Exception as e:
            _report_internal(e)
            raise SystemExit(2)

    return wrapper
