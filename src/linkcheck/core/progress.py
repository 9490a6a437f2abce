"""Terminal feedback while inputs are read.

A bar appears only when stderr is a TTY and an archive holds more than
``_PROGRESS_THRESHOLD`` entries; otherwise iteration is silent apart from
debug events. Console log handlers are muted while the bar is drawing.

Usage::

    for entry in progress(entries, desc="app.jar", unit="classes"):
        ...
    status("3 classes not found on the classpath", style="warning")
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

_PROGRESS_THRESHOLD = 100

T = TypeVar("T")

_console = Console(stderr=True)

_MARKERS = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_bar_state = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_bar_state, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console log handlers for the duration of the block."""
    _bar_state.active = True
    try:
        yield
    finally:
        _bar_state.active = False


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Shared stderr console, so bars and status lines do not interleave."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one marked line to stderr."""
    from linkcheck.core.logging import get_logger

    _console.print(f"{' ' * indent}{_MARKERS.get(style, '')}{message}", highlight=False)
    get_logger("progress").debug("status", message=message, style=style)


def _bar() -> Progress:
    return Progress(
        TextColumn("    {task.description}:"),
        BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
        TaskProgressColumn(),
        TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
        console=_console,
        transient=True,
    )


def progress(
    iterable: Iterable[T],
    *,
    desc: str | None = None,
    total: int | None = None,
    unit: str = "classes",
    force: bool = False,
) -> Iterator[T]:
    """Yield from ``iterable``, drawing a bar when it is long enough to matter."""
    if total is None and hasattr(iterable, "__len__"):
        total = len(iterable)  # type: ignore[arg-type]

    if not (_is_tty() and total is not None and (force or total > _PROGRESS_THRESHOLD)):
        from linkcheck.core.logging import get_logger

        log = get_logger("progress")
        if desc and total:
            log.debug("progress.start", desc=desc, total=total)
        yield from iterable
        if desc and total:
            log.debug("progress.done", desc=desc, total=total)
        return

    with suppress_console_logs(), _bar() as bar:
        task_id = bar.add_task(desc or "Reading", total=total, unit=unit)
        for item in iterable:
            yield item
            bar.advance(task_id)
