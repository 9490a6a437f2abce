"""Structured logging for linkcheck runs.

Every event goes through structlog and is rendered by stdlib handlers, one
per configured output. Console outputs go quiet while a progress bar is
drawing; file outputs always receive their records. The first file output
is remembered so fatal errors can point the user at it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from linkcheck.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = ("stderr", "stdout")

_log_file_path: Path | None = None


def get_log_file_path() -> Path | None:
    """File the current configuration writes to, if any."""
    return _log_file_path


def _level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


class ConsoleSuppressingFilter(logging.Filter):
    """Drop console records while a progress bar owns the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from linkcheck.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    stream = sys.stdout if output.destination == "stdout" else sys.stderr
    colors = output.destination in _CONSOLE_DESTINATIONS and stream.isatty()
    return structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)


def _handler(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    if output.destination in _CONSOLE_DESTINATIONS:
        handler.addFilter(ConsoleSuppressingFilter())
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Install handlers for each configured output.

    ``config`` wins over ``json_format``/``level``, which only build a
    single stderr output when no config is given.
    """
    global _log_file_path
    from linkcheck.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.WARNING)
    output_levels = [_level(o.level, root_level) for o in config.outputs]
    # The bound logger must pass whatever the chattiest output wants.
    floor = min([root_level, *output_levels])

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(floor),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(floor)

    _log_file_path = None
    for output, output_level in zip(config.outputs, output_levels, strict=True):
        if _log_file_path is None and output.destination not in _CONSOLE_DESTINATIONS:
            _log_file_path = Path(output.destination)
        handler = _handler(output)
        handler.setLevel(output_level)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output), foreign_pre_chain=pre_chain
            )
        )
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
