"""Structured logging for HireSense.

Events are rendered by structlog and routed through the stdlib root logger to
stderr, so stdout stays free for CLI output. ``setup_logging`` may be called
again (the CLI does so once config is loaded); it replaces the handlers it
installed earlier instead of stacking new ones.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "hiresense"
APP_VERSION = "0.3.0"

_HANDLER_PREFIX = f"{APP_NAME}."


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("version", APP_VERSION)
    return event_dict


def _processors(log_format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]
    if log_format == "console":
        return processors + [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    return processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def _install_handler(root: logging.Logger, name: str, handler: logging.Handler, level: int) -> None:
    handler.set_name(_HANDLER_PREFIX + name)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        log_format: "json" (one object per line) or "console"
        log_file: Optional path that receives a copy of every event
    """
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=_processors(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith(_HANDLER_PREFIX):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

    _install_handler(root, "stderr", _StderrHandler(), level)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _install_handler(root, "file", logging.FileHandler(log_path, encoding="utf-8"), level)


def configure_logging(config: dict[str, Any]) -> None:
    """Apply the ``logging`` section of a loaded configuration."""
    section = config.get("logging") or {}
    setup_logging(
        log_level=section.get("level", "INFO"),
        log_format=section.get("format", "json"),
        log_file=section.get("file"),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)


setup_logging()
