"""Logging configuration using structlog for structured JSON logging."""

import logging
import sys
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer
from structlog.stdlib import LoggerFactory, add_log_level, add_logger_name

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Events shown on the terminal without --verbose, plus all ERROR/CRITICAL
USER_FACING_EVENTS: set[str] = {
    "sync_started",
    "sync_completed",
    "sync_failed",
    "sync_dry_run",
    "document_skipped_bad_frontmatter",
    "duplicate_flashcard_identifier",
}


def _get_level_no(level_name: str) -> int:
    """Get numeric log level from name."""
    return _LOG_LEVELS.get(level_name.upper(), logging.INFO)


class UserFacingConsoleFilter(logging.Filter):
    """Only pass user-facing events to the console unless verbose."""

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose:
            return True
        if record.levelno >= logging.ERROR:
            return True

        # structlog passes the event dict as the record message
        event = record.msg.get("event") if isinstance(record.msg, dict) else None
        if event is None:
            event = record.getMessage()
        return event in USER_FACING_EVENTS


class UserFriendlyConsoleRenderer:
    """Renders user-facing logs as short sentences for terminal output."""

    def __init__(self) -> None:
        self._fallback = ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = event_dict.get("event", "")
        level = str(event_dict.get("level", "info")).upper()

        if event == "sync_started":
            mode = " (dry-run)" if event_dict.get("dry_run") else ""
            return f"Starting sync{mode}"

        if event == "sync_completed":
            return (
                f"Sync completed in {event_dict.get('duration_seconds', 0):.1f}s: "
                f"{event_dict.get('added', 0)} added, "
                f"{event_dict.get('modified', 0)} modified, "
                f"{event_dict.get('deleted', 0)} deleted"
            )

        if event == "sync_failed":
            return f"Sync failed: {event_dict.get('error', 'Unknown error')}"

        if level == "ERROR":
            return f"ERROR: {event_dict.get('error', event)}"

        if level == "WARNING" and event in USER_FACING_EVENTS:
            return f"WARNING: {event}"

        return str(self._fallback(logger, method_name, event_dict))


_configured = False
_handlers: list[logging.Handler] = []

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    add_log_level,
    add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def configure_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure structlog logging with console and optional file output.

    Args:
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the rotating JSON log file; no file when None
        verbose: If True, show all log messages on terminal
    """
    global _configured

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_get_level_no(log_level))
    console_handler.addFilter(UserFacingConsoleFilter(verbose=verbose))
    renderer: Any = (
        ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
        if verbose
        else UserFriendlyConsoleRenderer()
    )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        # 10MB per file, 5 backups
        file_handler = RotatingFileHandler(
            filename=str(log_dir / "anki-link.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=JSONRenderer(),
                foreign_pre_chain=_SHARED_PROCESSORS,
            )
        )
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    _configured = True

    get_logger(__name__).debug(
        "logging_configured",
        console_level=log_level,
        log_dir=str(log_dir) if log_dir else None,
        verbose=verbose,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to the given name.

    Args:
        name: Logger name (typically __name__)
    """
    if not _configured:
        # Console only until a command configures file output
        configure_logging()
    return structlog.get_logger(name)
