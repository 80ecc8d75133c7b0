"""
Structured Logging.

One structlog pipeline shared by the API server, the CLI and the editor
autosave loop. Settings come from config/settings/logging.yaml; arguments to
setup_logging() override them.

Every JSON record carries timestamp, level, logger, event, func_name and
lineno. Records emitted through log_with_source() also carry `source`
(cli, editor, ...), and records emitted while serving a request carry the
request_id and frontend bound by RequestContextMiddleware. Autosave records
add note_id and seq, so one note's save history can be read back with

    jq 'select(.note_id == "<id>")' logs/system.jsonl

Usage:
    from modules.backend.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})
    log_with_source(logger, "editor", "info", "Note saved", note_id=note_id, seq=3)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from modules.backend.core.config import find_project_root, load_yaml_config

# Frontends and internal callers that may appear as `source`
VALID_SOURCES = frozenset({
    "web",
    "cli",
    "editor",
    "api",
    "internal",
    "unknown",
})

# Third-party loggers held at WARNING whatever the root level is
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Read logging.yaml once and keep it for later setup_logging() calls."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(file_config: dict[str, Any], formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(file_config["path"])
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Safe to call more than once: existing root handlers are replaced, which
    the CLI relies on when --debug switches levels after import.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' for the console handler. The file
            handler always writes JSON lines.
        enable_console: Write to stdout
        enable_file_logging: Append to the rotating JSONL file
    """
    config = _load_logging_config()
    handlers = config["handlers"]

    level = level if level is not None else config["level"]
    format_type = format_type if format_type is not None else config["format"]
    if enable_console is None:
        enable_console = handlers["console"]["enabled"]
    if enable_file_logging is None:
        enable_file_logging = handlers["file"]["enabled"]

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )
    if format_type == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
            foreign_pre_chain=processors,
        )
    else:
        console_formatter = json_formatter

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root.addHandler(console_handler)

    if enable_file_logging:
        root.addHandler(_file_handler(handlers["file"], json_formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return a structlog logger, typically for __name__."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit `source` field.

    Used outside request handling, where no middleware binds a frontend:
    the editor autosave loop and CLI commands. Unrecognized sources are
    recorded as "unknown".

    Raises:
        AttributeError: If level is not a logger method
    """
    if source not in VALID_SOURCES:
        source = "unknown"
    getattr(logger, level.lower())(message, source=source, **kwargs)
