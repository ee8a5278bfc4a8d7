"""Logging configuration."""

from __future__ import annotations

import json
import linecache
import logging
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict

    from filmlink.core.config import Settings

ExcInfo = tuple[type[BaseException] | None, BaseException | None, TracebackType | None]

TracebackFrame = dict[str, str | int | None]

ExceptionDetails = dict[str, None | str | list[TracebackFrame]]

APP_LOG_FILE = "filmlink.json.log"
HTTP_LOG_FILE = "filmlink.http.json.log"

# Loggers of the HTTP stack used by search clients
HTTP_LOGGERS = ("httpx", "httpcore", "httpcore.connection", "httpcore.http11")


def format_exception_for_json(exc_info: ExcInfo | None) -> ExceptionDetails:
    """Format exception information for JSON logging.

    Args:
        exc_info: Exception info tuple from sys.exc_info() or None

    Returns:
        Dictionary with exception_type, exception_message, exception_module and,
        when a traceback is attached, traceback_frames and traceback_text.
        Empty when there is no exception.
    """
    if exc_info is None or exc_info == (None, None, None):
        return {}

    exc_type, exc_value, exc_tb = exc_info
    details: ExceptionDetails = {
        "exception_type": exc_type.__name__ if exc_type else None,
        "exception_message": str(exc_value) if exc_value else None,
        "exception_module": exc_type.__module__ if exc_type else None,
    }
    if exc_tb is None:
        return details

    frames: list[TracebackFrame] = []
    for frame, lineno in traceback.walk_tb(exc_tb):
        frame_info: TracebackFrame = {
            "filename": frame.f_code.co_filename,
            "lineno": lineno,
            "function": frame.f_code.co_name,
        }
        source = linecache.getline(frame.f_code.co_filename, lineno)
        if source:
            frame_info["source_line"] = source.strip()
        frames.append(frame_info)

    details["traceback_frames"] = frames
    details["traceback_text"] = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    return details


def exception_processor(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """structlog processor turning exc_info into structured fields.

    Handles ``exc_info=True`` (from ``logger.exception()``), explicit
    exc_info tuples, and an exception object passed as ``exception=``.
    """
    exc_info = event_dict.pop("exc_info", None)
    if exc_info is True:
        exc_info = sys.exc_info()
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and exc_info != (None, None, None):
        details = format_exception_for_json(exc_info)
        if details:
            event_dict["exception"] = details
            exc_type = details.get("exception_type")
            exc_msg = details.get("exception_message")
            if exc_type and exc_msg:
                event_dict["exception_summary"] = f"{exc_type}: {exc_msg}"

    passed = event_dict.get("exception")
    if isinstance(passed, BaseException):
        event_dict["exception"] = format_exception_for_json(
            (type(passed), passed, passed.__traceback__)
        )
        event_dict.setdefault("exception_summary", f"{type(passed).__name__}: {passed}")

    return event_dict


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library loggers (HTTP client logs)."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = format_exception_for_json(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


def _route_logger(name: str, handler: logging.Handler, level: int) -> None:
    """Send a stdlib logger only to ``handler``, closing whatever it had before."""
    target = logging.getLogger(name)
    for existing in target.handlers[:]:
        existing.close()
    target.handlers.clear()
    target.setLevel(level)
    target.propagate = False
    target.addHandler(handler)


def setup_logging(
    debug: bool = False,
    logs_dir: Path | None = None,
    level: str | int | None = None,
) -> None:
    """Setup structured logging with structlog.

    Configures:
    - Application logs: stdout (pretty in debug, JSON otherwise), or only a
      JSON file when ``logs_dir`` is given
    - HTTP client logs (httpx/httpcore): separate JSON file, WARNING and up

    Args:
        debug: Enable debug logging and the console renderer
        logs_dir: Optional directory for JSON log files
        level: Explicit log level overriding the one implied by ``debug``
    """
    if level is None:
        log_level = logging.DEBUG if debug else logging.INFO
    elif isinstance(level, str):
        log_level = logging.getLevelNamesMapping()[level.upper()]
    else:
        log_level = level

    app_file_handler: logging.Handler | None = None
    http_file_handler: logging.Handler | None = None
    if logs_dir:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            app_file_handler = logging.FileHandler(logs_dir / APP_LOG_FILE, encoding="utf-8")
            app_file_handler.setLevel(log_level)
            http_file_handler = logging.FileHandler(logs_dir / HTTP_LOG_FILE, encoding="utf-8")
            http_file_handler.setLevel(logging.DEBUG)
            http_file_handler.setFormatter(JSONFormatter())
        except OSError as e:
            # Fall back to stdout rather than failing the whole run
            sys.stderr.write(f"Warning: Failed to setup file logging: {e}\n")
            app_file_handler = http_file_handler = None

    if app_file_handler is None:
        app_handler: logging.Handler = logging.StreamHandler(sys.stdout)
        app_handler.setLevel(log_level)
    else:
        app_handler = app_file_handler

    logging.basicConfig(format="%(message)s", level=log_level, handlers=[app_handler], force=True)

    if http_file_handler:
        for name in HTTP_LOGGERS:
            _route_logger(name, http_file_handler, logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        exception_processor,
        structlog.processors.format_exc_info,
    ]
    # Files are always JSON; the console is pretty only in debug
    if debug and app_file_handler is None:
        renderer: Any = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.getLogger().setLevel(log_level)

    structlog.get_logger("filmlink.logging").info(
        "Logging configured",
        level=logging.getLevelName(log_level),
        debug=debug,
        app_log_file=str(logs_dir / APP_LOG_FILE) if app_file_handler and logs_dir else None,
        http_log_file=str(logs_dir / HTTP_LOG_FILE) if http_file_handler and logs_dir else None,
        http_loggers_configured=list(HTTP_LOGGERS) if http_file_handler else [],
    )


def setup_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from application settings."""
    if settings is None:
        from filmlink.core.config import get_settings

        settings = get_settings()

    setup_logging(
        debug=settings.is_debug,
        logs_dir=settings.logs_dir if settings.log_to_file else None,
        level=settings.log_level,
    )
