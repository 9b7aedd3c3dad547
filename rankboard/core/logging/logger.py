"""
Rankboard Logging Subsystem

Purpose
-------
Provide an async-safe logging subsystem offering:

- Structured JSON logs for aggregation and analysis.
- LogContext-based propagation of operation context via ContextVars.
- Correlation IDs for end-to-end traceability.
- Async-safe logging via a QueueHandler + QueueListener architecture.
- Hybrid output:
  - Console handler (JSON in production, colored human text in dev).
  - Optional rotating JSON file handler (LOG_TO_FILE).

Responsibilities
----------------
- Initialize and configure the global logging stack.
- Enrich all log records with contextual fields:
  - leaderboard, member, operation, component, correlation_id
- Avoid blocking the asyncio event loop with synchronous handler I/O.
- Provide simple helper APIs:
  - get_logger()
  - LogContext (sync + async context manager)
  - set_log_context() / clear_log_context()
  - is_logging_initialized()

Design Decisions
----------------
- JSONFormatter is the canonical representation.
- ContextFilter uses ContextVars to safely enrich logs in async code.
- Extra fields passed via `logger.info("msg", extra={...})` are merged into JSON.
- The log queue is drained by a listener thread that owns all handler I/O.
- Setup is explicit: importing the library never reconfigures the root
  logger. Applications call setup_logging() once at startup.

Dependencies
------------
- rankboard.core.config.config.Config
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import (
    QueueHandler,
    QueueListener,
    TimedRotatingFileHandler,
)
from pathlib import Path
from typing import Any, Dict, List, Optional

from rankboard.core.config.config import Config


# ============================================================================
# Operation Context (ContextVars)
# ============================================================================

_request_context: ContextVar[Dict[str, Any]] = ContextVar(
    "request_context",
    default={},
)


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Configuration for the logging subsystem."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "rankboard_daily.json.log"
    DAILY_BACKUP_COUNT: int = 1

    @property
    def environment(self) -> str:
        return str(Config.ENVIRONMENT).lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()

    @property
    def log_level(self) -> int:
        level_name = Config.LOG_LEVEL
        if not isinstance(level_name, str):
            level_name = "INFO"
        return getattr(logging, level_name.upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return self.is_production
        return bool(Config.LOG_JSON)

    @property
    def use_colors(self) -> bool:
        if self.is_production or self.use_json:
            return False
        return bool(Config.LOG_COLORS) and sys.stdout.isatty()

    @property
    def use_file(self) -> bool:
        return bool(Config.LOG_TO_FILE)


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _request_context.get({})

        defaults = {
            "leaderboard": context.get("leaderboard", "N/A"),
            "member": context.get("member", "N/A"),
            "operation": context.get("operation", "N/A"),
            "correlation_id": context.get("correlation_id") or "N/A",
            "component": context.get("component") or record.name.split(".", 1)[0],
        }
        # Values passed through `extra=` win over the ambient context.
        for attr, value in defaults.items():
            if not hasattr(record, attr):
                setattr(record, attr, value)

        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        prefix = self.COLORS.get(original, "")
        reset = self.COLORS["RESET"] if prefix else ""

        if prefix:
            record.levelname = f"{prefix}{original}{reset}"

        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    STANDARD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }

    CONTEXT_ATTRS = {
        "leaderboard",
        "member",
        "correlation_id",
        "component",
        "operation",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created_dt = datetime.fromtimestamp(record.created, tz=timezone.utc)

        log_data: Dict[str, Any] = {
            "timestamp": created_dt.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra: Dict[str, Any] = {}
        for key, val in record.__dict__.items():
            if key in self.STANDARD_ATTRS or key in self.CONTEXT_ATTRS:
                continue
            if key.startswith("_"):
                continue
            if key in {"levelname", "name", "message", "asctime"}:
                continue
            extra[key] = val

        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


# ============================================================================
# Global Setup
# ============================================================================

_queue_listener: Optional[QueueListener] = None
_queue_handler: Optional[QueueHandler] = None
_previous_root_level: Optional[int] = None


def _console_formatter() -> logging.Formatter:
    if LOGGER_CONFIG.use_json:
        return JSONFormatter()
    formatter_cls = ColoredFormatter if LOGGER_CONFIG.use_colors else logging.Formatter
    return formatter_cls(
        fmt=LOGGER_CONFIG.CONSOLE_FORMAT, datefmt=LOGGER_CONFIG.DATE_FORMAT
    )


def _build_handlers() -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_console_formatter())
    handlers: List[logging.Handler] = [console]

    if LOGGER_CONFIG.use_file:
        LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
        daily = TimedRotatingFileHandler(
            filename=str(LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME),
            when="midnight",
            backupCount=LOGGER_CONFIG.DAILY_BACKUP_COUNT,
            encoding="utf-8",
            utc=True,
        )
        daily.setFormatter(JSONFormatter())
        handlers.append(daily)

    for handler in handlers:
        handler.setLevel(LOGGER_CONFIG.log_level)
    return handlers


def is_logging_initialized() -> bool:
    return _queue_listener is not None


def setup_logging() -> None:
    """
    Route the root logger through a queue to the console (and optional file).

    Handler I/O runs on the listener thread, so logging from the event loop
    never blocks on a stream write. Calling this again is a no-op until
    shutdown_logging() runs.
    """
    global _queue_listener, _queue_handler, _previous_root_level

    if _queue_listener is not None:
        return

    root = logging.getLogger()
    _previous_root_level = root.level
    root.setLevel(LOGGER_CONFIG.log_level)

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue()
    _queue_listener = QueueListener(
        log_queue, *_build_handlers(), respect_handler_level=True
    )
    _queue_listener.start()

    # Enrich on the producing side; the listener thread has no ContextVars.
    _queue_handler = QueueHandler(log_queue)
    _queue_handler.addFilter(ContextFilter())
    root.addHandler(_queue_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": LOGGER_CONFIG.environment,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "file": LOGGER_CONFIG.use_file,
        },
    )


def shutdown_logging() -> None:
    """Drain the queue, close handlers and detach from the root logger."""
    global _queue_listener, _queue_handler, _previous_root_level

    if _queue_listener is None:
        return

    root = logging.getLogger()
    if _queue_handler is not None:
        root.removeHandler(_queue_handler)
        _queue_handler.close()
        _queue_handler = None

    try:
        _queue_listener.stop()
    finally:
        for handler in _queue_listener.handlers:
            handler.flush()
            handler.close()
        _queue_listener = None

    if _previous_root_level is not None:
        root.setLevel(_previous_root_level)
        _previous_root_level = None


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    def __init__(
        self,
        leaderboard: Optional[str] = None,
        member: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            "leaderboard": leaderboard or "N/A",
            "member": member or "N/A",
            "component": component,
            "operation": operation or "N/A",
            "correlation_id": correlation_id or self._generate_correlation_id(),
            **extra,
        }

        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def __enter__(self) -> "LogContext":
        self._token = _request_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_context.reset(self._token)

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def get_log_context() -> Dict[str, Any]:
    return dict(_request_context.get({}))


def set_log_context(
    leaderboard: Optional[str] = None,
    member: Optional[str] = None,
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> None:
    current = _request_context.get({}).copy()

    if leaderboard is not None:
        current["leaderboard"] = leaderboard
    if member is not None:
        current["member"] = member
    if component is not None:
        current["component"] = component
    if operation is not None:
        current["operation"] = operation
    if correlation_id:
        current["correlation_id"] = correlation_id

    current.update(extra)
    _request_context.set(current)


def clear_log_context() -> None:
    _request_context.set({})
