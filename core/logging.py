# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable log lines for lookup synchronization runs
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Thin layer over the standard library logging module.

Features:
- Component-tagged loggers (introspection, discovery, dialect, ...)
- Nested run context (correlation id, operation, enum type, table)
- JSON output for log aggregation, compact text for terminals
- Named checkpoints marking how far a synchronization run got

Context lives in a ContextVar, so nested log_context() blocks restore the
outer context on exit, also across threads and async tasks.

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger("schema.discovery", ComponentType.DISCOVERY)

    with log_context(operation="discover", enum_type="Ears"):
        logger.info("Found reference", extra={"table": "rabbit"})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union


class ComponentType(str, Enum):
    """Pipeline stage emitting a log line."""
    INTROSPECTION = "introspection"
    DISCOVERY = "discovery"
    BUILDER = "builder"
    DIALECT = "dialect"
    ORCHESTRATOR = "orchestrator"
    INFRASTRUCTURE = "infrastructure"


# ============================================================================
# RUN CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """Fields attached to every log line emitted inside a log_context block."""
    correlation_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    enum_type: Optional[str] = None
    table: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **updates: Any) -> "LogContext":
        """Copy with the given fields replaced; extra is merged, not replaced."""
        extra = {**self.extra, **(updates.pop("extra", None) or {})}
        return replace(self, extra=extra, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with extra flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_current_context: ContextVar[LogContext] = ContextVar("lookup_log_context", default=LogContext())


def get_current_context() -> LogContext:
    """Innermost active context (empty outside any log_context block)."""
    return _current_context.get()


@contextmanager
def log_context(**fields_: Any) -> Iterator[LogContext]:
    """
    Add fields to the logging context for the duration of a block.

    Args:
        **fields_: LogContext field values; unset fields are inherited

    Example:
        with log_context(correlation_id="a1b2", operation="apply"):
            with log_context(enum_type="Ears"):
                logger.info("Merging rows")   # carries all three fields
    """
    context = get_current_context().merged(**fields_)
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    # ContextFilter snapshots the context at emit time; fall back to the live one
    snapshot = getattr(record, "lookup_context", None)
    if snapshot is not None:
        return snapshot
    return get_current_context().to_dict()


def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "data", None) or {}


class ContextFilter(logging.Filter):
    """Attach the current LogContext to each record as record.lookup_context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.lookup_context = get_current_context().to_dict()
        return True


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line.

    Keys: timestamp, level, logger, message, context, data, exception, source.
    Empty context and data are omitted.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_context: bool = True,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {}
        if self.include_timestamp:
            payload["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        if self.include_level:
            payload["level"] = record.levelname
        if self.include_logger:
            payload["logger"] = record.name
        payload["message"] = record.getMessage()

        context = _record_context(record) if self.include_context else {}
        if context:
            payload["context"] = context
        data = _record_data(record)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """
    Terminal format:

        2026-10-19 12:00:00 INFO     schema.discovery [enum=Ears, op=discover]: message {data}
    """

    _CONTEXT_LABELS = (("enum_type", "enum"), ("table", "table"), ("operation", "op"))

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        context = _record_context(record)
        labels = [f"{label}={context[key]}" for key, label in self._CONTEXT_LABELS if context.get(key)]

        line = f"{stamp} {record.levelname:<8} {record.name}"
        if labels:
            line += f" [{', '.join(labels)}]"
        line += f": {record.getMessage()}"

        data = _record_data(record)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGER ADAPTER
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter tagging records with a component.

    Keyword extra={...} is carried as record.data, so arbitrary keys never
    collide with LogRecord attributes.
    """

    def process(self, msg, kwargs):
        data = dict(kwargs.pop("extra", None) or {})
        component = self.extra.get("component") if self.extra else None
        if component is not None:
            data.setdefault("component", ComponentType(component).value)
        kwargs["extra"] = {"data": data}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a component-tagged logger.

    Args:
        name: Logger name (e.g., "schema.discovery")
        component: Optional pipeline stage for categorization

    Returns:
        ContextLogger wrapping logging.getLogger(name)
    """
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Route root logging to stdout with the chosen formatter.

    Args:
        level: Log level name or number
        json_output: JSON lines instead of text (also enabled by LOG_FORMAT=json)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named checkpoint ("plan_built", "lookups_applied", ...).

    The checkpoint name and the run's correlation id are part of the record
    data, so a run can be followed with a single query on data.checkpoint.
    """
    payload: Dict[str, Any] = {"checkpoint": name}
    correlation_id = get_current_context().correlation_id
    if correlation_id:
        payload["correlation_id"] = correlation_id
    if data:
        payload.update(data)

    (logger or logging.getLogger("checkpoint")).info(
        f"CHECKPOINT: {name}", extra={"data": payload}
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "ContextFilter",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
