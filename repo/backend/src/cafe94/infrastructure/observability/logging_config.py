from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

# Attributes the engines attach through ``extra=``.
DEFAULT_CONTEXT_FIELDS = (
    "booking_id",
    "order_id",
    "table_id",
    "customer_id",
    "status",
    "receivers",
)

_configured_handler: logging.Handler | None = None


def _span_ids() -> dict[str, str | None]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {"trace_id": None, "span_id": None}
    return {
        "trace_id": format(span_context.trace_id, "032x"),
        "span_id": format(span_context.span_id, "016x"),
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line, stamped with the active span when there is one."""

    def __init__(self, context_fields: Sequence[str] = DEFAULT_CONTEXT_FIELDS) -> None:
        super().__init__()
        self._context_fields = tuple(context_fields)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_span_ids(),
        }
        entry.update(
            (field, getattr(record, field))
            for field in self._context_fields
            if getattr(record, field, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str | None = None) -> logging.Handler:
    """Route the root logger to stdout as JSON; later calls reuse the first handler."""
    global _configured_handler
    if _configured_handler is not None:
        return _configured_handler

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())

    _configured_handler = handler
    return handler
