"""
applog Record Formatter

Serializes record field mappings into newline-terminated lines. JSON
rendering goes through structlog's JSONRenderer with a strict encoder so a
value that cannot be represented fails loudly instead of being replaced by
its repr. Before encoding, error-like values are replaced by their message:
a plain encoder would otherwise reduce an exception to an opaque object and
lose the diagnostic text.
"""

import json
import logging
from datetime import date, datetime, timedelta
from functools import singledispatch
from typing import Any, Dict, Mapping, Optional

import structlog

from applog.exceptions import SerializationError


@singledispatch
def failure_message(value: Any) -> Optional[str]:
    """
    Return the failure message of an error-like value, or None.

    Register an implementation for new error-like types:

        >>> @failure_message.register
        ... def _(value: GrpcStatus) -> str:
        ...     return value.details
    """
    return None


@failure_message.register
def _(value: BaseException) -> str:
    return str(value)


def stringify_errors(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    structlog processor replacing error-like values by their message.

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process, modified in place

    Returns:
        The same event dictionary
    """
    for key, value in event_dict.items():
        message = failure_message(value)
        if message is not None:
            event_dict[key] = message
    return event_dict


def _json_default(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds() * 1000.0
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    message = failure_message(value)
    if message is not None:
        return message
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


_json_renderer = structlog.processors.JSONRenderer(
    serializer=json.dumps,
    default=_json_default,
    allow_nan=False,
)

_plain_renderer = structlog.processors.KeyValueRenderer(
    key_order=["@timestamp", "severity", "log_type", "description", "class"],
    sort_keys=True,
    drop_missing=True,
)


def serialize(fields: Mapping[str, Any]) -> bytes:
    """
    Encode a field mapping as one line of UTF-8 JSON.

    The caller's mapping is left untouched.

    Raises:
        SerializationError: If a value cannot be encoded
    """
    data = stringify_errors(None, "serialize", dict(fields))
    try:
        rendered = _json_renderer(None, "serialize", data)
    except (TypeError, ValueError, OverflowError, RecursionError) as e:
        raise SerializationError(f"Failed to marshal fields to JSON, {e}", cause=e) from e
    return (rendered + "\n").encode("utf-8")


def render_plain(fields: Mapping[str, Any]) -> str:
    """Render a field mapping as a human-readable key=value line."""
    data = stringify_errors(None, "render_plain", dict(fields))
    return _plain_renderer(None, "render_plain", data) + "\n"


def record_fields(record: logging.LogRecord) -> Mapping[str, Any]:
    """Field mapping carried by a record, or a minimal one for foreign records."""
    fields = getattr(record, "fields", None)
    if fields is None:
        return {"description": record.getMessage()}
    return fields


class JSONRecordFormatter(logging.Formatter):
    """Structured formatter: one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        return serialize(record_fields(record)).decode("utf-8")


class PlainRecordFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        return render_plain(record_fields(record))
