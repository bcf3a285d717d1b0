"""
applog Field Builder

Assembles the fixed metadata field set of an application log record:
timestamp, severity, pid, host name, caller location, description and,
for error and fatal records, the stack trace.
"""

import logging
import os
import socket
import sys
import traceback
from datetime import datetime
from enum import Enum
from functools import lru_cache
from types import FrameType
from typing import Any, Dict, Optional, Sequence

LOG_TYPE_APP = "application_log"
LOG_TYPE_ACCESS = "webapp_access"

UNKNOWN_LOCATION = "unknown:0"

_log = logging.getLogger(__name__)


class Severity(str, Enum):
    """Closed set of record severities, ordered debug < info < warning < error < fatal."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def level(self) -> int:
        """Standard library level the engine gates this severity on."""
        return _LEVELS[self]

    @property
    def has_stacktrace(self) -> bool:
        return self in (Severity.ERROR, Severity.FATAL)


_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


def timestamp() -> str:
    """Local time with millisecond precision and a numeric UTC offset."""
    return datetime.now().astimezone().isoformat(timespec="milliseconds")


@lru_cache(maxsize=1)
def hostname() -> str:
    """Host name of this process, resolved once. Empty when it cannot be resolved."""
    try:
        return socket.gethostname()
    except OSError as e:
        _log.debug("Could not resolve host name: %s", e)
        return ""


def format_message(template: str, args: Sequence[Any]) -> str:
    """
    Render a printf-style template.

    The template is only interpolated when arguments are given, the same rule
    logging.LogRecord.getMessage follows. An argument-less message is kept
    verbatim: '%' stays '%' and '%%' stays '%%', unlike printf. A template
    that does not match its arguments degrades to the template followed by
    the arguments.
    """
    if not args:
        return str(template)
    try:
        return str(template) % tuple(args)
    except (TypeError, ValueError, KeyError):
        return f"{template} {args!r}"


def concat_args(args: Sequence[Any]) -> str:
    """Join arguments with single spaces and drop trailing newlines."""
    return " ".join(str(arg) for arg in args).rstrip("\n")


def frame_location(frame: Optional[FrameType]) -> str:
    if frame is None:
        return UNKNOWN_LOCATION
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


def exception_location(exc: BaseException) -> str:
    """Location of the innermost frame the exception was raised from."""
    tb = exc.__traceback__
    if tb is None:
        return UNKNOWN_LOCATION
    while tb.tb_next is not None:
        tb = tb.tb_next
    return f"{os.path.basename(tb.tb_frame.f_code.co_filename)}:{tb.tb_lineno}"


def _caller_frame(depth: int) -> Optional[FrameType]:
    try:
        # +1 for this helper itself
        return sys._getframe(depth + 1)
    except ValueError:
        return None


def build_fields(
    severity: Severity,
    description: str,
    caller_skip: int = 0,
    exc: Optional[BaseException] = None,
) -> Dict[str, Any]:
    """
    Build the field mapping of an application log record.

    Args:
        severity: One of the five severities; anything else raises ValueError
        description: Already formatted message text
        caller_skip: Frames to skip above the function calling build_fields.
            0 records that function's own call site; a public method that
            reaches this through one private helper passes 2.
        exc: Recovered exception; when given, the location and stack trace
            describe where it was raised instead of the current stack

    Returns:
        A fresh dict; 'stacktrace' is present only for error and fatal
    """
    severity = Severity(severity)

    frame = None
    if exc is not None:
        location = exception_location(exc)
    else:
        # +1 skips build_fields' own frame
        frame = _caller_frame(caller_skip + 1)
        location = frame_location(frame)

    fields: Dict[str, Any] = {
        "log_type": LOG_TYPE_APP,
        "@timestamp": timestamp(),
        "severity": severity.value,
        "pid": os.getpid(),
        "description": description,
        "server_name": hostname(),
        "class": location,
    }

    if severity.has_stacktrace:
        if exc is not None:
            lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        elif frame is not None:
            lines = traceback.format_stack(frame)
        else:
            lines = traceback.format_stack()
        fields["stacktrace"] = "".join(lines)

    return fields
