"""
applog Logger

Public entry point. Every severity comes in two flavours: a concatenation
form taking arbitrary arguments (``info("loaded", 3, "items")``) and a
printf-style template form (``infof("loaded %d items", 3)``).

fatal() and fatalf() terminate the process once the record has been flushed.
panic(), panicf() and recover() emit fatal-severity records without
terminating.
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional, Union

from .access import AccessRequest, build_access_fields
from .engine import LogEngine, get_engine
from .fields import Severity, build_fields, concat_args, format_message
from .guard import PanicGuard

# Frames between build_fields' caller and the user's call site: _emit and
# the public method. Every public severity method must call _emit directly.
_CALLER_SKIP = 2


class Logger:
    """
    Severity dispatch over a LogEngine.

    Attributes:
        engine: Engine records are emitted through
    """

    def __init__(self, engine: Optional[LogEngine] = None):
        self._engine = engine

    @property
    def engine(self) -> LogEngine:
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def _emit(self, severity: Severity, description: str, level: Optional[int] = None) -> None:
        severity = Severity(severity)
        level = severity.level if level is None else level
        if not self.engine.is_enabled_for(level):
            return
        fields = build_fields(severity, description, caller_skip=_CALLER_SKIP)
        self.engine.emit(level, fields)

    def debug(self, *args: Any) -> None:
        self._emit(Severity.DEBUG, concat_args(args))

    def debugf(self, template: str, *args: Any) -> None:
        self._emit(Severity.DEBUG, format_message(template, args))

    def info(self, *args: Any) -> None:
        self._emit(Severity.INFO, concat_args(args))

    def infof(self, template: str, *args: Any) -> None:
        self._emit(Severity.INFO, format_message(template, args))

    def warning(self, *args: Any) -> None:
        self._emit(Severity.WARNING, concat_args(args))

    def warningf(self, template: str, *args: Any) -> None:
        self._emit(Severity.WARNING, format_message(template, args))

    def error(self, *args: Any) -> None:
        self._emit(Severity.ERROR, concat_args(args))

    def errorf(self, template: str, *args: Any) -> None:
        self._emit(Severity.ERROR, format_message(template, args))

    def panic(self, *args: Any) -> None:
        self._emit(Severity.FATAL, concat_args(args), level=logging.ERROR)

    def panicf(self, template: str, *args: Any) -> None:
        self._emit(Severity.FATAL, format_message(template, args), level=logging.ERROR)

    def fatal(self, *args: Any) -> None:
        self._emit(Severity.FATAL, concat_args(args))
        self.engine.exit(1)

    def fatalf(self, template: str, *args: Any) -> None:
        self._emit(Severity.FATAL, format_message(template, args))
        self.engine.exit(1)

    def access(
        self,
        request: AccessRequest,
        response_headers: Mapping[str, str],
        duration: Union[timedelta, float, int],
        status_code: int,
        bytes_sent: int,
        *extra: Optional[Mapping[str, Any]],
    ) -> None:
        """Emit an access record at info level."""
        if not self.engine.is_enabled_for(logging.INFO):
            return
        fields = build_access_fields(
            request, response_headers, duration, status_code, bytes_sent, *extra
        )
        self.engine.emit(logging.INFO, fields)

    def recover(self, exc: BaseException) -> None:
        """
        Emit the fatal-severity record of a recovered exception.

        The record is written at error level and the process keeps running.
        Location and stack trace describe where the exception was raised.
        """
        description = str(exc) or type(exc).__name__
        fields = build_fields(Severity.FATAL, description, exc=exc)
        self.engine.emit(logging.ERROR, fields)

    def guard(self, *cleanups: Callable[[], Any]) -> PanicGuard:
        """Return a PanicGuard that recovers into this logger."""
        return PanicGuard(self, *cleanups)


def new(engine: Optional[LogEngine] = None) -> Logger:
    """Create a Logger on the given engine, or on the process-wide one."""
    return Logger(engine)
