"""
applog Panic Guard

Scoped recovery for a unit of work. An exception escaping the protected
block is turned into a single fatal-severity record, the cleanup callbacks
run in the order given, and the exception is suppressed so the enclosing
code carries on. Unlike Logger.fatal(), nothing terminates the process.

    with logger.guard(release_lock, close_connection):
        handle(job)

    @PanicGuard(logger, rollback)
    def worker():
        ...
"""

import contextlib
from typing import Any, Callable, Optional


class PanicGuard(contextlib.ContextDecorator):
    """
    Context manager and decorator recovering exceptions into fatal records.

    Only Exception subclasses are intercepted; SystemExit, KeyboardInterrupt
    and GeneratorExit pass through. A cleanup that raises stops the remaining
    cleanups and its exception propagates; the fatal record is already written
    by then.

    Attributes:
        logger: Logger the fatal record is emitted through (needs recover())
        cleanups: Callbacks run after the record, in order
        triggered: True once an exception was recovered
        exception: The recovered exception, if any
    """

    def __init__(self, logger, *cleanups: Callable[[], Any]):
        self.logger = logger
        self.cleanups = cleanups
        self.triggered = False
        self.exception: Optional[BaseException] = None
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def _recreate_cm(self) -> "PanicGuard":
        # Each call of a decorated function gets its own guard state
        return type(self)(self.logger, *self.cleanups)

    def __enter__(self) -> "PanicGuard":
        self._armed = True
        self.triggered = False
        self.exception = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self._armed = False
        if exc_val is None or not isinstance(exc_val, Exception):
            return False

        self.triggered = True
        self.exception = exc_val
        self.logger.recover(exc_val)
        for cleanup in self.cleanups:
            cleanup()
        return True
