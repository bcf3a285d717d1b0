"""
applog Logging Engine

Owns the standard library logger that performs level filtering and writes
rendered records to the output stream. The handler lock taken by
logging.Handler.handle is the only synchronization point: formatting and the
write both happen under it, so concurrent records never interleave.
"""

import logging
import os
import sys
import threading
from typing import Any, Callable, Mapping, Optional, TextIO, Union

from applog.config.settings import LogStream, LoggingSettings, get_settings
from .fields import Severity
from .formatter import JSONRecordFormatter, PlainRecordFormatter


def terminate(code: int) -> None:
    """
    End the process with the given status from any thread.

    On the main thread this raises SystemExit so finally blocks and atexit
    handlers run. Elsewhere SystemExit would only end the calling thread, so
    logging is shut down and the process exits immediately.
    """
    if threading.current_thread() is threading.main_thread():
        sys.exit(code)
    logging.shutdown()
    os._exit(code)


class LogEngine:
    """
    Leveled sink for applog records.

    The configuration is read once at construction; there is no API to
    change it afterwards.

    Attributes:
        settings: Settings the engine was built from
        stream: Text stream records are written to
        logger: Underlying stdlib logger, unregistered and non-propagating
        handler: The single stream handler
    """

    def __init__(
        self,
        settings: Optional[LoggingSettings] = None,
        stream: Optional[TextIO] = None,
        exit_func: Optional[Callable[[int], Any]] = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.stream = stream if stream is not None else self._default_stream()
        self._exit_func = exit_func if exit_func is not None else terminate

        # Not created through logging.getLogger so engines never share handlers
        self.logger = logging.Logger("applog")
        self.logger.propagate = False
        self.logger.setLevel(logging.DEBUG if self.settings.debug else logging.INFO)

        self.handler = logging.StreamHandler(self.stream)
        self.handler.terminator = ""
        if self.settings.structured:
            self.handler.setFormatter(JSONRecordFormatter())
        else:
            self.handler.setFormatter(PlainRecordFormatter())
        self.logger.addHandler(self.handler)

    def _default_stream(self) -> TextIO:
        if self.settings.log_stream is LogStream.STDOUT:
            return sys.stdout
        return sys.stderr

    @property
    def level(self) -> int:
        return self.logger.level

    def is_enabled_for(self, level: Union[Severity, int]) -> bool:
        if isinstance(level, Severity):
            level = level.level
        return self.logger.isEnabledFor(level)

    def emit(self, level: Union[Severity, int], fields: Mapping[str, Any]) -> None:
        """
        Hand a field mapping to the handler if the level passes the threshold.

        Serialization failures are reported through logging.Handler.handleError
        and never reach the caller; the failed record writes nothing.
        """
        if isinstance(level, Severity):
            level = level.level
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, fields.get("description", ""), extra={"fields": fields})

    def flush(self) -> None:
        self.handler.flush()

    def exit(self, code: int = 1) -> None:
        self.flush()
        self._exit_func(code)

    def close(self) -> None:
        self.flush()
        self.logger.removeHandler(self.handler)
        self.handler.close()


_engine: Optional[LogEngine] = None


def get_engine() -> LogEngine:
    """
    Get the process-wide engine, creating it from the environment on first use.

    Returns:
        The shared LogEngine
    """
    global _engine
    if _engine is None:
        _engine = LogEngine()
    return _engine


def reset_engine() -> None:
    """Flush and forget the process-wide engine (tests and process teardown)."""
    global _engine
    if _engine is not None:
        _engine.close()
    _engine = None
