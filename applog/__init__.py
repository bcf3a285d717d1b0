"""
applog: structured application and access logging.

    >>> import applog
    >>> log = applog.new()
    >>> log.infof("loaded %d items", 3)
"""

from applog.exceptions import ApplogException, ConfigurationException, SerializationError
from applog.infrastructure.logging import (
    AccessRequest,
    LogEngine,
    Logger,
    PanicGuard,
    Severity,
    new,
    serialize,
)

__all__ = [
    "AccessRequest",
    "ApplogException",
    "ConfigurationException",
    "LogEngine",
    "Logger",
    "PanicGuard",
    "SerializationError",
    "Severity",
    "new",
    "serialize",
]
