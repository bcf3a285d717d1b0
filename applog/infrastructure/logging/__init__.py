"""
applog Logging Infrastructure

Record construction and serialization for application and access logs.

Components:
- fields: fixed application record fields, severities, caller location
- formatter: JSON and plain rendering with error-value stringification
- access: webapp_access record assembly
- engine: stdlib-backed leveled sink, one per process
- guard: PanicGuard scoped recovery
- logger: the Logger facade
"""

from .access import AccessRequest, build_access_fields
from .engine import LogEngine, get_engine, reset_engine
from .fields import (
    LOG_TYPE_ACCESS,
    LOG_TYPE_APP,
    Severity,
    build_fields,
    concat_args,
    format_message,
    timestamp,
)
from .formatter import (
    JSONRecordFormatter,
    PlainRecordFormatter,
    failure_message,
    render_plain,
    serialize,
    stringify_errors,
)
from .guard import PanicGuard
from .logger import Logger, new

__all__ = [
    'AccessRequest',
    'build_access_fields',
    'LogEngine',
    'get_engine',
    'reset_engine',
    'LOG_TYPE_ACCESS',
    'LOG_TYPE_APP',
    'Severity',
    'build_fields',
    'concat_args',
    'format_message',
    'timestamp',
    'JSONRecordFormatter',
    'PlainRecordFormatter',
    'failure_message',
    'render_plain',
    'serialize',
    'stringify_errors',
    'PanicGuard',
    'Logger',
    'new',
]
