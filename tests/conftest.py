"""Shared pytest fixtures for applog tests."""

import io
import json

import pytest

from applog.config.settings import LogFormat, LoggingSettings, reset_settings
from applog.infrastructure.logging import engine as engine_module
from applog.infrastructure.logging.engine import LogEngine, reset_engine
from applog.infrastructure.logging.logger import Logger


@pytest.fixture(autouse=True)
def clean_globals():
    """Isolate process-wide settings and engine between tests."""
    reset_settings()
    reset_engine()
    yield
    try:
        reset_engine()
    except ValueError:
        # The engine was bound to a capture stream pytest already closed
        engine_module._engine = None
    reset_settings()


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def exit_calls():
    return []


@pytest.fixture
def engine(stream, exit_calls):
    """Structured debug-level engine writing to an in-memory stream."""
    def fake_exit(code):
        exit_calls.append((code, stream.getvalue()))
        raise SystemExit(code)
    
    settings = LoggingSettings(debug=True, log_format=LogFormat.JSON)
    return LogEngine(settings=settings, stream=stream, exit_func=fake_exit)


@pytest.fixture
def logger(engine):
    return Logger(engine)


@pytest.fixture
def records(stream):
    """Callable returning every JSON record written so far."""
    def read():
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]
    return read
