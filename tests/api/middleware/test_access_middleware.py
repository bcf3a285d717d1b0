"""
Test module for applog.api.middleware.access
"""

import io
import json

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.testclient import TestClient

from applog.api.middleware.access import AccessLogMiddleware
from applog.config.settings import LoggingSettings
from applog.infrastructure.logging.engine import LogEngine
from applog.infrastructure.logging.logger import Logger


def build_app(logger, extra_fields=None):
    app = FastAPI()
    app.add_middleware(AccessLogMiddleware, logger=logger, extra_fields=extra_fields)

    @app.get("/items/{item_id}")
    async def get_item(item_id: int):
        return JSONResponse({"id": item_id}, status_code=200)

    @app.get("/text")
    async def text():
        return PlainTextResponse("hello", status_code=202)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("handler failed")

    return app


@pytest.fixture
def access_stream():
    return io.StringIO()


@pytest.fixture
def access_logger(access_stream):
    return Logger(LogEngine(settings=LoggingSettings(), stream=access_stream))


def read(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestAccessLogMiddleware:
    """Test cases for AccessLogMiddleware."""

    def test_one_record_per_request(self, access_logger, access_stream):
        client = TestClient(build_app(access_logger))

        response = client.get("/items/7?verbose=1")

        assert response.status_code == 200
        records = read(access_stream)
        assert len(records) == 1
        record = records[0]
        assert record["log_type"] == "webapp_access"
        assert record["request_command"] == "GET"
        assert record["request_uri"] == "/items/7?verbose=1"
        assert record["request_protocol"] == "HTTP/1.1"
        assert record["status_code"] == 200
        assert record["content_type"] == "application/json"
        assert record["bytes_sent"] == len(response.content)
        assert record["server_name"] == "testserver"
        assert record["response_time"] >= 0

    def test_content_type_parameters_dropped(self, access_logger, access_stream):
        client = TestClient(build_app(access_logger))

        client.get("/text")

        record = read(access_stream)[0]
        assert record["status_code"] == 202
        assert record["content_type"] == "text/plain"

    def test_extra_fields(self, access_logger, access_stream):
        def extra(request, response):
            return {"route": request.url.path, "status_code": 299}

        client = TestClient(build_app(access_logger, extra_fields=extra))

        client.get("/text")

        record = read(access_stream)[0]
        assert record["route"] == "/text"
        assert record["status_code"] == 299

    def test_failed_request_logged_as_500(self, access_logger, access_stream):
        client = TestClient(build_app(access_logger), raise_server_exceptions=False)

        response = client.get("/boom")

        assert response.status_code == 500
        records = read(access_stream)
        assert len(records) == 1
        assert records[0]["status_code"] == 500
        assert records[0]["bytes_sent"] == 0
