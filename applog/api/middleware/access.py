"""
Middleware emitting one webapp_access record per request.
"""

import time
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from applog.infrastructure.logging.access import AccessRequest
from applog.infrastructure.logging.logger import Logger, new


ExtraFields = Callable[[Request, Optional[Response]], Optional[Mapping[str, Any]]]


def _content_length(response: Response) -> int:
    try:
        return int(response.headers.get("content-length", 0))
    except ValueError:
        return 0


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Times each request and logs its access record.

    Requests whose handler raises are logged with status 500 before the
    exception is re-raised to the framework's error handling.
    """

    def __init__(
        self,
        app,
        logger: Optional[Logger] = None,
        extra_fields: Optional[ExtraFields] = None,
    ):
        super().__init__(app)
        self.logger = logger or new()
        self.extra_fields = extra_fields

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        access_request = AccessRequest.from_request(request)

        try:
            response = await call_next(request)
        except Exception:
            duration = timedelta(seconds=time.perf_counter() - start_time)
            self.logger.access(
                access_request, {}, duration, 500, 0, self._extra(request, None)
            )
            raise

        duration = timedelta(seconds=time.perf_counter() - start_time)
        self.logger.access(
            access_request,
            response.headers,
            duration,
            response.status_code,
            _content_length(response),
            self._extra(request, response),
        )
        return response

    def _extra(self, request: Request, response: Optional[Response]) -> Optional[Mapping[str, Any]]:
        if self.extra_fields is None:
            return None
        return self.extra_fields(request, response)
