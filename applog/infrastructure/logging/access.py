"""
applog Access Record Builder

Assembles the webapp_access record describing one completed HTTP
request/response cycle.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional, Union

from .fields import LOG_TYPE_ACCESS, timestamp


@dataclass(frozen=True)
class AccessRequest:
    """
    Request metadata consumed by the access record.

    Attributes:
        remote_addr: Client address, usually "host:port"
        host: Host the request was addressed to, possibly with a port
        method: HTTP method
        uri: Request target, path plus query string
        protocol: Protocol version string such as "HTTP/1.1"
    """
    remote_addr: str
    host: str
    method: str
    uri: str
    protocol: str

    @classmethod
    def from_request(cls, request) -> "AccessRequest":
        """Build from a Starlette/FastAPI Request."""
        scope = request.scope
        client = request.client
        remote_addr = f"{client.host}:{client.port}" if client else ""
        uri = (scope.get("raw_path") or b"").decode("latin-1") or request.url.path
        query = scope.get("query_string") or b""
        if query:
            uri = f"{uri}?{query.decode('latin-1')}"
        return cls(
            remote_addr=remote_addr,
            host=request.headers.get("host", ""),
            method=request.method,
            uri=uri,
            protocol=f"HTTP/{scope.get('http_version', '1.1')}",
        )


def strip_port(address: str) -> str:
    return (address or "").split(":")[0]


def _header(headers: Mapping[str, str], name: str) -> str:
    value = headers.get(name)
    if value is None and isinstance(headers, dict):
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return value or ""


def media_type(content_type: str) -> str:
    """Content-Type header value without its parameters."""
    return content_type.split(";")[0].strip()


def build_access_fields(
    request: AccessRequest,
    response_headers: Mapping[str, str],
    duration: Union[timedelta, float, int],
    status_code: int,
    bytes_sent: int,
    *extra: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Build the field mapping of an access record.

    Extra mappings are merged in the order given; later mappings override
    earlier ones and all of them override the base fields.
    """
    fields: Dict[str, Any] = {
        "@timestamp": timestamp(),
        "log_type": LOG_TYPE_ACCESS,
        "remote_host": strip_port(request.remote_addr),
        "server_name": strip_port(request.host),
        "request_command": request.method,
        "request_uri": request.uri,
        "request_protocol": request.protocol,
        "status_code": status_code,
        "response_time": duration,
        "bytes_sent": bytes_sent,
        "content_type": media_type(_header(response_headers or {}, "content-type")),
    }

    for mapping in extra:
        if mapping:
            fields.update(mapping)

    return fields
