"""
HTTP execution service for running one hurl.

This service sends the request described by a RequestSpec using httpx,
records the header lines that actually went out on the wire through the
httpcore trace hook, and captures the raw response. Transport failures
are wrapped in ExecutionError.

Execution is synchronous (``httpx.Client``) because the trace hook is
called synchronously; routes run it in FastAPI's threadpool.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import httpx

from ..exceptions import ExecutionError
from .pretty_printer import encode_fields
from .request_builder import RequestSpec


logger = logging.getLogger(__name__)

# httpcore trace events fired right before a request's headers are written
SEND_HEADER_EVENTS = (
    "http11.send_request_headers.started",
    "http2.send_request_headers.started",
)


class Method(str, Enum):
    """HTTP methods the executor knows how to dispatch."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class ExecutionResult:
    """Everything captured from one execution."""
    sent_headers: list[str]
    status_header_block: str
    content_type: str
    body: str
    post_data: list = field(default_factory=list)


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _with_form_content_type(headers: list) -> list:
    # A Content-Type the user chose is kept as is
    if any(key.lower() == "content-type" for key, _ in headers):
        return headers
    return [*headers, ("Content-Type", FORM_CONTENT_TYPE)]


def _send_get(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    return client.get(spec.url, **kwargs)


def _send_head(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    return client.head(spec.url, **kwargs)


def _send_delete(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    return client.delete(spec.url, **kwargs)


def _send_options(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    return client.options(spec.url, **kwargs)


def _send_patch(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    return client.patch(spec.url, **kwargs)


def _send_post(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    if spec.raw_body is not None:
        return client.post(spec.url, content=spec.raw_body, **kwargs)
    if spec.post_fields:
        # Encoded by hand so repeated names keep the order they were given in
        kwargs["headers"] = _with_form_content_type(kwargs.get("headers", []))
        return client.post(spec.url, content=encode_fields(spec.post_fields), **kwargs)
    return client.post(spec.url, **kwargs)


def _send_put(client: httpx.Client, spec: RequestSpec, **kwargs) -> httpx.Response:
    # PUT always sends one flat string, never structured form data
    return client.put(spec.url, content=encode_fields(spec.post_data), **kwargs)


DISPATCH: dict[Method, Callable[..., httpx.Response]] = {
    Method.GET: _send_get,
    Method.POST: _send_post,
    Method.PUT: _send_put,
    Method.DELETE: _send_delete,
    Method.HEAD: _send_head,
    Method.PATCH: _send_patch,
    Method.OPTIONS: _send_options,
}


class SentHeaderRecorder:
    """
    httpcore trace callback collecting the request lines written out.

    One block is recorded per request sent (redirect hops included);
    consecutive blocks are separated by an empty entry.
    """

    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        if event_name not in SEND_HEADER_EVENTS:
            return

        request = info["request"]
        version = "HTTP/2" if event_name.startswith("http2") else "HTTP/1.1"
        if self.lines:
            self.lines.append("")
        self.lines.append(
            f"{_decode(request.method)} {_decode(request.url.target)} {version}"
        )
        for key, value in request.headers:
            self.lines.append(f"{_decode(key)}: {_decode(value)}")


def _decode(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


def format_status_header_block(response: httpx.Response) -> str:
    """
    Rebuild the raw response header text: status line plus header lines.

    Redirect responses come first, each block ended by a blank line.
    """
    blocks = []
    for hop in [*response.history, response]:
        lines = [f"{hop.http_version} {hop.status_code} {hop.reason_phrase}".rstrip()]
        lines.extend(f"{_decode(key)}: {_decode(value)}" for key, value in hop.headers.raw)
        blocks.append("\r\n".join(lines) + "\r\n")
    return "\r\n".join(blocks)


def resolve_content_type(url: str, declared: Optional[str]) -> str:
    """A target path ending in ``.js`` is always treated as script."""
    if urlsplit(url).path.endswith(".js"):
        return "js"
    return declared or ""


def _error_message(exc: Exception) -> str:
    message = str(exc)
    return message if message else type(exc).__name__


def execute(
    spec: RequestSpec,
    transport: Optional[httpx.BaseTransport] = None
) -> ExecutionResult:
    """
    Execute the request described by ``spec``.

    Args:
        spec: The normalized request
        transport: Optional httpx transport, used instead of the network

    Returns:
        ExecutionResult with the sent header lines and the raw response

    Raises:
        ExecutionError: Unsupported method or any transport-level failure
    """
    try:
        method = Method(spec.method)
    except ValueError:
        raise ExecutionError(f"Unsupported HTTP method: {spec.method}") from None

    send = DISPATCH[method]
    recorder = SentHeaderRecorder()

    logger.debug("Executing %s %s", spec.method, spec.url)

    try:
        with httpx.Client(follow_redirects=spec.follow_redirects, transport=transport) as client:
            response = send(
                client,
                spec,
                headers=list(spec.headers),
                extensions={"trace": recorder},
            )
    except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, ValueError) as e:
        logger.debug("Execution of %s %s failed: %r", spec.method, spec.url, e)
        raise ExecutionError(_error_message(e)) from e

    return ExecutionResult(
        sent_headers=recorder.lines,
        status_header_block=format_status_header_block(response),
        content_type=resolve_content_type(spec.url, response.headers.get("content-type")),
        body=response.text,
        post_data=spec.post_data,
    )
