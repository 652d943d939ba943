"""Pytest configuration and fixtures"""

import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class TargetHandler(BaseHTTPRequestHandler):
    """A small target server the hurl tests send requests to."""

    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _send(self, status: int, body: str, content_type: str | None = None, extra=()):
        payload = body.encode("utf-8")
        self.send_response(status)
        if content_type:
            self.send_header("Content-Type", content_type)
        for key, value in extra:
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def _read_body(self) -> str:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length).decode("utf-8") if length else ""

    def _echo(self):
        body = self._read_body()
        self._send(200, json.dumps({
            "method": self.command,
            "path": self.path,
            "body": body,
            "content_type": self.headers.get("Content-Type"),
            "headers": self.headers.get_all("X-Dup") or [],
        }), "application/json")

    def do_GET(self):
        if self.path == "/json":
            self._send(200, '{"name": "hurl", "tags": ["a", "b"]}', "application/json")
        elif self.path == "/broken-json":
            self._send(200, '{"name": "hurl", ', "application/json")
        elif self.path == "/app.js":
            self._send(200, '{"served":"as html"}', "text/html")
        elif self.path == "/script":
            self._send(200, "function f() { return 1; }", "application/javascript")
        elif self.path == "/page":
            self._send(200, "<html><body>hi</body></html>", "text/html; charset=utf-8")
        elif self.path == "/redirect":
            self._send(302, "", extra=[("Location", "/json")])
        else:
            self._echo()

    def do_HEAD(self):
        self._send(200, "", "text/plain")

    do_POST = _echo
    do_PUT = _echo
    do_PATCH = _echo
    do_DELETE = _echo
    do_OPTIONS = _echo


@pytest.fixture(scope="session")
def target_server():
    """Run the target server on a free local port; yields its base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), TargetHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()


@pytest.fixture
def closed_port_url() -> str:
    """A local URL nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/"
