from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


class ScriptedServer(ThreadingHTTPServer):
    """Local HTTP server answering each path with a scripted sequence of
    (status, body) pairs. The last pair of a script is repeated."""

    daemon_threads = True

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _Handler)
        self.scripts: dict[str, list[tuple[int, bytes]]] = {}
        self.hits: dict[str, int] = {}
        self.lock = threading.Lock()

    @property
    def base_url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    def script(self, path: str, *outcomes: tuple[int, object]) -> str:
        self.scripts[path] = [
            (status, body if isinstance(body, bytes) else json.dumps(body).encode("utf-8"))
            for status, body in outcomes
        ]
        return f"{self.base_url}{path}"

    def next_outcome(self, path: str) -> tuple[int, bytes]:
        with self.lock:
            self.hits[path] = self.hits.get(path, 0) + 1
            script = self.scripts.get(path, [(404, b"{}")])
            return script.pop(0) if len(script) > 1 else script[0]


class _Handler(BaseHTTPRequestHandler):
    server: ScriptedServer

    def _answer(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        if length:
            self.rfile.read(length)
        status, body = self.server.next_outcome(self.path.split("?")[0])
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    do_GET = _answer
    do_POST = _answer

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


@pytest.fixture
def server() -> Generator[ScriptedServer, None, None]:
    srv = ScriptedServer()
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    try:
        yield srv
    finally:
        srv.shutdown()
        srv.server_close()
