"""
Local collector server for integration testing
"""
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class CollectorServer:
    """Plain-HTTP stand-in for the events collector"""

    def __init__(self, host="127.0.0.1", port=0):
        self.host = host
        self.port = port
        self.status = 200
        self.response_body = "ok"
        self.requests = []
        self.server = None
        self.server_thread = None

    @property
    def base_url(self):
        return f"http://{self.host}:{self.port}"

    def reset(self, status=200, response_body="ok"):
        self.status = status
        self.response_body = response_body
        self.requests.clear()

    def start(self):
        """Start the test server in a background thread"""
        if self.server is not None:
            return

        collector = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                collector.requests.append({
                    "path": self.path,
                    "headers": self.headers,
                    "body": self.rfile.read(length),
                })
                payload = collector.response_body.encode("utf-8")
                self.send_response(collector.status)
                self.send_header("Content-Type", "text/plain")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, format, *args):
                pass

        self.server = ThreadingHTTPServer((self.host, self.port), Handler)
        self.port = self.server.server_address[1]
        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()

    def stop(self):
        """Stop the test server"""
        if self.server is not None:
            self.server.shutdown()
            self.server.server_close()
            self.server = None


@pytest.fixture(scope="session")
def collector_server():
    """Fixture providing a running local collector"""
    server = CollectorServer()
    server.start()
    yield server
    server.stop()
