#!/usr/bin/env python3
"""HTTP server acting as the preview panel for a rendered document."""

import json
import urllib.parse
from http.server import BaseHTTPRequestHandler, HTTPServer

from svgpreview.core.shapes import SymbolMap


class PreviewRequestHandler(BaseHTTPRequestHandler):
    """Serves one pre-rendered document and the map it was rendered from."""

    def log_message(self, format: str, *args):
        """Suppress default logging to keep console clean."""
        pass

    def do_GET(self):
        path: str = urllib.parse.urlparse(self.path).path

        if path == "/" or path == "/index.html":
            self._serve_document()
        elif path == "/api/symbols":
            self._serve_symbols()
        else:
            self._send_404()

    def _serve_document(self):
        content: bytes = self.server.document.encode("utf-8")

        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def _serve_symbols(self):
        symbol_map: SymbolMap = self.server.symbol_map
        content: bytes = json.dumps(symbol_map.to_dict()).encode("utf-8")

        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def _send_error_response(self, code: int, message: str):
        """Send JSON error response."""
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps({"error": message}).encode())

    def _send_404(self):
        """Send 404 Not Found response."""
        self._send_error_response(404, "Not found")


def create_server(
    document: str, symbol_map: SymbolMap, host: str = "localhost", port: int = 6767
) -> HTTPServer:
    """Bind the panel server without starting it."""
    server = HTTPServer((host, port), PreviewRequestHandler)
    server.document = document
    server.symbol_map = symbol_map
    return server
