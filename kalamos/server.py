"""
Simple HTTP server for previewing a rendered output tree.
"""

import logging
import mimetypes
from dataclasses import dataclass
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import unquote, urlparse

NOT_FOUND_PATH = '404.html'
NOT_FOUND_BODY = b'<h1>404</h1><p>Not found!<p>'

logger = logging.getLogger('Kalamos.server')


@dataclass(frozen=True)
class RequestInfo:
    content: bytes
    status: HTTPStatus
    content_type: str


def _guess_type(path):
    return mimetypes.guess_type(path.name)[0] or 'text/plain'


def file_content(root, request_path):
    """
    Resolve a request path against the output tree.

    Serves the file itself, then ``<path>/index.html``, then the site's
    ``404.html`` (or a built-in page) with a 404 status. Paths that resolve
    outside ``root`` are treated as missing.
    """
    root = Path(root).resolve()
    relative = unquote(urlparse(request_path).path).lstrip('/')
    try:
        path = (root / relative).resolve()
    except (OSError, ValueError):
        # Null bytes and other unrepresentable paths
        path = None

    if path is not None and path.is_relative_to(root):
        for candidate in (path, path / 'index.html'):
            if candidate.is_file():
                return RequestInfo(candidate.read_bytes(), HTTPStatus.OK, _guess_type(candidate))

    not_found = root / NOT_FOUND_PATH
    content = not_found.read_bytes() if not_found.is_file() else NOT_FOUND_BODY
    return RequestInfo(content, HTTPStatus.NOT_FOUND, 'text/html')


class OutputRequestHandler(BaseHTTPRequestHandler):
    """Serve GET and HEAD requests from a fixed output directory."""

    def __init__(self, *args, directory=None, **kwargs):
        self.directory = directory
        super().__init__(*args, **kwargs)

    def _send(self, include_body):
        info = file_content(self.directory, self.path)
        self.send_response(info.status)
        self.send_header('Content-Type', info.content_type)
        self.send_header('Content-Length', str(len(info.content)))
        self.end_headers()
        if include_body:
            self.wfile.write(info.content)

    def do_GET(self):
        self._send(include_body=True)

    def do_HEAD(self):
        self._send(include_body=False)

    def log_message(self, format, *args):
        logger.info(f"{self.address_string()} - {format % args}")


def serve(output_dir, host='127.0.0.1', port=8000):
    """Serve ``output_dir`` until interrupted."""
    handler = partial(OutputRequestHandler, directory=str(output_dir))
    with ThreadingHTTPServer((host, port), handler) as httpd:
        logger.info(f"Serving {output_dir} at http://{host}:{port}")
        print(f"Serving site at http://{host}:{port}")
        print("Press Ctrl+C to stop")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
