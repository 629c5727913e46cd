"""Tests for the preview server."""

import os
import threading
import urllib.error
import urllib.request
from functools import partial
from http import HTTPStatus
from http.server import ThreadingHTTPServer

import pytest

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from conftest import write

from kalamos.server import NOT_FOUND_BODY, OutputRequestHandler, file_content


@pytest.fixture
def site_output(temp_dir):
    root = temp_dir / "output"
    write(root / "index.html", "<h1>home</h1>")
    write(root / "blog" / "index.html", "<h1>blog</h1>")
    write(root / "assets" / "style.css", "body{}")
    write(temp_dir / "secret.txt", "secret")
    return root


class TestFileContent:
    """Test cases for resolving request paths."""

    def test_serves_file(self, site_output):
        info = file_content(site_output, "/assets/style.css")
        assert info.status == HTTPStatus.OK
        assert info.content == b"body{}"
        assert info.content_type == "text/css"

    def test_serves_directory_index(self, site_output):
        info = file_content(site_output, "/blog/")
        assert info.status == HTTPStatus.OK
        assert info.content == b"<h1>blog</h1>"
        assert info.content_type == "text/html"

    def test_root_index(self, site_output):
        assert file_content(site_output, "/").content == b"<h1>home</h1>"

    def test_query_string_ignored(self, site_output):
        assert file_content(site_output, "/index.html?v=2").status == HTTPStatus.OK

    def test_builtin_not_found(self, site_output):
        info = file_content(site_output, "/missing.html")
        assert info.status == HTTPStatus.NOT_FOUND
        assert info.content == NOT_FOUND_BODY

    def test_site_not_found_page(self, site_output):
        write(site_output / "404.html", "custom 404")
        info = file_content(site_output, "/missing.html")
        assert info.status == HTTPStatus.NOT_FOUND
        assert info.content == b"custom 404"

    def test_traversal_is_not_found(self, site_output):
        info = file_content(site_output, "/../secret.txt")
        assert info.status == HTTPStatus.NOT_FOUND
        assert info.content == NOT_FOUND_BODY

    def test_null_byte_is_not_found(self, site_output):
        info = file_content(site_output, "/%00")
        assert info.status == HTTPStatus.NOT_FOUND
        assert info.content == NOT_FOUND_BODY


class TestOutputRequestHandler:
    """Run the handler in a real server on an ephemeral port."""

    @pytest.fixture
    def server_url(self, site_output):
        handler = partial(OutputRequestHandler, directory=str(site_output))
        httpd = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        thread.start()
        yield f"http://127.0.0.1:{httpd.server_address[1]}"
        httpd.shutdown()
        httpd.server_close()

    def test_get(self, server_url):
        with urllib.request.urlopen(server_url + "/blog/") as response:
            assert response.status == 200
            assert response.read() == b"<h1>blog</h1>"

    def test_not_found(self, server_url):
        with pytest.raises(urllib.error.HTTPError) as excinfo:
            urllib.request.urlopen(server_url + "/nope")
        assert excinfo.value.code == 404
        excinfo.value.close()
