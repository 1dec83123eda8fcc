"""Tests for the main entry point (__main__.py)."""

from unittest.mock import patch

import pytest

from httpc.__main__ import ensure_scheme, main
from httpc.errors import ConnectError, TooManyRedirects
from httpc.headers import Headers
from httpc.response import Response


def _ok(body=b"hello", content_type="text/plain"):
    return Response(200, Headers([("Content-Type", content_type)]), body, reason="OK")


class TestEnsureScheme:
    """Tests for scheme defaulting."""

    def test_adds_http(self):
        assert ensure_scheme("example.com/x") == "http://example.com/x"

    def test_keeps_https(self):
        assert ensure_scheme("https://example.com") == "https://example.com"


class TestMain:
    """Tests for the main function."""

    @patch("httpc.__main__.do_request")
    def test_get_prints_body(self, mock_request, capsys):
        mock_request.return_value = _ok()
        result = main(["--color", "never", "get", "example.com/path"])

        assert result == 0
        assert capsys.readouterr().out == "hello\n"
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "http://example.com/path"
        assert kwargs["body"] is None
        assert kwargs["follow_redirects"] is False

    @patch("httpc.__main__.do_request")
    def test_headers_parsed(self, mock_request):
        mock_request.return_value = _ok()
        main(["get", "-h", "Accept: text/html", "-h", "X-A:1", "http://e.com"])
        assert mock_request.call_args.kwargs["headers"] == [
            ("Accept", "text/html"),
            ("X-A", "1"),
        ]

    @patch("httpc.__main__.do_request")
    def test_invalid_header_returns_error(self, mock_request, capsys):
        result = main(["get", "-h", "no-colon", "http://e.com"])
        assert result == 2
        assert "Error" in capsys.readouterr().err
        mock_request.assert_not_called()

    @patch("httpc.__main__.do_request")
    def test_post_inline_data(self, mock_request):
        mock_request.return_value = _ok()
        main(["post", "-L", "-d", "a=1", "http://e.com"])
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["body"] == b"a=1"
        assert kwargs["follow_redirects"] is True

    @patch("httpc.__main__.do_request")
    def test_post_file_body(self, mock_request, tmp_path):
        f = tmp_path / "body.bin"
        f.write_bytes(b"\x00\x01payload")
        mock_request.return_value = _ok()
        main(["post", "-f", str(f), "http://e.com"])
        assert mock_request.call_args.kwargs["body"] == b"\x00\x01payload"

    @patch("httpc.__main__.do_request")
    def test_missing_body_file_returns_error(self, mock_request):
        result = main(["post", "-f", "/nonexistent/body.txt", "http://e.com"])
        assert result == 2
        mock_request.assert_not_called()

    @patch("httpc.__main__.do_request")
    def test_request_error_returns_one(self, mock_request, capsys):
        mock_request.side_effect = ConnectError("Connection refused")
        result = main(["get", "http://e.com"])
        assert result == 1
        assert "Connection refused" in capsys.readouterr().err

    @patch("httpc.__main__.do_request")
    def test_too_many_redirects_returns_one(self, mock_request):
        mock_request.side_effect = TooManyRedirects("Exceeded 10 redirects")
        assert main(["get", "-L", "http://e.com"]) == 1

    @patch("httpc.__main__.do_request")
    def test_output_file_gets_raw_body(self, mock_request, tmp_path, capsys):
        mock_request.return_value = _ok(b"\x89PNG", "image/png")
        out = tmp_path / "out.png"
        result = main(["--color", "never", "get", "-o", str(out), "http://e.com"])

        assert result == 0
        assert out.read_bytes() == b"\x89PNG"
        assert capsys.readouterr().out == ""

    @patch("httpc.__main__.do_request")
    def test_output_file_verbose_prints_head(self, mock_request, tmp_path, capsys):
        mock_request.return_value = _ok()
        out = tmp_path / "out.txt"
        main(["--color", "never", "get", "-v", "-o", str(out), "http://e.com"])
        assert "HTTP/1.1 200 OK" in capsys.readouterr().out

    @patch("httpc.__main__.do_request")
    def test_unwritable_output_returns_error(self, mock_request, tmp_path):
        mock_request.return_value = _ok()
        target = tmp_path / "missing-dir" / "out.txt"
        assert main(["get", "-o", str(target), "http://e.com"]) == 2

    def test_missing_url_exits(self):
        with pytest.raises(SystemExit):
            main(["get"])
