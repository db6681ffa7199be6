"""
Unit tests for request line parsing.
"""

import pytest

from staticserver.http.request import (
    RequestLine,
    MalformedRequestError,
    parse_request_line,
)


class TestParseRequestLine:
    """Tests for parse_request_line()."""

    def test_parse_simple_get(self):
        """Test parsing a well-formed request line."""
        request = parse_request_line("GET /index.html HTTP/1.1")

        assert request == RequestLine(method="GET", path="/index.html", version="HTTP/1.1")

    def test_method_and_version_not_validated(self):
        """Any three tokens are accepted."""
        request = parse_request_line("BREW /pot COFFEE/1.0")

        assert request.method == "BREW"
        assert request.version == "COFFEE/1.0"

    def test_path_kept_verbatim(self):
        """No decoding or normalization happens at parse time."""
        request = parse_request_line("GET /../a%2F..//etc?x=1 HTTP/1.1")

        assert request.path == "/../a%2F..//etc?x=1"

    @pytest.mark.parametrize("line", [
        "",
        "GET",
        "GET /",
        "GET / HTTP/1.1 extra",
        "GET  / HTTP/1.1",
        "GET / HTTP/1.1 ",
        " GET / HTTP/1.1",
        "GET\t/\tHTTP/1.1",
    ])
    def test_wrong_shape_rejected(self, line):
        """Anything that does not split into exactly 3 tokens is malformed."""
        with pytest.raises(MalformedRequestError):
            parse_request_line(line)

    def test_malformed_is_value_error(self):
        """Callers may catch it as a ValueError."""
        with pytest.raises(ValueError):
            parse_request_line("nonsense")

    def test_request_line_is_immutable(self):
        request = parse_request_line("GET / HTTP/1.1")

        with pytest.raises(AttributeError):
            request.path = "/other"
