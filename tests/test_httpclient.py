import re
import socket
import threading
from contextlib import contextmanager

import pytest

from nupiz.httpclient import (
    HttpResponse,
    UrlComponents,
    build_http_request,
    extract_host,
    extract_path,
    extract_port,
    get_default_port,
    http_delete,
    http_get,
    http_patch,
    http_post,
    http_put,
    is_https,
    parse_url,
    perform_http_request,
    url_decode,
    url_encode,
)


@contextmanager
def serve(reply: bytes):
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    srv.settimeout(5)
    received: list[bytes] = []

    def handle():
        try:
            conn, _ = srv.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5)
            data = b""
            while b"\r\n\r\n" not in data:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                data += chunk
            head, _, body = data.partition(b"\r\n\r\n")
            match = re.search(rb"Content-Length: (\d+)", head)
            if match:
                while len(body) < int(match.group(1)):
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    body += chunk
            received.append(head + b"\r\n\r\n" + body)
            if reply:
                conn.sendall(reply)

    thread = threading.Thread(target=handle, daemon=True)
    thread.start()
    try:
        yield srv.getsockname()[1], received
    finally:
        thread.join(5)
        srv.close()


def closed_port() -> int:
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def test_extract_host_strips_port_and_path():
    assert extract_host("http://example.com:8080/path") == "example.com"
    assert extract_host("http://example.com") == "example.com"


def test_extract_host_without_scheme_is_empty():
    assert extract_host("example.com/path") == ""


def test_extract_path():
    assert extract_path("http://example.com/a/b?x=1") == "/a/b"
    assert extract_path("http://example.com") == "/"
    assert extract_path("example.com/a") == "/"


def test_extract_port():
    assert extract_port("http://example.com:8080/") == 8080
    assert extract_port("http://example.com/") == 80
    assert extract_port("https://example.com/") == 80
    assert extract_port("http://example.com/a:9") == 80


def test_extract_port_invalid_raises():
    with pytest.raises(ValueError):
        extract_port("http://example.com:abc/")


def test_is_https_and_default_port():
    assert is_https("https://example.com")
    assert not is_https("http://example.com")
    assert get_default_port("https") == "443"
    assert get_default_port("http") == "80"


def test_build_request_without_data():
    request = build_http_request("GET", "http://example.com/p", "", {})
    assert request == "GET /p HTTP/1.1\r\nHost: example.com\r\n\r\n"


def test_build_request_with_data_and_sorted_headers():
    data = "hello"
    request = build_http_request(
        "POST", "http://example.com/", data, {"X-B": "2", "X-A": "1"}
    )
    assert request.endswith("\r\n\r\n" + data)
    assert f"Content-Length: {len(data)}\r\n" in request
    assert request.index("X-A: 1") < request.index("X-B: 2")


def test_parse_url_full():
    parts = parse_url("https://example.com:8443/a/b?q=1")
    assert parts == UrlComponents(
        scheme="https", host="example.com", port=8443, path="/a/b", query="q=1"
    )


def test_parse_url_defaults():
    parts = parse_url("example.com")
    assert parts.scheme == "http"
    assert parts.host == "example.com"
    assert parts.port == 80
    assert parts.path == "/"
    assert parts.query is None
    assert parse_url("https://example.com/x").port == 443


def test_parse_url_none():
    assert parse_url(None).error == "URL is null"


def test_url_encode_pins_space():
    assert url_encode("a b") == "a%20b"


@pytest.mark.parametrize("text", ["hello world", "a&b=c/d?e", "-_.~", "ünï ✓", ""])
def test_url_encode_round_trip(text):
    encoded = url_encode(text)
    assert re.fullmatch(r"[A-Za-z0-9\-_.~%]*", encoded)
    assert url_decode(encoded) == text


def test_url_encode_keeps_unreserved():
    assert url_encode("AZaz09-_.~") == "AZaz09-_.~"


def test_url_decode_leaves_bad_escapes():
    assert url_decode("%zz") == "%zz"
    assert url_decode("ab%4") == "ab%4"


def test_url_decode_plus_is_space():
    assert url_decode("a+b") == url_decode("a%20b")


def test_http_get_against_local_server():
    reply = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nhi there"
    with serve(reply) as (port, received):
        response = http_get(f"http://127.0.0.1:{port}/x?y=1")
    assert response.error is None
    assert response.status == 200
    assert response.body == "hi there"
    assert response.headers == "HTTP/1.1 200 OK\r\nContent-Type: text/plain"
    assert received[0].startswith(b"GET /x HTTP/1.1\r\nHost: 127.0.0.1\r\n")


def test_http_post_sends_body():
    reply = b"HTTP/1.1 201 Created\r\n\r\n"
    with serve(reply) as (port, received):
        response = http_post(f"http://127.0.0.1:{port}/items", "payload")
    assert response.status == 201
    assert response.body == ""
    assert received[0].startswith(b"POST /items HTTP/1.1\r\n")
    assert received[0].endswith(b"\r\n\r\npayload")


@pytest.mark.parametrize(
    "call, method",
    [
        (lambda url: http_put(url, "d"), b"PUT"),
        (lambda url: http_patch(url, "d"), b"PATCH"),
        (lambda url: http_delete(url), b"DELETE"),
    ],
)
def test_other_methods(call, method):
    with serve(b"HTTP/1.1 200 OK\r\n\r\nok") as (port, received):
        response = call(f"http://127.0.0.1:{port}/r")
    assert response.body == "ok"
    assert received[0].startswith(method + b" /r HTTP/1.1")


def test_custom_headers_are_sent():
    with serve(b"HTTP/1.1 200 OK\r\n\r\ndone") as (port, received):
        response = http_get(f"http://127.0.0.1:{port}/", {"X-Test": "yes"})
    assert response.status == 200
    assert response.body == "done"
    assert b"X-Test: yes\r\n" in received[0]


def test_no_response_received():
    with serve(b"") as (port, _):
        response = perform_http_request("GET", f"http://127.0.0.1:{port}/", "", None)
    assert response.error == "No response received"
    assert response.body is None


def test_invalid_response_format():
    with serve(b"garbage") as (port, _):
        response = http_get(f"http://127.0.0.1:{port}/")
    assert response.error == "Invalid response format"


def test_connect_failure():
    response = http_get(f"http://127.0.0.1:{closed_port()}/")
    assert response.error == "Failed to connect to server"
    assert not response.ok


def test_default_response_is_empty():
    assert HttpResponse() == HttpResponse(status=0, body=None, headers=None, error=None)