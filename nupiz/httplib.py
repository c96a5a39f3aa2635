"""The ``http`` library: fetching URLs and working with URL text."""

from __future__ import annotations

import re
import socket

from nupiz.extension import NativeError, Runtime, expect_args
from nupiz.httpclient import http_post, url_decode, url_encode

_USER_AGENT = "NupizLang/1.0"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _split_url(url: str) -> tuple[str, int, str]:
    """Return host, port and path (with query) of a URL."""
    port = 80
    scheme_end = url.find("://")
    if scheme_end != -1:
        if url.startswith("https"):
            port = 443
        url = url[scheme_end + 3:]

    path_start = url.find("/")
    port_start = url.find(":")
    if port_start != -1 and (path_start == -1 or port_start < path_start):
        host = url[:port_start]
        port = _atoi(url[port_start + 1:])
    else:
        host = url if path_start == -1 else url[:path_start]
    rest = "" if path_start == -1 else url[path_start:]

    path = rest if rest.startswith("/") else "/"
    return host, port, path


def fetch(url: str) -> str:
    """GET a URL and return the body, or an error message on failure."""
    host, port, path = _split_url(url)

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        return "Failed to create socket"

    with sock:
        try:
            address = socket.gethostbyname(host)
        except OSError:
            return "Failed to resolve hostname"
        try:
            sock.connect((address, port))
        except OSError:
            return "Failed to connect to server"
        request = (
            f"GET {path} HTTP/1.1\r\n"
            f"Host: {host}\r\n"
            f"User-Agent: {_USER_AGENT}\r\n"
            "Connection: close\r\n"
            "\r\n"
        )
        try:
            sock.sendall(request.encode("utf-8"))
        except OSError:
            return "Failed to send request"

        chunks = []
        while True:
            try:
                chunk = sock.recv(4096)
            except OSError:
                break
            if not chunk:
                break
            chunks.append(chunk)

    if not chunks:
        return "No response received"

    response = b"".join(chunks).decode("utf-8", "replace")
    _, separator, body = response.partition("\r\n\r\n")
    return body if separator else response


def http_get_native(runtime: Runtime, args: list) -> str:
    expect_args(args, 1)
    if not isinstance(args[0], str):
        raise NativeError("Expected string URL as first argument for http.get.")
    return fetch(args[0])


def http_post_native(runtime: Runtime, args: list) -> str:
    """POST a string to a URL; return the body or an error message."""
    expect_args(args, 2)
    url, data = args
    if not isinstance(url, str):
        raise NativeError("Expected string URL as first argument for http.post.")
    if not isinstance(data, str):
        raise NativeError("Expected string data as second argument for http.post.")
    response = http_post(url, data)
    if response.error is not None:
        return response.error
    return response.body or ""


def encode_url_native(runtime: Runtime, args: list) -> str:
    expect_args(args, 1)
    if not isinstance(args[0], str):
        raise NativeError("Expected string as argument for encodeUrl.")
    return url_encode(args[0])


def decode_url_native(runtime: Runtime, args: list) -> str:
    expect_args(args, 1)
    if not isinstance(args[0], str):
        raise NativeError("Expected string as argument for decodeUrl.")
    return url_decode(args[0])


def parse_url_native(runtime: Runtime, args: list) -> str:
    """Return the host part of a URL."""
    expect_args(args, 1)
    if not isinstance(args[0], str):
        raise NativeError("Expected string as argument for parseUrl.")
    host, _, _ = _split_url(args[0])
    return host


_FUNCTIONS = {
    "get": http_get_native,
    "post": http_post_native,
    "encodeUrl": encode_url_native,
    "decodeUrl": decode_url_native,
    "parseUrl": parse_url_native,
}


def import_http_lib(runtime: Runtime, lib: str) -> bool:
    """Initializer of the ``http`` library."""
    for name, func in _FUNCTIONS.items():
        runtime.define_function(lib, name, func)
    return True