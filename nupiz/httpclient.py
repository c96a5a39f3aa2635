"""A small HTTP/1.1 client over plain sockets, with URL helpers."""

from __future__ import annotations

import re
import socket
from dataclasses import dataclass
from typing import Mapping

_UNRESERVED = "-_.~"
_HEX_PREFIX = re.compile(rb"[0-9A-Fa-f]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class HttpResponse:
    """Outcome of a request: either a status with headers and body, or an error."""

    status: int = 0
    body: str | None = None
    headers: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class UrlComponents:
    """The parts of a URL."""

    scheme: str | None = None
    host: str | None = None
    port: int = 0
    path: str | None = None
    query: str | None = None
    error: str | None = None


def _stoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"invalid port: {text!r}")
    return int(match.group(1))


def url_encode(text: str) -> str:
    """Percent-encode every byte except ASCII letters, digits and ``-_.~``."""
    out = []
    for byte in text.encode("utf-8"):
        ch = chr(byte)
        if byte < 128 and (ch.isalnum() or ch in _UNRESERVED):
            out.append(ch)
        else:
            out.append(f"%{byte:02X}")
    return "".join(out)


def url_decode(text: str) -> str:
    """Decode ``%XX`` escapes and turn ``+`` into a space."""
    data = text.encode("utf-8")
    out = bytearray()
    i = 0
    while i < len(data):
        byte = data[i]
        if byte == ord("%") and i + 2 < len(data):
            match = _HEX_PREFIX.match(data[i + 1:i + 3])
            if match is not None:
                out.append(int(match.group(0), 16))
                i += 3
                continue
            out.append(byte)
        elif byte == ord("+"):
            out.append(ord(" "))
        else:
            out.append(byte)
        i += 1
    return out.decode("utf-8", "replace")


def parse_url(url: str | None) -> UrlComponents:
    """Split a URL into scheme, host, port, path and query."""
    components = UrlComponents()
    if url is None:
        components.error = "URL is null"
        return components

    scheme_end = url.find("://")
    if scheme_end != -1:
        components.scheme = url[:scheme_end]
        host_start = scheme_end + 3
    else:
        components.scheme = "http"
        host_start = 0

    host_end = url.find("/", host_start)
    if host_end == -1:
        host_end = len(url)

    port_start = url.find(":", host_start)
    if port_start != -1 and port_start < host_end:
        components.host = url[host_start:port_start]
        components.port = _stoi(url[port_start + 1:host_end])
    else:
        components.host = url[host_start:host_end]
        components.port = 443 if components.scheme == "https" else 80

    if host_end < len(url):
        query_start = url.find("?", host_end)
        if query_start != -1:
            components.path = url[host_end:query_start]
            components.query = url[query_start + 1:]
        else:
            components.path = url[host_end:]
    else:
        components.path = "/"
    return components


def extract_host(url: str) -> str:
    """Return the host of a URL, or an empty string if it has no scheme."""
    scheme_end = url.find("://")
    if scheme_end == -1:
        return ""
    host_start = scheme_end + 3
    host_end = url.find("/", host_start)
    if host_end == -1:
        host_end = len(url)
    port_start = url.find(":", host_start)
    if port_start != -1 and port_start < host_end:
        host_end = port_start
    return url[host_start:host_end]


def extract_path(url: str) -> str:
    """Return the path of a URL without its query, defaulting to ``/``."""
    scheme_end = url.find("://")
    if scheme_end == -1:
        return "/"
    path_start = url.find("/", scheme_end + 3)
    if path_start == -1:
        return "/"
    query_start = url.find("?", path_start)
    if query_start == -1:
        return url[path_start:]
    return url[path_start:query_start]


def extract_port(url: str) -> int:
    """Return the explicit port of a URL, or 80."""
    scheme_end = url.find("://")
    if scheme_end == -1:
        return 80
    host_start = scheme_end + 3
    port_start = url.find(":", host_start)
    if port_start == -1:
        return 80
    path_start = url.find("/", host_start)
    if path_start == -1:
        path_start = len(url)
    if port_start >= path_start:
        return 80
    return _stoi(url[port_start + 1:path_start])


def is_https(url: str) -> bool:
    return url[:5] == "https"


def get_default_port(scheme: str) -> str:
    return "443" if scheme == "https" else "80"


def build_http_request(
    method: str, url: str, data: str, headers: Mapping[str, str]
) -> str:
    """Build the text of an HTTP/1.1 request; headers go out sorted by name."""
    path = extract_path(url) or "/"
    lines = [f"{method} {path} HTTP/1.1", f"Host: {extract_host(url)}"]
    lines.extend(f"{name}: {value}" for name, value in sorted(headers.items()))
    if data:
        lines.append(f"Content-Length: {len(data.encode('utf-8'))}")
    return "\r\n".join(lines) + "\r\n\r\n" + data


def _receive_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        try:
            chunk = sock.recv(4096)
        except OSError:
            break
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def perform_http_request(
    method: str, url: str, data: str, headers: Mapping[str, str] | None
) -> HttpResponse:
    """Send one request and read the reply until the server closes."""
    response = HttpResponse()
    host = extract_host(url)
    port = extract_port(url)

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        response.error = "Failed to create socket"
        return response

    with sock:
        try:
            address = socket.gethostbyname(host)
        except OSError:
            response.error = "Failed to resolve hostname"
            return response
        try:
            sock.connect((address, port))
        except OSError:
            response.error = "Failed to connect to server"
            return response
        request = build_http_request(method, url, data, headers or {})
        try:
            sock.sendall(request.encode("utf-8"))
        except OSError:
            response.error = "Failed to send request"
            return response
        raw = _receive_all(sock)

    if not raw:
        response.error = "No response received"
        return response

    text = raw.decode("utf-8", "replace")
    header_end = text.find("\r\n\r\n")
    if header_end == -1:
        response.error = "Invalid response format"
        return response

    head = text[:header_end]
    marker = "HTTP/1.1 "
    status_start = head.find(marker)
    if status_start != -1:
        status_start += len(marker)
        if head.find(" ", status_start) != -1:
            response.status = _stoi(head[status_start:])

    response.headers = head
    response.body = text[header_end + 4:]
    return response


def http_get(url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
    return perform_http_request("GET", url, "", headers)


def http_post(
    url: str, data: str | None, headers: Mapping[str, str] | None = None
) -> HttpResponse:
    return perform_http_request("POST", url, data or "", headers)


def http_put(
    url: str, data: str | None, headers: Mapping[str, str] | None = None
) -> HttpResponse:
    return perform_http_request("PUT", url, data or "", headers)


def http_delete(url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
    return perform_http_request("DELETE", url, "", headers)


def http_patch(
    url: str, data: str | None, headers: Mapping[str, str] | None = None
) -> HttpResponse:
    return perform_http_request("PATCH", url, data or "", headers)