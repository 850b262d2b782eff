"""HTTP/1.1 parsing and serialization, headers, MIME types, cookies, addresses and REST descriptions."""

__version__ = "0.1.0"

__all__ = [
    "cookie",
    "cpuset",
    "description",
    "http_defs",
    "http_header",
    "http_headers",
    "mime",
    "net",
    "parser",
    "peer",
    "stream",
]