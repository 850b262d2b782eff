"""Typed HTTP headers: parsing header values and writing them back."""

from __future__ import annotations

import abc
import enum
import re
from typing import Iterable, List, Optional, Union

from .http_defs import CacheDirective, Directive, FullDate, Method
from .mime import MediaType
from .net import HTTP_STANDARD_PORT, AddressParser, Port
from .stream import StreamCursor, match_raw, match_string

_STRTOL = re.compile(r"[ \t\n\r\f\v]*[+-]?[0-9]+")
_STOULL = re.compile(r"[ \t\n\r\f\v]*([+-]?)([0-9]+)")
_UINT64 = 2 ** 64


class Encoding(enum.Enum):
    GZIP = "gzip"
    COMPRESS = "compress"
    DEFLATE = "deflate"
    IDENTITY = "identity"
    CHUNKED = "chunked"
    UNKNOWN = "unknown"


def encoding_string(encoding: Encoding) -> str:
    return encoding.value


class ConnectionControl(enum.Enum):
    CLOSE = "Close"
    KEEP_ALIVE = "Keep-Alive"
    EXT = "Ext"


class Expectation(enum.Enum):
    CONTINUE = "100-continue"
    EXT = "ext"


class Header(abc.ABC):
    """A header that knows its name and how to read and write its value."""

    NAME: str = ""

    @property
    def name(self) -> str:
        return self.NAME

    @abc.abstractmethod
    def parse(self, data: str) -> None:
        """Read the header's value from ``data``."""

    @abc.abstractmethod
    def write(self) -> str:
        """The header's value as it goes on the wire."""

    def __str__(self) -> str:
        return self.write()


class Allow(Header):
    NAME = "Allow"

    def __init__(self, methods: Iterable[Method] = ()):
        self.methods: List[Method] = list(methods)

    def parse(self, data: str) -> None:
        # Incoming Allow values are accepted but not interpreted.
        return None

    def write(self) -> str:
        return ", ".join(method.value for method in self.methods)

    def add_method(self, method: Method) -> None:
        self.methods.append(method)

    def add_methods(self, methods: Iterable[Method]) -> None:
        self.methods.extend(methods)


_TRIVIAL_DIRECTIVES = (
    Directive.NO_CACHE,
    Directive.NO_STORE,
    Directive.NO_TRANSFORM,
    Directive.ONLY_IF_CACHED,
    Directive.PUBLIC,
    Directive.PRIVATE,
    Directive.MUST_REVALIDATE,
    Directive.PROXY_REVALIDATE,
)

_TIMED_DIRECTIVES = (
    Directive.MAX_AGE,
    Directive.MAX_STALE,
    Directive.MIN_FRESH,
    Directive.S_MAX_AGE,
)


class CacheControl(Header):
    NAME = "Cache-Control"

    def __init__(self, directive: Optional[CacheDirective] = None):
        self.directives: List[CacheDirective] = []
        if directive is not None:
            self.directives.append(directive)

    def parse(self, data: str) -> None:
        """Read a comma separated list of directives; raise ValueError if malformed."""
        cursor = StreamCursor(data)
        while True:
            trivial = next(
                (d for d in _TRIVIAL_DIRECTIVES if match_raw(d.value, cursor)), None
            )
            if trivial is not None:
                self.directives.append(CacheDirective(trivial))
            else:
                for timed in _TIMED_DIRECTIVES:
                    if not match_raw(timed.value, cursor):
                        continue
                    if not cursor.advance(1):
                        raise ValueError("Invalid caching directive, missing delta-seconds")
                    seconds = 0
                    number = _STRTOL.match(cursor.data, cursor.position)
                    if number is not None:
                        seconds = int(number.group(0))
                        cursor.advance(number.end() - cursor.position)
                    if not cursor.eof() and cursor.current() != ",":
                        raise ValueError(
                            "Invalid caching directive, malformated delta-seconds"
                        )
                    self.directives.append(CacheDirective(timed, seconds))
                    break

            if not cursor.eof():
                if cursor.current() != ",":
                    raise ValueError("Invalid caching directive, expected a comma")
                while not cursor.eof() and cursor.current() in (",", " "):
                    cursor.advance(1)

            if cursor.eof():
                break

    def write(self) -> str:
        parts = []
        for directive in self.directives:
            text = directive.directive.value
            if directive.has_delta():
                seconds = int(directive.delta().total_seconds())
                if seconds > 0:
                    text += f"={seconds}"
            parts.append(text)
        return ", ".join(parts)

    def add_directive(self, directive: CacheDirective) -> None:
        self.directives.append(directive)

    def add_directives(self, directives: Iterable[CacheDirective]) -> None:
        self.directives.extend(directives)


class Connection(Header):
    NAME = "Connection"

    def __init__(self, control: ConnectionControl = ConnectionControl.KEEP_ALIVE):
        self.control = control

    def parse(self, data: str) -> None:
        cursor = StreamCursor(data)
        if match_string("close", cursor):
            self.control = ConnectionControl.CLOSE
        elif match_string("keep-alive", cursor):
            self.control = ConnectionControl.KEEP_ALIVE
        else:
            self.control = ConnectionControl.EXT

    def write(self) -> str:
        return self.control.value


class ContentLength(Header):
    NAME = "Content-Length"

    def __init__(self, value: int = 0):
        self.value = value

    def parse(self, data: str) -> None:
        """Read a leading unsigned number; leave the value alone if there is none."""
        match = _STOULL.match(data)
        if match is None:
            return
        value = int(match.group(2))
        if value >= _UINT64:
            raise ValueError("Content-Length out of range")
        if match.group(1) == "-":
            value = (-value) % _UINT64
        self.value = value

    def write(self) -> str:
        return str(self.value)


class _StringHeader(Header):
    """A header whose value is kept as plain text."""

    def __init__(self, value: str = ""):
        self.value = value

    def parse(self, data: str) -> None:
        self.value = data

    def write(self) -> str:
        return self.value


class Authorization(_StringHeader):
    NAME = "Authorization"


class Location(_StringHeader):
    NAME = "Location"


class UserAgent(_StringHeader):
    NAME = "User-Agent"


class AccessControlAllowOrigin(_StringHeader):
    NAME = "Access-Control-Allow-Origin"


class AccessControlAllowHeaders(_StringHeader):
    NAME = "Access-Control-Allow-Headers"


class AccessControlExposeHeaders(_StringHeader):
    NAME = "Access-Control-Expose-Headers"


class AccessControlAllowMethods(_StringHeader):
    NAME = "Access-Control-Allow-Methods"


class Date(Header):
    NAME = "Date"

    def __init__(self, full_date: Optional[FullDate] = None):
        self.full_date = full_date

    def parse(self, data: str) -> None:
        self.full_date = FullDate.from_string(data)

    def write(self) -> str:
        return "" if self.full_date is None else self.full_date.format()


class Expect(Header):
    NAME = "Expect"

    def __init__(self, expectation: Expectation = Expectation.EXT):
        self.expectation = expectation

    def parse(self, data: str) -> None:
        if data == Expectation.CONTINUE.value:
            self.expectation = Expectation.CONTINUE
        else:
            self.expectation = Expectation.EXT

    def write(self) -> str:
        if self.expectation is Expectation.CONTINUE:
            return Expectation.CONTINUE.value
        return ""


class Host(Header):
    NAME = "Host"

    def __init__(self, data: Optional[str] = None):
        self.host = ""
        self.port = Port(0)
        if data is not None:
            self.parse(data)

    def parse(self, data: str) -> None:
        parser = AddressParser(data)
        self.host = parser.raw_host
        if parser.raw_port:
            self.port = Port(parser.raw_port)
        else:
            self.port = Port(HTTP_STANDARD_PORT)

    def write(self) -> str:
        if self.port != 0:
            return f"{self.host}:{self.port}"
        return self.host


class Accept(Header):
    NAME = "Accept"

    def __init__(self):
        self.media_range: List[MediaType] = []

    def parse(self, data: str) -> None:
        """Read a comma separated list of media types."""
        cursor = StreamCursor(data)
        while True:
            start = cursor.position
            while cursor.next() not in (None, ","):
                cursor.advance(1)
            cursor.advance(1)
            self.media_range.append(MediaType.from_string(cursor.text_from(start)))

            if not cursor.eof():
                if not cursor.advance(1):
                    raise ValueError("Ill-formed Accept header")
                if cursor.next() in (None, ",", "\0"):
                    raise ValueError("Ill-formed Accept header")
                while not cursor.eof() and cursor.current() == " ":
                    cursor.advance(1)

            if cursor.eof():
                break

    def write(self) -> str:
        # Accept is only ever read from requests; nothing is written for it.
        return ""


class EncodingHeader(Header):
    """A header whose value names a content or transfer coding."""

    _CANDIDATES = (
        Encoding.GZIP,
        Encoding.DEFLATE,
        Encoding.COMPRESS,
        Encoding.IDENTITY,
        Encoding.CHUNKED,
    )

    def __init__(self, encoding: Encoding = Encoding.IDENTITY):
        self.encoding = encoding

    def parse(self, data: str) -> None:
        lowered = data.lower()
        for candidate in self._CANDIDATES:
            if candidate.value.startswith(lowered):
                self.encoding = candidate
                return
        self.encoding = Encoding.UNKNOWN

    def write(self) -> str:
        return encoding_string(self.encoding)


class ContentEncoding(EncodingHeader):
    NAME = "Content-Encoding"


class TransferEncoding(EncodingHeader):
    NAME = "Transfer-Encoding"


class Server(Header):
    NAME = "Server"

    def __init__(self, tokens: Union[str, Iterable[str]] = ()):
        if isinstance(tokens, str):
            tokens = [tokens]
        self.tokens: List[str] = list(tokens)

    def parse(self, data: str) -> None:
        self.tokens.append(data)

    def write(self) -> str:
        return " ".join(self.tokens)


class ContentType(Header):
    NAME = "Content-Type"

    def __init__(self, mime: Optional[MediaType] = None):
        self.mime = mime if mime is not None else MediaType()

    def parse(self, data: str) -> None:
        self.mime = MediaType.from_string(data)

    def write(self) -> str:
        return str(self.mime)

    def set_mime(self, mime: MediaType) -> None:
        self.mime = mime