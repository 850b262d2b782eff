"""Incremental HTTP/1.x request and response parsing, and response serialization."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .cookie import Cookie, CookieJar
from .http_defs import Code, HttpError, Method, Version, code_string
from .http_header import ContentLength, Encoding, TransferEncoding
from .http_headers import Collection, Raw, Registry, default_registry
from .stream import StreamCursor, match_raw, match_until

CRLF = "\r\n"
DEFAULT_MAX_REQUEST_SIZE = 4096

_METHODS = {method.value: method for method in Method}
_STRTOL = re.compile(r"[ \t\n\r\f\v]*[+-]?[0-9]+")
_HEX = re.compile(r"[ \t\n\r\f\v]*[+-]?(?:0[xX])?[0-9a-fA-F]+")


class State(enum.Enum):
    """The outcome of one parsing attempt."""

    AGAIN = "again"
    NEXT = "next"
    DONE = "done"


class Query:
    """The query parameters of a URI; the first value given for a name wins."""

    def __init__(self, params: Optional[Iterable[Tuple[str, str]]] = None):
        self.params: Dict[str, str] = {}
        for name, value in params or ():
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        self.params.setdefault(name, value)

    def get(self, name: str) -> Optional[str]:
        return self.params.get(name)

    def has(self, name: str) -> bool:
        return name in self.params

    def as_str(self) -> str:
        """The parameters as ``?a=1&b=2``, or an empty string if there are none."""
        if not self.params:
            return ""
        return "?" + "&".join(f"{name}={value}" for name, value in self.params.items())

    def __len__(self) -> int:
        return len(self.params)


@dataclass
class Message:
    """What requests and responses have in common."""

    version: Version = Version.HTTP11
    code: Union[Code, int, None] = None
    body: bytes = b""
    cookies: CookieJar = field(default_factory=CookieJar)
    headers: Collection = field(default_factory=Collection)


@dataclass
class Request(Message):
    method: Optional[Method] = None
    resource: str = ""
    query: Query = field(default_factory=Query)


@dataclass
class Response(Message):
    pass


def _bad_request(message: str, code: Code = Code.BAD_REQUEST):
    raise HttpError(code, message)


class _ChunkResult(enum.Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"
    FINAL = "final"


def _chunk_size(text: str) -> int:
    if not text:
        return 0
    if _HEX.fullmatch(text) is None:
        raise ValueError("Invalid chunk size")
    size = int(text.strip(), 16)
    if size < 0:
        raise ValueError("Invalid chunk size")
    return size


class _Chunk:
    """Progress through one chunk of a chunked body."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.size: Optional[int] = None
        self.left = 0

    def parse(self, cursor: StreamCursor, message: Message) -> _ChunkResult:
        if self.size is None:
            start = cursor.position
            while not cursor.eol():
                if not cursor.advance(1):
                    cursor.position = start
                    return _ChunkResult.INCOMPLETE
            size = _chunk_size(cursor.text_from(start))
            if not cursor.advance(2):
                cursor.position = start
                return _ChunkResult.INCOMPLETE
            self.size = self.left = size

        if self.size == 0:
            return _ChunkResult.FINAL

        if self.left > 0:
            taken = min(self.left, cursor.remaining())
            start = cursor.position
            cursor.advance(taken)
            message.body += cursor.text_from(start).encode("latin-1")
            self.left -= taken
            if self.left > 0:
                return _ChunkResult.INCOMPLETE

        if not cursor.advance(2):
            return _ChunkResult.INCOMPLETE
        return _ChunkResult.COMPLETE


def _apply_header(message: Message, registry: Registry, name: str, value: str) -> None:
    if name == "Cookie":
        message.cookies.remove_all_cookies()
        message.cookies.add_from_raw(value)
    elif name == "Set-Cookie":
        message.cookies.add(Cookie.from_string(value))
    elif registry.is_registered(name):
        header = registry.make_header(name)
        header.parse(value)
        message.headers.add(header)
    message.headers.add_raw(Raw(name, value))


class _Parser:
    """Runs the parsing steps over a growing input buffer."""

    def __init__(self, max_size: int = DEFAULT_MAX_REQUEST_SIZE):
        self.max_size = max_size
        self.registry: Registry = default_registry()
        self.cursor = StreamCursor("")
        self._steps: List[Callable[[StreamCursor], State]] = [
            self._first_line, self._headers, self._body,
        ]
        self.reset()

    def _new_message(self) -> Message:
        raise NotImplementedError

    def _first_line(self, cursor: StreamCursor) -> State:
        raise NotImplementedError

    def feed(self, data: Union[str, bytes]) -> None:
        """Append data; raise HttpError (413) if the buffer would grow too large."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if len(self.cursor.data) + len(data) > self.max_size:
            raise HttpError(Code.REQUEST_ENTITY_TOO_LARGE,
                            "Request exceeded maximum buffer size")
        self.cursor.data += data.decode("latin-1")

    def parse(self) -> State:
        """Parse as far as the buffer allows: AGAIN if more data is needed, else DONE."""
        while True:
            state = self._steps[self.current_step](self.cursor)
            if state is not State.NEXT:
                return state
            self.current_step += 1

    def reset(self) -> None:
        self.cursor.data = ""
        self.cursor.reset()
        self.current_step = 0
        self.message = self._new_message()
        self._bytes_read = 0
        self._chunk = _Chunk()

    def _headers(self, cursor: StreamCursor) -> State:
        start = cursor.position
        pending: List[Tuple[str, str]] = []
        state = self._read_headers(cursor, pending)
        if state is State.AGAIN:
            cursor.position = start
            return state
        for name, value in pending:
            _apply_header(self.message, self.registry, name, value)
        return state

    @staticmethod
    def _read_headers(cursor: StreamCursor, pending: List[Tuple[str, str]]) -> State:
        while not cursor.eol():
            name_start = cursor.position
            while cursor.current() != ":":
                if not cursor.advance(1):
                    return State.AGAIN
            if not cursor.advance(1):
                return State.AGAIN
            name = cursor.data[name_start:cursor.position - 1]

            while cursor.current() == " ":
                if not cursor.advance(1):
                    return State.AGAIN

            value_start = cursor.position
            while not cursor.eol():
                if not cursor.advance(1):
                    return State.AGAIN
            pending.append((name, cursor.text_from(value_start)))

            if not cursor.advance(2):
                return State.AGAIN

        if not cursor.advance(2):
            return State.AGAIN
        return State.NEXT

    def _body(self, cursor: StreamCursor) -> State:
        headers = self.message.headers
        length = headers.try_get(ContentLength)
        encoding = headers.try_get(TransferEncoding)
        if length is not None and encoding is not None:
            _bad_request("Got mutually exclusive ContentLength and TransferEncoding header")
        if length is not None:
            return self._content_length_body(cursor, length.value)
        if encoding is not None:
            return self._chunked_body(cursor, encoding.encoding)
        return State.DONE

    def _content_length_body(self, cursor: StreamCursor, length: int) -> State:
        wanted = length - self._bytes_read
        taken = min(wanted, cursor.remaining())
        start = cursor.position
        cursor.advance(taken)
        self.message.body += cursor.text_from(start).encode("latin-1")
        if taken < wanted:
            self._bytes_read += taken
            return State.AGAIN
        self._bytes_read = 0
        return State.DONE

    def _chunked_body(self, cursor: StreamCursor, encoding: Encoding) -> State:
        if encoding is not Encoding.CHUNKED:
            _bad_request("Unsupported Transfer-Encoding", Code.NOT_IMPLEMENTED)
        try:
            while True:
                result = self._chunk.parse(cursor, self.message)
                if result is _ChunkResult.FINAL:
                    return State.DONE
                if result is _ChunkResult.INCOMPLETE:
                    return State.AGAIN
                self._chunk.reset()
                if cursor.eof():
                    return State.AGAIN
        except ValueError as exc:
            raise HttpError(Code.BAD_REQUEST, str(exc)) from exc


class RequestParser(_Parser):
    """Parses an HTTP request fed to it piece by piece."""

    def __init__(self, max_size: int = DEFAULT_MAX_REQUEST_SIZE):
        super().__init__(max_size)

    @property
    def request(self) -> Request:
        return self.message

    def _new_message(self) -> Request:
        return Request()

    def feed(self, data: Union[str, bytes]) -> None:
        super().feed(data)

    def parse(self) -> State:
        return super().parse()

    def reset(self) -> None:
        super().reset()

    def _first_line(self, cursor: StreamCursor) -> State:
        start = cursor.position
        state = self._read_request_line(cursor)
        if state is State.AGAIN:
            cursor.position = start
        return state

    def _read_request_line(self, cursor: StreamCursor) -> State:
        method_start = cursor.position
        if not match_until(" ", cursor):
            return State.AGAIN
        method = _METHODS.get(cursor.text_from(method_start))
        if method is None:
            _bad_request("Unknown HTTP request method")
        if not cursor.advance(1):
            return State.AGAIN

        resource_start = cursor.position
        while cursor.current() not in ("?", " "):
            if not cursor.advance(1):
                return State.AGAIN
        resource = cursor.text_from(resource_start)

        query = Query()
        if cursor.current() == "?":
            if not cursor.advance(1):
                return State.AGAIN
            while cursor.current() != " ":
                key_start = cursor.position
                if not match_until("= &", cursor):
                    return State.AGAIN
                key = cursor.text_from(key_start)
                current = cursor.current()
                if current == " ":
                    query.add(key, "")
                elif current == "&":
                    query.add(key, "")
                    if not cursor.advance(1):
                        return State.AGAIN
                else:
                    if not cursor.advance(1):
                        return State.AGAIN
                    value_start = cursor.position
                    if not match_until(" &", cursor):
                        return State.AGAIN
                    query.add(key, cursor.text_from(value_start))
                    if cursor.current() == "&" and not cursor.advance(1):
                        return State.AGAIN

        if not cursor.advance(1):
            return State.AGAIN

        version_start = cursor.position
        while not cursor.eol():
            if not cursor.advance(1):
                return State.AGAIN
        text = cursor.text_from(version_start)
        if Version.HTTP10.value.startswith(text):
            version = Version.HTTP10
        elif Version.HTTP11.value.startswith(text):
            version = Version.HTTP11
        else:
            _bad_request("Encountered invalid HTTP version")

        if not cursor.advance(2):
            return State.AGAIN

        request = self.request
        request.method = method
        request.resource = resource
        request.query = query
        request.version = version
        return State.NEXT


class ResponseParser(_Parser):
    """Parses an HTTP response fed to it piece by piece."""

    def __init__(self, max_size: int = DEFAULT_MAX_REQUEST_SIZE):
        super().__init__(max_size)

    @property
    def response(self) -> Response:
        return self.message

    def _new_message(self) -> Response:
        return Response()

    def feed(self, data: Union[str, bytes]) -> None:
        super().feed(data)

    def parse(self) -> State:
        return super().parse()

    def reset(self) -> None:
        super().reset()

    def _first_line(self, cursor: StreamCursor) -> State:
        start = cursor.position
        state = self._read_status_line(cursor)
        if state is State.AGAIN:
            cursor.position = start
        return state

    def _read_status_line(self, cursor: StreamCursor) -> State:
        if match_raw(Version.HTTP11.value, cursor):
            version = Version.HTTP11
        elif match_raw(Version.HTTP10.value, cursor):
            version = Version.HTTP10
        else:
            _bad_request("Encountered invalid HTTP version")

        current = cursor.current()
        if current is not None and current != " ":
            _bad_request("Expected SPACE after http version")
        if not cursor.advance(1):
            return State.AGAIN

        code_start = cursor.position
        if not match_until(" ", cursor):
            return State.AGAIN
        text = cursor.text_from(code_start)
        if not text:
            number = 0
        elif _STRTOL.fullmatch(text) is not None:
            number = int(text)
        else:
            _bad_request("Failed to parsed return code")
        try:
            code: Union[Code, int] = Code(number)
        except ValueError:
            code = number

        if not cursor.advance(1):
            return State.AGAIN
        while not cursor.eol() and not cursor.eof():
            cursor.advance(1)
        if not cursor.advance(2):
            return State.AGAIN

        self.response.version = version
        self.response.code = code
        return State.NEXT


def _status_line(version: Version, code: Union[Code, int]) -> str:
    return f"{version.value} {int(code)} {code_string(code)}{CRLF}"


def _header_lines(headers: Optional[Collection]) -> str:
    if headers is None:
        return ""
    return "".join(f"{header.name}: {header.write()}{CRLF}" for header in headers.list())


def _cookie_lines(cookies: Optional[Iterable[Cookie]]) -> str:
    if cookies is None:
        return ""
    return "".join(f"Set-Cookie: {cookie}{CRLF}" for cookie in cookies)


def _as_bytes(data: Union[str, bytes]) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def serialize_response(version: Version, code: Union[Code, int],
                       headers: Optional[Collection], cookies: Optional[Iterable[Cookie]],
                       body: Union[str, bytes] = b"") -> bytes:
    """A complete response with a Content-Length header."""
    payload = _as_bytes(body)
    head = (
        _status_line(version, code)
        + _header_lines(headers)
        + _cookie_lines(cookies)
        + f"{ContentLength.NAME}: {len(payload)}{CRLF}"
        + CRLF
    )
    return head.encode("utf-8") + payload


def serialize_stream_head(version: Version, code: Union[Code, int],
                          headers: Optional[Collection],
                          cookies: Optional[Iterable[Cookie]]) -> bytes:
    """The head of a response whose body follows in chunks."""
    head = (
        _status_line(version, code)
        + _cookie_lines(cookies)
        + _header_lines(headers)
        + f"{TransferEncoding.NAME}: {Encoding.CHUNKED.value}{CRLF}"
        + CRLF
    )
    return head.encode("utf-8")


def serialize_chunk(data: Union[str, bytes]) -> bytes:
    """One chunk of a chunked body."""
    payload = _as_bytes(data)
    return f"{len(payload):x}{CRLF}".encode("ascii") + payload + CRLF.encode("ascii")


def serialize_stream_end() -> bytes:
    """The last, empty chunk that ends a chunked body."""
    return f"0{CRLF}{CRLF}".encode("ascii")