"""Text cursor, matching helpers and buffers used by the HTTP parsers."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

CR = "\r"
LF = "\n"

DEFAULT_MAX_RESPONSE_SIZE = 4096

_DOUBLE = re.compile(
    r"[ \t\n\r\f\v]*[+-]?(?:"
    r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class CaseSensitivity(enum.Enum):
    """How characters are compared while matching."""

    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"


class StreamCursor:
    """A read position over a piece of text."""

    EOF = None

    def __init__(self, data: str = ""):
        self.data = data
        self.position = 0

    def advance(self, count: int) -> bool:
        """Move forward by ``count`` characters; refuse if not that many remain."""
        if count > self.remaining():
            return False
        self.position += count
        return True

    def eol(self) -> bool:
        return self.current() == CR and self.next() == LF

    def eof(self) -> bool:
        return self.remaining() == 0

    def next(self) -> Optional[str]:
        """The character after the current one, or ``EOF``."""
        if self.remaining() < 2:
            return self.EOF
        return self.data[self.position + 1]

    def current(self) -> Optional[str]:
        if self.eof():
            return self.EOF
        return self.data[self.position]

    def remaining(self) -> int:
        return len(self.data) - self.position

    def text_from(self, start: int) -> str:
        """The text between ``start`` and the current position."""
        return self.data[start:self.position]

    def reset(self) -> None:
        self.position = 0


def match_raw(data: str, cursor: StreamCursor) -> bool:
    """Consume ``data`` if the cursor is exactly at it."""
    if cursor.remaining() < len(data):
        return False
    if cursor.data.startswith(data, cursor.position):
        cursor.advance(len(data))
        return True
    return False


def match_string(
    text: str,
    cursor: StreamCursor,
    case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
) -> bool:
    """Consume ``text`` if it is next in the cursor."""
    if cursor.remaining() < len(text):
        return False
    if case_sensitivity is CaseSensitivity.SENSITIVE:
        return match_raw(text, cursor)
    candidate = cursor.data[cursor.position:cursor.position + len(text)]
    if candidate.lower() != text.lower():
        return False
    cursor.advance(len(text))
    return True


def match_literal(
    char: str,
    cursor: StreamCursor,
    case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
) -> bool:
    """Consume a single character if it is the current one."""
    if cursor.eof():
        return False
    current = cursor.current()
    if case_sensitivity is CaseSensitivity.INSENSITIVE:
        char, current = char.lower(), current.lower()
    if char == current:
        cursor.advance(1)
        return True
    return False


def match_until(
    chars: Union[str, Iterable[str]],
    cursor: StreamCursor,
    case_sensitivity: CaseSensitivity = CaseSensitivity.SENSITIVE,
) -> bool:
    """Advance until one of ``chars`` is current; False if the end is reached."""
    if cursor.eof():
        return False
    insensitive = case_sensitivity is CaseSensitivity.INSENSITIVE
    targets = {c.lower() if insensitive else c for c in chars}
    while not cursor.eof():
        current = cursor.current()
        if (current.lower() if insensitive else current) in targets:
            return True
        cursor.advance(1)
    return False


def match_double(cursor: StreamCursor) -> Optional[float]:
    """Consume a floating point number and return it, or None if there is none."""
    match = _DOUBLE.match(cursor.data, cursor.position)
    if match is None:
        return None
    value = float(match.group(0))
    cursor.advance(match.end() - cursor.position)
    return value


def skip_whitespaces(cursor: StreamCursor) -> None:
    while not cursor.eof() and cursor.current() in (" ", "\t"):
        cursor.advance(1)


@dataclass(frozen=True)
class RawBuffer:
    """A chunk of outgoing data, possibly the tail of a larger one."""

    data: Union[str, bytes] = ""
    length: Optional[int] = None
    is_detached: bool = False

    def __post_init__(self):
        if self.length is None:
            object.__setattr__(self, "length", len(self.data))

    def detach(self, from_index: int) -> "RawBuffer":
        """A new buffer holding the data from ``from_index`` on."""
        if not self.data:
            return RawBuffer()
        if self.length < from_index:
            raise ValueError("Trying to detach buffer from an index bigger than length.")
        new_length = self.length - from_index
        return RawBuffer(self.data[from_index:from_index + new_length], new_length, True)


class FileBuffer:
    """A file to be sent, with its size taken when it is opened."""

    def __init__(self, file_name):
        if not file_name:
            raise ValueError("Empty fileName")
        with open(file_name, "rb") as handle:
            self.size = os.fstat(handle.fileno()).st_size
        self.file_name = os.fspath(file_name)


class DynamicStreamBuf:
    """A growing output buffer with a hard size limit."""

    def __init__(self, size: int = 128, max_size: int = DEFAULT_MAX_RESPONSE_SIZE):
        self.max_size = max_size
        self.capacity = min(size, max_size)
        self._data = bytearray()

    def write(self, data: Union[str, bytes]) -> int:
        """Append data; raise BufferError if it would exceed ``max_size``."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        needed = len(self._data) + len(data)
        if needed > self.max_size:
            raise BufferError("Response exceeded buffer size")
        while self.capacity < needed:
            self.capacity = min(max(self.capacity, 1) * 2, self.max_size)
        self._data += data
        return len(data)

    def buffer(self) -> RawBuffer:
        return RawBuffer(bytes(self._data))

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)