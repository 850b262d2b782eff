"""MIME media types: parsing, quality factors and rendering."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .http_defs import Code, HttpError
from .stream import (
    CaseSensitivity,
    StreamCursor,
    match_double,
    match_literal,
    match_raw,
    match_string,
    match_until,
)


class Type(enum.Enum):
    """Top-level media types."""

    NONE = ""
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    APPLICATION = "application"
    MESSAGE = "message"
    MULTIPART = "multipart"


class Subtype(enum.Enum):
    """Media subtypes; VENDOR and EXT keep their raw text on the media type."""

    NONE = ""
    HTML = "html"
    JAVASCRIPT = "javascript"
    CSS = "css"
    PLAIN = "plain"
    JSON = "json"
    XML = "xml"
    XHTML = "xhtml"
    PNG = "png"
    GIF = "gif"
    JPEG = "jpeg"
    BMP = "bmp"
    CSV = "csv"
    FORM_URL_ENCODED = "x-www-form-urlencoded"
    FORM_DATA = "form-data"
    OCTET_STREAM = "octet-stream"
    VENDOR = "vnd"
    EXT = "ext"


class Suffix(enum.Enum):
    """Structured syntax suffixes (the part after '+')."""

    NONE = ""
    JSON = "json"
    BER = "ber"
    DER = "der"
    FAST_INFOSET = "fastinfoset"
    WBXML = "wbxml"
    ZIP = "zip"
    XML = "xml"
    EXT = "ext"


_KNOWN_TYPES = tuple(t for t in Type if t is not Type.NONE)
_KNOWN_SUBTYPES = tuple(
    s for s in Subtype if s not in (Subtype.NONE, Subtype.VENDOR, Subtype.EXT)
)
_KNOWN_SUFFIXES = tuple(s for s in Suffix if s not in (Suffix.NONE, Suffix.EXT))

_KNOWN_EXTENSIONS = {
    "jpg": (Type.IMAGE, Subtype.JPEG),
    "jpeg": (Type.IMAGE, Subtype.JPEG),
    "png": (Type.IMAGE, Subtype.PNG),
    "bmp": (Type.IMAGE, Subtype.BMP),
    "txt": (Type.TEXT, Subtype.PLAIN),
    "md": (Type.TEXT, Subtype.PLAIN),
    "bin": (Type.APPLICATION, Subtype.OCTET_STREAM),
}


@dataclass(frozen=True, order=True)
class Q:
    """A quality factor, stored in hundredths (0 to 100)."""

    value: int

    def __post_init__(self):
        if not 0 <= self.value <= 100:
            raise ValueError("Invalid quality factor")

    @classmethod
    def from_float(cls, value: float) -> "Q":
        return cls(round(value * 100))

    def __str__(self) -> str:
        if self.value == 0:
            return "q=0"
        if self.value == 100:
            return "q=1"
        if self.value % 10 == 0:
            return f"q={self.value / 100:.1f}"
        return f"q={self.value / 100:.2f}"


def _raise(message: str):
    raise HttpError(Code.UNSUPPORTED_MEDIA_TYPE, message)


def _match_enum(members, cursor: StreamCursor):
    for member in members:
        if match_string(member.value, cursor, CaseSensitivity.INSENSITIVE):
            return member
    return None


class MediaType:
    """A media type such as ``application/xhtml+xml; q=0.7; charset=utf-8``."""

    def __init__(self, top: Type = Type.NONE, sub: Subtype = Subtype.NONE,
                 suffix: Suffix = Suffix.NONE):
        self.top = top
        self.sub = sub
        self.suffix = suffix
        self.q: Optional[Q] = None
        self.params: Dict[str, str] = {}
        self._raw = ""
        self._raw_sub: Optional[Tuple[int, int]] = None
        self._raw_suffix: Optional[Tuple[int, int]] = None

    @classmethod
    def from_string(cls, text: str) -> "MediaType":
        media = cls()
        media.parse(text)
        return media

    @classmethod
    def from_file(cls, file_name) -> "MediaType":
        """Guess the media type from a file name's extension."""
        name = os.fspath(file_name)
        dot = name.rfind(".")
        if dot == -1:
            return cls()
        known = _KNOWN_EXTENSIONS.get(name[dot + 1:])
        if known is None:
            return cls()
        return cls(*known)

    def parse(self, text: str) -> None:
        """Parse ``text`` into this media type; raise HttpError (415) if malformed."""
        cursor = StreamCursor(text)
        self._raw = text
        self.suffix = Suffix.NONE
        self.q = None
        self.params = {}
        self._raw_sub = None
        self._raw_suffix = None

        top = _match_enum(_KNOWN_TYPES, cursor)
        if top is None:
            _raise("Unknown Media Type")
        self.top = top

        if not match_literal("/", cursor):
            _raise("Malformed Media Type, expected a '/' after the top type")
        if cursor.eof():
            _raise("Malformed Media type, missing subtype")

        sub_start = cursor.position
        if match_raw("vnd.", cursor):
            sub = Subtype.VENDOR
        else:
            sub = _match_enum(_KNOWN_SUBTYPES, cursor) or Subtype.EXT
        if sub in (Subtype.EXT, Subtype.VENDOR):
            match_until(";+", cursor)
            self._raw_sub = (sub_start, cursor.position)
        self.sub = sub

        if cursor.eof():
            return

        if match_literal("+", cursor):
            if cursor.eof():
                _raise("Malformed Media Type, expected suffix, got EOF")
            suffix_start = cursor.position
            suffix = _match_enum(_KNOWN_SUFFIXES, cursor) or Suffix.EXT
            if suffix is Suffix.EXT:
                match_until(";+", cursor)
                self._raw_suffix = (suffix_start, cursor.position)
            self.suffix = suffix

        while not cursor.eof():
            current = cursor.current()
            if current in (";", " "):
                if cursor.next() in (None, "\0"):
                    _raise("Malformed Media Type, expected parameter got EOF")
                cursor.advance(1)
            elif match_literal("q", cursor):
                if cursor.eof():
                    _raise("Invalid quality factor")
                if not match_literal("=", cursor):
                    _raise("Missing quality factor")
                value = match_double(cursor)
                if value is None:
                    _raise("Invalid quality factor")
                try:
                    self.q = Q.from_float(value)
                except ValueError:
                    _raise("Invalid quality factor")
            else:
                key_start = cursor.position
                match_until("=", cursor)
                if cursor.eof() or cursor.next() in (None, "\0"):
                    _raise("Unfinished Media Type parameter")
                key = cursor.text_from(key_start)
                cursor.advance(1)
                value_start = cursor.position
                match_until(" ;", cursor)
                self.params.setdefault(key, cursor.text_from(value_start))

    def set_quality(self, quality: Q) -> None:
        self.q = quality

    def get_param(self, name: str) -> Optional[str]:
        return self.params.get(name)

    def set_param(self, name: str, value: str) -> None:
        self.params[name] = value

    def raw_sub(self) -> str:
        """The subtype as written, for vendor and extension subtypes."""
        if self._raw_sub is None:
            return self.sub.value
        start, end = self._raw_sub
        return self._raw[start:end]

    def raw_suffix(self) -> str:
        """The suffix as written, for extension suffixes."""
        if self._raw_suffix is None:
            return self.suffix.value
        start, end = self._raw_suffix
        return self._raw[start:end]

    def is_valid(self) -> bool:
        return self.top is not Type.NONE and self.sub is not Subtype.NONE

    def __str__(self) -> str:
        if self._raw:
            return self._raw
        parts = [f"{self.top.value}/{self.sub.value}"]
        if self.suffix is not Suffix.NONE:
            parts[0] += "+" + self.suffix.value
        if self.q is not None:
            parts.append(str(self.q))
        parts.extend(f"{key}={value}" for key, value in self.params.items())
        return "; ".join(parts)

    def __eq__(self, other):
        if not isinstance(other, MediaType):
            return NotImplemented
        return (self.top, self.sub, self.suffix) == (other.top, other.sub, other.suffix)

    def __hash__(self):
        return hash((self.top, self.sub, self.suffix))

    def __repr__(self) -> str:
        return f"MediaType({str(self)!r})"