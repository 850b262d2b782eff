"""HTTP cookies and the jar that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .http_defs import FullDate
from .stream import StreamCursor, match_string, match_until, skip_whitespaces


def _match_value(cursor: StreamCursor) -> str:
    current = cursor.current()
    if current is not None and current != "=":
        raise ValueError("Invalid cookie")
    if not cursor.advance(1):
        raise ValueError("Invalid cookie, early eof")
    start = cursor.position
    match_until(";", cursor)
    return cursor.text_from(start)


def _to_int(text: str) -> int:
    if not all(c in "0123456789" for c in text):
        raise ValueError("Invalid conversion")
    return int(text) if text else 0


def _name_value(cursor: StreamCursor):
    start = cursor.position
    if not match_until("=", cursor):
        raise ValueError("Invalid cookie, missing value")
    name = cursor.text_from(start)
    if not cursor.advance(1):
        raise ValueError("Invalid cookie, missing value")
    start = cursor.position
    match_until(";", cursor)
    return name, cursor.text_from(start)


@dataclass
class Cookie:
    """A cookie with its Set-Cookie attributes."""

    name: str
    value: str
    path: Optional[str] = None
    domain: Optional[str] = None
    expires: Optional[FullDate] = None
    max_age: Optional[int] = None
    secure: bool = False
    http_only: bool = False
    ext: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_string(cls, text: str) -> "Cookie":
        """Parse a Set-Cookie value; raise ValueError if it is malformed."""
        cursor = StreamCursor(text)
        name, value = _name_value(cursor)
        cookie = cls(name, value)
        if cursor.eof():
            return cookie
        cursor.advance(1)

        while True:
            skip_whitespaces(cursor)
            if match_string("Path", cursor):
                cookie.path = _match_value(cursor)
                cursor.advance(1)
            elif match_string("Domain", cursor):
                cookie.domain = _match_value(cursor)
                cursor.advance(1)
            elif match_string("Secure", cursor):
                cookie.secure = True
                cursor.advance(1)
            elif match_string("HttpOnly", cursor):
                cookie.http_only = True
                cursor.advance(1)
            elif match_string("Max-Age", cursor):
                cookie.max_age = _to_int(_match_value(cursor))
                cursor.advance(1)
            elif match_string("Expires", cursor):
                cookie.expires = FullDate.from_string(_match_value(cursor))
                cursor.advance(1)
            else:
                start = cursor.position
                match_until("=", cursor)
                ext_name = cursor.text_from(start)
                ext_value = "" if cursor.eof() else _match_value(cursor)
                cookie.ext.setdefault(ext_name, ext_value)
            if cursor.eof():
                break
        return cookie

    def __str__(self) -> str:
        parts = [f"{self.name}={self.value}"]
        if self.path is not None:
            parts.append(f"Path={self.path}")
        if self.domain is not None:
            parts.append(f"Domain={self.domain}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.expires is not None:
            parts.append(f"Expires={self.expires.format()}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        parts.extend(f"{key}={value}" for key, value in self.ext.items())
        return "; ".join(parts)


class CookieJar:
    """Cookies grouped by name, then by value."""

    def __init__(self):
        self._cookies: Dict[str, Dict[str, Cookie]] = {}

    def add(self, cookie: Cookie) -> None:
        self._cookies.setdefault(cookie.name, {}).setdefault(cookie.value, cookie)

    def add_from_raw(self, text: str) -> None:
        """Add every ``name=value`` pair of a Cookie header."""
        cursor = StreamCursor(text)
        while not cursor.eof():
            name, value = _name_value(cursor)
            self.add(Cookie(name, value))
            cursor.advance(1)
            skip_whitespaces(cursor)

    def get(self, name: str) -> Cookie:
        """The first cookie stored under ``name``."""
        try:
            by_value = self._cookies[name]
        except KeyError:
            raise KeyError("Could not find requested cookie") from None
        return next(iter(by_value.values()))

    def has(self, name: str) -> bool:
        return name in self._cookies

    def remove_all_cookies(self) -> None:
        self._cookies.clear()

    def __iter__(self) -> Iterator[Cookie]:
        for by_value in self._cookies.values():
            yield from by_value.values()

    def __len__(self) -> int:
        return sum(len(by_value) for by_value in self._cookies.values())