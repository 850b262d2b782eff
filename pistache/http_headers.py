"""The header registry and the per-message header collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Type, Union

from .http_header import (
    Accept,
    AccessControlAllowHeaders,
    AccessControlAllowMethods,
    AccessControlAllowOrigin,
    AccessControlExposeHeaders,
    Allow,
    Authorization,
    CacheControl,
    Connection,
    ContentEncoding,
    ContentLength,
    ContentType,
    Date,
    Expect,
    Header,
    Host,
    Location,
    Server,
    TransferEncoding,
    UserAgent,
)

HeaderName = Union[str, Type[Header]]


@dataclass(frozen=True)
class Raw:
    """A header kept as the name and value it arrived with."""

    name: str
    value: str


class Registry:
    """Maps header names to the factories that build their typed form."""

    def __init__(self):
        self._factories: Dict[str, Callable[[], Header]] = {}

    def register_header(self, name: str, factory: Callable[[], Header]) -> None:
        if name in self._factories:
            raise ValueError("Header already registered")
        self._factories[name] = factory

    def headers_list(self) -> List[str]:
        return [*self._factories]

    def make_header(self, name: str) -> Header:
        try:
            factory = self._factories[name]
        except KeyError:
            raise KeyError("Unknown header") from None
        return factory()

    def is_registered(self, name: str) -> bool:
        return name in self._factories


_BUILTIN_HEADERS = (
    Accept,
    AccessControlAllowOrigin,
    AccessControlAllowHeaders,
    AccessControlExposeHeaders,
    AccessControlAllowMethods,
    Allow,
    CacheControl,
    Connection,
    ContentEncoding,
    TransferEncoding,
    ContentLength,
    ContentType,
    Authorization,
    Date,
    Expect,
    Host,
    Location,
    Server,
    UserAgent,
)

_DEFAULT_REGISTRY = Registry()
for _header_class in _BUILTIN_HEADERS:
    _DEFAULT_REGISTRY.register_header(_header_class.NAME, _header_class)


def default_registry() -> Registry:
    """The shared registry holding every built-in header."""
    return _DEFAULT_REGISTRY


def _name_of(name: HeaderName) -> str:
    if isinstance(name, type) and issubclass(name, Header):
        return name.NAME
    return name


class Collection:
    """The typed and raw headers of one message.

    Names may be given as strings or as header classes. Adding a header
    under a name already present keeps the first one.
    """

    def __init__(self):
        self._headers: Dict[str, Header] = {}
        self._raw: Dict[str, Raw] = {}

    def add(self, header: Header) -> "Collection":
        self._headers.setdefault(header.name, header)
        return self

    def add_raw(self, raw: Raw) -> "Collection":
        self._raw.setdefault(raw.name, raw)
        return self

    def get(self, name: HeaderName) -> Header:
        header = self.try_get(name)
        if header is None:
            raise KeyError("Could not find header")
        return header

    def get_raw(self, name: str) -> Raw:
        raw = self.try_get_raw(name)
        if raw is None:
            raise KeyError("Could not find header")
        return raw

    def try_get(self, name: HeaderName) -> Optional[Header]:
        return self._headers.get(_name_of(name))

    def try_get_raw(self, name: str) -> Optional[Raw]:
        return self._raw.get(name)

    def has(self, name: HeaderName) -> bool:
        return _name_of(name) in self._headers

    def list(self) -> List[Header]:
        return [*self._headers.values()]

    def remove(self, name: HeaderName) -> bool:
        """Remove the typed header, or failing that the raw one; False if neither."""
        key = _name_of(name)
        if key in self._headers:
            del self._headers[key]
            return True
        if key in self._raw:
            del self._raw[key]
            return True
        return False

    def clear(self) -> None:
        self._headers.clear()
        self._raw.clear()

    def raw_headers(self) -> List[Raw]:
        return [*self._raw.values()]

    def __contains__(self, name: HeaderName) -> bool:
        return self.has(name)

    def __iter__(self) -> Iterator[Header]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._headers)