"""Declarative description of a REST API: info, paths, parameters and responses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .http_defs import Code, Method


class Scheme(enum.Enum):
    """Transfer schemes an API can be reached with."""

    HTTP = "http"
    HTTPS = "https"
    WS = "ws"
    WSS = "wss"


def scheme_string(scheme: Scheme) -> str:
    return scheme.value


@dataclass
class Contact:
    name: str
    url: str
    email: str


@dataclass
class License:
    name: str
    url: str


@dataclass
class Info:
    """General information about an API."""

    title: str
    version: str
    description: str = ""
    terms_of_service: str = ""
    contact: Optional[Contact] = None
    license: Optional[License] = None


@dataclass(frozen=True)
class PathDecl:
    """A path together with the method it answers to."""

    value: str
    method: Method


@dataclass
class Parameter:
    name: str
    description: str
    required: bool = True
    type: Any = None


@dataclass
class ResponseSpec:
    status_code: Union[Code, int]
    description: str


@dataclass
class Path:
    """One documented route."""

    value: str
    method: Method
    description: str = ""
    hidden: bool = False
    produces: List[Any] = field(default_factory=list)
    consumes: List[Any] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    responses: List[ResponseSpec] = field(default_factory=list)
    handler: Optional[Callable[..., Any]] = None

    @staticmethod
    def swagger_format(path: str) -> str:
        """Rewrite ``/users/:id?`` style paths as ``/users/{id}``."""
        if not path:
            return ""
        if not path.startswith("/"):
            raise ValueError("Invalid path, should start with a '/'")

        fragments = path.split("/")
        if fragments[-1] == "":
            fragments.pop()

        def process(fragment: str) -> str:
            fragment = fragment.replace("?", "", 1)
            if fragment.startswith(":"):
                return "{" + fragment[1:] + "}"
            return fragment

        *head, last = fragments
        out = "".join(process(fragment) + "/" for fragment in head)
        out += "/" if last == "" else process(last)
        return out


class PathGroup:
    """Paths grouped by their value, at most one per method."""

    def __init__(self):
        self._groups: Dict[str, List[Path]] = {}

    def has_path(self, name: Union[str, Path], method: Optional[Method] = None) -> bool:
        if isinstance(name, Path):
            name, method = name.value, name.method
        return self.path(name, method) is not None

    def paths(self, name: str) -> List[Path]:
        return list(self._groups.get(name, ()))

    def path(self, name: str, method: Method) -> Optional[Path]:
        return next((p for p in self._groups.get(name, ()) if p.method == method), None)

    def add(self, path: Path) -> Optional[Path]:
        """Add ``path``; return it, or None if one with the same value and method exists."""
        if self.has_path(path):
            return None
        self._groups.setdefault(path.value, []).append(path)
        return path

    def flat(self) -> Iterator[Path]:
        for group in self._groups.values():
            yield from group

    def __iter__(self) -> Iterator[Tuple[str, List[Path]]]:
        return iter(self._groups.items())

    def __len__(self) -> int:
        return len(self._groups)


class PathBuilder:
    """Gives access to a path once it has been added."""

    def __init__(self, path: Path):
        self.path = path

    def hide(self, value: bool = True) -> "PathBuilder":
        self.path.hidden = value
        return self


def _add_or_raise(paths: PathGroup, path: Path) -> PathBuilder:
    added = paths.add(path)
    if added is None:
        raise ValueError(f"Path already described: {path.method.value} {path.value}")
    return PathBuilder(added)


def _route_args(name, method, description):
    if isinstance(name, PathDecl):
        if isinstance(method, str):
            description = method
        return name.value, name.method, description
    if method is None:
        raise ValueError("A method is required")
    return name, method, description


class SubPath:
    """A path prefix under which routes are declared."""

    def __init__(self, prefix: str, paths: PathGroup):
        self.prefix = prefix
        self.parameters: List[Parameter] = []
        self.paths = paths

    def route(self, name, method=None, description: str = "") -> PathBuilder:
        """Declare ``prefix + name`` for ``method``; accepts a PathDecl in place of both."""
        name, method, description = _route_args(name, method, description)
        path = Path(self.prefix + name, method, description)
        path.parameters.extend(self.parameters)
        return _add_or_raise(self.paths, path)

    def path(self, prefix: str) -> "SubPath":
        return SubPath(self.prefix + prefix, self.paths)


class InfoBuilder:
    """Fills in an Info record fluently."""

    def __init__(self, info: Info):
        self.info = info

    def terms_of_service(self, value: str) -> "InfoBuilder":
        self.info.terms_of_service = value
        return self

    def contact(self, name: str, url: str, email: str) -> "InfoBuilder":
        self.info.contact = Contact(name, url, email)
        return self

    def license(self, name: str, url: str) -> "InfoBuilder":
        self.info.license = License(name, url)
        return self


class Description:
    """The description of a whole API."""

    def __init__(self, title: str, version: str, description: str = ""):
        self.api_info = Info(title, version, description)
        self.api_host = ""
        self.api_base_path = ""
        self.schemes: List[Scheme] = []
        self.paths = PathGroup()

    def info(self) -> InfoBuilder:
        return InfoBuilder(self.api_info)

    def host(self, value: str) -> "Description":
        self.api_host = value
        return self

    def base_path(self, value: str) -> "Description":
        self.api_base_path = value
        return self

    def options(self, name: str) -> PathDecl:
        return PathDecl(name, Method.OPTIONS)

    def get(self, name: str) -> PathDecl:
        return PathDecl(name, Method.GET)

    def post(self, name: str) -> PathDecl:
        return PathDecl(name, Method.POST)

    def head(self, name: str) -> PathDecl:
        return PathDecl(name, Method.HEAD)

    def put(self, name: str) -> PathDecl:
        return PathDecl(name, Method.PUT)

    def patch(self, name: str) -> PathDecl:
        return PathDecl(name, Method.PATCH)

    def delete(self, name: str) -> PathDecl:
        return PathDecl(name, Method.DELETE)

    def trace(self, name: str) -> PathDecl:
        return PathDecl(name, Method.TRACE)

    def connect(self, name: str) -> PathDecl:
        return PathDecl(name, Method.CONNECT)

    def path(self, name: str) -> SubPath:
        return SubPath(name, self.paths)

    def route(self, name, method=None, description: str = "") -> PathBuilder:
        """Declare a route; accepts a PathDecl in place of name and method."""
        name, method, description = _route_args(name, method, description)
        return _add_or_raise(self.paths, Path(name, method, description))

    def response(self, status_code: Union[Code, int], description: str) -> ResponseSpec:
        return ResponseSpec(status_code, description)