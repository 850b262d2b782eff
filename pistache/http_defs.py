"""HTTP versions, methods, status codes, cache directives and dates."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Union


class Version(enum.Enum):
    HTTP10 = "HTTP/1.0"
    HTTP11 = "HTTP/1.1"

    def __str__(self) -> str:
        return self.value


class Method(enum.Enum):
    OPTIONS = "OPTIONS"
    GET = "GET"
    POST = "POST"
    HEAD = "HEAD"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    def __str__(self) -> str:
        return self.value


class Code(enum.IntEnum):
    """HTTP status codes with their reason phrases."""

    def __new__(cls, value: int, phrase: str):
        member = int.__new__(cls, value)
        member._value_ = value
        member.phrase = phrase
        return member

    CONTINUE = 100, "Continue"
    SWITCHING_PROTOCOLS = 101, "Switching Protocols"
    PROCESSING = 102, "Processing"
    EARLY_HINTS = 103, "Early Hints"
    OK = 200, "OK"
    CREATED = 201, "Created"
    ACCEPTED = 202, "Accepted"
    NON_AUTHORITATIVE_INFORMATION = 203, "Non-Authoritative Information"
    NO_CONTENT = 204, "No Content"
    RESET_CONTENT = 205, "Reset Content"
    PARTIAL_CONTENT = 206, "Partial Content"
    MULTI_STATUS = 207, "Multi-Status"
    ALREADY_REPORTED = 208, "Already Reported"
    IM_USED = 226, "IM Used"
    MULTIPLE_CHOICES = 300, "Multiple Choices"
    MOVED_PERMANENTLY = 301, "Moved Permanently"
    FOUND = 302, "Found"
    SEE_OTHER = 303, "See Other"
    NOT_MODIFIED = 304, "Not Modified"
    USE_PROXY = 305, "Use Proxy"
    TEMPORARY_REDIRECT = 307, "Temporary Redirect"
    PERMANENT_REDIRECT = 308, "Permanent Redirect"
    BAD_REQUEST = 400, "Bad Request"
    UNAUTHORIZED = 401, "Unauthorized"
    PAYMENT_REQUIRED = 402, "Payment Required"
    FORBIDDEN = 403, "Forbidden"
    NOT_FOUND = 404, "Not Found"
    METHOD_NOT_ALLOWED = 405, "Method Not Allowed"
    NOT_ACCEPTABLE = 406, "Not Acceptable"
    PROXY_AUTHENTICATION_REQUIRED = 407, "Proxy Authentication Required"
    REQUEST_TIMEOUT = 408, "Request Timeout"
    CONFLICT = 409, "Conflict"
    GONE = 410, "Gone"
    LENGTH_REQUIRED = 411, "Length Required"
    PRECONDITION_FAILED = 412, "Precondition Failed"
    REQUEST_ENTITY_TOO_LARGE = 413, "Request Entity Too Large"
    REQUEST_URI_TOO_LONG = 414, "Request-URI Too Long"
    UNSUPPORTED_MEDIA_TYPE = 415, "Unsupported Media Type"
    REQUESTED_RANGE_NOT_SATISFIABLE = 416, "Requested Range Not Satisfiable"
    EXPECTATION_FAILED = 417, "Expectation Failed"
    I_M_A_TEAPOT = 418, "I'm a teapot"
    MISDIRECTED_REQUEST = 421, "Misdirected Request"
    UNPROCESSABLE_ENTITY = 422, "Unprocessable Entity"
    LOCKED = 423, "Locked"
    FAILED_DEPENDENCY = 424, "Failed Dependency"
    UPGRADE_REQUIRED = 426, "Upgrade Required"
    PRECONDITION_REQUIRED = 428, "Precondition Required"
    TOO_MANY_REQUESTS = 429, "Too Many Requests"
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431, "Request Header Fields Too Large"
    CONNECTION_CLOSED_WITHOUT_RESPONSE = 444, "Connection Closed Without Response"
    UNAVAILABLE_FOR_LEGAL_REASONS = 451, "Unavailable For Legal Reasons"
    CLIENT_CLOSED_REQUEST = 499, "Client Closed Request"
    INTERNAL_SERVER_ERROR = 500, "Internal Server Error"
    NOT_IMPLEMENTED = 501, "Not Implemented"
    BAD_GATEWAY = 502, "Bad Gateway"
    SERVICE_UNAVAILABLE = 503, "Service Unavailable"
    GATEWAY_TIMEOUT = 504, "Gateway Timeout"
    HTTP_VERSION_NOT_SUPPORTED = 505, "HTTP Version Not Supported"
    VARIANT_ALSO_NEGOTIATES = 506, "Variant Also Negotiates"
    INSUFFICIENT_STORAGE = 507, "Insufficient Storage"
    LOOP_DETECTED = 508, "Loop Detected"
    NOT_EXTENDED = 510, "Not Extended"
    NETWORK_AUTHENTICATION_REQUIRED = 511, "Network Authentication Required"
    NETWORK_CONNECT_TIMEOUT_ERROR = 599, "Network Connect Timeout Error"

    def __str__(self) -> str:
        return self.phrase


class Directive(enum.Enum):
    """Cache-Control directives, valued by their header token."""

    NO_CACHE = "no-cache"
    NO_STORE = "no-store"
    MAX_AGE = "max-age"
    MAX_STALE = "max-stale"
    MIN_FRESH = "min-fresh"
    NO_TRANSFORM = "no-transform"
    ONLY_IF_CACHED = "only-if-cached"
    PUBLIC = "public"
    PRIVATE = "private"
    MUST_REVALIDATE = "must-revalidate"
    PROXY_REVALIDATE = "proxy-revalidate"
    S_MAX_AGE = "s-maxage"
    EXT = ""


_TIMED_DIRECTIVES = frozenset(
    {Directive.MAX_AGE, Directive.S_MAX_AGE, Directive.MAX_STALE, Directive.MIN_FRESH}
)


class CacheDirective:
    """A Cache-Control directive, with a delta for the timed ones."""

    __slots__ = ("directive", "_seconds")

    def __init__(self, directive: Directive, delta: Union[int, timedelta] = 0):
        self.directive = directive
        seconds = int(delta.total_seconds()) if isinstance(delta, timedelta) else int(delta)
        self._seconds = seconds if directive in _TIMED_DIRECTIVES else 0

    def delta(self) -> timedelta:
        if self.directive not in _TIMED_DIRECTIVES:
            raise ValueError("Invalid operation on cache directive")
        return timedelta(seconds=self._seconds)

    def has_delta(self) -> bool:
        return self.directive in _TIMED_DIRECTIVES

    def __eq__(self, other):
        if not isinstance(other, CacheDirective):
            return NotImplemented
        return (self.directive, self._seconds) == (other.directive, other._seconds)

    def __hash__(self):
        return hash((self.directive, self._seconds))

    def __repr__(self):
        if self.has_delta():
            return f"CacheDirective({self.directive.name}, {self._seconds})"
        return f"CacheDirective({self.directive.name})"


class DateFormat(enum.Enum):
    RFC1123 = "rfc1123"
    RFC850 = "rfc850"
    ASCTIME = "asctime"


_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_TIME = r"(?P<H>[0-9]{1,2}):(?P<M>[0-9]{1,2}):(?P<S>[0-9]{1,2})"
_RFC1123 = re.compile(
    r"\s*(?P<wd>[A-Za-z]+),\s*(?P<d>[0-9]{1,2})\s*(?P<mon>[A-Za-z]+)\s*"
    r"(?P<y>[0-9]{1,4})\s*" + _TIME + r"\s*(?P<tz>\S+)"
)
_RFC850 = re.compile(
    r"\s*(?P<wd>[A-Za-z]+),\s*(?P<d>[0-9]{1,2})-(?P<mon>[A-Za-z]+)-"
    r"(?P<yy>[0-9]{1,2})\s*" + _TIME + r"\s*(?P<tz>\S+)"
)
_ASCTIME = re.compile(
    r"\s*(?P<wd>[A-Za-z]+)\s*(?P<mon>[A-Za-z]+)\s*(?P<d>[0-9]{1,2})\s*"
    + _TIME + r"\s*(?P<y>[0-9]{1,4})"
)


def _lookup(name: str, names) -> int:
    lowered = name.lower()
    for index, full in enumerate(names):
        if lowered in (full.lower(), full[:3].lower()):
            return index
    raise ValueError(f"Unknown name: {name}")


def _build_date(match: re.Match, year: int) -> datetime:
    weekday = _lookup(match["wd"], _WEEKDAYS)
    month = _lookup(match["mon"], _MONTHS) + 1
    value = datetime(
        year, month, int(match["d"]),
        int(match["H"]), int(match["M"]), int(match["S"]),
        tzinfo=timezone.utc,
    )
    if value.weekday() != weekday:
        raise ValueError("Weekday does not match the date")
    return value


def _two_digit_year(text: str) -> int:
    year = int(text)
    return 2000 + year if year < 69 else 1900 + year


@dataclass(frozen=True)
class FullDate:
    """A point in time as carried by HTTP date headers, kept in UTC."""

    date: datetime

    def __post_init__(self):
        value = self.date
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        object.__setattr__(self, "date", value)

    @classmethod
    def from_string(cls, text: str) -> "FullDate":
        """Parse an RFC 1123, RFC 850 or asctime date."""
        attempts = (
            (_RFC1123, lambda m: int(m["y"])),
            (_RFC850, lambda m: _two_digit_year(m["yy"])),
            (_ASCTIME, lambda m: int(m["y"])),
        )
        for pattern, year_of in attempts:
            match = pattern.match(text)
            if match is None:
                continue
            try:
                return cls(_build_date(match, year_of(match)))
            except ValueError:
                continue
        raise ValueError("Invalid Date format")

    def format(self, date_format: DateFormat = DateFormat.RFC1123) -> str:
        d = self.date
        wd = _WEEKDAYS[d.weekday()][:3]
        mon = _MONTHS[d.month - 1][:3]
        clock = f"{d.hour:02d}:{d.minute:02d}:{d.second:02d}"
        if date_format is DateFormat.RFC1123:
            return f"{wd}, {d.day:02d} {mon} {d.year:04d} {clock} UTC"
        if date_format is DateFormat.RFC850:
            return f"{wd}, {d.day:02d}-{mon}-{d.year % 100:02d} {clock} UTC"
        if date_format is DateFormat.ASCTIME:
            return f"{wd} {mon} {d.day:02d} {clock} {d.year:04d}"
        raise ValueError("Invalid use of FullDate.format")

    def __str__(self) -> str:
        return self.format()


class HttpError(Exception):
    """An error that maps onto an HTTP status code."""

    def __init__(self, code: Union[Code, int], reason: str):
        super().__init__(reason)
        self.code = int(code)
        self.reason = reason


def version_string(version: Version) -> str:
    return version.value


def method_string(method: Method) -> str:
    return method.value


def code_string(code: Union[Code, int]) -> str:
    """The reason phrase for a status code, or an empty string if unknown."""
    try:
        return Code(int(code)).phrase
    except ValueError:
        return ""