"""Ports, IP addresses and host:port parsing."""

from __future__ import annotations

import functools
import ipaddress
import re
import socket
import struct
import sys
from typing import Optional, Union

HTTP_STANDARD_PORT = 80

_STRTOL = re.compile(r"[ \t\n\r\f\v]*[+-]?[0-9]+")


def _strtol(text: str) -> Optional[int]:
    """Parse a whole decimal integer; None if any character is left over."""
    if _STRTOL.fullmatch(text) is None:
        return None
    return int(text)


class NetError(RuntimeError):
    """A networking error."""

    @classmethod
    def system(cls, message: str) -> "NetError":
        """An error whose message carries the OS error being handled, if any."""
        current = sys.exc_info()[1]
        if isinstance(current, OSError) and current.strerror:
            return cls(f"{message}: {current.strerror}")
        return cls(message)


@functools.total_ordering
class Port:
    """A TCP port number."""

    MIN = 0
    MAX = 65535

    __slots__ = ("value",)

    def __init__(self, value: Union[int, str, "Port"] = 0):
        if isinstance(value, Port):
            number = value.value
        elif isinstance(value, str):
            if not value:
                raise ValueError("Invalid port: empty port")
            number = _strtol(value)
            if number is None or not self.MIN <= number <= self.MAX:
                raise ValueError("Invalid port: " + value)
        else:
            number = int(value)
            if not self.MIN <= number <= self.MAX:
                raise ValueError(f"Invalid port: {number}")
        self.value = number

    def is_reserved(self) -> bool:
        return self.value < 1024

    def __int__(self) -> int:
        return self.value

    __index__ = __int__

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Port({self.value})"

    def __eq__(self, other):
        if isinstance(other, Port):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Port):
            return self.value < other.value
        if isinstance(other, int):
            return self.value < other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)


class IP:
    """An IPv4 or IPv6 address, with the port it came with."""

    __slots__ = ("address", "port")

    def __init__(self, address="0.0.0.0", port: int = 0):
        self.address = ipaddress.ip_address(address)
        self.port = port

    @classmethod
    def v4(cls, a: int, b: int, c: int, d: int) -> "IP":
        try:
            packed = bytes((a, b, c, d))
        except ValueError as exc:
            raise ValueError("Invalid IPv4 address part") from exc
        return cls(ipaddress.IPv4Address(packed))

    @classmethod
    def v6(cls, a, b, c, d, e, f, g, h) -> "IP":
        try:
            packed = struct.pack("!8H", a, b, c, d, e, f, g, h)
        except struct.error as exc:
            raise ValueError("Invalid IPv6 address part") from exc
        return cls(ipaddress.IPv6Address(packed))

    @classmethod
    def any(cls, is_ipv6: bool = False) -> "IP":
        if is_ipv6:
            return cls.v6(0, 0, 0, 0, 0, 0, 0, 0)
        return cls.v4(0, 0, 0, 0)

    @classmethod
    def loopback(cls, is_ipv6: bool = False) -> "IP":
        if is_ipv6:
            return cls.v6(0, 0, 0, 0, 0, 0, 0, 1)
        return cls.v4(127, 0, 0, 1)

    def family(self) -> int:
        return socket.AF_INET if self.address.version == 4 else socket.AF_INET6

    @staticmethod
    def supported() -> bool:
        """Whether this machine has a usable IPv6 address."""
        if not socket.has_ipv6:
            return False
        try:
            with socket.socket(socket.AF_INET6, socket.SOCK_STREAM) as probe:
                probe.bind(("::1", 0))
        except OSError:
            return False
        return True

    def __str__(self) -> str:
        return str(self.address)

    def __repr__(self) -> str:
        return f"IP({str(self.address)!r})"

    def __eq__(self, other):
        if not isinstance(other, IP):
            return NotImplemented
        return (self.address, self.port) == (other.address, other.port)

    def __hash__(self):
        return hash((self.address, self.port))


class AddressParser:
    """Splits ``host:port`` or ``[v6host]:port`` into its raw parts."""

    def __init__(self, data: str):
        self.has_colon = False
        self.raw_port = ""
        end_pos = data.find("]")
        start_pos = data.find("[")
        if start_pos != -1 and end_pos != -1 and start_pos < end_pos:
            if data.find(":", end_pos) != -1:
                self.has_colon = True
            self.raw_host = data[start_pos:start_pos + end_pos + 1]
            self.family = socket.AF_INET6
            end_pos += 1
        else:
            colon_pos = data.find(":")
            if colon_pos != -1:
                self.has_colon = True
            end_pos = colon_pos
            self.raw_host = data if colon_pos == -1 else data[:colon_pos]
            self.family = socket.AF_INET

        if end_pos != -1:
            self.raw_port = data[end_pos + 1:]
            if not self.raw_port:
                raise ValueError("Invalid port")


def _resolve_ipv4(host: str) -> str:
    if not host:
        return host
    try:
        return socket.gethostbyname(host)
    except (OSError, UnicodeError):
        return host


class Address:
    """An IP address together with a port."""

    def __init__(self, ip: Optional[IP] = None, port: Union[Port, int] = 0):
        self.ip = ip if ip is not None else IP()
        self.port = Port(port)

    @classmethod
    def parse(cls, addr: str) -> "Address":
        """Parse ``host``, ``host:port`` or ``[v6host]:port``."""
        parser = AddressParser(addr)
        if parser.family == socket.AF_INET6:
            raw_host = parser.raw_host
            if len(raw_host) <= 2:
                raise ValueError("Invalid IPv6 address")
            host = addr[1:1 + len(raw_host) - 2]
            if "%" in host:
                raise ValueError("Invalid IPv6 address")
            try:
                ip = IP(ipaddress.IPv6Address(host))
            except ValueError as exc:
                raise ValueError("Invalid IPv6 address") from exc
        else:
            host = parser.raw_host
            if host == "*":
                host = "0.0.0.0"
            elif host == "localhost":
                host = "127.0.0.1"
            host = _resolve_ipv4(host)
            try:
                ip = IP(ipaddress.IPv4Address(host))
            except ValueError as exc:
                raise ValueError("Invalid IPv4 address") from exc

        if not parser.raw_port:
            if parser.has_colon:
                raise ValueError("Invalid port")
            port = Port(HTTP_STANDARD_PORT)
        else:
            number = _strtol(parser.raw_port)
            if number is None or not Port.MIN <= number <= Port.MAX:
                raise ValueError("Invalid port")
            port = Port(number)
        return cls(ip, port)

    @classmethod
    def from_host_port(cls, host: str, port: Union[Port, int]) -> "Address":
        return cls.parse(f"{host}:{Port(port)}")

    def host(self) -> str:
        return str(self.ip)

    def family(self) -> int:
        return self.ip.family()

    def __eq__(self, other):
        if not isinstance(other, Address):
            return NotImplemented
        return (self.ip, self.port) == (other.ip, other.port)

    def __hash__(self):
        return hash((self.ip, self.port))

    def __repr__(self) -> str:
        return f"Address({self.host()!r}, {self.port.value})"