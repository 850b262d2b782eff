"""A connected TCP peer, and the base for handlers of TCP traffic."""

from __future__ import annotations

import ipaddress
import socket
from typing import Any, Dict, List, Optional

from .net import Address


class Peer:
    """The remote end of a connection, with per-connection data attached."""

    def __init__(self, address: Optional[Address] = None):
        self.address = address if address is not None else Address()
        self._hostname = ""
        self._fd = -1
        self._transport: Any = None
        self._data: Dict[str, Any] = {}

    def hostname(self) -> str:
        """The peer's host name, looked up once; empty if the lookup fails."""
        if not self._hostname:
            host = self.address.host()
            try:
                ipaddress.IPv4Address(host)
            except ValueError:
                self._hostname = host
            else:
                try:
                    self._hostname, _ = socket.getnameinfo((host, 0), socket.NI_NAMEREQD)
                except OSError:
                    pass
        return self._hostname

    def associate_fd(self, fd: int) -> None:
        self._fd = fd

    def fd(self) -> int:
        if self._fd == -1:
            raise RuntimeError("The peer has no associated fd")
        return self._fd

    def put_data(self, name: str, data: Any) -> None:
        if name in self._data:
            raise ValueError("The data already exists")
        self._data[name] = data

    def get_data(self, name: str) -> Any:
        data = self.try_get_data(name)
        if data is None:
            raise KeyError("The data does not exist")
        return data

    def try_get_data(self, name: str) -> Any:
        return self._data.get(name)

    def associate_transport(self, transport: Any) -> None:
        self._transport = transport

    def transport(self) -> Any:
        if self._transport is None:
            raise RuntimeError("Orphaned peer")
        return self._transport

    def __str__(self) -> str:
        return f"({self.address.host()}, {self.address.port}) [{self.hostname()}]"


class TcpHandler:
    """Receives connection events from a transport and keeps the connected peers."""

    def __init__(self):
        self.transport: Any = None
        self.peers: List[Peer] = []

    def associate_transport(self, transport: Any) -> None:
        self.transport = transport

    def on_connection(self, peer: Peer) -> None:
        """Record a newly connected peer."""
        if peer not in self.peers:
            self.peers.append(peer)

    def on_disconnection(self, peer: Peer) -> None:
        """Forget a peer that has gone away."""
        if peer in self.peers:
            self.peers.remove(peer)