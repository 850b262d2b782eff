import pytest

from pistache.net import IP, Address
from pistache.peer import Peer, TcpHandler


def _v6_peer():
    return Peer(Address(IP.loopback(True), 8080))


def test_fd_requires_association():
    peer = Peer()
    with pytest.raises(RuntimeError):
        peer.fd()
    peer.associate_fd(7)
    assert peer.fd() == 7


def test_put_and_get_data():
    peer = Peer()
    parser = object()
    peer.put_data("__Parser", parser)
    assert peer.get_data("__Parser") is parser
    assert peer.try_get_data("__Parser") is parser


def test_put_data_twice_raises():
    peer = Peer()
    peer.put_data("key", 1)
    with pytest.raises(ValueError):
        peer.put_data("key", 2)
    assert peer.get_data("key") == 1


def test_missing_data():
    peer = Peer()
    assert peer.try_get_data("nothing") is None
    with pytest.raises(KeyError):
        peer.get_data("nothing")


def test_transport_orphaned_and_associated():
    peer = Peer()
    with pytest.raises(RuntimeError):
        peer.transport()
    transport = object()
    peer.associate_transport(transport)
    assert peer.transport() is transport


def test_hostname_of_ipv6_peer_is_its_address():
    peer = _v6_peer()
    assert peer.hostname() == peer.address.host()


def test_str_shows_host_port_and_hostname():
    peer = _v6_peer()
    host = peer.address.host()
    assert str(peer) == f"({host}, 8080) [{host}]"


def test_default_address():
    assert Peer().address == Address()


def test_handler_associate_transport():
    handler = TcpHandler()
    assert handler.transport is None
    transport = object()
    handler.associate_transport(transport)
    assert handler.transport is transport


def test_handler_subclass_receives_events():
    class Recording(TcpHandler):
        def __init__(self):
            super().__init__()
            self.events = []

        def on_connection(self, peer):
            self.events.append(("connect", peer))

        def on_disconnection(self, peer):
            self.events.append(("disconnect", peer))

    handler = Recording()
    peer = Peer()
    handler.on_connection(peer)
    handler.on_disconnection(peer)
    assert handler.events == [("connect", peer), ("disconnect", peer)]