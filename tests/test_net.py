import socket

import pytest

from pistache.net import IP, Address, AddressParser, NetError, Port


def test_port_from_string_matches_int():
    assert Port("8080") == Port(8080)
    assert Port("8080") == 8080


@pytest.mark.parametrize("text", ["", "70000", "12a", "-1", "  "])
def test_port_rejects_invalid_strings(text):
    with pytest.raises(ValueError):
        Port(text)


def test_port_rejects_out_of_range_int():
    with pytest.raises(ValueError):
        Port(Port.MAX + 1)


def test_port_reserved():
    assert Port(22).is_reserved()
    assert not Port(8080).is_reserved()
    assert Port(1) < Port(2)


def test_ip_v4_string():
    assert str(IP.v4(127, 0, 0, 1)) == "127.0.0.1"
    assert IP.v4(127, 0, 0, 1).family() == socket.AF_INET


def test_ip_any_and_loopback():
    assert IP.any() == IP.v4(0, 0, 0, 0)
    assert str(IP.any()) == "0.0.0.0"
    assert IP.loopback() == IP.v4(127, 0, 0, 1)
    assert str(IP.loopback(True)) == "::1"
    assert IP.any(True).family() == socket.AF_INET6


def test_ip_v4_rejects_out_of_range():
    with pytest.raises(ValueError):
        IP.v4(256, 0, 0, 0)


def test_address_parser_ipv4():
    parser = AddressParser("127.0.0.1:8080")
    assert parser.raw_host == "127.0.0.1"
    assert parser.raw_port == "8080"
    assert parser.has_colon
    assert parser.family == socket.AF_INET


def test_address_parser_ipv6():
    parser = AddressParser("[::1]:8080")
    assert parser.raw_host == "[::1]"
    assert parser.raw_port == "8080"
    assert parser.family == socket.AF_INET6


def test_address_parser_empty_port_raises():
    with pytest.raises(ValueError):
        AddressParser("127.0.0.1:")


def test_address_parse_ipv4():
    address = Address.parse("127.0.0.1:8080")
    assert address.host() == "127.0.0.1"
    assert address.port == Port(8080)
    assert address.family() == socket.AF_INET


def test_address_parse_special_hosts():
    assert Address.parse("localhost:8080").host() == "127.0.0.1"
    assert Address.parse("*:8080").host() == "0.0.0.0"


def test_address_parse_default_port():
    assert Address.parse("127.0.0.1").port == Port(80)


def test_address_parse_ipv6():
    address = Address.parse("[::1]:8080")
    assert address.family() == socket.AF_INET6
    assert address.host() == str(IP.loopback(True))
    assert address.port == 8080


def test_address_parse_invalid_ipv6():
    with pytest.raises(ValueError):
        Address.parse("[::g]:8080")


def test_address_parse_invalid_port():
    with pytest.raises(ValueError):
        Address.parse("127.0.0.1:abc")
    with pytest.raises(ValueError):
        Address.parse("127.0.0.1:70000")


def test_address_from_host_port():
    address = Address.from_host_port("127.0.0.1", Port(9000))
    assert address == Address(IP.loopback(), Port(9000))


def test_net_error_system_includes_os_message(tmp_path):
    try:
        open(tmp_path / "missing", "rb")
    except OSError as exc:
        error = NetError.system("Could not open")
        expected = f"Could not open: {exc.strerror}"
    assert str(error) == expected


def test_net_error_system_without_os_error():
    assert str(NetError.system("Could not write data")) == "Could not write data"