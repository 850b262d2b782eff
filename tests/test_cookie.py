import pytest

from pistache.cookie import Cookie, CookieJar
from pistache.http_defs import FullDate


def test_name_and_value_only():
    cookie = Cookie.from_string("SID=31d4d96e407aad42")
    assert cookie.name == "SID"
    assert cookie.value == "31d4d96e407aad42"
    assert cookie.path is None
    assert cookie.secure is False
    assert cookie.ext == {}


def test_attributes():
    cookie = Cookie.from_string("SID=abc; Path=/; Domain=example.com; Secure; HttpOnly")
    assert cookie.path == "/"
    assert cookie.domain == "example.com"
    assert cookie.secure is True
    assert cookie.http_only is True


def test_max_age_and_expires():
    date = "Wed, 21 Oct 2015 07:28:00 GMT"
    cookie = Cookie.from_string(f"lang=en; Max-Age=3600; Expires={date}")
    assert cookie.max_age == 3600
    assert cookie.expires == FullDate.from_string(date)


def test_extension_attribute():
    cookie = Cookie.from_string("a=b; Path=/docs; Priority=High")
    assert cookie.path == "/docs"
    assert cookie.ext == {"Priority": "High"}


def test_missing_value_raises():
    with pytest.raises(ValueError):
        Cookie.from_string("nameonly")


def test_invalid_max_age_raises():
    with pytest.raises(ValueError):
        Cookie.from_string("a=b; Max-Age=12x")


def test_attribute_without_value_raises():
    with pytest.raises(ValueError):
        Cookie.from_string("a=b; Path")


def test_write_format():
    cookie = Cookie("SID", "abc", path="/", secure=True)
    assert str(cookie) == "SID=abc; Path=/; Secure"


def test_round_trip():
    original = Cookie(
        "SID", "abc", path="/", domain="example.com", max_age=60,
        expires=FullDate.from_string("Wed, 21 Oct 2015 07:28:00 GMT"),
        secure=True, http_only=True,
    )
    assert Cookie.from_string(str(original)) == original


def test_jar_add_and_get():
    jar = CookieJar()
    jar.add(Cookie("a", "1"))
    jar.add(Cookie("a", "2"))
    assert jar.has("a")
    assert not jar.has("b")
    assert jar.get("a").value == "1"
    assert len(jar) == 2


def test_jar_get_missing_raises():
    with pytest.raises(KeyError):
        CookieJar().get("missing")


def test_jar_add_from_raw():
    jar = CookieJar()
    jar.add_from_raw("a=1; b=2;  c=3")
    assert [(c.name, c.value) for c in jar] == [("a", "1"), ("b", "2"), ("c", "3")]


def test_jar_add_from_raw_invalid():
    with pytest.raises(ValueError):
        CookieJar().add_from_raw("a=1; broken")


def test_jar_remove_all():
    jar = CookieJar()
    jar.add_from_raw("a=1; b=2")
    jar.remove_all_cookies()
    assert len(jar) == 0
    assert not jar.has("a")