import pytest

from pistache.http_defs import CacheDirective, Directive, FullDate, HttpError, Method
from pistache.http_header import (
    Accept,
    AccessControlAllowHeaders,
    AccessControlAllowMethods,
    AccessControlAllowOrigin,
    AccessControlExposeHeaders,
    Allow,
    Authorization,
    CacheControl,
    Connection,
    ConnectionControl,
    ContentEncoding,
    ContentLength,
    ContentType,
    Date,
    Encoding,
    Expect,
    Expectation,
    Host,
    Location,
    Server,
    TransferEncoding,
    UserAgent,
    encoding_string,
)
from pistache.mime import MediaType, Subtype, Type
from pistache.net import HTTP_STANDARD_PORT, Port


def test_cache_control_parses_trivial_and_timed():
    header = CacheControl()
    header.parse("no-cache, max-age=3600")
    assert header.directives == [
        CacheDirective(Directive.NO_CACHE),
        CacheDirective(Directive.MAX_AGE, 3600),
    ]
    assert header.write() == "no-cache, max-age=3600"


@pytest.mark.parametrize(
    "text",
    [
        "no-store, must-revalidate, public",
        "private, proxy-revalidate",
        "s-maxage=60, min-fresh=5, max-stale=10",
        "only-if-cached, no-transform",
    ],
)
def test_cache_control_round_trip(text):
    header = CacheControl()
    header.parse(text)
    assert header.write() == text


def test_cache_control_skips_repeated_separators():
    header = CacheControl()
    header.parse("no-cache,,  public")
    assert [d.directive for d in header.directives] == [Directive.NO_CACHE, Directive.PUBLIC]


@pytest.mark.parametrize("text", ["no-cache x", "max-age", "max-age=12a", "unknown"])
def test_cache_control_rejects_malformed(text):
    with pytest.raises(ValueError):
        CacheControl().parse(text)


def test_cache_control_zero_delta_is_not_written():
    header = CacheControl(CacheDirective(Directive.MAX_AGE, 0))
    assert header.write() == "max-age"


def test_cache_control_add_directives():
    header = CacheControl()
    header.add_directive(CacheDirective(Directive.NO_STORE))
    header.add_directives([CacheDirective(Directive.PUBLIC), CacheDirective(Directive.MIN_FRESH, 7)])
    assert header.directives == [
        CacheDirective(Directive.NO_STORE),
        CacheDirective(Directive.PUBLIC),
        CacheDirective(Directive.MIN_FRESH, 7),
    ]


@pytest.mark.parametrize(
    "text, control, written",
    [
        ("close", ConnectionControl.CLOSE, "Close"),
        ("keep-alive", ConnectionControl.KEEP_ALIVE, "Keep-Alive"),
        ("upgrade", ConnectionControl.EXT, "Ext"),
    ],
)
def test_connection(text, control, written):
    header = Connection()
    header.parse(text)
    assert header.control is control
    assert header.write() == written


def test_content_length_round_trip():
    header = ContentLength()
    header.parse("1024")
    assert header.value == 1024
    assert header.write() == "1024"


def test_content_length_skips_leading_whitespace():
    header = ContentLength()
    header.parse("  17")
    assert header.value == 17


def test_content_length_keeps_value_on_garbage():
    header = ContentLength(5)
    header.parse("abc")
    assert header.value == 5


def test_expect_continue():
    header = Expect()
    header.parse("100-continue")
    assert header.expectation is Expectation.CONTINUE
    assert header.write() == "100-continue"


def test_expect_other_writes_nothing():
    header = Expect()
    header.parse("something-else")
    assert header.expectation is Expectation.EXT
    assert header.write() == ""


def test_host_with_port():
    header = Host("localhost:8080")
    assert header.host == "localhost"
    assert header.port == Port(8080)
    assert header.write() == "localhost:8080"


def test_host_without_port_uses_standard_port():
    header = Host("example.com")
    assert header.host == "example.com"
    assert header.port == HTTP_STANDARD_PORT


@pytest.mark.parametrize("text", ["example.com:", "example.com:abc"])
def test_host_rejects_bad_port(text):
    with pytest.raises(ValueError):
        Host(text)


@pytest.mark.parametrize(
    "text, encoding",
    [
        ("gzip", Encoding.GZIP),
        ("GZIP", Encoding.GZIP),
        ("deflate", Encoding.DEFLATE),
        ("compress", Encoding.COMPRESS),
        ("identity", Encoding.IDENTITY),
        ("chunked", Encoding.CHUNKED),
        ("brotli", Encoding.UNKNOWN),
    ],
)
def test_encoding_headers_parse(text, encoding):
    for cls in (ContentEncoding, TransferEncoding):
        header = cls()
        header.parse(text)
        assert header.encoding is encoding


def test_encoding_header_writes_name():
    header = TransferEncoding()
    header.parse("chunked")
    assert header.write() == "chunked"


@pytest.mark.parametrize(
    "encoding, text",
    [
        (Encoding.GZIP, "gzip"),
        (Encoding.COMPRESS, "compress"),
        (Encoding.DEFLATE, "deflate"),
        (Encoding.IDENTITY, "identity"),
        (Encoding.CHUNKED, "chunked"),
        (Encoding.UNKNOWN, "unknown"),
    ],
)
def test_encoding_string(encoding, text):
    assert encoding_string(encoding) == text


def test_server_tokens():
    assert Server("pistache").write() == "pistache"
    assert Server(["a", "b"]).write() == "a b"


def test_server_parse_appends():
    header = Server("x")
    header.parse("y")
    assert header.tokens == ["x", "y"]


def test_allow_methods():
    header = Allow()
    header.add_method(Method.GET)
    header.add_methods([Method.POST, Method.PUT])
    assert header.methods == [Method.GET, Method.POST, Method.PUT]
    assert header.write() == "GET, POST, PUT"


def test_allow_parse_keeps_methods():
    header = Allow([Method.DELETE])
    header.parse("GET")
    assert header.methods == [Method.DELETE]


def test_date_round_trip():
    text = "Sun, 06 Nov 1994 08:49:37 GMT"
    header = Date()
    header.parse(text)
    assert header.full_date == FullDate.from_string(text)
    again = Date()
    again.parse(header.write())
    assert again.full_date == header.full_date


def test_date_rejects_garbage():
    with pytest.raises(ValueError):
        Date().parse("not a date")


def test_accept_media_range():
    header = Accept()
    header.parse("text/html, application/json")
    assert header.media_range == [
        MediaType(Type.TEXT, Subtype.HTML),
        MediaType(Type.APPLICATION, Subtype.JSON),
    ]


def test_accept_rejects_trailing_comma():
    with pytest.raises(ValueError):
        Accept().parse("text/html,")


def test_accept_rejects_unknown_type():
    with pytest.raises(HttpError):
        Accept().parse("foo/bar")


def test_content_type_round_trip_and_set_mime():
    header = ContentType()
    header.parse("application/json; charset=utf-8")
    assert header.mime == MediaType(Type.APPLICATION, Subtype.JSON)
    assert header.write() == "application/json; charset=utf-8"
    header.set_mime(MediaType(Type.TEXT, Subtype.PLAIN))
    assert header.write() == "text/plain"


@pytest.mark.parametrize(
    "cls, value",
    [
        (Authorization, "Bearer token"),
        (Location, "/elsewhere"),
        (UserAgent, "curl/8.0"),
        (AccessControlAllowOrigin, "*"),
        (AccessControlAllowHeaders, "Content-Type"),
        (AccessControlExposeHeaders, "X-Request-Id"),
        (AccessControlAllowMethods, "GET, POST"),
    ],
)
def test_string_headers_round_trip(cls, value):
    header = cls()
    header.parse(value)
    assert header.value == value
    assert str(header) == value