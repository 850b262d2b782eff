import pytest

from pistache.http_defs import HttpError
from pistache.mime import MediaType, Q, Subtype, Suffix, Type


def _parsed(text):
    first = MediaType.from_string(text)
    second = MediaType()
    second.parse(text)
    return [first, second]


def test_basic():
    m1 = MediaType(Type.TEXT, Subtype.PLAIN)
    assert m1.top is Type.TEXT
    assert m1.sub is Subtype.PLAIN
    assert m1.suffix is Suffix.NONE
    assert str(m1) == "text/plain"
    assert m1 == MediaType(Type.TEXT, Subtype.PLAIN)
    assert m1 != MediaType(Type.APPLICATION, Subtype.JSON)

    m2 = MediaType(Type.APPLICATION, Subtype.XHTML, Suffix.XML)
    assert str(m2) == "application/xhtml+xml"

    m3 = MediaType(Type.TEXT, Subtype.PLAIN)
    assert m3.q is None
    m3.set_quality(Q.from_float(0.7))
    assert m3.q == Q(70)
    assert str(m3) == "text/plain; q=0.7"

    m4 = MediaType(Type.APPLICATION, Subtype.JSON, Suffix.ZIP)
    m4.set_quality(Q.from_float(0.79))
    assert str(m4) == "application/json+zip; q=0.79"

    m5 = MediaType(Type.TEXT, Subtype.HTML)
    m5.set_quality(Q.from_float(1.0))
    m5.set_param("charset", "utf-8")
    assert str(m5) == "text/html; q=1; charset=utf-8"


def test_valid_parsing_simple():
    for m in _parsed("application/json"):
        assert m == MediaType(Type.APPLICATION, Subtype.JSON)
        assert m.q is None


def test_valid_parsing_suffix():
    for m in _parsed("application/xhtml+xml"):
        assert m == MediaType(Type.APPLICATION, Subtype.XHTML, Suffix.XML)
        assert m.q is None


def test_valid_parsing_quality():
    for m in _parsed("application/json; q=0.3"):
        assert m == MediaType(Type.APPLICATION, Subtype.JSON)
        assert m.q == Q.from_float(0.3)
    for m in _parsed("application/xhtml+xml; q=0.7"):
        assert m.top is Type.APPLICATION
        assert m.sub is Subtype.XHTML
        assert m.suffix is Suffix.XML
        assert m.q == Q(70)
    for m in _parsed("application/xhtml+xml; q=0.78"):
        assert m.q == Q(78)


def test_valid_parsing_vendor_and_ext():
    for m in _parsed("application/vnd.adobe.flash-movie"):
        assert m.top is Type.APPLICATION
        assert m.sub is Subtype.VENDOR
        assert m.suffix is Suffix.NONE
        assert m.raw_sub() == "vnd.adobe.flash-movie"
    for m in _parsed("application/vnd.mycompany.myapp-v2+json"):
        assert m.sub is Subtype.VENDOR
        assert m.suffix is Suffix.JSON
        assert m.raw_sub() == "vnd.mycompany.myapp-v2"
    for m in _parsed("application/x-myapp-v1+json"):
        assert m.sub is Subtype.EXT
        assert m.suffix is Suffix.JSON
        assert m.raw_sub() == "x-myapp-v1"
    for m in _parsed("audio/x-my-codec"):
        assert m.top is Type.AUDIO
        assert m.sub is Subtype.EXT
        assert m.suffix is Suffix.NONE
        assert m.raw_sub() == "x-my-codec"


def test_valid_parsing_params():
    for m in _parsed("text/html; charset=ISO-8859-4"):
        assert m == MediaType(Type.TEXT, Subtype.HTML)
        assert m.q is None
        assert m.get_param("charset") == "ISO-8859-4"
    for m in _parsed("text/html; q=0.83; charset=ISO-8859-4"):
        assert m == MediaType(Type.TEXT, Subtype.HTML)
        assert m.q == Q(83)
        assert m.get_param("charset") == "ISO-8859-4"


@pytest.mark.parametrize(
    "text",
    [
        "applicationjson",
        "my/json",
        "text/",
        "text/plain+",
        "video/mp4;",
        "image/png;   ",
        "text/plain; q",
        "text/plain;    q",
        "application/xhtml+xml;    q=a0.2",
        "application/xhtml+xml;  q=0.2b",
        "text/html; q=0.21;",
        "text/html; q=0.21; charset",
        "text/html; q=0.21; charset=",
        "text/html; q=0.21; charset=ISO-8859-4;  ",
    ],
)
def test_invalid_parsing(text):
    with pytest.raises(HttpError) as info:
        MediaType.from_string(text)
    assert info.value.code == 415


def test_case_insensitive():
    for m in _parsed("Application/Json"):
        assert m == MediaType(Type.APPLICATION, Subtype.JSON)
        assert m.q is None
    for m in _parsed("aPpliCAtion/Xhtml+XML"):
        assert m == MediaType(Type.APPLICATION, Subtype.XHTML, Suffix.XML)
        assert m.q is None
    for m in _parsed("Application/Xhtml+XML; q=0.78"):
        assert m.q == Q(78)


def test_parsed_keeps_raw_text():
    text = "text/html; q=0.83; charset=ISO-8859-4"
    assert str(MediaType.from_string(text)) == text


def test_from_file():
    assert MediaType.from_file("photo.jpg") == MediaType(Type.IMAGE, Subtype.JPEG)
    assert MediaType.from_file("notes.md") == MediaType(Type.TEXT, Subtype.PLAIN)
    assert MediaType.from_file("blob.bin") == MediaType(Type.APPLICATION, Subtype.OCTET_STREAM)
    assert not MediaType.from_file("archive.tar.gz").is_valid()
    assert not MediaType.from_file("README").is_valid()


def test_is_valid():
    assert MediaType(Type.TEXT, Subtype.PLAIN).is_valid()
    assert not MediaType().is_valid()
    assert not MediaType(Type.TEXT).is_valid()


def test_quality_strings():
    assert str(Q(0)) == "q=0"
    assert str(Q(100)) == "q=1"
    assert str(Q(70)) == "q=0.7"
    assert str(Q(79)) == "q=0.79"
    with pytest.raises(ValueError):
        Q(101)


def test_params_set_and_get():
    m = MediaType(Type.TEXT, Subtype.HTML)
    assert m.get_param("charset") is None
    m.set_param("charset", "utf-8")
    assert m.get_param("charset") == "utf-8"