# pistache

Building blocks for HTTP/1.1 servers and clients, in plain Python with no
third-party dependencies.

## What it contains

- `pistache.stream`: `StreamCursor`, a read position over text, and the
  matching helpers built on it (`match_raw`, `match_string`,
  `match_literal`, `match_until`, `match_double`, `skip_whitespaces`), plus
  `RawBuffer`, `FileBuffer` and `DynamicStreamBuf`, an output buffer that
  raises `BufferError` once it would grow past its `max_size`.
- `pistache.http_defs`: the `Version`, `Method` and `Code` enums,
  `CacheDirective`, `FullDate` (reads RFC 1123, RFC 850 and asctime dates,
  writes any of the three through `DateFormat`) and `HttpError`.
- `pistache.net`: `Port`, `IP`, `AddressParser` and `Address`. An address is
  written as `host`, `host:port` or `[v6host]:port`; without a port, 80 is
  used.
- `pistache.mime`: `MediaType` with its `Type`, `Subtype` and `Suffix`,
  quality factors (`Q`) and parameters; `MediaType.from_file` guesses a type
  from a handful of file extensions.
- `pistache.cookie`: `Cookie` (the `Set-Cookie` syntax, with `Path`,
  `Domain`, `Max-Age`, `Expires`, `Secure`, `HttpOnly` and extra attributes)
  and `CookieJar`.
- `pistache.http_header`: typed headers such as `ContentLength`,
  `ContentType`, `CacheControl`, `Connection`, `Host`, `Accept`, `Date` and
  `TransferEncoding`, each with `parse` and `write`.
- `pistache.http_headers`: `Registry` (with `default_registry()` holding all
  built-in headers), `Raw` and `Collection`, the headers of one message.
- `pistache.parser`: `RequestParser` and `ResponseParser`, which are fed data
  piece by piece and handle `Content-Length` and chunked bodies; `Query`;
  and `serialize_response`, `serialize_stream_head`, `serialize_chunk` and
  `serialize_stream_end`, which write responses to bytes.
- `pistache.description`: `Description` and its builders for describing a
  REST API (info, paths, parameters, responses) in the shape Swagger uses;
  `Path.swagger_format` turns `/users/:id` into `/users/{id}`.
- `pistache.cpuset`: `CpuSet`, a set of CPU numbers below 1024, and
  `hardware_concurrency()`.
- `pistache.peer`: `Peer`, the remote end of a connection with data attached
  to it, and `TcpHandler`, which keeps track of connected peers.

## Install

```
pip install .
```

## Examples

Parse a request that arrives in pieces:

```python
from pistache.parser import RequestParser, State

parser = RequestParser(4096)
parser.feed(b"GET /hello?name=joe HTTP/1.1\r\nHost: localhost\r\n")
assert parser.parse() is State.AGAIN
parser.feed(b"\r\n")
assert parser.parse() is State.DONE

request = parser.request
print(request.resource)                   # /hello
print(request.query.get("name"))          # joe
```

Work with media types:

```python
from pistache.mime import MediaType, Q

mime = MediaType.from_string("text/html; q=0.83; charset=ISO-8859-4")
print(mime.get_param("charset"))          # ISO-8859-4
print(mime.q == Q.from_float(0.83))       # True
```

Read a `Set-Cookie` value:

```python
from pistache.cookie import Cookie

cookie = Cookie.from_string("session=token; Path=/; HttpOnly")
print(cookie.path, cookie.http_only)      # / True
```

Parse an address:

```python
from pistache.net import Address

address = Address.parse("127.0.0.1:8080")
print(address.host(), address.port)       # 127.0.0.1 8080
```

Write a response:

```python
from pistache.http_defs import Code, Version
from pistache.parser import serialize_response

data = serialize_response(Version.HTTP11, Code.OK, None, None, b"Hello")
# b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nHello"
```

## Errors

Malformed input raises exceptions rather than returning status codes.
Protocol errors raise `pistache.http_defs.HttpError`, which carries the
status code to answer with and a reason: a request larger than the parser's
`max_size` gives 413, a malformed media type 415. Bad addresses, ports,
cookies and cache directives raise `ValueError`; looking up a missing header,
cookie or peer data raises `KeyError`.

## What it does not do

This package parses and writes HTTP messages; it does not move them over the
network. There is no listening socket, event loop, transport, router or
command to start a server: `Peer` and `TcpHandler` are the objects such a
transport would use, and feeding data to the parsers and sending the
serialized bytes is left to the caller. `Description` records an API
description but does not serve it or a documentation UI.

## Running the tests

```
pip install .[test]
pytest
```