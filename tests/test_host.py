"""
Unit tests for hosts.
"""

import io

import pytest

from emitter import CallableHost, Emitter, EmitterError, HTTPResponse, MemoryHost, StreamHost
from emitter.host import HeaderList, splitHeader, splitStatus


class TestHelpers:
	"""Tests for header and status line helpers."""

	def test_split_header(self):
		assert splitHeader("Content-Type: text/plain") == ("Content-Type", "text/plain")
		assert splitHeader("X-Time: 12:30") == ("X-Time", "12:30")

	def test_split_status(self):
		assert splitStatus("HTTP/1.1 200 OK") == ("HTTP/1.1", 200, "OK")
		assert splitStatus("HTTP/2 404") == ("HTTP/2", 404, "")
		assert splitStatus("HTTP/1.1 418 I'm a teapot") == ("HTTP/1.1", 418, "I'm a teapot")


class TestHeaderList:
	"""Tests for header replace and append semantics."""

	def test_replace_keeps_position(self):
		headers = HeaderList()
		headers.add("A: 1")
		headers.add("B: 1")
		headers.add("a: 2")
		assert list(headers.lines()) == ["a: 2", "B: 1"]

	def test_append(self):
		headers = HeaderList()
		headers.add("Set-Cookie: a=1", False)
		headers.add("Set-Cookie: b=2", False)
		assert list(headers.pairs()) == [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]
		assert len(headers) == 2


class TestMemoryHost:
	"""Tests for the in-memory host."""

	def test_write_commits_headers(self):
		host = MemoryHost()
		assert not host.headersSent()
		assert not host.hasOutput()
		host.write(b"a")
		assert host.headersSent()
		assert host.hasOutput()

	def test_flush_moves_buffered_output(self):
		host = MemoryHost(buffered=b"previous")
		assert host.hasOutput()
		host.flush()
		assert host.chunks == [b"previous"]
		assert host.headersSent()

	def test_reset(self):
		host = MemoryHost(sent=True)
		host.header("X-Test: 1")
		host.statusLine("HTTP/1.1 404 Not Found", 404)
		host.write(b"a")
		host.reset()
		assert host.headerList() == []
		assert host.status == 200
		assert host.output == b""
		assert not host.headersSent()


class TestStreamHost:
	"""Tests for the stream host."""

	def test_frames_response(self):
		stream = io.BytesIO()
		response = HTTPResponse.Create("Hello", contentType="text/plain")
		response.addHeader("Set-Cookie", "a=1").addHeader("Set-Cookie", "b=2")
		Emitter(2).emit(response, host=StreamHost(stream))
		assert stream.getvalue() == (
			b"HTTP/1.1 200 OK\r\n"
			b"Content-Type: text/plain\r\n"
			b"Content-Length: 5\r\n"
			b"Set-Cookie: a=1\r\n"
			b"Set-Cookie: b=2\r\n"
			b"\r\n"
			b"Hello"
		)

	def test_head_is_written_without_body(self):
		stream = io.BytesIO()
		host = StreamHost(stream)
		Emitter().emit(HTTPResponse.Create("Hello", status=404), True, host=host)
		assert stream.getvalue() == b"HTTP/1.1 404 Not Found\r\nContent-Length: 5\r\n\r\n"
		assert host.headersSent()
		assert not host.hasOutput()

	def test_cannot_emit_twice(self):
		host = StreamHost(io.BytesIO())
		Emitter().emit(HTTPResponse.Create("Hello"), host=host)
		with pytest.raises(EmitterError):
			Emitter().emit(HTTPResponse.Create("Hello"), host=host)

	def test_cgi_status(self):
		stream = io.BytesIO()
		response = HTTPResponse.Create(b"Missing", status=404, contentType="text/plain")
		Emitter().emit(response, host=StreamHost(stream, cgi=True))
		assert stream.getvalue().startswith(b"Status: 404 Not Found\r\nContent-Type: text/plain\r\n")
		assert stream.getvalue().endswith(b"\r\n\r\nMissing")

	def test_cgi_status_without_reason(self):
		stream = io.BytesIO()
		response = HTTPResponse.Create(status=599, message="")
		Emitter().emit(response, host=StreamHost(stream, cgi=True))
		assert stream.getvalue() == b"Status: 599\r\n\r\n"


class TestCallableHost:
	"""Tests for a host delegating to runtime functions."""

	def test_delegates(self):
		lines: list[tuple[str, bool, int | None]] = []
		output = bytearray()
		host = CallableHost(
			lambda line, replace=True, status=None: lines.append((line, replace, status)),
			output.extend,
			outputLength=lambda: len(output),
		)
		response = HTTPResponse.Create("Hello", status=201, headers={"X-Test": "a"})
		Emitter(3).emit(response, host=host)
		assert lines == [
			("X-Test: a", True, None),
			("Content-Length: 5", True, None),
			("HTTP/1.1 201 Created", True, 201),
		]
		assert bytes(output) == b"Hello"
		assert host.hasOutput()

	def test_runtime_state(self):
		host = CallableHost(lambda line, replace=True, status=None: None, lambda data: None, headersSent=lambda: True)
		with pytest.raises(EmitterError):
			Emitter().emit(HTTPResponse.Create(), host=host)


# EOF
