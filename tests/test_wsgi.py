"""
Tests for the WSGI bridge.
"""

import pytest

from emitter import EmitterError, HTTPResponse
from emitter.bridge.wsgi import WSGIHost, application


class StartResponse:
	"""Records what a WSGI server receives."""

	def __init__(self):
		self.status: str | None = None
		self.headers: list[tuple[str, str]] | None = None
		self.chunks: list[bytes] = []

	def __call__(self, status, headers, exc_info=None):
		self.status = status
		self.headers = headers
		return self.chunks.append


def test_streams_body():
	start_response = StartResponse()
	app = application(lambda environ: HTTPResponse.Create("Hello", contentType="text/plain"), 2)
	assert list(app({"REQUEST_METHOD": "GET"}, start_response)) == []
	assert start_response.status == "200 OK"
	assert start_response.headers == [("Content-Type", "text/plain"), ("Content-Length", "5")]
	assert start_response.chunks == [b"He", b"ll", b"o"]


def test_head_request_has_no_body():
	start_response = StartResponse()
	app = application(lambda environ: HTTPResponse.Create("Hello"))
	app({"REQUEST_METHOD": "HEAD"}, start_response)
	assert start_response.status == "200 OK"
	assert start_response.headers == [("Content-Length", "5")]
	assert start_response.chunks == []


def test_ranged_body():
	start_response = StartResponse()
	app = application(
		lambda environ: HTTPResponse.Create(
			b"Contents", status=206, headers={"content-range": "bytes 2-6/8"}
		),
		3,
	)
	app({"REQUEST_METHOD": "GET"}, start_response)
	assert start_response.status == "206 Partial Content"
	assert b"".join(start_response.chunks) == b"ntent"


def test_status_requires_reason():
	host = WSGIHost(StartResponse())
	host.statusLine("HTTP/1.1 204", 204)
	assert host.status == "204 No Content"
	host.statusLine("HTTP/1.1 299", 299)
	assert host.status == "299 Unknown"


def test_cookies_are_not_merged():
	start_response = StartResponse()
	response = HTTPResponse.Create().addHeader("Set-Cookie", "a=1").addHeader("Set-Cookie", "b=2")
	application(lambda environ: response)({}, start_response)
	assert start_response.headers == [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]


def test_handler_errors_propagate():
	def handler(environ):
		raise RuntimeError("Handler failed")

	with pytest.raises(RuntimeError):
		application(handler)({}, StartResponse())


def test_invalid_buffer():
	with pytest.raises(EmitterError):
		application(lambda environ: HTTPResponse.Create(), 0)


# EOF
