from typing import Any, Callable, Iterable

from ..emitter import BufferPolicy, Emitter
from ..host import HeaderList, Host, splitStatus
from ..http.model import HTTPResponse
from ..http.status import HTTP_STATUS
from ..utils.logging import exception

# --
# ## WSGI Bridge
#
# Emits responses through a WSGI gateway, using the `write` callable returned
# by `start_response` so that bodies are streamed as they are read.

# SEE: https://peps.python.org/pep-3333/#the-write-callable

TEnviron = dict[str, Any]
TWSGIWrite = Callable[[bytes], object]
TStartResponse = Callable[..., TWSGIWrite]
THandler = Callable[[TEnviron], HTTPResponse]
TApplication = Callable[[TEnviron, TStartResponse], Iterable[bytes]]


class WSGIHost(Host):
	"""A host that starts the WSGI response on the first write or flush."""

	def __init__(self, start_response: TStartResponse):
		self.startResponse: TStartResponse = start_response
		self.headers: HeaderList = HeaderList()
		self.status: str = "200 OK"
		self._write: TWSGIWrite | None = None
		self.written: int = 0

	def headersSent(self) -> bool:
		return self._write is not None

	def hasOutput(self) -> bool:
		return self.written > 0

	def header(self, line: str, replace: bool = True) -> None:
		self.headers.add(line, replace)

	def statusLine(self, line: str, status: int) -> None:
		# WSGI requires a reason phrase
		_, _, reason = splitStatus(line)
		self.status = f"{status} {reason or HTTP_STATUS.get(status, 'Unknown')}"

	def start(self) -> TWSGIWrite:
		if self._write is None:
			self._write = self.startResponse(self.status, list(self.headers.pairs()))
		return self._write

	def flush(self) -> None:
		self.start()

	def write(self, data: bytes) -> None:
		self.start()(data)
		self.written += len(data)

	def end(self) -> None:
		# Empty bodies are never written, so the response may not be started
		self.start()


def application(
	handler: THandler, buffer: BufferPolicy | int | None = None
) -> TApplication:
	"""Turns a handler producing responses into a WSGI application that
	emits them. Bodies are not emitted for `HEAD` requests."""
	emitter = Emitter(buffer)

	def app(environ: TEnviron, start_response: TStartResponse) -> Iterable[bytes]:
		response: HTTPResponse = handler(environ)
		host = WSGIHost(start_response)
		try:
			emitter.emit(
				response,
				environ.get("REQUEST_METHOD", "GET") == "HEAD",
				host=host,
			)
		except Exception as e:
			raise exception(e, "Could not emit WSGI response")
		finally:
			response.body.close()
		return []

	return app


# EOF
