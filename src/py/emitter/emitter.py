from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .config import BUFFER
from .host import Host, stdoutHost
from .http.model import HTTPBody, HTTPResponse, headername
from .http.range import ContentRange, parseContentRange
from .utils.logging import debug, logged, warning

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class EmitterErrorKind(Enum):
	InvalidConfiguration = "invalid-configuration"
	HeadersAlreadySent = "headers-already-sent"
	OutputAlreadySent = "output-already-sent"


class EmitterError(RuntimeError):
	"""Raised when a response cannot be emitted. None of these are
	recoverable by emitting the same response again."""

	@staticmethod
	def InvalidBufferLength(length: int) -> "EmitterError":
		return EmitterError(
			EmitterErrorKind.InvalidConfiguration,
			f"Buffer length must be greater than zero; received `{length}`.",
		)

	@staticmethod
	def HeadersSent() -> "EmitterError":
		return EmitterError(
			EmitterErrorKind.HeadersAlreadySent,
			"Unable to emit response; headers already sent.",
		)

	@staticmethod
	def OutputSent() -> "EmitterError":
		return EmitterError(
			EmitterErrorKind.OutputAlreadySent,
			"Unable to emit response; output has been emitted previously.",
		)

	def __init__(self, kind: EmitterErrorKind, message: str):
		super().__init__(message)
		self.kind: EmitterErrorKind = kind
		self.message: str = message


# -----------------------------------------------------------------------------
#
# BUFFERING
#
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class BufferPolicy:
	"""Defines how bodies are written: in one operation when `size` is `None`,
	or in chunks of at most `size` bytes."""

	size: int | None = None

	@staticmethod
	def Unbuffered() -> "BufferPolicy":
		return BufferPolicy(None)

	@staticmethod
	def Chunked(size: int) -> "BufferPolicy":
		return BufferPolicy(size)

	def __post_init__(self) -> None:
		if self.size is not None and self.size < 1:
			raise EmitterError.InvalidBufferLength(self.size)

	@property
	def isChunked(self) -> bool:
		return self.size is not None


class BodyMode(Enum):
	"""How a body is going to be emitted."""

	Skip = 0
	Whole = 1
	Chunked = 2
	Ranged = 3


# -----------------------------------------------------------------------------
#
# EMITTER
#
# -----------------------------------------------------------------------------


class ResponseEmitter(ABC):
	"""Emits an HTTP response (status line, headers and body) to the output
	of its host runtime. Implementations may refuse to emit when the
	headers were already sent or some output was already emitted."""

	@abstractmethod
	def emit(self, response: HTTPResponse, withoutBody: bool = False) -> int: ...


class Emitter(ResponseEmitter):
	"""Emits responses to a `Host`, writing bodies in one go or in chunks
	depending on the buffer policy.

	The emitter holds no state besides its configuration and can be reused
	across responses. It is not safe to emit the same response concurrently,
	as emission reads and repositions the response body."""

	__slots__ = ["buffer", "host"]

	def __init__(
		self, buffer: BufferPolicy | int | None = None, host: Host | None = None
	):
		self.buffer: BufferPolicy = (
			buffer if isinstance(buffer, BufferPolicy) else BufferPolicy(buffer)
		)
		self.host: Host | None = host

	def emit(
		self,
		response: HTTPResponse,
		withoutBody: bool = False,
		*,
		host: Host | None = None,
	) -> int:
		"""Emits the response, returning the number of body bytes written."""
		out: Host = host if host is not None else self.host or stdoutHost()
		if out.headersSent():
			raise EmitterError.HeadersSent()
		if out.hasOutput():
			raise EmitterError.OutputSent()
		self.emitHeaders(response, out)
		self.emitStatusLine(response, out)
		written: int = self.emitBody(response, out, withoutBody)
		out.end()
		logged(debug) and debug(
			"Response emitted",
			Status=response.status,
			Headers=len(response.headers),
			Written=written,
		)
		return written

	def emitHeaders(self, response: HTTPResponse, host: Host) -> None:
		for name, values in response.headers.items():
			name = headername(name)
			# Cookies are never merged by proxies nor runtimes, so we never
			# replace them.
			replace: bool = name != "Set-Cookie"
			for value in values:
				host.header(f"{name}: {value}", replace)
				replace = False

	def emitStatusLine(self, response: HTTPResponse, host: Host) -> None:
		host.statusLine(self.statusLine(response), response.status)

	def statusLine(self, response: HTTPResponse) -> str:
		reason: str = (response.message or "").strip()
		protocol: str = response.protocol.strip()
		return f"HTTP/{protocol} {response.status}{f' {reason}' if reason else ''}"

	# =========================================================================
	# BODY
	# =========================================================================

	def bodyMode(
		self, response: HTTPResponse, withoutBody: bool
	) -> tuple[BodyMode, ContentRange | None]:
		if withoutBody or not response.body.isReadable():
			return BodyMode.Skip, None
		elif not self.buffer.isChunked:
			return BodyMode.Whole, None
		content_range = parseContentRange(response.header("Content-Range"))
		if content_range and content_range.isBytes:
			return BodyMode.Ranged, content_range
		else:
			return BodyMode.Chunked, None

	def emitBody(
		self, response: HTTPResponse, host: Host, withoutBody: bool = False
	) -> int:
		mode, content_range = self.bodyMode(response, withoutBody)
		body: HTTPBody = response.body
		if mode is BodyMode.Skip:
			return 0
		elif mode is BodyMode.Whole:
			return self._write(host, body.readAll())
		# Any output buffered by the host goes before the chunks
		host.flush()
		if mode is BodyMode.Ranged and content_range:
			return self.emitBodyRange(body, host, content_range)
		else:
			return self.emitBodyChunks(body, host)

	def emitBodyChunks(self, body: HTTPBody, host: Host) -> int:
		size: int = self.buffer.size or 1
		written: int = 0
		if body.isSeekable():
			body.rewind()
		while not body.isAtEnd():
			chunk: bytes = body.read(size)
			if not chunk:
				break
			written += self._write(host, chunk)
		return written

	def emitBodyRange(
		self, body: HTTPBody, host: Host, content_range: ContentRange
	) -> int:
		size: int = self.buffer.size or 1
		remaining: int = content_range.size
		written: int = 0
		if body.isSeekable():
			body.seek(content_range.first)
		while remaining >= size and not body.isAtEnd():
			chunk: bytes = body.read(size)
			if not chunk:
				break
			remaining -= len(chunk)
			written += self._write(host, chunk)
		# Reads may be short, so the tail can take more than one read
		while remaining > 0 and not body.isAtEnd():
			chunk = body.read(remaining)
			if not chunk:
				break
			remaining -= len(chunk)
			written += self._write(host, chunk)
		if remaining > 0:
			warning(
				"Body ended before the end of its range",
				Range=f"{content_range.first}-{content_range.last}",
				Missing=remaining,
			)
		return written

	def _write(self, host: Host, chunk: bytes) -> int:
		if chunk:
			host.write(chunk)
		return len(chunk)


# -----------------------------------------------------------------------------
#
# API
#
# -----------------------------------------------------------------------------


def emit(
	response: HTTPResponse, withoutBody: bool = False, host: Host | None = None
) -> int:
	"""Emits the response using the buffer length configured in the
	environment, to the given host or the standard output."""
	return Emitter(BUFFER).emit(response, withoutBody, host=host)


# EOF
