import inspect
import io
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator

from ..utils.io import asBytes
from .status import HTTP_STATUS

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`."""
	if name in headers:
		return headers[name]
	key: str = name.lower()
	if key in headers:
		return headers[key]
	else:
		normalized: str = "-".join(_.capitalize() for _ in key.split("-"))
		headers[key] = normalized
		return normalized


THeaderValue = str | int | list[str] | tuple[str, ...]


def headervalues(value: THeaderValue) -> list[str]:
	if isinstance(value, list) or isinstance(value, tuple):
		return [str(_) for _ in value]
	else:
		return [str(value)]


# -----------------------------------------------------------------------------
#
# HEADERS
#
# -----------------------------------------------------------------------------


class HTTPHeaders:
	"""An ordered, case-insensitive collection of headers where each header
	may have more than one value. Names are kept as they were first given."""

	__slots__ = ["_values"]

	def __init__(
		self,
		headers: "dict[str, THeaderValue] | Iterable[tuple[str, THeaderValue]] | HTTPHeaders | None" = None,
	):
		self._values: dict[str, tuple[str, list[str]]] = {}
		items: Iterable[tuple[str, THeaderValue]] = (
			()
			if headers is None
			else (
				headers.items()
				if isinstance(headers, (dict, HTTPHeaders))
				else headers
			)
		)
		for k, v in items:
			self.add(k, v)

	def get(self, name: str) -> list[str]:
		entry = self._values.get(name.lower())
		return list(entry[1]) if entry else []

	def line(self, name: str) -> str:
		"""Returns the values of the given header joined by commas, or an
		empty string when the header is not defined."""
		return ", ".join(self.get(name))

	def set(self, name: str, value: THeaderValue) -> "HTTPHeaders":
		key: str = name.lower()
		entry = self._values.get(key)
		self._values[key] = (entry[0] if entry else name, headervalues(value))
		return self

	def add(self, name: str, value: THeaderValue) -> "HTTPHeaders":
		key: str = name.lower()
		if key in self._values:
			self._values[key][1].extend(headervalues(value))
		else:
			self._values[key] = (name, headervalues(value))
		return self

	def remove(self, name: str) -> "HTTPHeaders":
		self._values.pop(name.lower(), None)
		return self

	def items(self) -> Iterator[tuple[str, list[str]]]:
		for name, values in self._values.values():
			yield name, list(values)

	def __contains__(self, name: object) -> bool:
		return isinstance(name, str) and name.lower() in self._values

	def __len__(self) -> int:
		return len(self._values)

	def __str__(self) -> str:
		return f"Headers({', '.join(f'{k}={v}' for k, v in self.items())})"


# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------

# Read size when a body is loaded as a whole
BODY_READ_SIZE: int = 64_000


class HTTPBody(ABC):
	"""A readable, optionally seekable body stream. Bodies are consumed by a
	single reader at a time, and reading moves the position."""

	@staticmethod
	def Create(content: Any) -> "HTTPBody":
		"""Wraps the given content in the matching body type."""
		if isinstance(content, HTTPBody):
			return content
		elif content is None:
			return HTTPBodyIO.FromBytes(b"")
		elif isinstance(content, (str, bytes, bytearray)):
			return HTTPBodyIO.FromBytes(asBytes(content))
		elif isinstance(content, Path):
			return HTTPBodyIO.FromPath(content)
		elif isinstance(content, io.TextIOBase):
			raise ValueError(f"Body files must be opened in binary mode: {content}")
		elif isinstance(content, io.IOBase):
			return HTTPBodyIO(content)  # type: ignore[arg-type]
		elif inspect.isgenerator(content) or isinstance(content, Iterator):
			return HTTPBodyStream(content)
		else:
			raise ValueError(f"Unsupported content {type(content)}:{content}")

	@abstractmethod
	def isReadable(self) -> bool: ...

	@abstractmethod
	def isSeekable(self) -> bool: ...

	@abstractmethod
	def isAtEnd(self) -> bool: ...

	@abstractmethod
	def read(self, size: int) -> bytes:
		"""Reads up to `size` bytes, which may return less."""
		...

	def seek(self, offset: int) -> None:
		raise OSError(f"Body is not seekable: {self}")

	def rewind(self) -> None:
		self.seek(0)

	def readAll(self) -> bytes:
		"""Reads the whole body, from the start when the body is seekable."""
		if self.isSeekable():
			self.rewind()
		data = bytearray()
		while not self.isAtEnd():
			chunk = self.read(BODY_READ_SIZE)
			if not chunk:
				break
			data += chunk
		return bytes(data)

	def close(self) -> None:
		pass


class HTTPBodyIO(HTTPBody):
	"""A body backed by a binary file object (in-memory, file, spooled)."""

	__slots__ = ["stream", "_eof"]

	@staticmethod
	def FromBytes(data: bytes) -> "HTTPBodyIO":
		return HTTPBodyIO(io.BytesIO(data))

	@staticmethod
	def FromPath(path: Path | str) -> "HTTPBodyIO":
		return HTTPBodyIO(open(path, "rb"))

	def __init__(self, stream: BinaryIO):
		self.stream: BinaryIO = stream
		# Only used for non-seekable streams
		self._eof: bool = False

	def isReadable(self) -> bool:
		return not self.stream.closed and self.stream.readable()

	def isSeekable(self) -> bool:
		return not self.stream.closed and self.stream.seekable()

	def isAtEnd(self) -> bool:
		if self._eof or self.stream.closed:
			return True
		elif self.stream.seekable():
			position: int = self.stream.tell()
			end: int = self.stream.seek(0, os.SEEK_END)
			self.stream.seek(position)
			return position >= end
		else:
			return False

	def seek(self, offset: int) -> None:
		if not self.isSeekable():
			raise OSError(f"Body is not seekable: {self}")
		self.stream.seek(offset)
		self._eof = False

	def read(self, size: int) -> bytes:
		if not self.isReadable():
			raise OSError(f"Body is not readable: {self}")
		# NOTE: Non-blocking streams return None when no data is available
		data: bytes | None = self.stream.read(size)
		if not data:
			self._eof = True
			return b""
		return data

	def close(self) -> None:
		self.stream.close()

	def __str__(self) -> str:
		return f"BodyIO({getattr(self.stream, 'name', type(self.stream).__name__)})"


class HTTPBodyStream(HTTPBody):
	"""A body produced by an iterator of chunks. The stream can only be read
	once and cannot be repositioned."""

	__slots__ = ["stream", "buffer", "_done"]

	def __init__(self, stream: Iterable[bytes | str]):
		self.stream: Iterator[bytes | str] = iter(stream)
		self.buffer: bytearray = bytearray()
		self._done: bool = False

	def _fill(self, size: int) -> None:
		while len(self.buffer) < size and not self._done:
			try:
				self.buffer += asBytes(next(self.stream))
			except StopIteration:
				self._done = True

	def isReadable(self) -> bool:
		return True

	def isSeekable(self) -> bool:
		return False

	def isAtEnd(self) -> bool:
		# We need to look ahead, as the producer may have nothing left
		self._fill(1)
		return not self.buffer

	def read(self, size: int) -> bytes:
		self._fill(size)
		data: bytes = bytes(self.buffer[:size])
		del self.buffer[:size]
		return data

	def close(self) -> None:
		close = getattr(self.stream, "close", None)
		if close:
			close()
		self._done = True
		self.buffer.clear()

	def __str__(self) -> str:
		return f"BodyStream({self.stream})"


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPResponse:
	"""An HTTP response, as consumed by emitters."""

	__slots__ = ["protocol", "status", "message", "headers", "body"]

	@staticmethod
	def Create(
		content: Any = None,
		contentType: str | None = None,
		headers: "dict[str, THeaderValue] | HTTPHeaders | None" = None,
		status: int = 200,
		message: str | None = None,
		protocol: str = "1.1",
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects."""
		updated_headers: HTTPHeaders = HTTPHeaders(headers)
		if contentType is not None:
			updated_headers.set("Content-Type", contentType)
		# Only payloads we hold in memory have a known length
		if (
			isinstance(content, (str, bytes, bytearray))
			and "Content-Length" not in updated_headers
		):
			updated_headers.set("Content-Length", len(asBytes(content)))
		return HTTPResponse(
			protocol=protocol,
			status=status,
			message=HTTP_STATUS.get(status, "") if message is None else message,
			headers=updated_headers,
			body=HTTPBody.Create(content),
		)

	def __init__(
		self,
		protocol: str,
		status: int,
		message: str | None,
		headers: HTTPHeaders,
		body: HTTPBody,
	):
		if status < 100:
			raise ValueError(f"Invalid HTTP status code: {status}")
		# We only keep the version token, so `HTTP/1.1` becomes `1.1`
		self.protocol: str = protocol.removeprefix("HTTP/")
		self.status: int = status
		self.message: str | None = message
		self.headers: HTTPHeaders = headers
		self.body: HTTPBody = body

	def header(self, name: str) -> str | None:
		return self.headers.line(name) if name in self.headers else None

	def headerValues(self, name: str) -> list[str]:
		return self.headers.get(name)

	def setHeader(self, name: str, value: THeaderValue | None) -> "HTTPResponse":
		if value is None:
			self.headers.remove(name)
		else:
			self.headers.set(name, value)
		return self

	def addHeader(self, name: str, value: THeaderValue) -> "HTTPResponse":
		self.headers.add(name, value)
		return self

	def __str__(self) -> str:
		return f"Response(HTTP/{self.protocol} {self.status} {self.message} {self.headers} {self.body})"


# EOF
