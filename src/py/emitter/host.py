import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Iterator

from mypy_extensions import Arg, DefaultArg

from .http.status import HTTP_STATUS
from .utils.io import EOL, asHeaderBytes

# --
# == Hosts
#
# A host stands for the output channel of the runtime serving the
# response. Emitters only go through this interface, which makes it possible
# to target a raw stream, a gateway like WSGI or an in-memory capture.

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def splitHeader(line: str) -> tuple[str, str]:
	"""Splits a `Name: value` header line."""
	name, _, value = line.partition(":")
	return name.strip(), value.strip()


def splitStatus(line: str) -> tuple[str, int, str]:
	"""Splits a `HTTP/1.1 200 OK` status line into protocol, status and
	reason, where the reason may be empty."""
	protocol, _, rest = line.partition(" ")
	code, _, reason = rest.partition(" ")
	return protocol, int(code), reason.strip()


class HeaderList:
	"""Header lines grouped by (case-insensitive) name. Replacing a header
	drops all its previous lines, but the header keeps its position."""

	__slots__ = ["headers"]

	def __init__(self) -> None:
		self.headers: dict[str, list[str]] = {}

	def add(self, line: str, replace: bool = True) -> None:
		key: str = splitHeader(line)[0].lower()
		if replace or key not in self.headers:
			self.headers[key] = []
		self.headers[key].append(line)

	def lines(self) -> Iterator[str]:
		for lines in self.headers.values():
			yield from lines

	def pairs(self) -> Iterator[tuple[str, str]]:
		for line in self.lines():
			yield splitHeader(line)

	def clear(self) -> None:
		self.headers.clear()

	def __len__(self) -> int:
		return sum(len(_) for _ in self.headers.values())


# -----------------------------------------------------------------------------
#
# HOST
#
# -----------------------------------------------------------------------------


class Host(ABC):
	"""The primitives of the runtime output channel."""

	@abstractmethod
	def headersSent(self) -> bool:
		"""Tells if the headers have already been committed."""
		...

	@abstractmethod
	def hasOutput(self) -> bool:
		"""Tells if some output is already buffered or emitted."""
		...

	@abstractmethod
	def header(self, line: str, replace: bool = True) -> None: ...

	@abstractmethod
	def statusLine(self, line: str, status: int) -> None: ...

	@abstractmethod
	def flush(self) -> None: ...

	@abstractmethod
	def write(self, data: bytes) -> None: ...

	def end(self) -> None:
		"""Called once a response is emitted, so that hosts deferring their
		head can commit it."""
		pass


class MemoryHost(Host):
	"""Captures the emitted response in memory, tracking each individual
	write. The host can be primed as if the runtime had already started
	its output."""

	def __init__(self, *, sent: bool = False, buffered: bytes = b""):
		self.headers: HeaderList = HeaderList()
		self.status: int = 200
		self.line: str = ""
		self.buffered: bytearray = bytearray(buffered)
		self.chunks: list[bytes] = []
		self.sent: bool = sent

	@property
	def output(self) -> bytes:
		return b"".join(self.chunks)

	def headerList(self) -> list[str]:
		return list(self.headers.lines())

	def headersSent(self) -> bool:
		return self.sent

	def hasOutput(self) -> bool:
		return len(self.buffered) > 0 or len(self.chunks) > 0

	def header(self, line: str, replace: bool = True) -> None:
		self.headers.add(line, replace)

	def statusLine(self, line: str, status: int) -> None:
		self.line = line
		self.status = status

	def flush(self) -> None:
		self.sent = True
		if self.buffered:
			self.chunks.append(bytes(self.buffered))
			self.buffered.clear()

	def write(self, data: bytes) -> None:
		self.sent = True
		self.chunks.append(data)

	def reset(self) -> "MemoryHost":
		self.headers.clear()
		self.status = 200
		self.line = ""
		self.buffered.clear()
		self.chunks.clear()
		self.sent = False
		return self


class StreamHost(Host):
	"""Writes the response with its HTTP framing to a binary stream, such
	as a socket file or the standard output. The head is written on the
	first write or flush. In CGI mode, the status line is sent as a
	`Status` header."""

	def __init__(self, stream: BinaryIO | None = None, *, cgi: bool = False):
		self.stream: BinaryIO = sys.stdout.buffer if stream is None else stream
		self.cgi: bool = cgi
		self.headers: HeaderList = HeaderList()
		self.line: str = "HTTP/1.1 200 OK"
		self.status: int = 200
		self.committed: bool = False
		self.written: int = 0

	def head(self) -> bytes:
		"""Serializes the head of the response."""
		if self.cgi:
			_, status, reason = splitStatus(self.line)
			first: str = (
				f"Status: {status} {reason or HTTP_STATUS.get(status, '')}".rstrip()
			)
		else:
			first = self.line
		lines: list[str] = [first] + list(self.headers.lines())
		return b"".join(asHeaderBytes(_) + EOL for _ in lines) + EOL

	def commit(self) -> None:
		if not self.committed:
			self.committed = True
			self.stream.write(self.head())

	def headersSent(self) -> bool:
		return self.committed

	def hasOutput(self) -> bool:
		return self.written > 0

	def header(self, line: str, replace: bool = True) -> None:
		self.headers.add(line, replace)

	def statusLine(self, line: str, status: int) -> None:
		self.line = line
		self.status = status

	def flush(self) -> None:
		self.commit()
		self.stream.flush()

	def write(self, data: bytes) -> None:
		self.commit()
		self.stream.write(data)
		self.written += len(data)

	def end(self) -> None:
		self.flush()


# The standard output is shared by the whole process, and so is its host
STDOUT: StreamHost | None = None


def stdoutHost() -> StreamHost:
	"""Returns the host writing to the standard output, created on first use."""
	global STDOUT
	if STDOUT is None:
		STDOUT = StreamHost()
	return STDOUT


# The signatures of the primitives of runtimes exposing free functions
THeaderFunction = Callable[
	[Arg(str, "line"), DefaultArg(bool, "replace"), DefaultArg(int | None, "status")],
	None,
]
THeadersSentFunction = Callable[[], bool]
TOutputLengthFunction = Callable[[], int]
TFlushFunction = Callable[[], None]
TWriteFunction = Callable[[Arg(bytes, "data")], object]


class CallableHost(Host):
	"""A host that delegates to plain functions, where the status line is
	sent as a header along with its status code."""

	def __init__(
		self,
		header: THeaderFunction,
		write: TWriteFunction,
		*,
		headersSent: THeadersSentFunction = lambda: False,
		outputLength: TOutputLengthFunction = lambda: 0,
		flush: TFlushFunction = lambda: None,
	):
		self._header: THeaderFunction = header
		self._write: TWriteFunction = write
		self._headersSent: THeadersSentFunction = headersSent
		self._outputLength: TOutputLengthFunction = outputLength
		self._flush: TFlushFunction = flush

	def headersSent(self) -> bool:
		return self._headersSent()

	def hasOutput(self) -> bool:
		return self._outputLength() > 0

	def header(self, line: str, replace: bool = True) -> None:
		self._header(line, replace, None)

	def statusLine(self, line: str, status: int) -> None:
		self._header(line, True, status)

	def flush(self) -> None:
		self._flush()

	def write(self, data: bytes) -> None:
		self._write(data)


# EOF
