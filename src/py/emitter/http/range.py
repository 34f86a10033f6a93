import re
from typing import NamedTuple

# --
# == Content-Range
#
# Parses `Content-Range` values like `bytes 0-499/1234` or `bytes 0-499/*`.
# SEE: https://www.rfc-editor.org/rfc/rfc9110#name-content-range

RE_CONTENT_RANGE: re.Pattern[str] = re.compile(
	r"(?P<unit>\w+)\s+(?P<first>\d+)-(?P<last>\d+)/(?P<length>\d+|\*)"
)


class ContentRange(NamedTuple):
	"""A parsed content range, where `first` and `last` are inclusive
	offsets. A `length` of `None` stands for an unknown complete length (`*`)."""

	unit: str
	first: int
	last: int
	length: int | None = None

	@property
	def isBytes(self) -> bool:
		return self.unit == "bytes"

	@property
	def isUnbounded(self) -> bool:
		return self.length is None

	@property
	def size(self) -> int:
		return self.last - self.first + 1


def parseContentRange(header: str | None) -> ContentRange | None:
	"""Parses the given `Content-Range` header value, returning `None` when
	there is no valid range."""
	if not header:
		return None
	match = RE_CONTENT_RANGE.search(header)
	if not match:
		return None
	first: int = int(match.group("first"))
	last: int = int(match.group("last"))
	if first > last:
		return None
	length: str = match.group("length")
	return ContentRange(
		unit=match.group("unit"),
		first=first,
		last=last,
		length=None if length == "*" else int(length),
	)


# EOF
