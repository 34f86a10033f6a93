DEFAULT_ENCODING: str = "utf8"
EOL: bytes = b"\r\n"


def asBytes(value: str | bytes | bytearray | None) -> bytes:
	"""Coerces the given value to bytes, encoding strings with the default
	encoding."""
	if isinstance(value, bytes):
		return value
	elif isinstance(value, bytearray):
		return bytes(value)
	elif isinstance(value, str):
		return value.encode(DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


# NOTE: Header lines are restricted to latin-1, like on the wire.
def asHeaderBytes(line: str) -> bytes:
	return line.encode("latin-1")


# EOF
