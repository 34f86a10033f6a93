from os import getenv
from .utils.io import DEFAULT_ENCODING  # NOQA: F401


def _bufferLength(value: str | None) -> int | None:
	return int(value) if value else None


# Chunk size used by the module-level `emit`, unset means unbuffered. An
# invalid value is rejected when the emitter is created, not here.
BUFFER: int | None = _bufferLength(getenv("EMITTER_BUFFER"))

# One of Debug, Info, Warning, Error
LOG_LEVEL: str = getenv("EMITTER_LOG_LEVEL", "Info")

# EOF
