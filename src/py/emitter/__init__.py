from .http.model import (
	HTTPBody,
	HTTPBodyIO,
	HTTPBodyStream,
	HTTPHeaders,
	HTTPResponse,
	headername,
)  # NOQA: F401
from .http.range import ContentRange, parseContentRange  # NOQA: F401
from .host import Host, MemoryHost, StreamHost, CallableHost  # NOQA: F401
from .emitter import (
	BufferPolicy,
	Emitter,
	EmitterError,
	EmitterErrorKind,
	ResponseEmitter,
	emit,
)  # NOQA: F401

# EOF
