"""
Ranged File Server Example

This demonstrates serving a file through a WSGI server, honoring
`Range` requests by emitting partial content.
Features shown:
- WSGI bridge streaming bodies through the `write` callable
- Content-Range driven partial emission
- HEAD requests without body

Usage:
    python wsgi.py FILE

Test with:
    curl -i http://localhost:8000/
    curl -i -H "Range: bytes=0-99" http://localhost:8000/
"""

import re
import sys
from pathlib import Path
from wsgiref.simple_server import make_server

from emitter import HTTPResponse
from emitter.bridge.wsgi import TEnviron, application
from emitter.utils.logging import info

RE_RANGE = re.compile(r"bytes=(\d+)-(\d*)")


def serve(path: Path):
	def handler(environ: TEnviron) -> HTTPResponse:
		size: int = path.stat().st_size
		match = RE_RANGE.match(environ.get("HTTP_RANGE", ""))
		if not match or not size:
			return HTTPResponse.Create(
				path, headers={"Content-Length": size, "Accept-Ranges": "bytes"}
			)
		first: int = int(match.group(1))
		last: int = min(int(match.group(2) or size - 1), size - 1)
		if first > last:
			return HTTPResponse.Create(
				status=416, headers={"Content-Range": f"bytes */{size}"}
			)
		return HTTPResponse.Create(
			path,
			status=206,
			headers={
				"Content-Range": f"bytes {first}-{last}/{size}",
				"Content-Length": last - first + 1,
			},
		)

	return application(handler, 64_000)


if __name__ == "__main__":
	path = Path(sys.argv[1] if len(sys.argv) > 1 else __file__)
	info("Serving file", Path=str(path), Port=8000)
	with make_server("", 8000, serve(path)) as server:
		server.serve_forever()

# EOF
