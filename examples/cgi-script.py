"""
CGI Script Example

This demonstrates emitting a response from a CGI script, where the
web server reads the response from the standard output.
Features shown:
- Stream host in CGI mode (`Status` header instead of a status line)
- Chunked body emission
- Extra logging for nicer output (on stderr)

Usage:
    Copy to your web server's `cgi-bin` and make it executable, or run
    python cgi-script.py
"""

import os

from emitter import Emitter, HTTPResponse, StreamHost
from emitter.utils.logging import info

if __name__ == "__main__":
	path: str = os.environ.get("PATH_INFO", "/")
	info("Emitting CGI response", Path=path)
	response = HTTPResponse.Create(
		f"Hello from {path}\n",
		contentType="text/plain; charset=utf-8",
		headers={"Set-Cookie": ["visited=1", "theme=dark"]},
	)
	Emitter(4096).emit(
		response,
		os.environ.get("REQUEST_METHOD") == "HEAD",
		host=StreamHost(cgi=True),
	)

# EOF
