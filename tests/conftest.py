"""
pytest configuration and fixtures.
"""

import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src/py to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "py"))

from emitter import HTTPBodyIO, HTTPHeaders, HTTPResponse, MemoryHost  # noqa: E402
from emitter.http.status import HTTP_STATUS  # noqa: E402

TResponseFactory = Callable[..., HTTPResponse]


@pytest.fixture
def host() -> MemoryHost:
	"""A fresh in-memory host."""
	return MemoryHost()


@pytest.fixture
def createResponse() -> TResponseFactory:
	"""Creates responses with exactly the given headers, unlike
	`HTTPResponse.Create` which adds content headers."""

	def create(
		status: int = 200,
		headers: dict[str, str] | HTTPHeaders | None = None,
		contents: str = "",
		protocol: str = "1.1",
	) -> HTTPResponse:
		return HTTPResponse(
			protocol=protocol,
			status=status,
			message=HTTP_STATUS.get(status, ""),
			headers=HTTPHeaders(headers),
			body=HTTPBodyIO.FromBytes(contents.encode()),
		)

	return create


# EOF
