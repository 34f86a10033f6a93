"""
Tests for the logging helpers.
"""

import io

import pytest

from emitter.utils import logging
from emitter.utils.logging import LogLevel, debug, formatData, logged, warning


@pytest.fixture
def stderr(monkeypatch) -> io.StringIO:
	stream = io.StringIO()
	monkeypatch.setattr(logging, "ERR", stream)
	return stream


def test_levels():
	assert logging.THRESHOLD is LogLevel.Info
	assert not logged(debug)
	assert logged(warning)


def test_threshold_parsing():
	assert logging._threshold("debug") is LogLevel.Debug
	assert logging._threshold("WARNING") is LogLevel.Warning
	assert logging._threshold("verbose") is LogLevel.Info


def test_format_data():
	assert formatData(None) == "◌"
	assert formatData(True) == "✓"
	assert formatData("two words") == "'two words'"
	assert formatData([1, 2]) == "1,2"
	assert formatData(0.5) == "0.50"


def test_entries_below_threshold_are_not_written(stderr):
	entry = debug("Hidden", Key="value")
	assert entry.level is LogLevel.Debug
	assert entry.context == {"Key": "value"}
	assert stderr.getvalue() == ""


def test_entries_are_written(stderr):
	warning("Shown", Key="value")
	assert "[emitter]" in stderr.getvalue()
	assert "Shown" in stderr.getvalue()
	assert "value" in stderr.getvalue()


# EOF
