import sys
import time
from enum import Enum
from typing import Any, Callable, NamedTuple
from contextvars import ContextVar
from ..config import LOG_LEVEL
from .term import Term

ERR = sys.stderr

TContext = str | int | float | bool | bytes | None

LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="emitter")


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30
	Error = 40  # A managed error
	Exception = 50  # An un-managed error


LOG_LEVEL_COLOR = {
	LogLevel.Debug: 31,
	LogLevel.Info: 75,
	LogLevel.Warning: 202,
	LogLevel.Error: 160,
	LogLevel.Exception: 124,
}


def _threshold(name: str) -> LogLevel:
	try:
		return LogLevel[name.capitalize()]
	except KeyError:
		return LogLevel.Info


THRESHOLD: LogLevel = _threshold(LOG_LEVEL)


class LogEntry(NamedTuple):
	origin: str
	time: float
	level: LogLevel = LogLevel.Info
	message: str | None = None
	value: TContext = None
	context: dict[str, TContext] | None = None


def formatData(value: Any) -> str:
	if value is None or value == () or value == [] or value == {}:
		return "◌"
	elif isinstance(value, dict):
		return " ".join(
			f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
		)
	elif isinstance(value, list) or isinstance(value, tuple):
		return ",".join(formatData(v) for v in value)
	elif isinstance(value, str):
		return repr(value) if " " in value else value
	elif isinstance(value, bool):
		return "✓" if value else "✗"
	elif isinstance(value, float):
		return f"{value:0.2f}"
	else:
		return str(value)


def send(entry: LogEntry) -> LogEntry:
	if entry.level.value >= THRESHOLD.value:
		clr: str = Term.Color(LOG_LEVEL_COLOR[entry.level])
		code: str = "" if entry.value is None else f" [{entry.value}]"
		ERR.write(
			f"{clr}{Term.BOLD}[{entry.origin}]{Term.RESET}{code} {entry.message} {formatData(entry.context)}{Term.RESET}\n"
		)
		ERR.flush()
	return entry


def entry(
	level: LogLevel,
	message: str,
	*,
	origin: str | None = None,
	at: float | None = None,
	value: TContext = None,
	context: dict[str, TContext],
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		time=time.time() if at is None else at,
		level=level,
		message=message,
		value=value,
		context=context,
	)


def debug(
	message: str, *, origin: str | None = None, **context: TContext
) -> LogEntry:
	return send(entry(LogLevel.Debug, message, origin=origin, context=context))


def info(message: str, *, origin: str | None = None, **context: TContext) -> LogEntry:
	return send(entry(LogLevel.Info, message, origin=origin, context=context))


def warning(
	message: str, *, origin: str | None = None, **context: TContext
) -> LogEntry:
	return send(entry(LogLevel.Warning, message, origin=origin, context=context))


def error(
	message: str,
	code: int | str | None,
	*,
	origin: str | None = None,
	**context: TContext,
) -> LogEntry:
	return send(
		entry(LogLevel.Error, message, origin=origin, value=code, context=context)
	)


def exception(
	exception: Exception,
	message: str | None = None,
) -> Exception:
	try:
		stream = ERR
		stream.write(
			f"!!! EXCP {f'{message}: [{exception.__class__.__name__}] {exception}' if message else f'[{exception.__class__.__name__}] {exception}'}\n"
		)
		tb = exception.__traceback__
		while tb:
			code = tb.tb_frame.f_code
			stream.write(
				f"... in {code.co_name:15s} at {tb.tb_lineno:4d} in {code.co_filename}\n",
			)
			tb = tb.tb_next
		stream.flush()
	except Exception:  # nosec: B110
		# Swallow all exceptions so that this function can be called from an exception
		# handler safely, such as in the implementation of logging/logging sinks.
		pass

	# Return the exception so that this function can be called like:
	#   raise exception(e)
	return exception


LOGGED_LEVELS: dict[Callable[..., Any], LogLevel] = {
	debug: LogLevel.Debug,
	info: LogLevel.Info,
	warning: LogLevel.Warning,
	error: LogLevel.Error,
}


def logged(item: Callable[..., Any]) -> bool:
	"""Takes one of the logging function, and tells if it is currently
	enabled. This is used to guard against running the whole entry
	building when not necessary."""
	return LOGGED_LEVELS.get(item, LogLevel.Exception).value >= THRESHOLD.value


# EOF
