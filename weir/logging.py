"""Logging helpers built on femtologging.

Weir emits pre-formatted messages so every call site produces the same
``[event] key=value`` shape regardless of the handler attached.

Example:
>>> from weir.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Accepted delivery for %s", "acme/widgets")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Log levels understood by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the upper-cased level and whether the input was rejected.

    Parameters
    ----------
    level : str | None
        Raw level, typically read from ``WEIR_LOG_LEVEL``.

    Returns
    -------
    tuple[str, bool]
        The level to use and ``True`` when ``level`` was blank or unknown,
        in which case ``INFO`` is returned.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return ("INFO", True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root configuration at ``level``."""
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Interpolate ``args`` into a percent-style ``template``."""
    return template % args


class _SupportsLog(typ.Protocol):
    """Anything exposing femtologging's ``log`` signature."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: str,
    message: str,
    *,
    exc_info: object | None = None,
) -> None:
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting."""
    _emit(logger, "INFO", format_log_message(template, *args), exc_info=exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _emit(logger, "WARNING", format_log_message(template, *args), exc_info=exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting."""
    _emit(logger, "ERROR", format_log_message(template, *args), exc_info=exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log ``message`` at ERROR with ``exc`` attached as exc_info.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the record.
    message : str
        Pre-formatted description of the failure.
    exc : BaseException
        Exception whose traceback accompanies the record.

    """
    _emit(logger, "ERROR", message, exc_info=exc)


__all__ = [
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
