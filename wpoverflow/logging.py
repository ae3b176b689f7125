"""Logging framework for wpoverflow.
Provides structured logging with configurable verbosity, per-operator
counters for emitted checks, and a bridge from Python's logging module.
"""

from __future__ import annotations

import logging
import sys
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels for wpoverflow."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3
    TRACE = 4

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown log level: {name!r}") from None


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"


def supports_color(stream: TextIO) -> bool:
    """Check if the stream supports ANSI colors."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


_INDICATORS = {
    LogLevel.NORMAL: ("•", Colors.WHITE),
    LogLevel.VERBOSE: ("→", Colors.BLUE),
    LogLevel.DEBUG: ("⚙", Colors.MAGENTA),
    LogLevel.TRACE: ("⋯", Colors.GRAY),
}


@dataclass
class LogEntry:
    """A log entry with metadata."""

    level: LogLevel
    message: str
    category: str = "general"
    timestamp: float = field(default_factory=time.time)
    context: dict[str, Any] = field(default_factory=dict)

    def format(self, color: bool = True, show_time: bool = True) -> str:
        """Format the log entry for display."""
        parts = []
        if show_time:
            stamp = time.strftime("%H:%M:%S", time.localtime(self.timestamp))
            parts.append(f"{Colors.GRAY}{stamp}{Colors.RESET}" if color else stamp)
        char, col = _INDICATORS.get(self.level, ("", ""))
        if char:
            parts.append(f"{col}{char}{Colors.RESET}" if color else char)
        if self.category != "general":
            tag = f"[{self.category}]"
            parts.append(f"{Colors.CYAN}{tag}{Colors.RESET}" if color else tag)
        parts.append(self.message)
        if self.context:
            parts.append(" ".join(f"{k}={v}" for k, v in self.context.items()))
        return " ".join(parts)


class OverflowLogger:
    """Main logger for wpoverflow."""

    def __init__(
        self,
        level: LogLevel = LogLevel.NORMAL,
        color: bool = True,
        stream: TextIO | None = None,
        max_entries: int = 1000,
    ):
        self.level = level
        self._stream = stream or sys.stderr
        self._color = color and supports_color(self._stream)
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self._counters: dict[str, int] = {}

    def set_level(self, level: LogLevel) -> None:
        self.level = level

    def is_enabled(self, level: LogLevel) -> bool:
        return level <= self.level

    def _emit(self, entry: LogEntry) -> None:
        self._entries.append(entry)
        if self.is_enabled(entry.level):
            self._stream.write(entry.format(color=self._color) + "\n")
            self._stream.flush()

    def log(
        self,
        level: LogLevel,
        message: str,
        category: str = "general",
        **context: Any,
    ) -> None:
        """Log a message at the specified level."""
        self._emit(LogEntry(level=level, message=message, category=category, context=context))

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.NORMAL, message, **context)

    def verbose(self, message: str, **context: Any) -> None:
        self.log(LogLevel.VERBOSE, message, **context)

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def trace(self, message: str, **context: Any) -> None:
        self.log(LogLevel.TRACE, message, **context)

    def warning(self, message: str) -> None:
        """Log a warning message (shown unless QUIET)."""
        if self.level > LogLevel.QUIET:
            prefix = f"{Colors.YELLOW}⚠{Colors.RESET}" if self._color else "⚠"
            self._stream.write(f"{prefix} {message}\n")
            self._stream.flush()

    def error(self, message: str) -> None:
        """Log an error message (always shown)."""
        prefix = f"{Colors.RED}✗{Colors.RESET}" if self._color else "✗"
        self._stream.write(f"{prefix} {message}\n")
        self._stream.flush()

    @contextmanager
    def timer(self, name: str, category: str = "timing"):
        """Context manager for timing operations."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.verbose(f"{name}: {time.perf_counter() - start:.3f}s", category=category)

    def count(self, name: str, increment: int = 1) -> int:
        """Increment a counter and return new value."""
        self._counters[name] = self._counters.get(name, 0) + increment
        return self._counters[name]

    def get_count(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_entries(
        self,
        level: LogLevel | None = None,
        category: str | None = None,
    ) -> list[LogEntry]:
        """Get retained entries, optionally filtered."""
        entries = list(self._entries)
        if level is not None:
            entries = [e for e in entries if e.level == level]
        if category is not None:
            entries = [e for e in entries if e.category == category]
        return entries


_logger: OverflowLogger | None = None


def get_logger() -> OverflowLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = OverflowLogger()
    return _logger


def set_logger(logger: OverflowLogger) -> None:
    """Set the global logger instance."""
    global _logger
    _logger = logger


def configure_logging(
    level: LogLevel = LogLevel.NORMAL,
    color: bool = True,
    stream: TextIO | None = None,
) -> OverflowLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = OverflowLogger(level=level, color=color, stream=stream)
    return _logger


class PythonLoggingBridge(logging.Handler):
    """Bridge Python's logging module into the wpoverflow logger."""

    _LEVEL_MAP = {
        logging.DEBUG: LogLevel.DEBUG,
        logging.INFO: LogLevel.NORMAL,
    }

    def __init__(self, target: OverflowLogger | None = None):
        super().__init__()
        self._target = target

    @property
    def target(self) -> OverflowLogger:
        # Unpinned bridges follow set_logger()/configure_logging().
        return self._target or get_logger()

    def emit(self, record: logging.LogRecord) -> None:
        message = self.format(record)
        if record.levelno >= logging.ERROR:
            self.target.error(message)
        elif record.levelno >= logging.WARNING:
            self.target.warning(message)
        else:
            level = self._LEVEL_MAP.get(record.levelno, LogLevel.TRACE)
            self.target.log(level, message, category="python")


def setup_python_logging(level: int = logging.INFO) -> None:
    """Route the "wpoverflow" Python logger into the wpoverflow logger."""
    logger = logging.getLogger("wpoverflow")
    logger.setLevel(level)
    if not any(isinstance(h, PythonLoggingBridge) for h in logger.handlers):
        logger.addHandler(PythonLoggingBridge())


__all__ = [
    "LogLevel",
    "LogEntry",
    "Colors",
    "OverflowLogger",
    "get_logger",
    "set_logger",
    "configure_logging",
    "PythonLoggingBridge",
    "setup_python_logging",
    "supports_color",
]
