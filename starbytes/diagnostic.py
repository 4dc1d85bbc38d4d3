"""Diagnostics, a simple stream logger and a small positional formatter."""

from __future__ import annotations

import enum
import sys
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional, TextIO

LOGGER_COLOR_RESET = 0x00
LOGGER_COLOR_RED = 0x00
LOGGER_COLOR_BLUE = 0x00
LOGGER_COLOR_GREEN = 0x00
LOGGER_COLOR_YELLOW = 0x00

ERROR_MESSAGE = "error:"


class Severity(enum.Enum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"


class StreamLogger:
    """Writes plain text, numbers and colour escapes to a text stream."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.is_open = False

    def open(self) -> None:
        """Mark the logger as open for a run of output."""
        self.is_open = True

    def string(self, text: str) -> None:
        self.out.write(text)

    def integer(self, value: int) -> None:
        self.out.write(str(value))

    def float_point(self, value: float) -> None:
        self.out.write(f"{value:f}")

    def line_break(self, count: int = 1) -> None:
        if count > 0:
            self.out.write("\n" * count)
            self.out.flush()

    def color(self, code: int) -> None:
        self.out.write(f"\033[{code}m")

    def close(self) -> None:
        self.out.flush()
        self.is_open = False


@dataclass
class Diagnostic:
    """A message reported while processing input."""

    message: str
    severity: Severity = Severity.ERROR
    resolved: bool = False

    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def send(self, logger: StreamLogger) -> None:
        """Write the diagnostic to a logger; only errors produce output."""
        if not self.is_error():
            return
        logger.color(LOGGER_COLOR_RED)
        logger.string(ERROR_MESSAGE)
        logger.color(LOGGER_COLOR_RESET)
        logger.line_break(1)
        logger.string(self.message)


def create_error(message: str) -> Diagnostic:
    return Diagnostic(str(message), Severity.ERROR)


def create_warning(message: str) -> Diagnostic:
    return Diagnostic(str(message), Severity.WARNING)


class DiagnosticHandler:
    """Collects diagnostics and writes the unresolved ones on demand."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.buffer: Deque[Diagnostic] = deque()
        self.logger = StreamLogger(out)

    def push(self, diagnostic: Diagnostic) -> "DiagnosticHandler":
        self.buffer.append(diagnostic)
        return self

    def empty(self) -> bool:
        return not self.buffer

    def has_errored(self) -> bool:
        return any(d.is_error() for d in self.buffer)

    def log_all(self) -> None:
        """Send every unresolved diagnostic and empty the buffer."""
        while self.buffer:
            diagnostic = self.buffer.popleft()
            if not diagnostic.resolved:
                diagnostic.send(self.logger)


class FormatError(ValueError):
    """Raised for a malformed format string or a missing argument."""


def fmt_string(fmt: str, *args: Any) -> str:
    """Replace every ``@{N}`` in *fmt* with the N-th argument.

    An ``@`` that is not followed by ``{`` is kept as written.
    """
    parts: list[str] = []
    chars = iter(fmt)
    for c in chars:
        if c != "@":
            parts.append(c)
            continue
        nxt = next(chars, None)
        if nxt != "{":
            parts.append("@")
            if nxt is not None:
                parts.append(nxt)
            continue
        digits: list[str] = []
        for d in chars:
            if d == "}":
                break
            if not d.isdigit():
                raise FormatError(f"Character {d} is not a digit!")
            digits.append(d)
        else:
            raise FormatError("Unterminated placeholder in format string")
        if not digits:
            raise FormatError("Empty placeholder in format string")
        index = int("".join(digits))
        if index >= len(args):
            raise FormatError(f"No argument for placeholder @{{{index}}}")
        parts.append(str(args[index]))
    return "".join(parts)