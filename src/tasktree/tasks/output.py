"""Progress output destination for task trees."""

from __future__ import annotations

import sys
from typing import TextIO

ANSI_RESET = "\x1b[0m"
ANSI_ATTR_BRIGHT = "\x1b[1m"
ANSI_FG_GREEN = "\x1b[32m"
ANSI_FG_RED = "\x1b[31m"

COLOR_MODES = ("auto", "always", "never")


class OutputSink:
    """Receives progress text, optionally wrapped in ANSI styling.

    ``styled`` is fixed at construction; use :meth:`for_stream` to derive it
    from the stream itself. A sink without a stream drops every write.
    """

    def __init__(self, stream: TextIO | None, styled: bool = False) -> None:
        self.stream = stream
        self.styled = styled

    @classmethod
    def for_stream(cls, stream: TextIO | None, color: str = "auto") -> "OutputSink":
        if color not in COLOR_MODES:
            raise ValueError(f"Unknown color mode '{color}', expected one of {', '.join(COLOR_MODES)}")
        if stream is None:
            return cls(None)
        if color == "auto":
            isatty = getattr(stream, "isatty", None)
            styled = bool(isatty()) if callable(isatty) else False
        else:
            styled = color == "always"
        return cls(stream, styled=styled)

    @classmethod
    def stdout(cls, color: str = "auto") -> "OutputSink":
        return cls.for_stream(sys.stdout, color)

    @classmethod
    def disabled(cls) -> "OutputSink":
        return cls(None)

    @property
    def enabled(self) -> bool:
        return self.stream is not None

    def write(self, message: str) -> None:
        if self.stream is None:
            return
        self.stream.write(message)
        self.stream.flush()

    def bright(self, message: str) -> None:
        self._styled_write(ANSI_ATTR_BRIGHT, message)

    def success(self, message: str) -> None:
        self._styled_write(ANSI_FG_GREEN, message)

    def failure(self, message: str) -> None:
        self._styled_write(ANSI_FG_RED, message)

    def _styled_write(self, code: str, message: str) -> None:
        if self.styled:
            self.write(f"{ANSI_RESET}{code}{message}{ANSI_RESET}")
        else:
            self.write(message)

    def __repr__(self) -> str:
        return f"OutputSink(stream={self.stream!r}, styled={self.styled})"
