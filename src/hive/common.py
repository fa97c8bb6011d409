"""Common terminal helpers for the project."""

import sys
from enum import Enum
from typing import (
    Any,
    TextIO,
)

_RESET = "\033[0m"


class AnsiColors(Enum):
    """
    ANSI color codes for terminal output.
    """

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[33m"
    BLUE = "\033[94m"


def supports_color(stream: TextIO) -> bool:
    """True when *stream* is an interactive terminal."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def colored_print(text: str, color: AnsiColors, *args: Any, **kwargs: Any) -> None:
    """
    Print text in color.

    Colour codes are only emitted when the target stream is a terminal, so piped or captured
    output stays plain.

    Args:
        text: The text to print
        color: The color to use (AnsiColors enum)
        args: Additional positional arguments for print
        kwargs: Additional keyword arguments for print (``file`` selects the stream)
    """
    stream = kwargs.get("file") or sys.stdout
    if supports_color(stream):
        text = f"{color.value}{text}{_RESET}"
    print(text, *args, **kwargs)
