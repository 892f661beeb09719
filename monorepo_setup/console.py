"""Terminal output helpers (colored banners and status lines)."""

from __future__ import annotations

import os
import sys
from typing import TextIO

PREFIX = "[monorepo-setup]"

GREEN = "\033[0;32m"
BLUE = "\033[0;34m"
YELLOW = "\033[1;33m"
RED = "\033[0;31m"
NC = "\033[0m"

RULE = "━" * 40

# Used when the stream encoding cannot represent the glyphs.
_ASCII_FALLBACK = (("━", "-"), ("✓", "OK"), ("✗", "x"))


def _fit(text: str, stream: TextIO) -> str:
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        text.encode(encoding)
        return text
    except UnicodeEncodeError:
        pass
    except LookupError:
        encoding = "ascii"
    for glyph, alt in _ASCII_FALLBACK:
        text = text.replace(glyph, alt)
    return text.encode(encoding, errors="replace").decode(encoding)


def _use_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream.
        return False


def paint(text: str, color: str, *, stream: TextIO | None = None) -> str:
    s = sys.stdout if stream is None else stream
    if not _use_color(s):
        return text
    return f"{color}{text}{NC}"


def say(text: str = "", color: str = "") -> None:
    line = paint(text, color) if color else text
    print(_fit(line, sys.stdout), flush=True)


def info(text: str) -> None:
    say(text, YELLOW)


def success(text: str) -> None:
    say(f"✓ {text}", GREEN)


def failure(text: str) -> None:
    say(f"✗ {text}", RED)


def title(text: str) -> None:
    bar = "=" * 44
    say(bar, BLUE)
    say(f"  {text}", BLUE)
    say(bar, BLUE)
    say()


def banner(text: str) -> None:
    say(RULE, GREEN)
    say(text, GREEN)
    say(RULE, GREEN)
    say()


def error(message: str, *, label: str = "ERROR") -> None:
    line = f"{PREFIX} {label}: {message}"
    line = _fit(paint(line, RED, stream=sys.stderr), sys.stderr)
    print(line, file=sys.stderr, flush=True)
