"""Parsing of ``>runcode`` commands and trimming of long program output."""

from __future__ import annotations

import re
from dataclasses import dataclass

_WS = r"[\t\n\f\r ]"
_COMMAND = re.compile(rf">runcode(raw)?{_WS}(.+?){_WS}([\s\S]+)")

_MAX_LINES = 30
_MAX_INDEX = 1000
TRUNCATION = "\n............\n............"


@dataclass(frozen=True)
class RunRequest:
    """A request to run a block of code in a language."""

    raw: bool
    language: str
    code: str


def _unescape_cq(text: str) -> str:
    return text.replace("&#91;", "[").replace("&#93;", "]").replace("&amp;", "&")


def parse_command(text: str) -> RunRequest | None:
    """Parse ``>runcode[raw] <language> <code>``; return None if it does not match."""
    m = _COMMAND.fullmatch(text)
    if m is None:
        return None
    return RunRequest(
        raw=m.group(1) is not None,
        language=m.group(2).lower(),
        code=_unescape_cq(m.group(3)),
    )


def cut_too_long(text: str) -> str:
    """Cut text after more than 30 line breaks or 1000 characters."""
    count = 0
    for i, ch in enumerate(text):
        if ch == "\r" and text[i + 1 : i + 2] == "\n":
            pass  # counted with the following "\n"
        elif ch in "\n\r":
            count += 1
        if count > _MAX_LINES or i > _MAX_INDEX:
            return text[: i - 1] + TRUNCATION
    return text