"""Formatting of anime scene search results."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from decimal import Decimal

CONFIDENT_HINT = "我有把握是这个！"
UNSURE_HINT = "大概是这个？"
_CONFIDENCE = 80


def _f32(x: float) -> float:
    return struct.unpack("f", struct.pack("f", x))[0]


def _format_f32(x: float) -> str:
    """The shortest text that reads back as the same single-precision value."""
    value = _f32(x)
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if _f32(float(text)) == value:
            return format(Decimal(text), "f")
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class TraceResult:
    """The best match for a searched image."""

    title: str
    episode: int | str | None
    start: float
    end: float
    similarity: float
    image: str = ""


def format_hint(similarity: float) -> str:
    """How sure the reply sounds for a similarity in percent."""
    return UNSURE_HINT if similarity < _CONFIDENCE else CONFIDENT_HINT


def split_time(seconds: float) -> tuple[int, float]:
    """Split a time in seconds into whole minutes and remaining seconds."""
    value = _f32(seconds)
    minutes = int(value / 60)
    return minutes, _f32(value - _f32(minutes * 60))


def describe_result(result: TraceResult) -> str:
    """The text that follows the preview image in a reply."""
    mf, sf = split_time(result.start)
    mt, st = split_time(result.end)
    episode = "" if result.episode is None else str(result.episode)
    return (
        "\n"
        f"番剧名：{result.title}\n"
        f"话数：{episode}\n"
        f"时间：{mf}:{_format_f32(sf)}-{mt}:{_format_f32(st)}"
    )