# streamcoder/common/timecode.py
from __future__ import annotations

import re

_DIGITS = re.compile(r"\d+")


def parse_duration(text: str) -> int:
    """
    Convert an ffmpeg ``HH:MM:SS.mmm`` timestamp into integer milliseconds.

    The fractional part is taken as a raw millisecond count, so ``00:00:05.50``
    yields 5050. Raises ValueError when the text does not have exactly four
    all-digit components.
    """
    parts = re.split(r"[:.]", text.strip())
    if len(parts) != 4 or not all(_DIGITS.fullmatch(p) for p in parts):
        raise ValueError(f"malformed timestamp: {text!r}")
    hours, minutes, seconds, millis = (int(p) for p in parts)
    return hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + millis


def format_duration(ms: int) -> str:
    """Inverse of parse_duration: 3723456 -> '01:02:03.456'."""
    if ms < 0:
        raise ValueError("duration must be non-negative")
    hours, rest = divmod(int(ms), 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
