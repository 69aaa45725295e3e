# streamcoder/domain/parsing/fields.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from streamcoder.common.timecode import parse_duration

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class FieldSpec:
    """
    A named pattern applied to one diagnostic line.

    With ``group`` set the transform receives that capture group; without it
    the transform receives the whole ``re.Match`` so one pattern can feed
    several fields.
    """
    pattern: re.Pattern[str]
    group: Optional[int] = None
    transform: Optional[Callable[[Any], Any]] = None


def extract_fields(line: str, specs: Mapping[str, FieldSpec]) -> Dict[str, Any]:
    """
    Apply every spec to ``line`` and return the values that came out truthy.
    A pattern that does not match leaves its field out; the transform is
    never called for it.

    0, empty strings and None are all dropped: a ``0 kb/s`` bitrate is
    reported as absent, never as zero.
    """
    out: Dict[str, Any] = {}
    for name, spec in specs.items():
        match = spec.pattern.search(line)
        if match is None:
            continue
        raw: Any = match.group(spec.group) if spec.group is not None else match
        value = spec.transform(raw) if spec.transform else raw
        if value:
            out[name] = value
    return out


# ---- transforms ---------------------------------------------------------------
def leading_int(text: Optional[str]) -> Optional[int]:
    """Integer prefix of ``text`` ('5.1(side)' -> 5); None when there is none."""
    if not text:
        return None
    m = _LEADING_INT.match(text)
    return int(m.group(0)) if m else None


def to_float(text: Optional[str]) -> Optional[float]:
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _scaled(value: Optional[str], suffix: Optional[str], base: int) -> Optional[int]:
    number = to_float(value)
    if number is None:
        return None
    unit = (suffix or "").lower()
    if unit == "k":
        number *= base
    elif unit == "m":
        number *= base * base
    return int(round(number))


def _stream_type(m: re.Match[str]) -> str:
    return m.group(1).lower()


def _channels(text: Optional[str]) -> Optional[int]:
    if text == "mono":
        return 1
    if text == "stereo":
        return 2
    return leading_int(text)


def _decimal_rate(m: re.Match[str]) -> Optional[int]:
    return _scaled(m.group(1), m.group(2), 1000)


def _binary_size(m: re.Match[str]) -> Optional[int]:
    return _scaled(m.group(1), m.group(2), 1024)


def _frame_size(m: re.Match[str]) -> tuple[int, int]:
    return int(m.group(1)), int(m.group(2))


def _aspect(m: re.Match[str]) -> Optional[float]:
    width, height = int(m.group(1)), int(m.group(2))
    if not height:
        return None
    return width / height


def _timestamp(text: str) -> int:
    return parse_duration(text)


# ---- field sets -----------------------------------------------------------------
_FRAME_SIZE = re.compile(r"(\d+)x(\d+)(?: \[.*?\])?(?:,|$)", re.I)

# Applied to "Stream #0:0(und): Video: h264 (High), yuv420p, 1280x720, 30 fps, ..." lines
METADATA_FIELDS: Dict[str, FieldSpec] = {
    "type": FieldSpec(re.compile(r"Stream #\d+:\d+.*?: (\w+):", re.I), transform=_stream_type),
    "codec": FieldSpec(re.compile(r"Stream #\d+:\d+.*?: \w+: ([^\s,(]+)", re.I), group=1),
    "samplerate": FieldSpec(re.compile(r"(\d+) Hz", re.I), group=1, transform=leading_int),
    "channels": FieldSpec(re.compile(r"\d+ Hz, (.*?)(?:,|$)", re.I), group=1, transform=_channels),
    "bitrate": FieldSpec(re.compile(r"(\d+) (\w)?b/s", re.I), transform=_decimal_rate),
    "fps": FieldSpec(re.compile(r"([\d.]+) fps", re.I), group=1, transform=to_float),
    "size": FieldSpec(_FRAME_SIZE, transform=_frame_size),
    "aspect": FieldSpec(_FRAME_SIZE, transform=_aspect),
    "colors": FieldSpec(re.compile(r"Video:.*?, (.*?)(?:,|$)", re.I), group=1),
}

# Applied to "frame=  100 fps= 30 q=28.0 size=     512kB time=00:00:05.00 bitrate= 800.0kbits/s"
PROGRESS_FIELDS: Dict[str, FieldSpec] = {
    "frame": FieldSpec(re.compile(r"frame=\s*(\d+)", re.I), group=1, transform=leading_int),
    "fps": FieldSpec(re.compile(r"fps=\s*([\d.]+)", re.I), group=1, transform=to_float),
    "quality": FieldSpec(re.compile(r"q=\s*([\d.]+)", re.I), group=1, transform=to_float),
    # kB / KiB / mB / MiB all occur depending on the ffmpeg release
    "size": FieldSpec(re.compile(r"size=\s*(\d+)\s*([km])?i?b", re.I), transform=_binary_size),
    "time": FieldSpec(re.compile(r"time=\s*(\d+:\d+:\d+\.\d+)", re.I), group=1, transform=_timestamp),
    "bitrate": FieldSpec(re.compile(r"bitrate=\s*([\d.]+)\s*([km])?bits/s", re.I), transform=_decimal_rate),
}
