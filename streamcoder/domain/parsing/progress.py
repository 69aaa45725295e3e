# streamcoder/domain/parsing/progress.py
from __future__ import annotations

from typing import Optional

from streamcoder.domain.entities.progress import ProgressRecord
from streamcoder.domain.parsing.fields import PROGRESS_FIELDS, extract_fields


def decode_progress(line: str, duration_ms: Optional[int] = None) -> ProgressRecord:
    """
    Turn a progress line into a ProgressRecord.
    ``fraction_complete`` is only set when both the input duration and the
    line's time are known and non-zero.
    """
    fields = extract_fields(line, PROGRESS_FIELDS)
    time_ms = fields.get("time")
    fraction = time_ms / duration_ms if duration_ms and time_ms else None
    return ProgressRecord(
        frame_number=fields.get("frame"),
        fps=fields.get("fps"),
        quality=fields.get("quality"),
        size_bytes=fields.get("size"),
        time_ms=time_ms,
        bitrate_bps=fields.get("bitrate"),
        fraction_complete=fraction,
    )
