# streamcoder/domain/entities/progress.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProgressRecord:
    """
    One decoded ``frame= ... time= ... bitrate=`` status line.
    A new instance is emitted per line; fields the line did not carry are None.
    """
    frame_number: Optional[int] = None
    fps: Optional[float] = None
    quality: Optional[float] = None
    size_bytes: Optional[int] = None
    time_ms: Optional[int] = None
    bitrate_bps: Optional[int] = None
    # time_ms / input duration, when both are known
    fraction_complete: Optional[float] = None
