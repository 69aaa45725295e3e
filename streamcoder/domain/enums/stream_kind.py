from __future__ import annotations
from enum import StrEnum

class StreamKind(StrEnum):
    video = "video"
    audio = "audio"
    other = "other"

    @classmethod
    def from_label(cls, label: str | None) -> "StreamKind":
        """Map the engine's stream type word ('Video', 'Audio', 'Subtitle', ...)."""
        try:
            return cls((label or "").lower())
        except ValueError:
            return cls.other
