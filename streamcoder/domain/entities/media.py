# streamcoder/domain/entities/media.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.enums.stream_kind import StreamKind

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True)
class StreamDescriptor:
    """
    One elementary stream reported by the engine (e.g. ``Stream #0:0: Video: h264 ...``).

    Every technical attribute is optional: the engine only prints what it
    knows, and values the extractor treats as empty (0, "") are left as None.
    Video-only and audio-only attributes stay None on streams of the other kind.
    """
    kind: StreamKind = StreamKind.other
    codec: Optional[str] = None
    bitrate: Optional[int] = None

    # video
    fps: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    aspect_ratio: Optional[float] = None
    pixel_format: Optional[str] = None

    # audio
    sample_rate: Optional[int] = None
    channel_count: Optional[int] = None

    # Present only when a "Metadata:" block followed the stream line
    metadata: Optional[Mapping[str, str]] = None

    @property
    def is_video(self) -> bool:
        return self.kind is StreamKind.video

    @property
    def is_audio(self) -> bool:
        return self.kind is StreamKind.audio


@dataclass(frozen=True)
class MediaSection:
    """
    Input or output side of a run. ``duration_ms`` and ``synched`` are only
    ever filled for the input section.
    """
    role: SectionRole
    streams: Tuple[StreamDescriptor, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    duration_ms: Optional[int] = None
    synched: bool = False

    def first_of(self, kind: StreamKind) -> Optional[StreamDescriptor]:
        return next((s for s in self.streams if s.kind is kind), None)


@dataclass(frozen=True)
class MetadataRecord:
    """
    Snapshot handed to listeners exactly once per run.

    ``complete`` is False when the engine exited before the metadata phase
    ended and the parser had to flush what it had.
    """
    input: MediaSection = field(default_factory=lambda: MediaSection(role=SectionRole.input))
    output: MediaSection = field(default_factory=lambda: MediaSection(role=SectionRole.output))
    complete: bool = True
