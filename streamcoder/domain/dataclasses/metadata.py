# streamcoder/domain/dataclasses/metadata.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from streamcoder.domain.entities.media import MediaSection, MetadataRecord, StreamDescriptor
from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.enums.stream_kind import StreamKind


def _freeze_mapping(d: Optional[Dict[str, str]]) -> Optional[Mapping[str, str]]:
    return None if d is None else MappingProxyType(dict(d))


# Working copies mutated by the accumulator while the metadata phase runs.
# Callers only ever see the frozen entities produced by freeze().
@dataclass
class StreamDraft:
    kind: StreamKind = StreamKind.other
    codec: Optional[str] = None
    bitrate: Optional[int] = None
    fps: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    aspect_ratio: Optional[float] = None
    pixel_format: Optional[str] = None
    sample_rate: Optional[int] = None
    channel_count: Optional[int] = None
    metadata: Optional[Dict[str, str]] = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "StreamDraft":
        """Build from the output of extract_fields(line, METADATA_FIELDS)."""
        kind = StreamKind.from_label(fields.get("type"))
        draft = cls(kind=kind, codec=fields.get("codec"), bitrate=fields.get("bitrate"))
        if kind is StreamKind.video:
            width, height = fields.get("size") or (None, None)
            draft.fps = fields.get("fps")
            draft.width = width
            draft.height = height
            draft.aspect_ratio = fields.get("aspect")
            draft.pixel_format = fields.get("colors")
        elif kind is StreamKind.audio:
            draft.sample_rate = fields.get("samplerate")
            draft.channel_count = fields.get("channels")
        return draft

    def freeze(self) -> StreamDescriptor:
        return StreamDescriptor(
            kind=self.kind,
            codec=self.codec,
            bitrate=self.bitrate,
            fps=self.fps,
            width=self.width,
            height=self.height,
            aspect_ratio=self.aspect_ratio,
            pixel_format=self.pixel_format,
            sample_rate=self.sample_rate,
            channel_count=self.channel_count,
            metadata=_freeze_mapping(self.metadata),
        )


@dataclass
class SectionDraft:
    role: SectionRole
    streams: List[StreamDraft] = field(default_factory=list)
    metadata: Optional[Dict[str, str]] = None
    duration_ms: Optional[int] = None
    synched: bool = False

    @property
    def tail(self) -> Optional[StreamDraft]:
        return self.streams[-1] if self.streams else None

    def freeze(self) -> MediaSection:
        return MediaSection(
            role=self.role,
            streams=tuple(s.freeze() for s in self.streams),
            metadata=_freeze_mapping(self.metadata) or MappingProxyType({}),
            duration_ms=self.duration_ms,
            synched=self.synched,
        )


@dataclass
class MetadataDraft:
    input: SectionDraft = field(default_factory=lambda: SectionDraft(role=SectionRole.input))
    output: SectionDraft = field(default_factory=lambda: SectionDraft(role=SectionRole.output))

    def freeze(self, *, complete: bool = True) -> MetadataRecord:
        return MetadataRecord(input=self.input.freeze(), output=self.output.freeze(), complete=complete)
