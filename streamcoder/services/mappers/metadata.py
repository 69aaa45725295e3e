# streamcoder/services/mappers/metadata.py
from __future__ import annotations

from streamcoder.domain.entities.media import MediaSection, MetadataRecord, StreamDescriptor
from streamcoder.services.schemas.metadata import MetadataOut, SectionOut, StreamOut


def to_stream_out(stream: StreamDescriptor) -> StreamOut:
    return StreamOut(
        kind=stream.kind,
        codec=stream.codec,
        bitrate=stream.bitrate,
        fps=stream.fps,
        width=stream.width,
        height=stream.height,
        aspect_ratio=stream.aspect_ratio,
        pixel_format=stream.pixel_format,
        sample_rate=stream.sample_rate,
        channel_count=stream.channel_count,
        metadata=dict(stream.metadata) if stream.metadata is not None else None,
    )


def to_section_out(section: MediaSection) -> SectionOut:
    return SectionOut(
        role=section.role,
        streams=[to_stream_out(s) for s in section.streams],
        metadata=dict(section.metadata),
        duration_ms=section.duration_ms,
        synched=section.synched,
    )


def to_metadata_out(record: MetadataRecord) -> MetadataOut:
    return MetadataOut(
        input=to_section_out(record.input),
        output=to_section_out(record.output),
        complete=record.complete,
    )
