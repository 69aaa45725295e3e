# services/schemas/metadata.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.enums.stream_kind import StreamKind


class MetadataRequest(BaseModel):
    path: str = Field(..., description="Absolute path of the media file to inspect",
                      examples=["/media/incoming/foo.mp4"])


class StreamOut(BaseModel):
    kind: StreamKind = StreamKind.other
    codec: Optional[str] = None
    bitrate: Optional[int] = Field(None, ge=0)

    fps: Optional[float] = Field(None, ge=0)
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    aspect_ratio: Optional[float] = None
    pixel_format: Optional[str] = None

    sample_rate: Optional[int] = Field(None, ge=0)
    channel_count: Optional[int] = Field(None, ge=0)

    metadata: Optional[Dict[str, str]] = None

    model_config = ConfigDict(use_enum_values=False)


class SectionOut(BaseModel):
    role: SectionRole
    streams: List[StreamOut] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)
    duration_ms: Optional[int] = Field(None, ge=0)
    synched: bool = False


class MetadataOut(BaseModel):
    input: SectionOut
    output: SectionOut
    complete: bool = True
