# tests/services/conftest.py
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import List, Optional

import pytest
from starlette.testclient import TestClient

from streamcoder.domain.entities.media import MediaSection, MetadataRecord, StreamDescriptor
from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.enums.stream_kind import StreamKind
from streamcoder.services.api.app import create_app
from streamcoder.services.api.deps import get_metadata_reader


class FakeMetadataReader:
    """MetadataReaderPort stand-in: returns a canned record or raises a canned error."""

    def __init__(self, record: Optional[MetadataRecord] = None, error: Optional[Exception] = None):
        self.record = record
        self.error = error
        self.paths: List[Path] = []

    def read(self, path: Path) -> MetadataRecord:
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        assert self.record is not None
        return self.record


@pytest.fixture()
def sample_record() -> MetadataRecord:
    video = StreamDescriptor(
        kind=StreamKind.video, codec="h264", bitrate=1071000, fps=30.0,
        width=1280, height=720, aspect_ratio=1280 / 720, pixel_format="yuv420p(progressive)",
        metadata=MappingProxyType({"handler_name": "VideoHandler"}),
    )
    audio = StreamDescriptor(kind=StreamKind.audio, codec="aac", bitrate=128000, sample_rate=44100, channel_count=2)
    return MetadataRecord(
        input=MediaSection(
            role=SectionRole.input,
            streams=(video, audio),
            metadata=MappingProxyType({"major_brand": "isom"}),
            duration_ms=10000,
            synched=True,
        ),
        output=MediaSection(role=SectionRole.output),
    )


@pytest.fixture()
def fake_reader() -> FakeMetadataReader:
    return FakeMetadataReader()


@pytest.fixture()
def api_client(fake_reader):
    """
    A TestClient whose `get_metadata_reader` dependency is overridden to hand
    out `fake_reader`, so no ffmpeg process is ever started.
    """
    app = create_app()
    app.dependency_overrides[get_metadata_reader] = lambda: fake_reader
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
