# streamcoder/services/api/deps.py
from __future__ import annotations

from streamcoder.domain.ports.metadata import MetadataReaderPort
from streamcoder.services.transcode.metadata_reader import FFmpegMetadataReader


def get_metadata_reader() -> MetadataReaderPort:
    """
    Provide a MetadataReaderPort implementation (ffmpeg) via DI.
    Tests override this with a fake.
    """
    return FFmpegMetadataReader()
