# streamcoder/services/transcode/metadata_reader.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from streamcoder.common.logging import get_logger
from streamcoder.common.settings import get_settings
from streamcoder.domain.entities.media import MetadataRecord
from streamcoder.domain.ports.metadata import MetadataReaderPort
from streamcoder.services.transcode.ffmpeg_adapter import FFmpegTranscoder, Source, TranscodeError

logger = get_logger()


class FFmpegMetadataReader(MetadataReaderPort):
    """
    Reads container and stream metadata by letting ffmpeg decode zero seconds
    into the null muxer. The run reaches "Stream mapping:", so the record
    comes back complete and includes the output side.
    """

    def __init__(self, ffmpeg_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings()
        self.ffmpeg_bin = ffmpeg_bin or cfg.ffmpeg_bin
        self.timeout_sec = int(timeout_sec or cfg.ffmpeg.metadata_timeout_sec)

    def read(self, path: Path) -> MetadataRecord:
        if not Path(path).is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return self.read_source(str(path))

    def read_source(self, source: Source) -> MetadataRecord:
        transcoder = FFmpegTranscoder(source, ffmpeg_bin=self.ffmpeg_bin)
        handle = transcoder.format("null").custom("t", "0").write_to_file("-")
        try:
            report = handle.wait(self.timeout_sec)
        except TimeoutError as e:
            handle.kill()
            raise TranscodeError(f"ffmpeg timed out after {self.timeout_sec}s") from e

        record = handle.metadata
        if record is None or not record.input.streams:
            raise TranscodeError(
                "ffmpeg produced no metadata",
                stderr=report.last_diagnostic_line,
                rc=report.exit_code,
            )
        if not report.ok:
            logger.warning("ffmpeg exited with %s while reading metadata", report.exit_code)
        return record


def read_metadata(source: Source, timeout_sec: Optional[int] = None) -> MetadataRecord:
    """Convenience wrapper around FFmpegMetadataReader for one-off reads."""
    return FFmpegMetadataReader(timeout_sec=timeout_sec).read_source(source)
