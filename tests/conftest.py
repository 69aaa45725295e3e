# tests/conftest.py
from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from streamcoder.common import settings as settings_mod

# Typical stderr of `ffmpeg -i in.mp4 -f webm pipe:1`, already split into lines.
FFMPEG_STDERR = [
    "ffmpeg version 4.4.2 Copyright (c) 2000-2021 the FFmpeg developers",
    "  built with gcc 11 (Ubuntu 11.2.0-19ubuntu1)",
    "  configuration: --prefix=/usr --enable-gpl",
    "Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'in.mp4':",
    "  Metadata:",
    "    major_brand     : isom",
    "    encoder         : Lavf58.76.100",
    "  Duration: 00:00:10.00, start: 0.000000, bitrate: 1205 kb/s",
    "  Stream #0:0(und): Video: h264 (High) (avc1 / 0x31637661), yuv420p(progressive), 1280x720 [SAR 1:1 DAR 16:9], 1071 kb/s, 30 fps, 30 tbr, 15360 tbn, 60 tbc (default)",
    "    Metadata:",
    "      handler_name    : VideoHandler",
    "      vendor_id       : [0][0][0][0]",
    "  Stream #0:1(und): Audio: aac (LC) (mp4a / 0x6134706D), 44100 Hz, stereo, fltp, 128 kb/s (default)",
    "    Metadata:",
    "      handler_name    : SoundHandler",
    "Output #0, webm, to 'pipe:1':",
    "  Metadata:",
    "    encoder         : Lavf58.76.100",
    "  Stream #0:0(und): Video: vp8, yuv420p(progressive), 1280x720 [SAR 1:1 DAR 16:9], q=-1--1, 30 fps, 1k tbn (default)",
    "  Stream #0:1(und): Audio: vorbis, 44100 Hz, stereo, fltp (default)",
    "Stream mapping:",
    "  Stream #0:0 -> #0:0 (h264 (native) -> vp8 (libvpx))",
    "  Stream #0:1 -> #0:1 (aac (native) -> vorbis (libvorbis))",
    "Press [q] to stop, [?] for help",
    "frame=   75 fps= 25 q=10.0 size=     256kB time=00:00:02.500 bitrate= 838.9kbits/s speed=0.83x",
    "frame=  150 fps= 25 q=10.0 size=     512kB time=00:00:05.000 bitrate= 838.9kbits/s speed=0.83x",
    "frame=  300 fps= 25 q=-0.0 Lsize=    1024kB time=00:00:10.000 bitrate= 838.9kbits/s speed=0.84x",
    "video:900kB audio:110kB subtitle:0kB other streams:0kB global headers:3kB muxing overhead: 1.000000%",
]


class RecordingListener:
    """Listener double that records every event in arrival order."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def on_metadata(self, record):
        self.events.append(("metadata", record))

    def on_progress(self, record):
        self.events.append(("progress", record))

    def on_parse_error(self, line):
        self.events.append(("parse_error", line))

    def on_finish(self):
        self.events.append(("finish", None))

    def on_error(self, error):
        self.events.append(("error", error))

    def of(self, name: str) -> List[Any]:
        return [payload for kind, payload in self.events if kind == name]

    def names(self) -> List[str]:
        return [kind for kind, _ in self.events]


@pytest.fixture()
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture()
def ffmpeg_stderr() -> List[str]:
    return list(FFMPEG_STDERR)


@pytest.fixture(autouse=True)
def _fresh_settings():
    # settings are cached per process; env changes in a test must not leak
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()
