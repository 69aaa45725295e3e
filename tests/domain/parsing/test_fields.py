import re

import pytest

from streamcoder.domain.parsing.fields import (
    METADATA_FIELDS,
    PROGRESS_FIELDS,
    FieldSpec,
    extract_fields,
    leading_int,
)

VIDEO_LINE = (
    "Stream #0:0(und): Video: h264 (High) (avc1 / 0x31637661), yuv420p, "
    "1920x1080 [SAR 1:1 DAR 16:9], 4500 kb/s, 29.97 fps, 29.97 tbr, 30k tbn (default)"
)
AUDIO_LINE = "Stream #0:1(eng): Audio: aac (LC) (mp4a / 0x6134706D), 48000 Hz, stereo, fltp, 192 kb/s"


def test_unmatched_pattern_is_absent_not_error():
    specs = {"x": FieldSpec(re.compile(r"nothing-here=(\d+)"), group=1, transform=int)}
    assert extract_fields("frame=1", specs) == {}


def test_transform_is_skipped_when_pattern_misses():
    seen = []
    specs = {"pair": FieldSpec(re.compile(r"(\d+)x(\d+)"), transform=lambda m: seen.append(m) or m.group(1))}
    assert extract_fields("no frame size here", specs) == {}
    assert seen == []


def test_whole_match_goes_to_transform_without_group():
    specs = {"pair": FieldSpec(re.compile(r"(\d+)-(\d+)"), transform=lambda m: (m.group(1), m.group(2)))}
    assert extract_fields("a 3-4 b", specs) == {"pair": ("3", "4")}


def test_zero_values_are_dropped():
    out = extract_fields("Stream #0:1: Audio: aac, 44100 Hz, mono, fltp, 0 kb/s", METADATA_FIELDS)
    assert "bitrate" not in out
    assert out["channels"] == 1


def test_video_stream_fields():
    out = extract_fields(VIDEO_LINE, METADATA_FIELDS)
    assert out["type"] == "video"
    assert out["codec"] == "h264"
    assert out["bitrate"] == 4_500_000
    assert out["fps"] == pytest.approx(29.97)
    assert out["size"] == (1920, 1080)
    assert out["aspect"] == pytest.approx(16 / 9)
    assert out["colors"] == "yuv420p"
    assert "samplerate" not in out


def test_audio_stream_fields():
    out = extract_fields(AUDIO_LINE, METADATA_FIELDS)
    assert out["type"] == "audio"
    assert out["codec"] == "aac"
    assert out["samplerate"] == 48000
    assert out["channels"] == 2
    assert out["bitrate"] == 192_000
    assert "size" not in out


def test_channel_layout_falls_back_to_leading_integer():
    out = extract_fields("Stream #0:1: Audio: ac3, 48000 Hz, 5.1(side), fltp, 384 kb/s", METADATA_FIELDS)
    assert out["channels"] == 5


def test_zero_height_frame_has_no_aspect():
    out = extract_fields("Stream #0:0: Video: rawvideo, rgb24, 640x0, 25 fps", METADATA_FIELDS)
    assert out["size"] == (640, 0)
    assert "aspect" not in out


def test_progress_size_uses_binary_multiplier():
    out = extract_fields("frame=  100 fps= 30 q=28.0 size=    512kB time=00:00:05.00 bitrate= 800.0kbits/s", PROGRESS_FIELDS)
    assert out["frame"] == 100
    assert out["fps"] == 30.0
    assert out["quality"] == 28.0
    assert out["size"] == 512 * 1024
    assert out["time"] == 5000
    # bitrate stays decimal
    assert out["bitrate"] == 800_000


def test_progress_kib_and_megabit_units():
    out = extract_fields("size=    2048KiB time=00:01:00.00 bitrate=   1.5mbits/s speed=1x", PROGRESS_FIELDS)
    assert out["size"] == 2048 * 1024
    assert out["bitrate"] == 1_500_000
    assert "frame" not in out


def test_progress_na_fields_absent():
    out = extract_fields("frame=    0 fps=0.0 q=-1.0 size=N/A time=N/A bitrate=N/A", PROGRESS_FIELDS)
    assert out == {}


def test_leading_int():
    assert leading_int("42abc") == 42
    assert leading_int("abc") is None
    assert leading_int(None) is None
