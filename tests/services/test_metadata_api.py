# tests/services/test_metadata_api.py
from __future__ import annotations

from pathlib import Path

from streamcoder.services.transcode.ffmpeg_adapter import TranscodeError


def test_healthz(api_client):
    r = api_client.get("/healthz")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ok"] is True
    assert body["app"] == "streamcoder"
    assert body["ffmpeg"]


def test_metadata_ok(api_client, fake_reader, sample_record):
    fake_reader.record = sample_record

    r = api_client.post("/api/metadata", json={"path": "/media/in.mp4"})
    assert r.status_code == 200, r.text
    assert fake_reader.paths == [Path("/media/in.mp4")]

    body = r.json()
    assert body["complete"] is True
    inp = body["input"]
    assert inp["role"] == "input"
    assert inp["duration_ms"] == 10000
    assert inp["synched"] is True
    assert inp["metadata"] == {"major_brand": "isom"}

    video, audio = inp["streams"]
    assert video["kind"] == "video"
    assert (video["width"], video["height"]) == (1280, 720)
    assert video["metadata"] == {"handler_name": "VideoHandler"}
    assert audio["kind"] == "audio"
    assert audio["channel_count"] == 2
    assert audio["metadata"] is None
    assert body["output"]["streams"] == []


def test_metadata_missing_file_is_404(api_client, fake_reader):
    fake_reader.error = FileNotFoundError("File not found: /nope.mp4")

    r = api_client.post("/api/metadata", json={"path": "/nope.mp4"})
    assert r.status_code == 404
    assert "nope.mp4" in r.json()["detail"]


def test_metadata_engine_failure_is_502(api_client, fake_reader):
    fake_reader.error = TranscodeError("ffmpeg produced no metadata", stderr="Invalid data found", rc=1)

    r = api_client.post("/api/metadata", json={"path": "/media/bad.mp4"})
    assert r.status_code == 502
    assert r.json()["detail"] == {
        "message": "ffmpeg produced no metadata",
        "stderr": "Invalid data found",
        "rc": 1,
    }


def test_metadata_requires_path(api_client):
    r = api_client.post("/api/metadata", json={})
    assert r.status_code == 422
