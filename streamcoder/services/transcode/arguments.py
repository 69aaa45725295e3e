# streamcoder/services/transcode/arguments.py
from __future__ import annotations

from typing import Dict, List, Optional, Union

from streamcoder.common.timecode import format_duration

Number = Union[int, float]


def _scale_filter(width: Number, height: Number, *, bound: str, always_scale: bool) -> str:
    """
    Build a ``scale=W:H`` expression that fits (bound="min") or covers
    (bound="max") a width x height box while keeping the aspect ratio and
    respecting chroma subsampling. Without always_scale the source size is
    also a candidate, so the frame is never scaled past it.
    """
    w = f"{bound}(trunc({width}/hsub)*hsub\\,trunc(a*{height}/hsub)*hsub)"
    h = f"{bound}(trunc({height}/vsub)*vsub\\,trunc({width}/a/vsub)*vsub)"
    if not always_scale:
        w = f"{bound}(trunc(iw/hsub)*hsub\\,{w})"
        h = f"{bound}(trunc(ih/vsub)*vsub\\,{h})"
    return f"scale={w}:{h}"


class TranscodeArguments:
    """
    Fluent, ordered set of ffmpeg output options.

    Each option is stored under a key; setting the same key again replaces its
    tokens but keeps the key's original position, so compile() output is
    stable. Every setter returns self.
    """

    def __init__(self) -> None:
        self.args: Dict[str, List[str]] = {}

    def compile(self) -> List[str]:
        """Flatten the options into one argument list, in insertion order."""
        out: List[str] = []
        for tokens in self.args.values():
            out.extend(tokens)
        return out

    # ---- video ------------------------------------------------------------------
    def video_bitrate(self, bitrate: Union[int, str]) -> "TranscodeArguments":
        """Video bitrate; both ``1280000`` and ``"1280k"`` are accepted."""
        self.args["b"] = ["-b:v", str(bitrate)]
        return self

    def video_codec(self, codec: str) -> "TranscodeArguments":
        """Video codec name as known to the local ffmpeg (``ffmpeg -codecs``)."""
        self.args["vcodec"] = ["-vcodec", codec]
        return self

    def fps(self, fps: Number) -> "TranscodeArguments":
        self.args["r"] = ["-r", str(fps)]
        return self

    def format(self, fmt: str) -> "TranscodeArguments":
        """Output container. mp4 also gets fragmented moov flags so it can be piped."""
        self.args["format"] = ["-f", fmt]
        if fmt.lower() == "mp4":
            self.args["movflags"] = ["-movflags", "frag_keyframe+faststart"]
        return self

    def max_size(self, width: Number, height: Number, always_scale: bool = True) -> "TranscodeArguments":
        """Shrink to fit inside width x height, aspect ratio preserved."""
        self.args["vfscale"] = ["-vf", _scale_filter(width, height, bound="min", always_scale=always_scale)]
        return self

    def min_size(self, width: Number, height: Number, always_scale: bool = True) -> "TranscodeArguments":
        """Scale so both sides are at least width x height, aspect ratio preserved."""
        self.args["vfscale"] = ["-vf", _scale_filter(width, height, bound="max", always_scale=always_scale)]
        return self

    def size(self, width: int, height: int) -> "TranscodeArguments":
        """Exact output size; aspect ratio is not kept."""
        self.args["s"] = ["-s", f"{width}x{height}"]
        return self

    def passes(self, passes: int) -> "TranscodeArguments":
        self.args["pass"] = ["-pass", str(passes)]
        return self

    def aspect_ratio(self, ratio: Number) -> "TranscodeArguments":
        self.args["aspect"] = ["-aspect", str(ratio)]
        return self

    # ---- audio ------------------------------------------------------------------
    def audio_codec(self, codec: str) -> "TranscodeArguments":
        self.args["acodec"] = ["-acodec", codec]
        return self

    def sample_rate(self, rate: int) -> "TranscodeArguments":
        self.args["ar"] = ["-ar", str(rate)]
        return self

    def channels(self, channels: int) -> "TranscodeArguments":
        self.args["ac"] = ["-ac", str(channels)]
        return self

    def audio_bitrate(self, bitrate: Union[int, str]) -> "TranscodeArguments":
        self.args["ab"] = ["-ab", str(bitrate)]
        return self

    # ---- misc -------------------------------------------------------------------
    def capture_frame(self, ms: Number) -> "TranscodeArguments":
        """Grab the single frame at ``ms`` as mjpeg."""
        timestamp = format_duration(int(round(ms)))
        self.args["ss"] = ["-ss", timestamp, "-an", "-r", "1", "-vframes", "1", "-y"]
        return self.video_codec("mjpeg").format("mjpeg")

    def custom(self, key: str, value: Optional[str] = None) -> "TranscodeArguments":
        """Escape hatch for any option without a dedicated setter: ``-key [value]``."""
        tokens = [f"-{key}"]
        if value is not None:
            tokens.append(str(value))
        self.args[key] = tokens
        return self
