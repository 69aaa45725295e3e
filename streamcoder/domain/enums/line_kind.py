from __future__ import annotations
from enum import StrEnum

class LineKind(StrEnum):
    input_header = "input_header"
    output_header = "output_header"
    metadata_marker = "metadata_marker"
    duration = "duration"
    stream_mapping = "stream_mapping"
    stream = "stream"
    progress = "progress"
    freeform = "freeform"
