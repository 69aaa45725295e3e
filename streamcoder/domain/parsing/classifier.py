# streamcoder/domain/parsing/classifier.py
from __future__ import annotations

import re
from typing import Tuple

from streamcoder.domain.enums.line_kind import LineKind

# Order matters: first match wins ("Stream mapping:" must beat "Stream #").
_RULES: Tuple[Tuple[re.Pattern[str], LineKind], ...] = (
    (re.compile(r"^input", re.I), LineKind.input_header),
    (re.compile(r"^output", re.I), LineKind.output_header),
    (re.compile(r"^metadata:$", re.I), LineKind.metadata_marker),
    (re.compile(r"^duration", re.I), LineKind.duration),
    (re.compile(r"^stream mapping", re.I), LineKind.stream_mapping),
    (re.compile(r"^stream #", re.I), LineKind.stream),
    (re.compile(r"^(?:frame|size)=", re.I), LineKind.progress),
)


def classify(line: str) -> LineKind:
    """Return the logical section a diagnostic line belongs to."""
    text = line.strip()
    for pattern, kind in _RULES:
        if pattern.search(text):
            return kind
    return LineKind.freeform
