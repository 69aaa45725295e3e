# streamcoder/domain/parsing/errors.py
from __future__ import annotations


class MalformedLineError(ValueError):
    """A line matched a classification but its contents could not be converted."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
