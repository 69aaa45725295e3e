from __future__ import annotations
from enum import StrEnum

class ParseState(StrEnum):
    parsing = "parsing"
    ended = "ended"
