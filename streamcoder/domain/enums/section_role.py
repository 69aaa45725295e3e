from __future__ import annotations
from enum import StrEnum

class SectionRole(StrEnum):
    input = "input"
    output = "output"
