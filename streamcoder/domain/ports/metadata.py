from __future__ import annotations
from pathlib import Path
from typing import Protocol
from streamcoder.domain.entities.media import MetadataRecord

class MetadataReaderPort(Protocol):
    def read(self, path: Path) -> MetadataRecord: ...
