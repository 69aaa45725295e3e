from streamcoder.services.schemas.metadata import (
    MetadataRequest,
    MetadataOut,
    SectionOut,
    StreamOut,
)

__all__ = [
    "MetadataRequest",
    "MetadataOut",
    "SectionOut",
    "StreamOut",
]
