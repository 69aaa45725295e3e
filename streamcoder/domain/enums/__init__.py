from streamcoder.domain.enums.line_kind import LineKind
from streamcoder.domain.enums.parse_state import ParseState
from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.enums.stream_kind import StreamKind
__all__ = [
    "LineKind",
    "ParseState",
    "SectionRole",
    "StreamKind",
]
