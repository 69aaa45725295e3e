from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Protocol

from streamcoder.domain.entities.media import MetadataRecord
from streamcoder.domain.entities.progress import ProgressRecord

if TYPE_CHECKING:
    from streamcoder.services.transcode.ffmpeg_adapter import TranscodeError


class DiagnosticListener(Protocol):
    # Listeners may implement any subset; missing handlers are skipped.
    def on_metadata(self, record: MetadataRecord) -> None: ...
    def on_progress(self, record: ProgressRecord) -> None: ...
    def on_parse_error(self, line: str) -> None: ...


class TranscodeListener(DiagnosticListener, Protocol):
    def on_finish(self) -> None: ...
    def on_error(self, error: "TranscodeError") -> None: ...


@dataclass(frozen=True)
class Callbacks:
    """Plain-callable listener, for callers that don't want a class."""

    on_metadata: Optional[Callable[[MetadataRecord], None]] = None
    on_progress: Optional[Callable[[ProgressRecord], None]] = None
    on_parse_error: Optional[Callable[[str], None]] = None
    on_finish: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[["TranscodeError"], None]] = None


def dispatch(listeners: Iterable[Any], event: str, *args: Any) -> None:
    """Call ``event`` on every listener that implements it, in subscription order."""
    for listener in list(listeners):
        handler = getattr(listener, event, None)
        if handler is not None:
            handler(*args)
