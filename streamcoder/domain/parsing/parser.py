# streamcoder/domain/parsing/parser.py
from __future__ import annotations

from typing import Any, Iterable, List, Optional

from streamcoder.common.logging import get_logger
from streamcoder.domain.entities.media import MetadataRecord
from streamcoder.domain.enums.line_kind import LineKind
from streamcoder.domain.parsing.accumulator import MetadataAccumulator
from streamcoder.domain.parsing.classifier import classify
from streamcoder.domain.parsing.progress import decode_progress
from streamcoder.domain.ports.events import dispatch

logger = get_logger(__name__)


class DiagnosticParser:
    """
    Incremental parser for ffmpeg's stderr.

    Feed it one line at a time, in the order ffmpeg wrote them. Subscribed
    listeners receive:
      - on_metadata(MetadataRecord): once per run
      - on_progress(ProgressRecord): once per progress line
      - on_parse_error(line): for lines that could not be interpreted

    One instance per run; nothing is shared between instances.
    """

    def __init__(self, listeners: Iterable[Any] = ()) -> None:
        self._listeners: List[Any] = list(listeners)
        self._accumulator = MetadataAccumulator()
        self._last_line: Optional[str] = None
        self.progress_count = 0
        self.parse_error_count = 0

    # ---- subscriptions ----------------------------------------------------------
    def subscribe(self, listener: Any) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Any) -> None:
        self._listeners.remove(listener)

    def _notify(self, event: str, *args: Any) -> None:
        dispatch(self._listeners, event, *args)

    # ---- state ------------------------------------------------------------------
    @property
    def ended(self) -> bool:
        return self._accumulator.ended

    @property
    def metadata(self) -> Optional[MetadataRecord]:
        return self._accumulator.record

    @property
    def last_diagnostic_line(self) -> Optional[str]:
        """Most recent non-empty line; used as the message when ffmpeg fails."""
        return self._last_line

    # ---- feed -------------------------------------------------------------------
    def feed(self, raw: str) -> None:
        line = raw.strip()
        if line:
            self._last_line = line

        try:
            kind = classify(line)
            emitted = self._accumulator.consume(kind, line)
        except Exception as ex:
            self._parse_error(line, ex)
            return

        # the phase has ended once consume() returned a record; emit it first
        if emitted is not None:
            self._notify("on_metadata", emitted)
        if kind is not LineKind.progress:
            return

        try:
            progress = decode_progress(line, self._accumulator.input_duration_ms)
        except Exception as ex:
            self._parse_error(line, ex)
            return
        self.progress_count += 1
        self._notify("on_progress", progress)

    def _parse_error(self, line: str, ex: Exception) -> None:
        self.parse_error_count += 1
        logger.debug("Could not parse ffmpeg line %r: %s", line, ex)
        self._notify("on_parse_error", line)

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed(line)

    def close(self) -> Optional[MetadataRecord]:
        """
        Signal end of stream. If the metadata phase never ended, flush what was
        collected as an incomplete record and notify listeners with it.
        """
        record = self._accumulator.finish()
        if record is not None:
            logger.warning("ffmpeg output ended before metadata was complete; flushing partial metadata")
            self._notify("on_metadata", record)
        return record
