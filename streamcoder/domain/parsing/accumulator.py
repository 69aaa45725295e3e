# streamcoder/domain/parsing/accumulator.py
from __future__ import annotations

import re
from typing import Dict, Optional

from streamcoder.common.timecode import parse_duration
from streamcoder.domain.dataclasses.metadata import MetadataDraft, SectionDraft, StreamDraft
from streamcoder.domain.entities.media import MetadataRecord
from streamcoder.domain.enums.line_kind import LineKind
from streamcoder.domain.enums.parse_state import ParseState
from streamcoder.domain.enums.section_role import SectionRole
from streamcoder.domain.parsing.errors import MalformedLineError
from streamcoder.domain.parsing.fields import METADATA_FIELDS, extract_fields

_DURATION = re.compile(r"duration:\s*(\S+?)(?:,|$)", re.I)
_KEY_VALUE = re.compile(r"^(\S+?)\s*:\s*(.+?)$")


class MetadataAccumulator:
    """
    State machine that folds metadata-phase lines into a draft record.

    PARSING -> ENDED happens once, on a "Stream mapping:" line or on the first
    progress line. consume() returns the frozen record on that transition and
    None otherwise. After ENDED every metadata line is ignored.
    """

    def __init__(self) -> None:
        self._draft = MetadataDraft()
        self._current: Optional[SectionDraft] = None
        self._state = ParseState.parsing
        self._record: Optional[MetadataRecord] = None

    # ---- state ------------------------------------------------------------------
    @property
    def state(self) -> ParseState:
        return self._state

    @property
    def ended(self) -> bool:
        return self._state is ParseState.ended

    @property
    def record(self) -> Optional[MetadataRecord]:
        """The emitted snapshot, once ENDED."""
        return self._record

    @property
    def input_duration_ms(self) -> Optional[int]:
        return self._draft.input.duration_ms

    # ---- transitions ------------------------------------------------------------
    def consume(self, kind: LineKind, line: str) -> Optional[MetadataRecord]:
        if self.ended:
            return None

        if kind in (LineKind.stream_mapping, LineKind.progress):
            return self._end(complete=True)

        if kind is LineKind.input_header:
            self._current = self._draft.input = SectionDraft(role=SectionRole.input)
        elif kind is LineKind.output_header:
            self._current = self._draft.output = SectionDraft(role=SectionRole.output)
        elif self._current is None:
            # banner and configuration lines before the first header
            return None
        elif kind is LineKind.metadata_marker:
            self._open_metadata_block(self._current)
        elif kind is LineKind.duration:
            self._apply_duration(self._current, line)
        elif kind is LineKind.stream:
            self._current.streams.append(StreamDraft.from_fields(extract_fields(line, METADATA_FIELDS)))
        else:
            self._apply_key_value(self._current, line)
        return None

    def finish(self) -> Optional[MetadataRecord]:
        """
        Force the transition at end of stream. Returns an incomplete record when
        the phase had not ended yet, otherwise None.
        """
        if self.ended:
            return None
        return self._end(complete=False)

    def _end(self, *, complete: bool) -> MetadataRecord:
        self._record = self._draft.freeze(complete=complete)
        self._state = ParseState.ended
        self._current = None
        return self._record

    # ---- line handlers ----------------------------------------------------------
    @staticmethod
    def _open_metadata_block(section: SectionDraft) -> None:
        tail = section.tail
        if tail is not None:
            tail.metadata = {}
        else:
            section.metadata = {}

    @staticmethod
    def _apply_duration(section: SectionDraft, line: str) -> None:
        m = _DURATION.search(line)
        if not m:
            raise MalformedLineError(line, "duration line without timestamp")
        duration_ms = parse_duration(m.group(1))
        if section.role is SectionRole.input:
            section.duration_ms = duration_ms
            section.synched = "start: 0.000000" in line

    @staticmethod
    def _apply_key_value(section: SectionDraft, line: str) -> None:
        target: Optional[Dict[str, str]] = None
        tail = section.tail
        if tail is not None and tail.metadata is not None:
            target = tail.metadata
        elif section.metadata is not None:
            target = section.metadata
        if target is None:
            return
        m = _KEY_VALUE.match(line.strip())
        if m:
            target[m.group(1)] = m.group(2)
