# streamcoder/services/transcode/ffmpeg_adapter.py
from __future__ import annotations

import os
import shlex
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Iterable, List, Optional, Union

from streamcoder.common.iter import iter_lines
from streamcoder.common.logging import get_logger
from streamcoder.common.settings import get_settings
from streamcoder.domain.dataclasses.reports import TranscodeReport
from streamcoder.domain.entities.media import MetadataRecord
from streamcoder.domain.parsing.parser import DiagnosticParser
from streamcoder.domain.ports.events import dispatch
from streamcoder.services.transcode.arguments import TranscodeArguments

logger = get_logger()

Source = Union[str, "os.PathLike[str]", IO[bytes]]


@dataclass(frozen=True)
class TranscodeError(RuntimeError):
    """Adapter-level error for ffmpeg failures."""
    message: str
    stderr: Optional[str] = None
    rc: Optional[int] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class TranscodeHandle:
    """
    A running ffmpeg process plus the parser consuming its stderr.
    ``stdout`` is the binary payload channel (only set for stream()).
    """
    process: subprocess.Popen
    parser: DiagnosticParser
    report: TranscodeReport
    _done: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    @property
    def stdout(self) -> Optional[IO[bytes]]:
        return self.process.stdout

    @property
    def metadata(self) -> Optional[MetadataRecord]:
        return self.parser.metadata

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> TranscodeReport:
        """Block until ffmpeg exited and every listener was notified."""
        if not self._done.wait(timeout):
            raise TimeoutError(f"ffmpeg still running after {timeout}s")
        return self.report

    def kill(self) -> None:
        if self.process.poll() is None:
            self.process.kill()


class FFmpegTranscoder(TranscodeArguments):
    """
    Transcodes a media source with ffmpeg.

    ``source`` is either a path (handed to ffmpeg with ``-i``) or a readable
    binary stream (pumped into ffmpeg's stdin, ``-i -``). Configure the output
    with the fluent TranscodeArguments setters, subscribe listeners, then call
    exec(), stream() or write_to_file().

    Listener events:
      on_metadata(MetadataRecord), on_progress(ProgressRecord),
      on_parse_error(str), on_finish(), on_error(TranscodeError)
    """

    def __init__(
        self,
        source: Source,
        *,
        ffmpeg_bin: Optional[str] = None,
        work_dir: Optional[Union[str, Path]] = None,
        listeners: Iterable[Any] = (),
    ) -> None:
        super().__init__()
        cfg = get_settings()
        self.source = source
        self.ffmpeg_bin = ffmpeg_bin or cfg.ffmpeg_bin
        self.work_dir = Path(work_dir) if work_dir else cfg.ffmpeg_work_dir
        self._chunk_size = cfg.ffmpeg.pump_chunk_size
        self._encoding = cfg.ffmpeg.stderr_encoding
        self._listeners: List[Any] = list(listeners)

    # ---- listeners ----------------------------------------------------------------
    def subscribe(self, listener: Any) -> "FFmpegTranscoder":
        self._listeners.append(listener)
        return self

    # ---- command line -------------------------------------------------------------
    @property
    def _source_is_path(self) -> bool:
        return isinstance(self.source, (str, os.PathLike))

    def build_command(self, output_args: Iterable[str] = ()) -> List[str]:
        input_args = ["-i", os.fspath(self.source) if self._source_is_path else "-"]
        return [self.ffmpeg_bin, *input_args, *self.compile(), *output_args]

    # ---- Port API -----------------------------------------------------------------
    def exec(self) -> TranscodeHandle:
        """Run without writing output; useful when only metadata is needed."""
        return self._spawn([], stdout=subprocess.DEVNULL)

    def stream(self) -> TranscodeHandle:
        """Run with output on ``pipe:1``; read it from ``handle.stdout``."""
        return self._spawn(["pipe:1"], stdout=subprocess.PIPE)

    def write_to_file(self, path: Union[str, Path]) -> TranscodeHandle:
        return self._spawn(["-y", str(path)], stdout=subprocess.DEVNULL)

    # ---- process plumbing ---------------------------------------------------------
    def _spawn(self, output_args: List[str], *, stdout: int) -> TranscodeHandle:
        cmd = self.build_command(output_args)
        logger.info("Spawning ffmpeg %s", " ".join(shlex.quote(p) for p in cmd[1:]))

        report = TranscodeReport(command=cmd)
        report.start()
        parser = DiagnosticParser(self._listeners)
        piped = not self._source_is_path

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE if piped else subprocess.DEVNULL,
                stdout=stdout,
                stderr=subprocess.PIPE,
                cwd=str(self.work_dir),
            )
        except OSError as e:
            raise TranscodeError("Failed to execute ffmpeg (OS error).", stderr=str(e)) from e

        handle = TranscodeHandle(process=proc, parser=parser, report=report)
        if piped:
            threading.Thread(
                target=self._pump_source, args=(proc,), name="ffmpeg-stdin", daemon=True
            ).start()
        threading.Thread(
            target=self._watch, args=(handle,), name="ffmpeg-stderr", daemon=True
        ).start()
        return handle

    def _pump_source(self, proc: subprocess.Popen) -> None:
        stdin = proc.stdin
        assert stdin is not None
        try:
            for chunk in iter(lambda: self.source.read(self._chunk_size), b""):  # type: ignore[union-attr]
                stdin.write(chunk)
        except (BrokenPipeError, ValueError) as e:
            # ffmpeg stops reading once it has what it needs (e.g. capture_frame)
            logger.debug("ffmpeg closed stdin early: %s", e)
        finally:
            try:
                stdin.close()
            except BrokenPipeError:
                pass

    def _watch(self, handle: TranscodeHandle) -> None:
        proc, parser, report = handle.process, handle.parser, handle.report
        try:
            assert proc.stderr is not None
            # progress lines end in '\r' and must reach the parser without delay
            for line in iter_lines(proc.stderr, encoding=self._encoding):
                parser.feed(line)
            rc = proc.wait()
            parser.close()
            self._fill_report(report, parser, rc)

            if rc == 0:
                logger.info("ffmpeg finished in %.2fs", report.elapsed_sec or 0.0)
                dispatch(self._listeners, "on_finish")
            else:
                err = TranscodeError(
                    f"FFmpeg error: {parser.last_diagnostic_line}",
                    stderr=parser.last_diagnostic_line,
                    rc=rc,
                )
                logger.warning("ffmpeg exited with %s: %s", rc, parser.last_diagnostic_line)
                report.add_error("ffmpeg", err.message)
                dispatch(self._listeners, "on_error", err)
        except Exception as exc:
            logger.exception("ffmpeg watcher failed")
            self._abort(handle, exc)
        finally:
            handle._done.set()

    def _abort(self, handle: TranscodeHandle, exc: Exception) -> None:
        proc, parser, report = handle.process, handle.parser, handle.report
        handle.kill()
        rc = proc.wait()
        if not parser.ended:
            try:
                parser.close()
            except Exception:
                logger.exception("flushing metadata after watcher failure failed")
        self._fill_report(report, parser, rc)
        report.add_error("watcher", str(exc))
        dispatch(self._listeners, "on_error", TranscodeError("ffmpeg watcher failed", stderr=str(exc), rc=rc))

    @staticmethod
    def _fill_report(report: TranscodeReport, parser: DiagnosticParser, rc: int) -> None:
        report.exit_code = rc
        report.progress_events = parser.progress_count
        report.parse_errors = parser.parse_error_count
        report.last_diagnostic_line = parser.last_diagnostic_line
        if parser.metadata is not None:
            report.metadata_complete = parser.metadata.complete
        report.stop()
