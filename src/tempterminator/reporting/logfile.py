"""Append-only run log."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from tempterminator.core.events import EventSink
from tempterminator.models.outcome import ItemOutcome
from tempterminator.models.summary import RunSummary
from tempterminator.reporting.formatting import END_BANNER, START_BANNER, format_outcome, stamp, summary_lines

if TYPE_CHECKING:
    from tempterminator.core.errors import UnexpectedFailure

log = logging.getLogger(__name__)


class LogFileListener(EventSink):
    """Appends a timestamped record of each run to a text file.

    The file is opened when a run starts and closed once its summary (or
    abort) has been written.  ``written`` tells whether the current run
    made it into the file.  When it cannot be opened the run goes on
    without a file log.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._stream: TextIO | None = None
        self.written = False

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def on_start(self, target: Path) -> None:
        self.close()
        self.written = False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = open(self.path, "a", encoding="utf-8")
        except OSError as e:
            log.warning("Cannot open log file at %s, proceeding without file log: %s", self.path, e)
            self._stream = None
            return
        self.written = True
        self._write(stamp(START_BANNER))
        self._write(stamp(f"Target: {target}"))

    def on_item(self, outcome: ItemOutcome) -> None:
        self._write(stamp(format_outcome(outcome)))

    def on_summary(self, summary: RunSummary) -> None:
        if summary.cancelled:
            self._write(stamp("Run cancelled"))
        self._finish(summary)

    def on_abort(self, error: UnexpectedFailure) -> None:
        self._write(stamp(f"Run aborted: {error}"))
        self._finish(error.summary)

    def append(self, message: str) -> None:
        """Record a single line outside of a run, e.g. a failed validation."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(stamp(message) + "\n")
        except OSError as e:
            log.warning("Cannot write to log file at %s: %s", self.path, e)

    def _finish(self, summary: RunSummary) -> None:
        self._write("")
        for line in summary_lines(summary):
            self._write(line)
        self._write(END_BANNER)
        self._write("")
        self.close()

    def _write(self, line: str) -> None:
        if self._stream is None:
            return
        self._stream.write(line + "\n")
        self._stream.flush()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
