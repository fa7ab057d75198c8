"""Error types raised by the deletion engine."""

from __future__ import annotations

from pathlib import Path

from tempterminator.models.outcome import ItemKind
from tempterminator.models.summary import RunSummary


class TempTerminatorError(Exception):
    """Base class for all engine errors."""


class TargetMissing(TempTerminatorError):
    """Raised when the target directory does not exist or is not a directory."""

    def __init__(self, path: Path | str, reason: str = "not found") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Temp folder {reason}: {path}")


class ItemRemovalFailed(TempTerminatorError):
    """Raised when a single file or folder could not be removed.

    Always caught by the pass that attempted the removal.
    """

    def __init__(self, path: Path, kind: ItemKind, reason: str) -> None:
        self.path = path
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot delete {kind.value} {path}: {reason}")


class UnexpectedFailure(TempTerminatorError):
    """Raised when a run cannot continue, e.g. the target can no longer be listed.

    ``summary`` holds the counters gathered before the failure.
    """

    def __init__(self, message: str, summary: RunSummary | None = None) -> None:
        self.summary = summary if summary is not None else RunSummary()
        super().__init__(message)
