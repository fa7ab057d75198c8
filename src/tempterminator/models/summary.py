"""Pass and run summary dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

from tempterminator.models.outcome import ItemKind, ItemOutcome


@dataclass(slots=True)
class PassResult:
    """Counters for a single pass over the target directory."""

    kind: ItemKind
    deleted: int = 0
    skipped: int = 0
    items_removed: int | None = None
    cancelled: bool = False

    @property
    def attempted(self) -> int:
        return self.deleted + self.skipped

    def record(self, outcome: ItemOutcome) -> None:
        if outcome.deleted:
            self.deleted += 1
            if outcome.items_removed is not None:
                self.items_removed = (self.items_removed or 0) + outcome.items_removed
        else:
            self.skipped += 1


@dataclass(slots=True)
class RunSummary:
    """Aggregate counters for one run.

    ``items_removed_in_folders`` stays None unless the descendant count of
    deleted folders was tracked.
    """

    files_deleted: int = 0
    files_skipped: int = 0
    folders_deleted: int = 0
    folders_skipped: int = 0
    items_removed_in_folders: int | None = None
    cancelled: bool = False
    elapsed: float = 0.0

    @property
    def files_seen(self) -> int:
        return self.files_deleted + self.files_skipped

    @property
    def folders_seen(self) -> int:
        return self.folders_deleted + self.folders_skipped

    @property
    def total_skipped(self) -> int:
        return self.files_skipped + self.folders_skipped

    def record(self, outcome: ItemOutcome) -> None:
        """Fold a single outcome into the counters."""
        match (outcome.kind, outcome.deleted):
            case (ItemKind.FILE, True):
                self.files_deleted += 1
            case (ItemKind.FILE, False):
                self.files_skipped += 1
            case (ItemKind.DIRECTORY, True):
                self.folders_deleted += 1
                if outcome.items_removed is not None:
                    self.items_removed_in_folders = (self.items_removed_in_folders or 0) + outcome.items_removed
            case (ItemKind.DIRECTORY, False):
                self.folders_skipped += 1

    def to_dict(self) -> dict:
        return {
            "files_deleted": self.files_deleted,
            "files_skipped": self.files_skipped,
            "folders_deleted": self.folders_deleted,
            "folders_skipped": self.folders_skipped,
            "items_removed_in_folders": self.items_removed_in_folders,
            "cancelled": self.cancelled,
            "elapsed": round(self.elapsed, 3),
        }
