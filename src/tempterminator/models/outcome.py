"""Per-entry deletion outcome."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ItemKind(str, Enum):
    """Kind of directory entry handled by a pass."""

    FILE = "file"
    DIRECTORY = "folder"


class ItemResult(str, Enum):
    """Whether an entry was removed."""

    DELETED = "deleted"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    """Result of attempting to remove one directory entry.

    ``reason`` is only set for skipped entries.  ``items_removed`` is the
    advisory descendant count of a deleted folder, or None when it was
    not counted.
    """

    path: Path
    kind: ItemKind
    result: ItemResult
    reason: str | None = None
    items_removed: int | None = None

    @property
    def deleted(self) -> bool:
        return self.result is ItemResult.DELETED

    @property
    def skipped(self) -> bool:
        return self.result is ItemResult.SKIPPED

    @classmethod
    def removed(cls, path: Path, kind: ItemKind, items_removed: int | None = None) -> ItemOutcome:
        return cls(path=path, kind=kind, result=ItemResult.DELETED, items_removed=items_removed)

    @classmethod
    def not_removed(cls, path: Path, kind: ItemKind, reason: str | None) -> ItemOutcome:
        return cls(path=path, kind=kind, result=ItemResult.SKIPPED, reason=reason or "unknown")

    def to_dict(self) -> dict:
        data = {
            "path": str(self.path),
            "kind": self.kind.value,
            "result": self.result.value,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        if self.items_removed is not None:
            data["items_removed"] = self.items_removed
        return data
