"""Plain-text rendering shared by the console and log-file listeners."""

from __future__ import annotations

from tempterminator.models.outcome import ItemKind, ItemOutcome
from tempterminator.models.summary import RunSummary
from tempterminator.utils import timestamp

START_BANNER = "=== Starting Temp Termination ==="
END_BANNER = "=== End ==="
SUMMARY_HEADER = "--- Summary ---"


def format_outcome(outcome: ItemOutcome) -> str:
    """Render one outcome without its timestamp, e.g. ``Deleted file: /tmp/a``."""
    if outcome.deleted:
        line = f"Deleted {outcome.kind.value}: {outcome.path}"
        if outcome.kind is ItemKind.DIRECTORY and outcome.items_removed is not None:
            line += f" (items removed: {outcome.items_removed})"
        return line
    return f"Skipped {outcome.kind.value} (cannot delete): {outcome.path} | Reason: {outcome.reason or 'unknown'}"


def stamp(message: str) -> str:
    """Prefix a message with the current ``[YYYY-MM-DD HH:MM:SS]`` timestamp."""
    return f"[{timestamp()}] {message}"


def summary_lines(summary: RunSummary) -> list[str]:
    """Render the summary block, header included."""
    lines = [
        SUMMARY_HEADER,
        f"Files deleted: {summary.files_deleted}",
        f"Files skipped: {summary.files_skipped}",
        f"Folders deleted: {summary.folders_deleted}",
        f"Folders skipped: {summary.folders_skipped}",
    ]
    if summary.items_removed_in_folders is not None:
        lines.append(f"Items removed in folders: {summary.items_removed_in_folders}")
    return lines
