"""Two-pass deletion engine for the immediate contents of a directory."""

from __future__ import annotations

import dataclasses
import logging
import os
import threading
import time
from pathlib import Path
from typing import Iterable

from tempterminator.core.errors import ItemRemovalFailed, TargetMissing, UnexpectedFailure
from tempterminator.core.events import EventSink
from tempterminator.models.outcome import ItemKind, ItemOutcome
from tempterminator.models.summary import PassResult, RunSummary
from tempterminator.utils import count_tree, describe_os_error, remove_file, remove_tree

log = logging.getLogger(__name__)

_IN_USE_BY_RUN = "in use by this run"


class DeletionEngine:
    """Removes every regular file, then every subdirectory, directly inside a target.

    Each entry is attempted exactly once.  A failing entry is reported as
    skipped and never stops the pass.  Only a failure to list the target
    itself ends a run early, as :class:`UnexpectedFailure`.
    """

    def __init__(
        self,
        target: Path | str,
        sink: EventSink | None = None,
        *,
        count_items: bool = False,
        cancel: threading.Event | None = None,
        exclude: Iterable[Path] = (),
    ) -> None:
        self.target = target
        self.sink = sink or EventSink()
        self.count_items = count_items
        self.cancel_event = cancel or threading.Event()
        self.exclude = {_resolved(p) for p in exclude}
        self._path: Path | None = None
        self._summary = self._new_summary()

    def cancel(self) -> None:
        """Stop after the entry currently being removed."""
        self.cancel_event.set()

    def validate(self) -> Path:
        """Check that the target exists and is a directory.

        Returns:
            The target as a Path.

        Raises:
            TargetMissing: The target is empty, missing or not a directory.
        """
        raw = self.target
        # Path("") is Path("."); an empty target must never mean the working directory.
        if not str(raw).strip() or raw == Path(""):
            raise TargetMissing(raw, "not configured")

        path = Path(raw)
        if not path.exists():
            raise TargetMissing(path)
        if not path.is_dir():
            raise TargetMissing(path, "is not a directory")

        self._path = path
        return path

    def run(self) -> RunSummary:
        """Validate, run the file pass, then the folder pass, and emit the summary.

        Raises:
            TargetMissing: Validation failed; nothing was deleted.
            UnexpectedFailure: The target could not be listed; the sink
                has received ``on_abort`` with the partial counters.
        """
        target = self.validate()
        self._summary = self._new_summary()
        started = time.monotonic()
        self.sink.on_start(target)

        try:
            files = self.run_file_pass()
            if not files.cancelled:
                self.run_folder_pass()
        except UnexpectedFailure as exc:
            self._summary.elapsed = time.monotonic() - started
            log.error("Run aborted: %s", exc)
            self.sink.on_abort(exc)
            raise

        self._summary.elapsed = time.monotonic() - started
        summary = self.summarize()
        self.sink.on_summary(summary)
        return summary

    def run_file_pass(self) -> PassResult:
        """Remove each regular file directly inside the target.

        Symlinks, devices and other non-regular entries are neither
        removed nor reported.  Directories are left for the folder pass.
        """
        result = PassResult(kind=ItemKind.FILE)
        if self._check_cancelled(result):
            return result
        for entry in self._snapshot():
            if self._check_cancelled(result):
                break
            if not _is_regular_file(entry):
                continue
            self._emit(self._delete_file(Path(entry.path)), result)

        log.info("File pass: %d deleted, %d skipped", result.deleted, result.skipped)
        return result

    def run_folder_pass(self) -> PassResult:
        """Remove each subdirectory directly inside the target, with its contents.

        A subtree that fails part-way is reported as skipped; its
        remaining descendants are not retried.
        """
        result = PassResult(kind=ItemKind.DIRECTORY, items_removed=0 if self.count_items else None)
        if self._check_cancelled(result):
            return result
        for entry in self._snapshot():
            if self._check_cancelled(result):
                break
            if not _is_directory(entry):
                continue
            self._emit(self._delete_folder(Path(entry.path)), result)

        log.info("Folder pass: %d deleted, %d skipped", result.deleted, result.skipped)
        return result

    def summarize(self) -> RunSummary:
        """Return a copy of the counters accumulated so far."""
        return dataclasses.replace(self._summary)

    def _new_summary(self) -> RunSummary:
        return RunSummary(items_removed_in_folders=0 if self.count_items else None)

    def _snapshot(self) -> list[os.DirEntry]:
        """List the target once; entries created later are not visited."""
        path = self._path or self.validate()
        try:
            with os.scandir(path) as it:
                return list(it)
        except OSError as exc:
            raise UnexpectedFailure(
                f"Cannot list {path}: {describe_os_error(exc)}",
                self._summary,
            ) from exc

    def _check_cancelled(self, result: PassResult) -> bool:
        if not self.cancel_event.is_set():
            return False
        log.info("Cancelled during %s pass", result.kind.value)
        result.cancelled = True
        self._summary.cancelled = True
        return True

    def _is_excluded(self, path: Path) -> bool:
        """True for an excluded path or a folder holding one, e.g. this run's own log."""
        resolved = _resolved(path)
        for kept in self.exclude:
            if kept == resolved or resolved in kept.parents:
                log.info("Keeping %s: in use by this run", path)
                return True
        return False

    def _emit(self, outcome: ItemOutcome, result: PassResult) -> None:
        result.record(outcome)
        self._summary.record(outcome)
        self.sink.on_item(outcome)

    def _delete_file(self, path: Path) -> ItemOutcome:
        if self._is_excluded(path):
            return ItemOutcome.not_removed(path, ItemKind.FILE, _IN_USE_BY_RUN)
        try:
            _remove_file(path)
        except ItemRemovalFailed as exc:
            log.info("Skipped file %s: %s", path, exc.reason)
            return ItemOutcome.not_removed(path, ItemKind.FILE, exc.reason)
        log.debug("Deleted file: %s", path)
        return ItemOutcome.removed(path, ItemKind.FILE)

    def _delete_folder(self, path: Path) -> ItemOutcome:
        if self._is_excluded(path):
            return ItemOutcome.not_removed(path, ItemKind.DIRECTORY, _IN_USE_BY_RUN)
        # rmtree reports no count, so descendants are counted before removal.
        items = count_tree(path) if self.count_items else None
        try:
            _remove_folder(path)
        except ItemRemovalFailed as exc:
            log.info("Skipped folder %s: %s", path, exc.reason)
            return ItemOutcome.not_removed(path, ItemKind.DIRECTORY, exc.reason)
        log.debug("Deleted folder: %s (%s items)", path, items if items is not None else "?")
        return ItemOutcome.removed(path, ItemKind.DIRECTORY, items_removed=items)


def _resolved(path: Path | str) -> Path:
    return Path(os.path.realpath(path))


def _is_regular_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file(follow_symlinks=False)
    except OSError:
        log.debug("Cannot stat: %s", entry.path)
        return False


def _is_directory(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        log.debug("Cannot stat: %s", entry.path)
        return False


def _remove_file(path: Path) -> None:
    try:
        remove_file(path)
    except OSError as exc:
        raise ItemRemovalFailed(path, ItemKind.FILE, describe_os_error(exc)) from exc
    if os.path.lexists(path):
        raise ItemRemovalFailed(path, ItemKind.FILE, "unknown")


def _remove_folder(path: Path) -> None:
    try:
        remove_tree(path)
    except OSError as exc:
        raise ItemRemovalFailed(path, ItemKind.DIRECTORY, describe_os_error(exc)) from exc
    if os.path.lexists(path):
        raise ItemRemovalFailed(path, ItemKind.DIRECTORY, "unknown")
