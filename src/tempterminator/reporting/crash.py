"""Crash records for failures that escape a run."""

from __future__ import annotations

import logging
import traceback
from pathlib import Path

from tempterminator.utils import timestamp

log = logging.getLogger(__name__)


def format_crash_record(exc: BaseException) -> str:
    """Render a crash record: banner, exception line and traceback."""
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return (
        f"=== Crash at {timestamp()} ===\n"
        f"Exception: {type(exc).__name__}: {exc}\n"
        f"{trace}\n"
    )


def write_crash_record(exc: BaseException, path: Path) -> bool:
    """Append a crash record for *exc* to *path*.

    Returns:
        True if the record was written.  A failure to write is logged,
        never raised, since the caller is already handling a crash.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(format_crash_record(exc))
    except OSError:
        log.exception("Failed to write crash log: %s", path)
        return False
    log.info("Crash record written to %s", path)
    return True
