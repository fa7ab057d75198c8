"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def xdg_state_home() -> Path:
    """Return XDG_STATE_HOME, defaulting to ~/.local/state."""
    return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))


def desktop_dir() -> Path | None:
    """Return the user's Desktop directory if it exists."""
    desktop = Path(os.environ.get("XDG_DESKTOP_DIR", Path.home() / "Desktop"))
    return desktop if desktop.is_dir() else None


def timestamp(moment: datetime | None = None) -> str:
    """Format a local timestamp the way run logs print it."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def remove_file(path: Path) -> None:
    """Remove a single file; raises OSError on failure."""
    os.unlink(path)


def remove_tree(path: Path) -> None:
    """Remove a directory and everything beneath it; raises OSError on the first failure."""
    shutil.rmtree(path)


def count_tree(path: Path | str) -> int:
    """Count every file and directory beneath *path*, not counting *path* itself.

    Symlinks are counted but never followed.  Unreadable subdirectories
    contribute what could be listed.
    """
    count = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    count += 1
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        pass
        except OSError:
            log.debug("Cannot list: %s", current)
    return count


def describe_os_error(exc: OSError) -> str:
    """Return a short human-readable cause for a failed filesystem call."""
    return exc.strerror or str(exc) or type(exc).__name__


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
