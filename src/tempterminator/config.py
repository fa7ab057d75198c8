"""Run configuration resolved from options, environment and platform defaults."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from tempterminator.utils import desktop_dir, xdg_state_home

log = logging.getLogger(__name__)

TARGET_ENV = "TEMPTERMINATOR_TARGET"
LOG_FILE_ENV = "TEMPTERMINATOR_LOG"
CRASH_LOG_ENV = "TEMPTERMINATOR_CRASH_LOG"

_APP_DIR = "tempterminator"
_LOG_FILE = "TempTerminator_Log.txt"
_CRASH_FILE = "Crashlog.txt"


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything one invocation needs to know about paths and options.

    ``log_file`` is None when file logging is disabled.
    """

    target: Path | str
    log_file: Path | None
    crash_log: Path
    count_items: bool = True

    @classmethod
    def resolve(
        cls,
        target: Path | str | None = None,
        log_file: Path | None = None,
        crash_log: Path | None = None,
        *,
        count_items: bool = True,
        no_log_file: bool = False,
    ) -> RunConfig:
        """Build a config, preferring explicit values over environment and defaults."""
        resolved_target = target if target is not None else default_target()
        resolved_log = None if no_log_file else (log_file or default_log_file())
        config = cls(
            target=resolved_target,
            log_file=resolved_log,
            crash_log=crash_log or default_crash_log(),
            count_items=count_items,
        )
        log.debug("Resolved config: %s", config)
        return config


def default_target() -> Path | str:
    """The configured target, or the platform temp directory.

    An empty ``TEMPTERMINATOR_TARGET`` is returned as-is so validation can
    reject it instead of silently falling back.
    """
    configured = os.environ.get(TARGET_ENV)
    if configured is not None:
        return configured
    return Path(tempfile.gettempdir())


def default_log_file() -> Path:
    """Return the append-only run log location."""
    configured = os.environ.get(LOG_FILE_ENV)
    if configured:
        return Path(configured)
    return xdg_state_home() / _APP_DIR / _LOG_FILE


def default_crash_log() -> Path:
    """Return the crash log location: the Desktop when there is one, else the working directory."""
    configured = os.environ.get(CRASH_LOG_ENV)
    if configured:
        return Path(configured)
    desktop = desktop_dir()
    if desktop is None:
        return Path.cwd() / _CRASH_FILE
    return desktop / _CRASH_FILE
