"""CLI interface for TempTerminator."""

from __future__ import annotations

import json
import logging
import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click

from tempterminator.config import RunConfig
from tempterminator.core.engine import DeletionEngine
from tempterminator.core.errors import TargetMissing
from tempterminator.core.events import EventBus
from tempterminator.reporting.console import ConsoleListener
from tempterminator.reporting.crash import write_crash_record
from tempterminator.reporting.json_output import JsonListener
from tempterminator.reporting.logfile import LogFileListener

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130

_FALLBACK_CRASH_LOG = Path("Crashlog.txt")


def _raw_target(ctx: click.Context, param: click.Parameter, value: str | None) -> Path | str | None:
    """Keep an empty --target as the empty string so validation rejects it."""
    if value is None or not value.strip():
        return value
    return Path(value)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@contextmanager
def _cancel_on_interrupt(cancel: threading.Event) -> Iterator[None]:
    """Turn Ctrl+C into a cancellation request for the duration of a run."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame) -> None:
        log.info("Interrupt received, finishing current entry")
        cancel.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _build_bus(config: RunConfig, quiet: bool, as_json: bool) -> tuple[EventBus, LogFileListener | None]:
    log_listener = LogFileListener(config.log_file) if config.log_file is not None else None

    bus = EventBus()
    if as_json:
        bus.register(JsonListener())
    else:
        bus.register(ConsoleListener(quiet=quiet, log_listener=log_listener))
    if log_listener is not None:
        bus.register(log_listener)
    return bus, log_listener


def _run(config: RunConfig, quiet: bool, as_json: bool) -> int:
    bus, log_listener = _build_bus(config, quiet, as_json)
    cancel = threading.Event()
    exclude = [config.log_file] if config.log_file is not None else []
    engine = DeletionEngine(
        config.target,
        bus,
        count_items=config.count_items,
        cancel=cancel,
        exclude=exclude,
    )

    try:
        with _cancel_on_interrupt(cancel):
            summary = engine.run()
    except TargetMissing as exc:
        log.debug("Validation failed", exc_info=True)
        if log_listener is not None:
            log_listener.append(f"Error: {exc}. Aborting.")
        if as_json:
            click.echo(json.dumps({"status": "target_missing", "target": str(exc.path), "error": str(exc)}))
        else:
            click.echo(f"{click.style('✗', fg='red')} Error: {exc}", err=True)
        return EXIT_FAILURE

    return EXIT_CANCELLED if summary.cancelled else EXIT_OK


@click.command()
@click.option(
    "--target", "-t",
    type=click.Path(),
    default=None,
    callback=_raw_target,
    help="Directory to empty (default: $TEMPTERMINATOR_TARGET or the system temp directory)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append-only run log (default: $TEMPTERMINATOR_LOG or the user state directory)",
)
@click.option("--no-log-file", is_flag=True, help="Do not write a run log")
@click.option(
    "--crash-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to record unexpected failures (default: ~/Desktop/Crashlog.txt)",
)
@click.option(
    "--count-items/--no-count-items",
    default=True,
    show_default=True,
    help="Count what each deleted folder contained",
)
@click.option("--quiet", "-q", is_flag=True, help="Only print the summary")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(
    target: Path | str | None,
    log_file: Path | None,
    no_log_file: bool,
    crash_log: Path | None,
    count_items: bool,
    quiet: bool,
    as_json: bool,
    verbose: int,
) -> None:
    """TempTerminator: empty the temp directory, skipping whatever is in use.

    Regular files are removed first, then subfolders.  Entries that are
    locked or protected are skipped and logged; the run always ends with
    a summary.
    """
    _setup_logging(verbose)
    crash_path = crash_log or _FALLBACK_CRASH_LOG

    try:
        config = RunConfig.resolve(
            target=target,
            log_file=log_file,
            crash_log=crash_log,
            count_items=count_items,
            no_log_file=no_log_file,
        )
        crash_path = config.crash_log
        code = _run(config, quiet, as_json)
    except Exception as exc:
        log.exception("Unexpected error")
        written = write_crash_record(exc, crash_path)
        click.echo("\nTempTerminator encountered an unexpected error and must exit.", err=True)
        if written:
            click.echo(f"A crash log has been written to {crash_path}", err=True)
        sys.exit(EXIT_FAILURE)

    sys.exit(code)
