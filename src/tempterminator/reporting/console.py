"""Console rendering of run events."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from tempterminator.core.events import EventSink
from tempterminator.models.outcome import ItemOutcome
from tempterminator.models.summary import RunSummary
from tempterminator.reporting.formatting import SUMMARY_HEADER, format_outcome, summary_lines
from tempterminator.utils import format_elapsed

if TYPE_CHECKING:
    from tempterminator.core.errors import UnexpectedFailure
    from tempterminator.reporting.logfile import LogFileListener


class ConsoleListener(EventSink):
    """Echoes outcomes and the summary to stdout.

    With ``quiet`` only the summary is printed.
    """

    def __init__(self, quiet: bool = False, log_listener: LogFileListener | None = None) -> None:
        self.quiet = quiet
        self.log_listener = log_listener

    def on_start(self, target: Path) -> None:
        if self.quiet:
            return
        click.echo(f"\n{click.style('🧹', bold=True)} Cleaning {click.style(str(target), bold=True)}...\n")

    def on_item(self, outcome: ItemOutcome) -> None:
        if self.quiet:
            return
        if outcome.deleted:
            click.echo(f"  {click.style('✓', fg='green')} {format_outcome(outcome)}")
        else:
            click.echo(f"  {click.style('!', fg='yellow')} {format_outcome(outcome)}")

    def on_summary(self, summary: RunSummary) -> None:
        if summary.cancelled:
            click.echo(click.style("\nCancelled, remaining entries were not attempted.", fg="yellow"))
        self._echo_summary(summary)
        click.echo(f"\nTemp folder cleanup finished in {format_elapsed(summary.elapsed)}.")
        if self.log_listener is not None and self.log_listener.written:
            click.echo(f"Detailed log saved at: {self.log_listener.path}")
        click.echo()

    def on_abort(self, error: UnexpectedFailure) -> None:
        click.echo(f"\n{click.style('✗', fg='red')} Run aborted: {error}", err=True)
        self._echo_summary(error.summary)

    def _echo_summary(self, summary: RunSummary) -> None:
        click.echo()
        for line in summary_lines(summary):
            if line == SUMMARY_HEADER:
                click.echo(click.style(line, bold=True))
            else:
                click.echo(line)
