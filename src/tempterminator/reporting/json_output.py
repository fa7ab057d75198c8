"""Machine-readable run report."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from tempterminator.core.events import EventSink
from tempterminator.models.outcome import ItemOutcome
from tempterminator.models.summary import RunSummary

if TYPE_CHECKING:
    from tempterminator.core.errors import UnexpectedFailure


class JsonListener(EventSink):
    """Collects a run and prints it as one JSON document when it ends."""

    def __init__(self) -> None:
        self.target: Path | None = None
        self.outcomes: list[ItemOutcome] = []

    def on_start(self, target: Path) -> None:
        self.target = target
        self.outcomes = []

    def on_item(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    def on_summary(self, summary: RunSummary) -> None:
        status = "cancelled" if summary.cancelled else "cleaned"
        click.echo(json.dumps(self.build(status, summary), indent=2))

    def on_abort(self, error: UnexpectedFailure) -> None:
        data = self.build("aborted", error.summary)
        data["error"] = str(error)
        click.echo(json.dumps(data, indent=2))

    def build(self, status: str, summary: RunSummary) -> dict[str, Any]:
        return {
            "status": status,
            "target": str(self.target) if self.target is not None else None,
            "results": [o.to_dict() for o in self.outcomes],
            "summary": summary.to_dict(),
        }
