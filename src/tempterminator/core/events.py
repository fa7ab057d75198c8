"""Event sink interface and the multi-listener bus."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from tempterminator.models.outcome import ItemOutcome
from tempterminator.models.summary import RunSummary

if TYPE_CHECKING:
    from tempterminator.core.errors import UnexpectedFailure

log = logging.getLogger(__name__)


class EventSink:
    """Receives the events of a run.

    Order is always ``on_start``, zero or more ``on_item`` calls, then
    either ``on_summary`` or ``on_abort``.  Every hook is a no-op by
    default so listeners only override what they present.
    """

    def on_start(self, target: Path) -> None:
        """A run has been validated and is about to delete."""

    def on_item(self, outcome: ItemOutcome) -> None:
        """One entry was deleted or skipped."""

    def on_summary(self, summary: RunSummary) -> None:
        """The run finished (possibly cancelled)."""

    def on_abort(self, error: UnexpectedFailure) -> None:
        """The run stopped early; ``error.summary`` holds partial counters."""


class EventBus(EventSink):
    """Fans every event out to the registered listeners in registration order.

    A listener that raises is logged and skipped; the other listeners
    and the run itself carry on.
    """

    def __init__(self, listeners: list[EventSink] | None = None) -> None:
        self._listeners: list[EventSink] = []
        for listener in listeners or []:
            self.register(listener)

    def register(self, listener: EventSink) -> None:
        """Add a listener."""
        if listener in self._listeners:
            log.warning("Listener %r already registered, skipping duplicate", listener)
            return
        self._listeners.append(listener)
        log.debug("Registered listener: %s", type(listener).__name__)

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[EventSink]:
        return iter(self._listeners)

    def on_start(self, target: Path) -> None:
        self._dispatch("on_start", target)

    def on_item(self, outcome: ItemOutcome) -> None:
        self._dispatch("on_item", outcome)

    def on_summary(self, summary: RunSummary) -> None:
        self._dispatch("on_summary", summary)

    def on_abort(self, error: UnexpectedFailure) -> None:
        self._dispatch("on_abort", error)

    def _dispatch(self, hook: str, payload: object) -> None:
        for listener in self._listeners:
            try:
                getattr(listener, hook)(payload)
            except Exception:
                log.exception("Listener '%s' failed during %s", type(listener).__name__, hook)
