"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

import tempterminator.core.engine as engine_module
from tempterminator.core.events import EventSink
from tempterminator.utils import remove_file, remove_tree


class RecordingSink(EventSink):
    """Sink that keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def on_start(self, target):
        self.events.append(("start", target))

    def on_item(self, outcome):
        self.events.append(("item", outcome))

    def on_summary(self, summary):
        self.events.append(("summary", summary))

    def on_abort(self, error):
        self.events.append(("abort", error))

    @property
    def outcomes(self):
        return [payload for name, payload in self.events if name == "item"]

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_sink():
    """Factory for extra recording sinks."""
    return RecordingSink


@pytest.fixture
def target(tmp_path) -> Path:
    """An empty directory to clean."""
    directory = tmp_path / "temp"
    directory.mkdir()
    return directory


@pytest.fixture
def example_target(target) -> Path:
    """a.txt, b.txt and sub/c.txt."""
    (target / "a.txt").write_text("a")
    (target / "b.txt").write_text("b")
    (target / "sub").mkdir()
    (target / "sub" / "c.txt").write_text("c")
    return target


@pytest.fixture
def locked(monkeypatch):
    """Make removal of the named entries fail with PermissionError.

    Returns the set of names; add to it to lock more entries.
    """
    names: set[str] = set()

    def _remove_file(path):
        if Path(path).name in names:
            raise PermissionError(13, "Permission denied", str(path))
        remove_file(path)

    def _remove_tree(path):
        if Path(path).name in names:
            raise PermissionError(13, "Permission denied", str(path))
        remove_tree(path)

    monkeypatch.setattr(engine_module, "remove_file", _remove_file)
    monkeypatch.setattr(engine_module, "remove_tree", _remove_tree)
    return names


@pytest.fixture
def isolate_env(tmp_path, monkeypatch):
    """Point every configurable location into tmp_path."""
    state = tmp_path / "state"
    monkeypatch.setenv("XDG_STATE_HOME", str(state))
    monkeypatch.setenv("XDG_DESKTOP_DIR", str(tmp_path / "no-desktop"))
    monkeypatch.delenv("TEMPTERMINATOR_TARGET", raising=False)
    monkeypatch.delenv("TEMPTERMINATOR_LOG", raising=False)
    monkeypatch.delenv("TEMPTERMINATOR_CRASH_LOG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
