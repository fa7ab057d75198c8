"""Tests for the console, log-file, JSON and crash reporters."""

from __future__ import annotations

import json
import re
from pathlib import Path

from tempterminator.core.engine import DeletionEngine
from tempterminator.core.errors import UnexpectedFailure
from tempterminator.core.events import EventBus
from tempterminator.models.outcome import ItemKind, ItemOutcome
from tempterminator.models.summary import RunSummary
from tempterminator.reporting.console import ConsoleListener
from tempterminator.reporting.crash import format_crash_record, write_crash_record
from tempterminator.reporting.formatting import format_outcome, summary_lines
from tempterminator.reporting.json_output import JsonListener
from tempterminator.reporting.logfile import LogFileListener

STAMP = r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] "


class TestFormatting:
    def test_deleted_file(self):
        outcome = ItemOutcome.removed(Path("/tmp/a.txt"), ItemKind.FILE)
        assert format_outcome(outcome) == "Deleted file: /tmp/a.txt"

    def test_skipped_file(self):
        outcome = ItemOutcome.not_removed(Path("/tmp/a.txt"), ItemKind.FILE, "Permission denied")
        assert format_outcome(outcome) == "Skipped file (cannot delete): /tmp/a.txt | Reason: Permission denied"

    def test_deleted_folder_with_count(self):
        outcome = ItemOutcome.removed(Path("/tmp/sub"), ItemKind.DIRECTORY, items_removed=3)
        assert format_outcome(outcome) == "Deleted folder: /tmp/sub (items removed: 3)"

    def test_deleted_folder_without_count(self):
        outcome = ItemOutcome.removed(Path("/tmp/sub"), ItemKind.DIRECTORY)
        assert format_outcome(outcome) == "Deleted folder: /tmp/sub"

    def test_skipped_folder(self):
        outcome = ItemOutcome.not_removed(Path("/tmp/sub"), ItemKind.DIRECTORY, "Device or resource busy")
        assert format_outcome(outcome) == (
            "Skipped folder (cannot delete): /tmp/sub | Reason: Device or resource busy"
        )

    def test_summary_lines(self):
        lines = summary_lines(RunSummary(files_deleted=2, folders_deleted=1))
        assert lines == [
            "--- Summary ---",
            "Files deleted: 2",
            "Files skipped: 0",
            "Folders deleted: 1",
            "Folders skipped: 0",
        ]

    def test_summary_lines_with_item_count(self):
        lines = summary_lines(RunSummary(items_removed_in_folders=7))
        assert lines[-1] == "Items removed in folders: 7"


class TestLogFileListener:
    def test_full_run(self, example_target, tmp_path):
        log_path = tmp_path / "logs" / "TempTerminator_Log.txt"
        listener = LogFileListener(log_path)

        DeletionEngine(example_target, listener, count_items=True).run()

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert re.match(STAMP + "=== Starting Temp Termination ===$", lines[0])
        assert lines[1].endswith(f"Target: {example_target}")
        deleted = sorted(line.split("] ", 1)[1] for line in lines[2:5])
        assert deleted == [
            f"Deleted file: {example_target / 'a.txt'}",
            f"Deleted file: {example_target / 'b.txt'}",
            f"Deleted folder: {example_target / 'sub'} (items removed: 1)",
        ]
        assert all(re.match(STAMP, line) for line in lines[2:5])
        assert lines[5:] == [
            "",
            "--- Summary ---",
            "Files deleted: 2",
            "Files skipped: 0",
            "Folders deleted: 1",
            "Folders skipped: 0",
            "Items removed in folders: 1",
            "=== End ===",
            "",
        ]
        assert not listener.is_open

    def test_appends_across_runs(self, example_target, tmp_path):
        log_path = tmp_path / "run.log"
        DeletionEngine(example_target, LogFileListener(log_path)).run()
        DeletionEngine(example_target, LogFileListener(log_path)).run()

        text = log_path.read_text(encoding="utf-8")
        assert text.count("=== Starting Temp Termination ===") == 2
        assert text.count("=== End ===") == 2

    def test_skipped_entry_logged_with_reason(self, example_target, tmp_path, locked):
        locked.add("a.txt")
        log_path = tmp_path / "run.log"

        DeletionEngine(example_target, LogFileListener(log_path)).run()

        text = log_path.read_text(encoding="utf-8")
        assert f"Skipped file (cannot delete): {example_target / 'a.txt'} | Reason: Permission denied" in text
        assert "Files skipped: 1" in text

    def test_unopenable_log_does_not_stop_run(self, example_target, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        listener = LogFileListener(blocker / "run.log")

        summary = DeletionEngine(example_target, listener).run()

        assert summary.files_deleted == 2
        assert not listener.is_open
        assert "proceeding without file log" in caplog.text

    def test_abort_writes_partial_summary(self, tmp_path):
        log_path = tmp_path / "run.log"
        listener = LogFileListener(log_path)
        listener.on_start(tmp_path)

        listener.on_abort(UnexpectedFailure("Cannot list /x: gone", RunSummary(files_deleted=4)))

        text = log_path.read_text(encoding="utf-8")
        assert "Run aborted: Cannot list /x: gone" in text
        assert "Files deleted: 4" in text

    def test_append_single_line(self, tmp_path):
        log_path = tmp_path / "nested" / "run.log"
        LogFileListener(log_path).append("Error: Temp folder not found: /nope")
        assert re.match(STAMP + "Error: Temp folder not found: /nope$", log_path.read_text().strip())


class TestConsoleListener:
    def test_echoes_outcomes_and_summary(self, example_target, capsys, tmp_path):
        log_path = tmp_path / "run.log"
        log_listener = LogFileListener(log_path)
        bus = EventBus([ConsoleListener(log_listener=log_listener), log_listener])

        DeletionEngine(example_target, bus).run()

        out = capsys.readouterr().out
        assert f"Deleted file: {example_target / 'a.txt'}" in out
        assert "--- Summary ---" in out
        assert "Files deleted: 2" in out
        assert f"Detailed log saved at: {log_path}" in out

    def test_unwritten_log_is_not_advertised(self, example_target, capsys, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        log_listener = LogFileListener(blocker / "run.log")
        bus = EventBus([ConsoleListener(log_listener=log_listener), log_listener])

        DeletionEngine(example_target, bus).run()

        out = capsys.readouterr().out
        assert "Files deleted: 2" in out
        assert "Detailed log saved at" not in out
        assert not log_listener.written

    def test_quiet_prints_only_summary(self, example_target, capsys):
        DeletionEngine(example_target, ConsoleListener(quiet=True)).run()

        out = capsys.readouterr().out
        assert "Deleted file" not in out
        assert "Folders deleted: 1" in out

    def test_cancelled_run_noted(self, capsys):
        ConsoleListener().on_summary(RunSummary(cancelled=True))
        assert "Cancelled" in capsys.readouterr().out


class TestJsonListener:
    def test_document(self, example_target, capsys):
        DeletionEngine(example_target, JsonListener()).run()

        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "cleaned"
        assert data["target"] == str(example_target)
        assert len(data["results"]) == 3
        assert data["summary"]["files_deleted"] == 2
        assert data["summary"]["folders_deleted"] == 1

    def test_abort_document(self, capsys, tmp_path):
        listener = JsonListener()
        listener.on_start(tmp_path)
        listener.on_abort(UnexpectedFailure("boom", RunSummary(files_skipped=1)))

        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "aborted"
        assert data["error"] == "boom"
        assert data["summary"]["files_skipped"] == 1

    def test_combined_with_log_file(self, example_target, capsys, tmp_path):
        log_path = tmp_path / "run.log"
        bus = EventBus([JsonListener(), LogFileListener(log_path)])

        DeletionEngine(example_target, bus).run()

        assert json.loads(capsys.readouterr().out)["status"] == "cleaned"
        assert "Files deleted: 2" in log_path.read_text()


class TestCrashReporter:
    def _raise(self) -> RuntimeError:
        try:
            raise RuntimeError("disk on fire")
        except RuntimeError as exc:
            return exc

    def test_format(self):
        record = format_crash_record(self._raise())
        assert record.startswith("=== Crash at ")
        assert "Exception: RuntimeError: disk on fire" in record
        assert "Traceback" in record

    def test_write_appends(self, tmp_path):
        path = tmp_path / "Desktop" / "Crashlog.txt"
        assert write_crash_record(self._raise(), path)
        assert write_crash_record(self._raise(), path)
        assert path.read_text().count("=== Crash at ") == 2

    def test_write_failure_is_not_raised(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        assert write_crash_record(self._raise(), blocker / "Crashlog.txt") is False
        assert "Failed to write crash log" in caplog.text
