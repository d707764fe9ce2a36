import json
import logging
from pathlib import Path

from devsetup.observers.console import ConsoleObserver
from devsetup.observers.dispatcher import EventBus
from devsetup.observers.events import RunStarted, RunSummary, StepFailed, StepSkipped, StepStarted, new_ctx
from devsetup.observers.jsonfile import JsonFileObserver
from devsetup.observers.logger import LoggerObserver


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


class Broken:
    def notify(self, ev):
        raise RuntimeError("observer bug")


def _ctx():
    return new_ctx(username="jdoe", machine="arm64", run_id="run-1")


def test_new_ctx_generates_run_id():
    ctx = new_ctx(username="jdoe", machine="x86_64")
    assert ctx["run_id"]
    assert ctx["ts"].endswith("Z")


def test_broken_observer_does_not_stop_others():
    cap = Capture()
    bus = EventBus([Broken(), cap])
    bus.emit(StepSkipped(name="aliases", reason="precondition", **_ctx()))
    assert len(cap.events) == 1


def test_json_file_observer_appends_lines(tmp_path: Path):
    path = tmp_path / "logs" / "run-1.jsonl"
    obs = JsonFileObserver(path)
    obs.notify(StepStarted(name="homebrew", title="Setting up Homebrew", index=1, total=13, **_ctx()))
    obs.notify(StepFailed(name="homebrew", error="Brew installation failed!", **_ctx()))

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert [l["type"] for l in lines] == ["StepStarted", "StepFailed"]
    assert lines[0]["index"] == 1
    assert lines[1]["error"] == "Brew installation failed!"
    assert lines[1]["run_id"] == "run-1"


def test_logger_observer_logs_event(caplog):
    logger = logging.getLogger("observer-test")
    caplog.set_level(logging.DEBUG, logger="observer-test")

    LoggerObserver(logger).notify(StepSkipped(name="aliases", reason="declined", **_ctx()))

    assert "[EVENT] StepSkipped" in caplog.text
    assert "reason=declined" in caplog.text


def test_console_observer_reports_progress(capsys):
    console = ConsoleObserver()
    console.notify(StepStarted(name="aliases", title="Setting up aliases", index=7, total=13, **_ctx()))
    console.notify(StepSkipped(name="aliases", reason="precondition", **_ctx()))
    console.notify(RunSummary(done=0, skipped=13, failed=0, completed=True, **_ctx()))

    out = capsys.readouterr().out
    assert "[7/13] Setting up aliases" in out
    assert "aliases already set up, skipping" in out
    assert "All Done! Happy Making!" in out


def test_console_observer_reports_failure_without_mark(capsys):
    ConsoleObserver().notify(StepFailed(name="ruby", error="rvm install failed", **_ctx()))
    captured = capsys.readouterr()
    assert "ruby failed" in captured.err
    assert "❌" not in captured.err + captured.out


def test_console_greets_by_full_name(capsys):
    ConsoleObserver().notify(RunStarted(version="1.3.10", full_name="Jane Doe", **_ctx()))
    assert "Hi Jane Doe, welcome" in capsys.readouterr().out


def test_console_greeting_falls_back_to_username(capsys):
    ConsoleObserver().notify(RunStarted(version="1.3.10", **_ctx()))
    assert "Hi jdoe, welcome" in capsys.readouterr().out


def test_json_file_observer_keeps_unicode_readable(tmp_path: Path):
    path = tmp_path / "run-1.jsonl"
    JsonFileObserver(path).notify(StepFailed(name="ruby", error="rvm install failed ☕", **_ctx()))
    raw = path.read_text(encoding="utf-8")
    assert "☕" in raw
    assert json.loads(raw)["error"] == "rvm install failed ☕"
