import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from devsetup import __version__
from devsetup.cli import app as cli
from devsetup.runner.errors import ActionFailure
from devsetup.runner.models import Step

runner = CliRunner()


@pytest.fixture(autouse=True)
def home(tmp_path: Path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERNAME", "jdoe")
    monkeypatch.setenv("USER_FULL_NAME", "Jane Doe")
    monkeypatch.setenv("UNAME_MACHINE", "arm64")
    monkeypatch.setenv("SHELL", "/bin/zsh")
    monkeypatch.delenv("DEVSETUP_CONFIG", raising=False)
    yield home
    # CliRunner swaps the std streams; drop handlers bound to them
    logger = logging.getLogger("devsetup")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def _steps(*steps):
    return lambda cfg: list(steps)


def test_version_flag_prints_version():
    result = runner.invoke(cli.app, ["-v"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_help_flag():
    result = runner.invoke(cli.app, ["-h"])
    assert result.exit_code == 0
    assert "--dry-run" in result.stdout


def test_successful_run_records_version(home: Path, tmp_path: Path, monkeypatch):
    ran = []
    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="noop", action=lambda c: ran.append(c.env.username))))
    log_dir = tmp_path / "logs"

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(log_dir)])

    assert result.exit_code == 0, result.output
    assert ran == ["jdoe"]
    assert (home / ".dev_setup_version").read_text() == f"{__version__}\n"
    assert "All Done! Happy Making!" in result.stdout

    events = [json.loads(l) for f in log_dir.glob("*.jsonl") for l in f.read_text().splitlines()]
    assert events[0]["type"] == "RunStarted"
    assert events[-1]["type"] == "RunSummary"
    assert events[-1]["completed"] is True


def test_failed_run_exits_non_zero_without_marker(home: Path, tmp_path: Path, monkeypatch):
    def explode(ctx):
        raise ActionFailure("Brew installation failed!")

    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="homebrew", action=explode)))

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert not (home / ".dev_setup_version").exists()


def test_dry_run_does_not_record_version(home: Path, tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="noop", action=lambda c: None)))

    result = runner.invoke(cli.app, ["--yes", "--dry-run", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 0, result.output
    assert not (home / ".dev_setup_version").exists()


def test_invalid_plan_exits_non_zero(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="ruby", action=lambda c: None, requires=["rvm"])))

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1


def test_missing_config_file_exits_non_zero(tmp_path: Path):
    result = runner.invoke(cli.app, ["--config", str(tmp_path / "missing.yaml"), "--log-dir", str(tmp_path / "logs")])
    assert result.exit_code == 1


def test_reload_shell_refuses_unsupported_shell(monkeypatch, capsys):
    monkeypatch.setattr(cli.os, "execvp", lambda *a: pytest.fail("must not exec"))
    cli.reload_shell("/usr/bin/fish")
    assert "not supported" in capsys.readouterr().out


def test_reload_shell_execs_login_shell(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.os, "execvp", lambda file, args: calls.append((file, args)))
    cli.reload_shell("/bin/zsh")
    assert calls == [("/bin/zsh", ["/bin/zsh", "-l"])]


def test_failed_step_prints_one_marked_error(tmp_path: Path, monkeypatch):
    def explode(ctx):
        raise ActionFailure("Brew installation failed!")

    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="homebrew", action=explode)))

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert result.output.count("❌") == 1
    assert "❌ homebrew: Brew installation failed!" in result.output
    assert "| ERROR" not in result.output


def test_invalid_plan_prints_one_marked_error(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="ruby", action=lambda c: None, requires=["rvm"])))

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert result.output.count("❌") == 1
    assert "invalid step plan" in result.output


def test_unwritable_version_marker_fails_the_run(home: Path, tmp_path: Path, monkeypatch):
    blocked = home / ".dev_setup_version"
    blocked.mkdir()
    (blocked / "keep").write_text("")
    monkeypatch.setattr(cli, "build_default_steps", _steps(Step(name="noop", action=lambda c: None)))

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert result.output.count("❌") == 1
    assert "could not record version" in result.output
    assert "All Done!" not in result.output


def test_greeting_uses_full_name(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli, "build_default_steps", _steps())

    result = runner.invoke(cli.app, ["--yes", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 0, result.output
    assert "Hi Jane Doe, welcome" in result.output
