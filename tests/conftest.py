import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from devsetup.config.models import SetupConfig, SetupEnvironment
from devsetup.runner.models import StepContext
from devsetup.utils.profile import ProfileFile


class ScriptedConfirmer:
    """Answers prompts from a script; falls back to each prompt's default."""

    def __init__(self, answers: Optional[List[bool]] = None):
        self.answers = list(answers or [])
        self.prompts: List[str] = []

    def ask(self, prompt, default=False):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else default


class FakeCommands:
    """
    Records every mutating command; answers read-only probes from a table
    keyed by the joined command line.
    """

    def __init__(self, probes: Optional[Dict[str, Tuple[int, str]]] = None, fail_on: Optional[List[str]] = None):
        self.dry_run = False
        self.calls: List[List[str]] = []
        self.probes = dict(probes or {})
        self.fail_on = list(fail_on or [])

    def run(self, cmd, **kwargs):
        argv = [str(c) for c in cmd]
        self.calls.append(argv)
        joined = " ".join(argv)
        if any(pattern in joined for pattern in self.fail_on):
            raise subprocess.CalledProcessError(1, argv)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def probe(self, cmd, cwd=None):
        key = " ".join(str(c) for c in cmd)
        rc, out = self.probes.get(key, (1, ""))
        return subprocess.CompletedProcess(list(cmd), rc, out, "")

    def succeeds(self, cmd, cwd=None):
        return self.probe(cmd, cwd=cwd).returncode == 0

    def output(self, cmd, cwd=None):
        result = self.probe(cmd, cwd=cwd)
        return result.stdout.strip() if result.returncode == 0 else ""

    def ran(self, fragment: str) -> bool:
        return any(fragment in " ".join(c) for c in self.calls)


@pytest.fixture
def env(tmp_path: Path) -> SetupEnvironment:
    home = tmp_path / "home"
    home.mkdir()
    return SetupEnvironment(
        username="jdoe",
        machine="arm64",
        email="jdoe@example.com",
        full_name="Jane Doe",
        home=home,
        repo_path=home / "monorepo",
        bin_install_dir=home / "bin",
        shell="/bin/zsh",
        profile_path=home / ".zshrc",
        zprofile_path=home / ".zprofile",
        version_path=home / ".dev_setup_version",
    )


@pytest.fixture
def ctx(env: SetupEnvironment) -> StepContext:
    return StepContext(
        env=env,
        config=SetupConfig(),
        commands=FakeCommands(),
        confirmer=ScriptedConfirmer(),
        profile=ProfileFile(env.profile_path),
        zprofile=ProfileFile(env.zprofile_path),
    )
