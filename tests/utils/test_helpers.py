import os
from pathlib import Path

import pytest

from devsetup.utils.helpers import is_installed, pushd


def test_pushd_changes_and_restores(tmp_path: Path, monkeypatch):
    target = tmp_path / "repo"
    target.mkdir()
    monkeypatch.chdir(tmp_path)

    with pushd(target) as p:
        assert Path(os.getcwd()) == target
        assert p == target

    assert Path(os.getcwd()) == tmp_path


def test_pushd_restores_on_exception(tmp_path: Path, monkeypatch):
    target = tmp_path / "repo"
    target.mkdir()
    monkeypatch.chdir(tmp_path)

    with pytest.raises(RuntimeError):
        with pushd(target):
            raise RuntimeError("install failed")

    assert Path(os.getcwd()) == tmp_path


def test_is_installed_uses_path(tmp_path: Path, monkeypatch):
    tool = tmp_path / "fake-brew"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    monkeypatch.setenv("PATH", str(tmp_path))

    assert is_installed("fake-brew")
    assert not is_installed("fake-missing")
