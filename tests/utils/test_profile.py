from pathlib import Path

from devsetup.utils.profile import ProfileFile, alias_line


def test_contains_on_missing_file_is_false(tmp_path: Path):
    assert not ProfileFile(tmp_path / ".zshrc").contains("alias k")


def test_append_adds_newline_when_file_lacks_one(tmp_path: Path):
    path = tmp_path / ".zshrc"
    path.write_text("export EDITOR=vim")
    ProfileFile(path).append('alias k="kubectl"')
    assert path.read_text() == 'export EDITOR=vim\nalias k="kubectl"\n'


def test_ensure_is_idempotent(tmp_path: Path):
    profile = ProfileFile(tmp_path / ".zshrc")
    assert profile.ensure('alias k="kubectl"') is True
    assert profile.ensure('alias k="kubectl"') is False
    assert profile.path.read_text().count('alias k="kubectl"') == 1


def test_ensure_with_marker_matches_any_line(tmp_path: Path):
    path = tmp_path / ".zshrc"
    path.write_text("export GITHUB_USERNAME=someone\n")
    changed = ProfileFile(path).ensure("export GITHUB_USERNAME=jdoe", marker="GITHUB_USERNAME")
    assert changed is False
    assert "jdoe" not in path.read_text()


def test_dry_run_does_not_write(tmp_path: Path):
    profile = ProfileFile(tmp_path / ".zshrc", dry_run=True)
    profile.append("path+=(/opt/bin)")
    assert not profile.path.exists()


def test_alias_line_format():
    assert alias_line("k", "kubectl") == 'alias k="kubectl"'
