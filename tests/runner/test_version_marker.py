from pathlib import Path

import pytest

from devsetup.runner.version import VersionMarker


def test_missing_marker_reads_as_none(tmp_path: Path):
    assert VersionMarker(tmp_path / ".dev_setup_version").read() is None


def test_write_then_read(tmp_path: Path):
    marker = VersionMarker(tmp_path / ".dev_setup_version")
    marker.write("1.3.10")
    assert marker.path.read_text() == "1.3.10\n"
    assert marker.read() == "1.3.10"
    assert not (tmp_path / ".dev_setup_version.tmp").exists()


def test_write_replaces_previous_version(tmp_path: Path):
    marker = VersionMarker(tmp_path / ".dev_setup_version")
    marker.write("1.3.9")
    marker.write("1.3.10")
    assert marker.path.read_text() == "1.3.10\n"


def test_malformed_marker_is_ignored(tmp_path: Path):
    path = tmp_path / ".dev_setup_version"
    path.write_text("not-a-version\n")
    assert VersionMarker(path).read() is None


@pytest.mark.parametrize("bad", ["1.3", "v1.3.10", "1.3.10-rc1", ""])
def test_write_rejects_malformed_versions(tmp_path: Path, bad):
    marker = VersionMarker(tmp_path / ".dev_setup_version")
    with pytest.raises(ValueError):
        marker.write(bad)
    assert not marker.path.exists()


def test_failed_write_leaves_no_temp_file(tmp_path: Path):
    path = tmp_path / ".dev_setup_version"
    path.mkdir()
    (path / "keep").write_text("")

    with pytest.raises(OSError):
        VersionMarker(path).write("1.3.10")

    assert not (tmp_path / ".dev_setup_version.tmp").exists()
