# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/runner/version.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .models import VERSION_RE

log = logging.getLogger("devsetup")


class VersionMarker:
    """
    Single-line file holding the version of the last successful run.

    Informational only: it never decides whether steps run.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.is_file():
            return None
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            log.warning("could not read version marker %s: %s", self.path, exc)
            return None
        if not VERSION_RE.match(value):
            log.warning("ignoring malformed version marker %s: %r", self.path, value)
            return None
        return value

    def write(self, version: str) -> None:
        if not VERSION_RE.match(version):
            raise ValueError(f"version must look like MAJOR.MINOR.PATCH, got {version!r}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(f"{version}\n", encoding="utf-8")
        try:
            tmp.replace(self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        log.info("recorded version %s in %s", version, self.path)
