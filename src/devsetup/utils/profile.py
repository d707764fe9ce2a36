# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/utils/profile.py

from __future__ import annotations

import logging
from pathlib import Path

log = logging.getLogger("devsetup")


class ProfileFile:
    """
    A shell profile treated as an append-only resource.

    Steps ask ``contains`` before ``append`` so re-running the setup never
    writes the same line twice.
    """

    def __init__(self, path: str | Path, *, dry_run: bool = False):
        self.path = Path(path)
        self.dry_run = dry_run

    def __repr__(self) -> str:
        return f"ProfileFile({str(self.path)!r})"

    def contains(self, text: str) -> bool:
        """True if any line of the profile contains ``text`` (grep semantics)."""
        if not self.path.exists():
            return False
        with self.path.open("r", encoding="utf-8", errors="replace") as f:
            return any(text in line for line in f)

    def append(self, line: str) -> None:
        if self.dry_run:
            log.info("dry-run: would append %r to %s", line, self.path)
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        prefix = ""
        if self.path.exists() and self.path.stat().st_size > 0:
            with self.path.open("rb") as f:
                f.seek(-1, 2)
                if f.read(1) != b"\n":
                    prefix = "\n"

        with self.path.open("a", encoding="utf-8") as f:
            f.write(f"{prefix}{line}\n")
        log.info("appended %r to %s", line, self.path)

    def ensure(self, line: str, *, marker: str | None = None) -> bool:
        """
        Append ``line`` unless ``marker`` (default: the line itself) is already
        present. Returns True when the file was changed.
        """
        if self.contains(marker or line):
            return False
        self.append(line)
        return True


def alias_line(name: str, command: str) -> str:
    return f'alias {name}="{command}"'
