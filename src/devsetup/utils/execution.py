# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/utils/execution.py

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

Cmd = Sequence[Union[str, "os.PathLike[str]"]]


@dataclass
class CommandRunner:
    """
    Runs external installers and tools.

    ``run`` mutates the machine and honours ``dry_run``; ``probe`` is for
    side-effect free checks (preconditions) and always executes.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("devsetup"))
    dry_run: bool = False
    label: Optional[str] = None

    def run(
        self,
        cmd: Cmd,
        *,
        check: bool = True,
        interactive: bool = False,
        cwd: str | Path | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess:
        label = self.label or "cmd"
        cmd_str = " ".join(map(str, cmd))

        # --- Log command ---
        self.logger.info(f"[{label}] $ {cmd_str}")

        if self.dry_run:
            self.logger.info(f"[{label}] dry-run: skipped execution")
            return subprocess.CompletedProcess(
                args=list(cmd),
                returncode=0,
                stdout="",
                stderr="",
            )

        start = time.time()

        try:
            # installers that prompt (ssh-keygen, sudo, the homebrew script)
            # need the terminal, so their output is not captured
            result = subprocess.run(
                [str(c) for c in cmd],
                capture_output=not interactive,
                check=check,
                text=True,
                cwd=str(cwd) if cwd else None,
                env={**os.environ, **env} if env else None,
            )

        except subprocess.CalledProcessError as e:
            self.logger.error(f"[{label}][exit {e.returncode}] {cmd_str}")
            if e.stdout:
                self.logger.debug(f"[{label}][stdout]\n{e.stdout.rstrip()}")
            if e.stderr:
                self.logger.debug(f"[{label}][stderr]\n{e.stderr.rstrip()}")
            raise

        duration = time.time() - start

        # --- Log outputs ---
        if result.stdout:
            self.logger.debug(f"[{label}][stdout]\n{result.stdout.rstrip()}")
        if result.stderr:
            self.logger.debug(f"[{label}][stderr]\n{result.stderr.rstrip()}")
        self.logger.info(f"[{label}][exit {result.returncode}] ({duration:.2f}s)")

        return result

    def probe(self, cmd: Cmd, *, cwd: str | Path | None = None) -> subprocess.CompletedProcess:
        """Run a read-only check. A missing executable reads as exit code 127."""
        self.logger.debug(f"[probe] $ {' '.join(map(str, cmd))}")
        try:
            return subprocess.run(
                [str(c) for c in cmd],
                capture_output=True,
                check=False,
                text=True,
                cwd=str(cwd) if cwd else None,
            )
        except FileNotFoundError:
            return subprocess.CompletedProcess(args=list(cmd), returncode=127, stdout="", stderr="")

    def succeeds(self, cmd: Cmd, *, cwd: str | Path | None = None) -> bool:
        return self.probe(cmd, cwd=cwd).returncode == 0

    def output(self, cmd: Cmd, *, cwd: str | Path | None = None) -> str:
        """stdout of a read-only check, stripped; empty when the command fails."""
        result = self.probe(cmd, cwd=cwd)
        return result.stdout.strip() if result.returncode == 0 else ""
