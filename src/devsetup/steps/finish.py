# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import re
from pathlib import Path

import typer

from ..runner.models import Step, StepContext

HOSTS_FILE = Path("/etc/hosts")
_LOCALHOST_RE = re.compile(r"^\s*127\.0\.0\.1\s+localhost\b", re.MULTILINE)


def nothing_to_clean(ctx: StepContext) -> bool:
    result = ctx.commands.probe(["brew", "cleanup", "--dry-run"])
    return result.returncode == 0 and not result.stdout.strip()


def cleanup_homebrew(ctx: StepContext) -> None:
    # uninstall old or unused packages; a failed cleanup is not worth stopping for
    ctx.commands.run(["brew", "cleanup"], check=False)


def localhost_entry_present(ctx: StepContext) -> bool:
    return bool(_LOCALHOST_RE.search(HOSTS_FILE.read_text()))


def warn_missing_localhost(ctx: StepContext) -> None:
    typer.secho("⛔️ Warning ⛔️", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"Your {HOSTS_FILE} is missing the entry for '127.0.0.1 localhost'")
    typer.echo("This is known to cause issues with development environments")
    typer.echo(f"Please add the entry for '127.0.0.1 localhost' manually to {HOSTS_FILE}")
    ctx.logger.warning("%s has no '127.0.0.1 localhost' entry", HOSTS_FILE)


def build_finish_steps() -> list[Step]:
    return [
        Step(
            name="brew-cleanup",
            title="🧹 Brew cleanup to uninstall old or unused packages...",
            requires=["homebrew"],
            precondition=nothing_to_clean,
            action=cleanup_homebrew,
        ),
        Step(
            name="localhost-entry",
            title="🔎 Checking /etc/hosts...",
            precondition=localhost_entry_present,
            action=warn_missing_localhost,
        ),
    ]
