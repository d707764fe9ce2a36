# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/observers/console.py
from __future__ import annotations

import typer

from .events import (
    BaseEvent,
    PreconditionErrored,
    RunStarted,
    RunSummary,
    StepFailed,
    StepRecovering,
    StepSkipped,
    StepStarted,
    StepSucceeded,
    VersionRecorded,
)

RULE = "-" * 36
BANNER = "=" * 72


class ConsoleObserver:
    """Human readable progress: a header per step, then a ✅ line or a plain failure notice."""

    def notify(self, event: BaseEvent) -> None:
        if isinstance(event, RunStarted):
            typer.echo(f"\n{BANNER}\n")
            typer.secho(
                f"🚀 Hi {event.full_name or event.username}, welcome to the workstation setup version {event.version}!",
                fg=typer.colors.MAGENTA,
                bold=True,
            )
            if event.previous_version:
                typer.echo(f"   (you are on version {event.previous_version})")
            typer.echo(f"\n{BANNER}\n")
        elif isinstance(event, StepStarted):
            typer.echo(f"\n{RULE}\n")
            typer.secho(f"[{event.index}/{event.total}] {event.title}", fg=typer.colors.CYAN, bold=True)
            typer.echo(f"\n{RULE}\n")
        elif isinstance(event, StepSkipped):
            if event.reason == "declined":
                typer.echo(f" -> skipped {event.name} (declined)")
            else:
                typer.echo(f" -> {event.name} already set up, skipping")
        elif isinstance(event, PreconditionErrored):
            typer.secho(f" -> could not check {event.name}: {event.error}", fg=typer.colors.YELLOW)
        elif isinstance(event, StepRecovering):
            typer.secho(
                f" -> attempting to recover {event.name} from: {event.error}",
                fg=typer.colors.YELLOW,
            )
        elif isinstance(event, StepSucceeded):
            typer.secho(f"\n✅ Finished {event.name}!", fg=typer.colors.GREEN)
        elif isinstance(event, StepFailed):
            # the CLI prints the single marked error for the run
            typer.secho(f"\n{event.name} failed", fg=typer.colors.RED, err=True)
        elif isinstance(event, VersionRecorded):
            typer.echo(f"Recorded version {event.version} in {event.path}")
        elif isinstance(event, RunSummary) and event.completed:
            typer.echo(f"\n{BANNER}\n")
            typer.secho("🚀 All Done! Happy Making!", fg=typer.colors.MAGENTA, bold=True)
            typer.echo(f"\n{BANNER}\n")
