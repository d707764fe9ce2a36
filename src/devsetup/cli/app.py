# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/cli/app.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from devsetup import LAST_UPDATED, __version__
from devsetup.config.loader import load_config, resolve_environment
from devsetup.logging.log import init_logging
from devsetup.observers.console import ConsoleObserver
from devsetup.observers.jsonfile import JsonFileObserver
from devsetup.observers.logger import LoggerObserver
from devsetup.runner.errors import StepPlanError
from devsetup.runner.executor import provision
from devsetup.runner.models import RunState, StepContext
from devsetup.runner.version import VersionMarker
from devsetup.steps.registry import build_default_steps
from devsetup.utils.confirm import DefaultConfirmer, TyperConfirmer
from devsetup.utils.execution import CommandRunner
from devsetup.utils.profile import ProfileFile


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(
    help="Workstation setup CLI",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _fail(message: str) -> None:
    typer.secho(f"\n❌ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def reload_shell(shell: str) -> None:
    """Replace this process with a fresh login shell so new settings apply."""
    if not shell or not (shell.endswith("zsh") or shell.endswith("bash")):
        typer.echo(f"Your shell ({shell or 'unknown'}) is not supported! Please reload manually.")
        return
    os.execvp(shell, [shell, "-l"])


# ------------------------------------------------------------------------------
# Setup command
# ------------------------------------------------------------------------------

@app.command()
def setup(
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the current version and exit.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Setup config YAML (defaults to $DEVSETUP_CONFIG)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer every prompt with its default"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log external commands without running them"),
    debug: bool = typer.Option(False, "--debug"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
):
    """
    usage: devsetup [-h | -v]

    Prepares/updates your local machine with the latest dev tools! Safe to
    re-run: steps that are already done are skipped.
    """
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)

    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as exc:
        _fail(f"could not load config: {exc}")

    env = resolve_environment(cfg)
    logger.debug("environment: %s", env.model_dump())

    confirmer = DefaultConfirmer() if yes else TyperConfirmer()
    ctx = StepContext(
        env=env,
        config=cfg,
        commands=CommandRunner(logger=logger, dry_run=dry_run),
        confirmer=confirmer,
        profile=ProfileFile(env.profile_path, dry_run=dry_run),
        zprofile=ProfileFile(env.zprofile_path, dry_run=dry_run),
        logger=logger,
    )
    state = RunState(version=__version__, environment=env, run_id=run_id)

    observers = [
        ConsoleObserver(),
        LoggerObserver(logger),
        JsonFileObserver(log_path.parent / f"{run_id}.jsonl"),
    ]

    typer.echo(f"Setup version {__version__} (last updated {LAST_UPDATED})")
    typer.echo(f"  Run ID   : {run_id}")
    typer.echo(f"  Logs     : {log_path}")
    if dry_run:
        typer.secho("  Dry run  : external commands are only logged", fg=typer.colors.YELLOW)

    try:
        provision(
            build_default_steps(cfg),
            ctx,
            state,
            marker=None if dry_run else VersionMarker(env.version_path),
            observers=observers,
        )
    except StepPlanError as exc:
        _fail(f"invalid step plan: {exc}")

    if not state.completed:
        typer.echo(f"See {log_path} for details. Re-run once fixed; finished steps will be skipped.")
        _fail(state.error or "setup failed")

    if dry_run:
        return

    if confirmer.ask("start new shell to update current settings?", default=False):
        reload_shell(env.shell)
    else:
        typer.echo(" -> some shell settings may need refreshing (path, rvm, nvm, brew, etc)")
        typer.echo(" -> run 'exec $SHELL -l' to reload your shell manually!")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
