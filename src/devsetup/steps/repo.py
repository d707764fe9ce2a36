# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/repo.py

"""Clone the company repository and wire it into the shell."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional

import typer

from ..config.models import RepoSpec
from ..runner.errors import EnvironmentMismatch
from ..runner.models import Step, StepContext
from .common import create_alias, has_alias, login_shell, workdir

_VERSION_RE = re.compile(r"(\d+\.\d+\.\d+)")


def _aliases(spec: RepoSpec, repo: Path) -> Dict[str, str]:
    return {name: cmd.replace("{repo}", str(repo)) for name, cmd in spec.aliases.items()}


# ------------------------------------------------------------------------------
# clone
# ------------------------------------------------------------------------------

def repo_cloned(ctx: StepContext) -> bool:
    return ctx.env.repo_path.is_dir()


def clone_repo(spec: RepoSpec):
    def action(ctx: StepContext) -> None:
        typer.echo(f"Cloning to {ctx.env.repo_path}")
        typer.echo("Buckle up, this is going to take a while...")
        ctx.commands.run(["git", "clone", spec.url, ctx.env.repo_path], interactive=True)
    return action


# ------------------------------------------------------------------------------
# dependencies
# ------------------------------------------------------------------------------

def active_ruby_version(ctx: StepContext) -> Optional[str]:
    m = _VERSION_RE.search(ctx.commands.output(login_shell("ruby --version")))
    return m.group(1) if m else None


def check_ruby_version(ctx: StepContext) -> None:
    """The active ruby must match the repo's .ruby-version before gems install."""
    pinned = Path(".ruby-version")
    if not pinned.is_file():
        return
    expected = pinned.read_text().strip()
    found = active_ruby_version(ctx)
    if found != expected:
        raise EnvironmentMismatch(
            "Ruby version",
            expected=expected,
            found=found or "no ruby",
            remedy=f"rvm use {expected} --default",
        )


def deps_installed(spec: RepoSpec):
    def check(ctx: StepContext) -> bool:
        if not spec.installed_check or not ctx.env.repo_path.is_dir():
            return False
        return ctx.commands.succeeds(login_shell(spec.installed_check), cwd=ctx.env.repo_path)
    return check


def install_deps(spec: RepoSpec):
    def action(ctx: StepContext) -> None:
        with workdir(ctx, ctx.env.repo_path):
            if not ctx.commands.dry_run:
                check_ruby_version(ctx)
            for command in spec.install_commands:
                ctx.logger.info(" -> %s", command)
                ctx.commands.run(login_shell(command), interactive=True)
            for script in spec.setup_scripts:
                ctx.commands.run(login_shell(script), interactive=True)
    return action


# ------------------------------------------------------------------------------
# aliases and hooks
# ------------------------------------------------------------------------------

def repo_aliases_present(spec: RepoSpec):
    def check(ctx: StepContext) -> bool:
        return all(has_alias(ctx, n, c) for n, c in _aliases(spec, ctx.env.repo_path).items())
    return check


def add_repo_aliases(spec: RepoSpec):
    def action(ctx: StepContext) -> None:
        for name, command in _aliases(spec, ctx.env.repo_path).items():
            create_alias(ctx, name, command)
    return action


def hooks_installed(spec: RepoSpec):
    def check(ctx: StepContext) -> bool:
        return (ctx.env.repo_path / spec.hooks_marker).exists()
    return check


def install_hooks(spec: RepoSpec):
    def action(ctx: StepContext) -> None:
        typer.echo("Installing git hook handlers...")
        with workdir(ctx, ctx.env.repo_path):
            for script in spec.hook_scripts:
                ctx.commands.run(login_shell(script))
    return action


# ------------------------------------------------------------------------------
# start shells in the repo
# ------------------------------------------------------------------------------

def _cd_line(ctx: StepContext) -> str:
    return f"cd {ctx.env.repo_path}"


def starts_in_repo(ctx: StepContext) -> bool:
    return ctx.profile.contains(_cd_line(ctx))


def start_in_repo(ctx: StepContext) -> None:
    ctx.profile.append(_cd_line(ctx))
    typer.secho(f"You'll start in {ctx.env.repo_path} in new shells!", fg=typer.colors.GREEN)


def build_repo_steps(spec: RepoSpec) -> list[Step]:
    steps = [
        Step(
            name="repo-clone",
            title="🥚 Setting up your repo...",
            requires=["ssh-key"],
            precondition=repo_cloned,
            action=clone_repo(spec),
        ),
        Step(
            name="repo-deps",
            title="🐣 Setting up your repo dependencies...",
            requires=["repo-clone", "ruby"],
            precondition=deps_installed(spec),
            action=install_deps(spec),
        ),
    ]
    if spec.aliases:
        steps.append(
            Step(
                name="repo-aliases",
                title="🐥 Setting up your repo aliases...",
                requires=["repo-clone"],
                precondition=repo_aliases_present(spec),
                action=add_repo_aliases(spec),
            )
        )
    if spec.hook_scripts:
        steps.append(
            Step(
                name="repo-hooks",
                title="🐓 Setting up your repo hooks...",
                requires=["repo-clone"],
                precondition=hooks_installed(spec),
                action=install_hooks(spec),
            )
        )
    if spec.start_in_repo:
        steps.append(
            Step(
                name="repo-start",
                title="🏠 Starting new shells in your repo...",
                requires=["repo-clone"],
                precondition=starts_in_repo,
                action=start_in_repo,
                requires_confirmation=True,
                confirm_prompt="Would you like your shell to always start in the repo?",
                confirm_default=False,
            )
        )
    return steps
