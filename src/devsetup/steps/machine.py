# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/machine.py

"""Base machine setup: Homebrew, git identity and the ssh key."""

from __future__ import annotations

import os
import shutil

import typer

from ..runner.errors import ActionFailure
from ..runner.models import Step, StepContext
from ..utils.helpers import is_installed

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


# ------------------------------------------------------------------------------
# Homebrew
# ------------------------------------------------------------------------------

def _activate_homebrew(ctx: StepContext) -> None:
    """Equivalent of ``eval "$(brew shellenv)"`` for this process."""
    bin_dir = str(ctx.env.homebrew_prefix / "bin")
    paths = os.environ.get("PATH", "").split(os.pathsep)
    if bin_dir not in paths:
        os.environ["PATH"] = os.pathsep.join([bin_dir, *paths])


def homebrew_installed(ctx: StepContext) -> bool:
    return is_installed("brew")


def install_homebrew(ctx: StepContext) -> None:
    brew = ctx.env.homebrew_prefix / "bin" / "brew"
    if brew.exists():
        ctx.logger.info("Homebrew found at %s but not on PATH", brew)
    else:
        ctx.commands.run(
            ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"'],
            interactive=True,
        )

    shellenv = f'eval "$({brew} shellenv)"'
    if not ctx.zprofile.contains(shellenv):
        if ctx.confirm(f"add {brew.parent} to path in {ctx.zprofile.path}?", default=False):
            ctx.zprofile.append(shellenv)
    _activate_homebrew(ctx)

    if not ctx.commands.dry_run and not is_installed("brew"):
        raise ActionFailure("Brew installation failed!")

    # brew doctor complains about plenty of harmless things
    ctx.commands.run(["brew", "doctor"], check=False)


# ------------------------------------------------------------------------------
# git config
# ------------------------------------------------------------------------------

def _git_get(ctx: StepContext, key: str) -> str:
    return ctx.commands.output(["git", "config", "--global", key])


def git_configured(ctx: StepContext) -> bool:
    return (
        bool(_git_get(ctx, "user.name"))
        and bool(_git_get(ctx, "user.email"))
        and _git_get(ctx, "push.default") == "current"
        and ctx.profile.contains("GITHUB_USERNAME")
    )


def configure_git(ctx: StepContext) -> None:
    name = _git_get(ctx, "user.name")
    typer.echo(f"Your current git user.name:\n\n   {name}\n")
    if not name:
        ctx.commands.run(["git", "config", "--global", "user.name", ctx.env.full_name])
        typer.echo(f"git user.name updated to: {ctx.env.full_name}")

    email = _git_get(ctx, "user.email")
    typer.echo(f"Your current git user.email:\n\n   {email}\n")
    if not email:
        ctx.commands.run(["git", "config", "--global", "user.email", ctx.env.email])
        typer.echo(f"git user.email updated to: {ctx.env.email}")

    # push defaults to the current branch name
    ctx.commands.run(["git", "config", "--global", "push.default", "current"])

    if ctx.profile.ensure(f"export GITHUB_USERNAME={ctx.env.username}", marker="GITHUB_USERNAME"):
        typer.echo(f"GITHUB_USERNAME set to {ctx.env.username} in {ctx.profile.path}")


# ------------------------------------------------------------------------------
# ssh
# ------------------------------------------------------------------------------

def _key_path(ctx: StepContext):
    return ctx.env.home / ".ssh" / "id_rsa"


def _fingerprint(ctx: StepContext) -> str:
    out = ctx.commands.output(["ssh-keygen", "-lf", _key_path(ctx)])
    parts = out.split()
    return parts[1] if len(parts) > 1 else ""


def ssh_key_ready(ctx: StepContext) -> bool:
    if not _key_path(ctx).is_file():
        return False
    fingerprint = _fingerprint(ctx)
    return bool(fingerprint) and fingerprint in ctx.commands.output(["ssh-add", "-l"])


def setup_ssh_key(ctx: StepContext) -> None:
    key = _key_path(ctx)
    if key.is_file():
        typer.echo(f"Your RSA key already exists at {key}")
    else:
        typer.echo(f"Creating SSH key for {ctx.env.email}")
        ctx.commands.run(
            ["ssh-keygen", "-t", "rsa", "-b", "4096", "-C", ctx.env.email, "-f", key],
            interactive=True,
        )

    fingerprint = _fingerprint(ctx)
    if fingerprint and fingerprint in ctx.commands.output(["ssh-add", "-l"]):
        typer.echo("SSH key already exists in the local keystore.")
    else:
        typer.echo("Adding key to local keychain...")
        ctx.commands.run(["ssh-add", key], interactive=True)

    public = key.with_name(key.name + ".pub")
    if public.is_file():
        typer.echo(f"\nHere's your public key:\n\n{public.read_text().strip()}\n")
        if shutil.which("pbcopy"):
            ctx.commands.run(["bash", "-c", f'pbcopy < "{public}"'])
            typer.echo("Your public key has also been copied to the clipboard.")

    if not ctx.confirm(
        f"If not done already, please paste your public key at {ctx.config.ssh_keys_url}. "
        "Has your key been added?",
        default=True,
    ):
        ctx.logger.warning("ssh key not confirmed as uploaded; cloning may fail")


def build_machine_steps() -> list[Step]:
    return [
        Step(
            name="homebrew",
            title="🍺 Setting up Homebrew...",
            precondition=homebrew_installed,
            action=install_homebrew,
        ),
        Step(
            name="git-config",
            title="🐙 Setting up your git configs...",
            precondition=git_configured,
            action=configure_git,
        ),
        Step(
            name="ssh-key",
            title="⚡️ Setting up ssh...",
            precondition=ssh_key_ready,
            action=setup_ssh_key,
        ),
    ]
