# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/tools.py

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import List

from ..config.models import SetupConfig, UnisonSpec
from ..runner.errors import PreconditionCheckError
from ..runner.models import Step, StepContext
from ..utils.helpers import is_installed
from .common import (
    brew_has,
    create_alias,
    create_link,
    has_alias,
    smart_brew,
    workdir,
)

ZSH_SHARE_DIR = Path("/usr/local/share/zsh")


# ------------------------------------------------------------------------------
# brew packages
# ------------------------------------------------------------------------------

def _packages(ctx: StepContext) -> List[str]:
    return [*ctx.config.brew_packages, f"postgresql@{ctx.config.postgresql_version}"]


def brew_packages_installed(ctx: StepContext) -> bool:
    return all(brew_has(ctx, p) for p in _packages(ctx))


def install_brew_packages(ctx: StepContext) -> None:
    # an outdated yarn makes brew doctor fail
    if is_installed("yarn"):
        ctx.commands.run(["brew", "upgrade", "yarn"], check=False)

    prefix = ctx.env.homebrew_prefix
    for package in ctx.config.brew_packages:
        ctx.logger.info("installing or upgrading %s", package)
        smart_brew(ctx, package)
        if "@" in package:
            # version pinning requires a link, and the pinned bin dir goes first in PATH
            ctx.commands.run(["brew", "link", package], check=False)
            ctx.profile.ensure(f'PATH="{prefix}/opt/{package}/bin:$PATH"', marker=package)

    postgresql = f"postgresql@{ctx.config.postgresql_version}"
    smart_brew(ctx, postgresql)
    if not is_installed("postgres"):
        ctx.commands.run(["brew", "link", postgresql])


# ------------------------------------------------------------------------------
# unison
# ------------------------------------------------------------------------------

def unison_installed(spec: UnisonSpec):
    def check(ctx: StepContext) -> bool:
        return is_installed(spec.command) or (ctx.env.bin_install_dir / spec.command).exists()
    return check


def install_unison(spec: UnisonSpec):
    def action(ctx: StepContext) -> None:
        target = ctx.env.home / "opt" / "unison" / spec.release
        ctx.commands.run(["mkdir", "-p", target])

        tarball = f"{spec.release}.tar.gz"
        installed = f"{spec.release}.installed.tar.gz"
        with workdir(ctx, target):
            if not Path(installed).is_file():
                ctx.commands.run(["curl", "-L", spec.url, "-o", tarball, "--progress-bar"], interactive=True)
                ctx.commands.run(["tar", "xzf", tarball])
                ctx.commands.run(["mv", tarball, installed])

        create_link(ctx, target / "bin" / "unison", spec.command)
        create_link(ctx, ctx.env.bin_install_dir / spec.command, "unison")
    return action


# ------------------------------------------------------------------------------
# /usr/local/share/zsh ownership
# ------------------------------------------------------------------------------

def zsh_share_ok(ctx: StepContext) -> bool:
    # likely a Monterey+ issue on Intel only
    if ctx.env.is_arm:
        return True
    try:
        mode = os.stat(ZSH_SHARE_DIR).st_mode
    except FileNotFoundError:
        return True
    except OSError as exc:
        raise PreconditionCheckError(f"cannot stat {ZSH_SHARE_DIR}: {exc}") from exc
    return stat.filemode(mode) == "drwxr-xr-x"


def fix_zsh_share(ctx: StepContext) -> None:
    # stop compinit from complaining that the group can write here
    ctx.commands.run(["sudo", "chmod", "-R", "g-w", str(ZSH_SHARE_DIR.parent)], interactive=True)


# ------------------------------------------------------------------------------
# aliases
# ------------------------------------------------------------------------------

def aliases_present(ctx: StepContext) -> bool:
    return all(has_alias(ctx, n, c) for n, c in ctx.config.aliases.items())


def add_aliases(ctx: StepContext) -> None:
    for name, command in ctx.config.aliases.items():
        create_alias(ctx, name, command)


# ------------------------------------------------------------------------------
# aws cli
# ------------------------------------------------------------------------------

def aws_installed(ctx: StepContext) -> bool:
    return is_installed("aws")


def install_aws(ctx: StepContext) -> None:
    with tempfile.TemporaryDirectory(prefix="devsetup-aws-") as tmp:
        with workdir(ctx, Path(tmp)):
            ctx.commands.run(["curl", ctx.config.aws_pkg_url, "-o", "AWSCLIV2.pkg", "--progress-bar"], interactive=True)
            ctx.commands.run(["sudo", "installer", "-pkg", "AWSCLIV2.pkg", "-target", "/"], interactive=True)


def build_tool_steps(config: SetupConfig) -> list[Step]:
    steps = [
        Step(
            name="brew-packages",
            title="💻 Installing dev tools with Homebrew...",
            requires=["homebrew"],
            precondition=brew_packages_installed,
            action=install_brew_packages,
        ),
    ]
    if config.unison is not None:
        steps.append(
            Step(
                name="unison",
                title=f"🔁 Installing {config.unison.command}...",
                precondition=unison_installed(config.unison),
                action=install_unison(config.unison),
            )
        )
    steps += [
        Step(
            name="zsh-share-permissions",
            title="🔧 Fixing /usr/local/share/zsh ownership...",
            precondition=zsh_share_ok,
            action=fix_zsh_share,
        ),
        Step(
            name="aliases",
            title="🔗 Setting up additional aliases...",
            precondition=aliases_present,
            action=add_aliases,
        ),
        Step(
            name="aws-cli",
            title="☁️  Setting up aws cli...",
            precondition=aws_installed,
            action=install_aws,
        ),
    ]
    return steps
