# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/common.py

from __future__ import annotations

import os
import shlex
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from ..runner.models import StepContext
from ..utils.helpers import pushd
from ..utils.profile import alias_line


@contextmanager
def workdir(ctx: StepContext, path: Path) -> Iterator[Path]:
    """
    ``pushd`` for steps. In dry-run mode the directory may not exist yet
    (nothing was cloned or downloaded), so the block runs where we are.
    """
    if ctx.commands.dry_run and not path.is_dir():
        ctx.logger.info("dry-run: %s does not exist, staying in %s", path, os.getcwd())
        yield path
        return
    with pushd(path) as p:
        yield p


def login_shell(command: str) -> List[str]:
    # a login shell picks up rvm/nvm/brew from the profiles we edited
    return ["bash", "-lc", command]


# ------------------------------------------------------------------------------
# Profile helpers
# ------------------------------------------------------------------------------

def has_alias(ctx: StepContext, name: str, command: str) -> bool:
    return ctx.profile.contains(alias_line(name, command))


def create_alias(ctx: StepContext, name: str, command: str) -> None:
    ctx.logger.info("setting up alias '%s' for '%s'", name, command)
    ctx.profile.ensure(alias_line(name, command))


def path_line(directory: Path) -> str:
    return f"path+=({directory})"


def init_bin_install_dir(ctx: StepContext) -> None:
    bin_dir = ctx.env.bin_install_dir
    ctx.commands.run(["mkdir", "-p", bin_dir])
    if ctx.zprofile.contains(path_line(bin_dir)):
        return
    if ctx.confirm(f"add {bin_dir} to path in {ctx.zprofile.path}?", default=False):
        ctx.zprofile.append(path_line(bin_dir))
    else:
        ctx.logger.warning("manually add %s to your shell path", bin_dir)


def create_link(ctx: StepContext, reference: Path | str, link: str) -> None:
    """Symlink ``reference`` as ``link`` inside the bin install dir."""
    init_bin_install_dir(ctx)
    with workdir(ctx, ctx.env.bin_install_dir):
        ctx.commands.run(["ln", "-sfn", reference, link])


# ------------------------------------------------------------------------------
# Homebrew helpers
# ------------------------------------------------------------------------------

def brew_has(ctx: StepContext, package: str) -> bool:
    return ctx.commands.succeeds(["brew", "ls", "--versions", package])


def smart_brew(ctx: StepContext, package: str) -> None:
    """Install the package, or upgrade it when it is already there."""
    if brew_has(ctx, package):
        ctx.commands.run(["brew", "upgrade", package], check=False)
    else:
        ctx.commands.run(["brew", "install", package], interactive=True)


# ------------------------------------------------------------------------------
# rvm helpers
# ------------------------------------------------------------------------------

def rvm_dir(ctx: StepContext) -> Path:
    return ctx.env.home / ".rvm"


def rvm(ctx: StepContext, *args: str) -> List[str]:
    # rvm is a shell function, it only exists after sourcing its script
    script = rvm_dir(ctx) / "scripts" / "rvm"
    joined = " ".join(shlex.quote(a) for a in args)
    return ["bash", "-c", f'source "{script}" && rvm {joined}']
