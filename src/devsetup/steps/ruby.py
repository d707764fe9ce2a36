# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/ruby.py

from __future__ import annotations

import re
from typing import Dict

from ..config.models import SetupConfig
from ..runner.models import Step, StepContext
from .common import rvm, rvm_dir, workdir

RVM_KEY_URL = "https://rvm.io/pkuczynski.asc"
RVM_INSTALL_URL = "https://get.rvm.io"

_EXPORT_RE = re.compile(r'^\s*export\s+(\w+)="?([^"]*)"?\s*$')


def rvm_installed(ctx: StepContext) -> bool:
    return rvm_dir(ctx).is_dir()


def install_rvm(ctx: StepContext) -> None:
    ctx.commands.run(["bash", "-c", f"curl -sSL {RVM_KEY_URL} | gpg --import -"])
    ctx.commands.run(
        ["bash", "-c", f"curl -sSL {RVM_INSTALL_URL} | bash -s stable --auto-dotfiles"],
        interactive=True,
    )


def _rvm_list(ctx: StepContext) -> str:
    return ctx.commands.output(rvm(ctx, "list"))


def ruby_installed(ctx: StepContext) -> bool:
    # "rvm list" echoes a missing .ruby-version too; the trailing " [" only
    # follows versions that are really installed
    return f" ruby-{ctx.config.ruby_version} [" in _rvm_list(ctx)


def _libffi_env(ctx: StepContext) -> Dict[str, str]:
    """The ``export`` hints printed by ``brew info libffi``, as a dict."""
    env: Dict[str, str] = {}
    for line in ctx.commands.output(["brew", "info", "libffi"]).splitlines():
        m = _EXPORT_RE.match(line)
        if m:
            env[m.group(1)] = m.group(2)
    return env


def install_ruby(ctx: StepContext) -> None:
    version = ctx.config.ruby_version
    ctx.logger.info("Ruby %s not found; installing", version)
    ctx.commands.run(rvm(ctx, "get", "master"), interactive=True)

    args = ["install", version]
    env = None
    if ctx.env.is_arm:
        env = _libffi_env(ctx)
        args.append("--with-out-ext=fiddle")
    ctx.commands.run(rvm(ctx, *args), env=env, interactive=True)


def rvm_make_install(ctx: StepContext, error: BaseException) -> None:
    """
    ``rvm install`` is known to fail at its final install stage; running
    ``make install`` from the unpacked source finishes the job.
    """
    source = rvm_dir(ctx) / "src" / f"ruby-{ctx.config.ruby_version}"
    ctx.logger.warning("recovering from rvm install error (%s) in %s", error, source)
    with workdir(ctx, source):
        ctx.commands.run(["make", "install"], interactive=True)


def ruby_is_default(ctx: StepContext) -> bool:
    return f"* ruby-{ctx.config.ruby_version}" in _rvm_list(ctx)


def make_ruby_default(ctx: StepContext) -> None:
    ctx.commands.run(rvm(ctx, "use", ctx.config.ruby_version, "--default"))


def build_ruby_steps(config: SetupConfig) -> list[Step]:
    version = config.ruby_version
    return [
        Step(
            name="rvm",
            title="💎 Setting up rvm...",
            precondition=rvm_installed,
            action=install_rvm,
        ),
        Step(
            name="ruby",
            title=f"💎 Installing ruby {version}...",
            requires=["rvm"],
            precondition=ruby_installed,
            action=install_ruby,
            recovery=rvm_make_install,
        ),
        Step(
            name="ruby-default",
            title=f"💎 Making ruby {version} the default...",
            requires=["ruby"],
            precondition=ruby_is_default,
            action=make_ruby_default,
            requires_confirmation=True,
            confirm_prompt=f"configure ruby-{version} as default?",
            confirm_default=False,
        ),
    ]
