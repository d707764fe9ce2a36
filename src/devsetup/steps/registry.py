# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/steps/registry.py


from __future__ import annotations
from typing import List

from devsetup.config.models import SetupConfig
from devsetup.runner.models import Step
from devsetup.steps.finish import build_finish_steps
from devsetup.steps.machine import build_machine_steps
from devsetup.steps.repo import build_repo_steps
from devsetup.steps.ruby import build_ruby_steps
from devsetup.steps.tools import build_tool_steps


def build_default_steps(config: SetupConfig) -> List[Step]:
    """
    The full provisioning sequence in the order it must run.

    The order is the dependency chain (package manager before packages,
    clone before the repo's own dependencies); nothing reorders it later.
    """
    steps: List[Step] = []
    steps += build_machine_steps()
    steps += build_tool_steps(config)
    steps += build_ruby_steps(config)

    if config.repo is not None:
        steps += build_repo_steps(config.repo)

    steps += build_finish_steps()
    return steps
