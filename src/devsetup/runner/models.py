# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/runner/models.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..config.models import SetupConfig, SetupEnvironment
from ..utils.confirm import Confirmer
from ..utils.execution import CommandRunner
from ..utils.profile import ProfileFile

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


class StepStatus(str, Enum):
    PENDING = "PENDING"
    SKIPPED = "SKIPPED"
    RUNNING = "RUNNING"
    RECOVERING = "RECOVERING"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class StepContext:
    """Everything a step may touch. Built once per run and shared by all steps."""

    env: SetupEnvironment
    config: SetupConfig
    commands: CommandRunner
    confirmer: Confirmer
    profile: ProfileFile        # interactive shell rc file (~/.zshrc, ~/.bashrc)
    zprofile: ProfileFile       # login profile that carries PATH edits
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("devsetup"))

    def confirm(self, prompt: str, default: bool = False) -> bool:
        answer = self.confirmer.ask(prompt, default)
        self.logger.info("confirm %r -> %s", prompt, "yes" if answer else "no")
        return answer


Action = Callable[[StepContext], Optional[bool]]
Precondition = Callable[[StepContext], bool]
Recovery = Callable[[StepContext, BaseException], Optional[bool]]


@dataclass
class Step:
    """
    One named, idempotent unit of provisioning work.

    ``action`` fails by raising or by returning False. ``precondition``
    returning True means the effect is already present and the step is
    skipped. ``recovery`` is attempted once if ``action`` fails.
    """

    name: str
    action: Action
    precondition: Optional[Precondition] = None
    title: Optional[str] = None
    requires_confirmation: bool = False
    confirm_prompt: Optional[str] = None
    confirm_default: bool = False
    requires: List[str] = field(default_factory=list)   # earlier step names
    recovery: Optional[Recovery] = None

    @property
    def header(self) -> str:
        return self.title or self.name

    @property
    def prompt(self) -> str:
        return self.confirm_prompt or f"run {self.name}?"


@dataclass
class StepOutcome:
    name: str
    status: StepStatus = StepStatus.PENDING
    reason: Optional[str] = None        # skip reason: "precondition" | "declined"
    error: Optional[str] = None
    duration_ms: int = 0
    recovered: bool = False


@dataclass
class RunState:
    version: str
    environment: SetupEnvironment
    run_id: str = ""
    completed: bool = False
    outcomes: List[StepOutcome] = field(default_factory=list)
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if not VERSION_RE.match(self.version):
            raise ValueError(f"version must look like MAJOR.MINOR.PATCH, got {self.version!r}")

    def add(self, outcome: StepOutcome) -> None:
        self.outcomes.append(outcome)

    def outcome(self, name: str) -> Optional[StepOutcome]:
        return next((o for o in self.outcomes if o.name == name), None)

    def count(self, status: StepStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def failed_step(self) -> Optional[StepOutcome]:
        return next((o for o in self.outcomes if o.status == StepStatus.FAILED), None)

    def summary(self) -> str:
        done = self.count(StepStatus.DONE)
        skipped = self.count(StepStatus.SKIPPED)
        failed = self.count(StepStatus.FAILED)
        return f"DONE={done} SKIPPED={skipped} FAILED={failed}"
