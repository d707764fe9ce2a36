# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single provisioning run
    username: str     # operator the machine is being set up for
    machine: str      # hardware identifier (arm64, x86_64)

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(username: str, machine: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "username": username,
        "machine": machine,
    }


# ---------------------------------------------------------------------
# Run lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RunStarted(BaseEvent):
    version: str
    previous_version: Optional[str] = None
    full_name: str = ""   # for the greeting; falls back to username

@dataclass(frozen=True)
class RunSummary(BaseEvent):
    done: int
    skipped: int
    failed: int
    completed: bool
    error: Optional[str] = None

@dataclass(frozen=True)
class VersionRecorded(BaseEvent):
    version: str
    path: str


# ---------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PlanComputed(BaseEvent):
    order: List[str]

@dataclass(frozen=True)
class PlanFailed(BaseEvent):
    error: str


# ---------------------------------------------------------------------
# Step lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class StepStarted(BaseEvent):
    name: str
    title: str
    index: int
    total: int

@dataclass(frozen=True)
class StepSkipped(BaseEvent):
    name: str
    reason: str       # "precondition" | "declined"

@dataclass(frozen=True)
class PreconditionErrored(BaseEvent):
    name: str
    error: str

@dataclass(frozen=True)
class StepRecovering(BaseEvent):
    name: str
    error: str

@dataclass(frozen=True)
class StepSucceeded(BaseEvent):
    name: str
    duration_ms: int
    recovered: bool = False

@dataclass(frozen=True)
class StepFailed(BaseEvent):
    name: str
    error: str
