# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import os
import time
from typing import List, Optional, Sequence

from .errors import ActionFailure, EnvironmentMismatch, UserDeclined
from .models import RunState, Step, StepContext, StepOutcome, StepStatus
from .planner import plan
from .version import VersionMarker

# Observer bits
from ..observers.dispatcher import EventBus
from ..observers.events import (
    new_ctx,
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

log = logging.getLogger("devsetup")


def _precondition_satisfied(step: Step, context: StepContext, bus: EventBus, run_ctx: dict) -> bool:
    if step.precondition is None:
        return False
    try:
        return bool(step.precondition(context))
    except Exception as exc:
        # an unreadable check counts as "not satisfied"; the step runs
        log.warning("precondition for %s could not be evaluated: %s", step.name, exc)
        bus.emit(PreconditionErrored(name=step.name, error=str(exc), **run_ctx))
        return False


def _invoke(step: Step, context: StepContext) -> None:
    if step.action(context) is False:
        raise ActionFailure(f"{step.name} reported failure")


def _recover(step: Step, context: StepContext, error: BaseException) -> None:
    if step.recovery(context, error) is False:
        raise ActionFailure(f"recovery for {step.name} reported failure")


def _skip(outcome: StepOutcome, reason: str, bus: EventBus, run_ctx: dict) -> StepOutcome:
    outcome.status = StepStatus.SKIPPED
    outcome.reason = reason
    log.info("step %s skipped (%s)", outcome.name, reason)
    bus.emit(StepSkipped(name=outcome.name, reason=reason, **run_ctx))
    return outcome


def _fail(outcome: StepOutcome, error: str, bus: EventBus, run_ctx: dict) -> StepOutcome:
    outcome.status = StepStatus.FAILED
    outcome.error = error
    log.debug("step %s failed: %s", outcome.name, error)
    bus.emit(StepFailed(name=outcome.name, error=error, **run_ctx))
    return outcome


def run_step(
    step: Step,
    context: StepContext,
    *,
    bus: EventBus,
    run_ctx: dict,
    index: int = 1,
    total: int = 1,
) -> StepOutcome:
    """
    Drive one step through PENDING -> SKIPPED | RUNNING -> [RECOVERING] -> DONE | FAILED.

    Never raises for action failures; the returned outcome carries the error.
    The working directory is restored before returning.
    """
    outcome = StepOutcome(name=step.name)
    bus.emit(StepStarted(name=step.name, title=step.header, index=index, total=total, **run_ctx))

    cwd = os.getcwd()
    try:
        if _precondition_satisfied(step, context, bus, run_ctx):
            return _skip(outcome, "precondition", bus, run_ctx)

        if step.requires_confirmation and not context.confirm(step.prompt, step.confirm_default):
            return _skip(outcome, "declined", bus, run_ctx)

        outcome.status = StepStatus.RUNNING
        log.info("step %s running", step.name)
        t0 = time.time()
        try:
            _invoke(step, context)
        except UserDeclined:
            return _skip(outcome, "declined", bus, run_ctx)
        except EnvironmentMismatch as exc:
            return _fail(outcome, str(exc), bus, run_ctx)
        except Exception as exc:
            if step.recovery is None:
                return _fail(outcome, str(exc) or exc.__class__.__name__, bus, run_ctx)

            outcome.status = StepStatus.RECOVERING
            log.warning("step %s failed (%s), attempting recovery", step.name, exc)
            bus.emit(StepRecovering(name=step.name, error=str(exc), **run_ctx))
            try:
                _recover(step, context, exc)
            except Exception as rec_exc:
                return _fail(outcome, f"{exc}; recovery failed: {rec_exc}", bus, run_ctx)
            outcome.recovered = True

        outcome.duration_ms = int((time.time() - t0) * 1000)
        outcome.status = StepStatus.DONE
        bus.emit(
            StepSucceeded(
                name=step.name,
                duration_ms=outcome.duration_ms,
                recovered=outcome.recovered,
                **run_ctx,
            )
        )
        return outcome

    finally:
        if os.getcwd() != cwd:
            log.warning("step %s left the working directory changed, restoring %s", step.name, cwd)
            os.chdir(cwd)


def provision(
    steps: Sequence[Step],
    context: StepContext,
    state: RunState,
    *,
    marker: Optional[VersionMarker] = None,
    observers: Optional[List] = None,
) -> RunState:
    """
    Run every step in declared order, stopping at the first fatal failure.

    The version marker is written only when every step ended DONE or
    SKIPPED. Nothing is rolled back and nothing partial is persisted: a
    failed run is restarted from the top and the preconditions skip the
    work that already happened.
    """
    bus = EventBus(observers or [])
    run_ctx = new_ctx(
        username=state.environment.username,
        machine=state.environment.machine,
        run_id=state.run_id or None,
    )
    state.run_id = run_ctx["run_id"]

    previous = marker.read() if marker else None
    bus.emit(
        RunStarted(
            version=state.version,
            previous_version=previous,
            full_name=state.environment.full_name,
            **run_ctx,
        )
    )

    # raises StepPlanError before anything touches the machine
    ordered = plan(steps, bus=bus, run_ctx=run_ctx)
    log.debug("step order: %s", [s.name for s in ordered])

    total = len(ordered)
    for index, step in enumerate(ordered, start=1):
        outcome = run_step(step, context, bus=bus, run_ctx=run_ctx, index=index, total=total)
        state.add(outcome)
        if outcome.status == StepStatus.FAILED:
            state.error = f"{step.name}: {outcome.error}"
            break
    else:
        state.completed = True

    if state.completed and marker is not None:
        try:
            marker.write(state.version)
        except OSError as exc:
            # every step finished, but the run only counts once the marker is on disk
            state.completed = False
            state.error = f"could not record version {state.version} in {marker.path}: {exc}"
            log.debug(state.error)
        else:
            bus.emit(VersionRecorded(version=state.version, path=str(marker.path), **run_ctx))

    bus.emit(
        RunSummary(
            done=state.count(StepStatus.DONE),
            skipped=state.count(StepStatus.SKIPPED),
            failed=state.count(StepStatus.FAILED),
            completed=state.completed,
            error=state.error,
            **run_ctx,
        )
    )
    log.info("run %s finished: %s", state.run_id, state.summary())
    return state
