# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .errors import DuplicateStepError, OutOfOrderStepError, UnknownStepError
from .models import Step

# Observer bits
from ..observers.dispatcher import EventBus
from ..observers.events import PlanComputed, PlanFailed, new_ctx


def plan(
    steps: Sequence[Step],
    bus: Optional[EventBus] = None,
    run_ctx: Optional[dict] = None,
) -> List[Step]:
    """
    Validate the declared step order and return it unchanged.

    Steps are never reordered: every name in ``requires`` must belong to a
    step declared earlier. Emits PlanComputed / PlanFailed if an EventBus is
    provided.
    """
    ctx = run_ctx or new_ctx(username="", machine="")
    try:
        position: Dict[str, int] = {}
        for i, step in enumerate(steps):
            if step.name in position:
                raise DuplicateStepError(f"Step '{step.name}' is declared twice")
            position[step.name] = i

        for i, step in enumerate(steps):
            for dep in step.requires:
                if dep not in position:
                    raise UnknownStepError(
                        f"Step '{step.name}' requires unknown step '{dep}'"
                    )
                if position[dep] >= i:
                    raise OutOfOrderStepError(
                        f"Step '{step.name}' requires '{dep}', which is declared after it"
                    )

        order = list(steps)
        if bus:
            bus.emit(PlanComputed(order=[s.name for s in order], **ctx))
        return order

    except Exception as e:
        if bus:
            bus.emit(PlanFailed(error=str(e), **ctx))
        raise
