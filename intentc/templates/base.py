from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from intentc.models import STEP_TYPES, ExecutionStep, IntentIR


class StepTemplate(Protocol):
    strategy: str

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        ...


def step_id(order: int) -> str:
    return f"step_{order}"


def make_step(
    order: int,
    type: str,
    action: str,
    parameters: Optional[dict[str, Any]] = None,
    dependencies: Sequence[str] = (),
) -> ExecutionStep:
    if type not in STEP_TYPES:
        raise ValueError(f"Unsupported step type '{type}'. Supported: {', '.join(STEP_TYPES)}")
    return ExecutionStep(
        id=step_id(order),
        order=order,
        type=type,
        action=action,
        parameters=dict(parameters or {}),
        dependencies=tuple(dependencies),
    )
