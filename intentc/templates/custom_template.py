from __future__ import annotations

from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import make_step, step_id


class CustomExecutionTemplate:
    """Fallback used when no planning rule matched."""

    strategy = "custom_execution"

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        return [
            make_step(
                start_order,
                "execute_query",
                "custom_execution",
                {
                    "intent_id": ir.id,
                    "intent_name": ir.name,
                    "goal": ir.goal,
                    "capabilities": list(ir.capabilities),
                    "constraints": list(ir.constraints),
                },
                [step_id(0)],
            )
        ]
