from __future__ import annotations

from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import make_step, step_id


class ApiOrchestrationTemplate:
    strategy = "api_orchestration"

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        return [
            make_step(
                start_order,
                "api_call",
                "orchestrate_apis",
                {"capabilities": list(ir.capabilities)},
                [step_id(0)],
            )
        ]
