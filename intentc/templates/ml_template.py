from __future__ import annotations

from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import make_step, step_id


class MlWorkflowTemplate:
    strategy = "ml_workflow"

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        return [
            make_step(
                start_order,
                "train_model",
                "train_ml_model",
                {"capabilities": list(ir.capabilities)},
                [step_id(0)],
            )
        ]
