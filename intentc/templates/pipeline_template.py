from __future__ import annotations

from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import make_step, step_id


class DataPipelineTemplate:
    strategy = "data_pipeline"

    def expand(self, ir: IntentIR, start_order: int) -> list[ExecutionStep]:
        return [
            make_step(
                start_order,
                "transform_data",
                "create_pipeline",
                {"transforms": list(ir.capabilities)},
                [step_id(0)],
            )
        ]
