from __future__ import annotations

from typing import Mapping, Optional

from intentc.errors import PlanningError
from intentc.models import ExecutionStep, IntentIR
from intentc.templates.base import StepTemplate, make_step
from intentc.templates.registry import build_registry


class StepGenerator:
    def __init__(self, templates: Optional[Mapping[str, StepTemplate]] = None) -> None:
        self.templates = templates if templates is not None else build_registry()

    def generate_steps(self, ir: IntentIR, strategy: str) -> list[ExecutionStep]:
        template = self.templates.get(strategy)
        if template is None:
            supported = ", ".join(sorted(self.templates))
            raise PlanningError(f"No step template for strategy '{strategy}'. Supported: {supported}")

        steps = [make_step(0, "validate", "validate_intent", {"intent_id": ir.id})]
        steps.extend(template.expand(ir, start_order=len(steps)))
        return steps
