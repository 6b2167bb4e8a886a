from __future__ import annotations

from typing import Protocol

from intentc.models import ExecutionPlan, IntentIR


class Planner(Protocol):
    def create_plan(self, ir: IntentIR) -> ExecutionPlan:
        ...
