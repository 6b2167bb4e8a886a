"""Rule-based planner: IntentIR → ExecutionPlan.

Strategy selection, step expansion and estimation are all table driven, so
the same IR and registry always give the same strategy, steps and cost.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Mapping, Optional

from intentc.errors import PlanningError
from intentc.models import ExecutionPlan, IntentIR
from intentc.planners.audit import AuditLogger
from intentc.planners.estimator import ResourceEstimator
from intentc.planners.selector import StrategySelector
from intentc.planners.steps import StepGenerator
from intentc.rules.registry import RuleRegistry
from intentc.templates.base import StepTemplate

logger = logging.getLogger(__name__)

STEP_GENERATION_ALTERNATIVES = ("Could add optimization steps", "Could add monitoring steps")


def validate_plan(plan: ExecutionPlan) -> list[str]:
    """Check the dependency invariant: every dependency exists and comes earlier."""
    errors: list[str] = []
    orders = {step.id: step.order for step in plan.steps}
    if len(orders) != len(plan.steps):
        errors.append("Plan contains duplicate step ids")
    for step in plan.steps:
        for dependency in step.dependencies:
            if dependency not in orders:
                errors.append(f"{step.id} depends on unknown step {dependency}")
            elif orders[dependency] >= step.order:
                errors.append(f"{step.id} depends on {dependency}, which does not come earlier")
    return errors


class DeterministicPlanner:
    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        templates: Optional[Mapping[str, StepTemplate]] = None,
        estimator: Optional[ResourceEstimator] = None,
    ) -> None:
        self.selector = StrategySelector(registry)
        self.step_generator = StepGenerator(templates)
        self.estimator = estimator or ResourceEstimator()

    @property
    def registry(self) -> RuleRegistry:
        return self.selector.registry

    def create_plan(self, ir: IntentIR) -> ExecutionPlan:
        audit = AuditLogger()

        strategy, selection_entry = self.selector.select_strategy(ir)
        audit.append(selection_entry)

        steps = self.step_generator.generate_steps(ir, strategy)
        audit.record(
            "step_generation",
            f"Generated {len(steps)} steps",
            f"Using {strategy} strategy template",
            STEP_GENERATION_ALTERNATIVES,
        )

        resources = self.estimator.estimate_resources(steps)
        duration_ms = self.estimator.estimate_duration_ms(steps)
        cost = self.estimator.calculate_cost(steps, resources)

        audit.record(
            "plan_complete",
            f"Generated {len(steps)} steps with {strategy} strategy",
            f"Total duration: {duration_ms}ms, cost: {cost} units",
        )

        plan = ExecutionPlan(
            id=f"plan_{uuid.uuid4().hex}",
            intent_id=ir.id,
            strategy=strategy,
            steps=tuple(steps),
            estimated_duration_ms=duration_ms,
            estimated_cost=cost,
            resources=tuple(resources),
            audit_log=audit.entries(),
            generated_at=datetime.now(timezone.utc),
        )

        problems = validate_plan(plan)
        if problems:
            raise PlanningError(f"Generated plan violates step ordering: {'; '.join(problems)}")

        logger.info("Planned intent '%s': %s, %d steps, cost %s", ir.name, strategy, len(steps), cost)
        return plan


def create_plan(ir: IntentIR, registry: Optional[RuleRegistry] = None) -> ExecutionPlan:
    return DeterministicPlanner(registry=registry).create_plan(ir)
