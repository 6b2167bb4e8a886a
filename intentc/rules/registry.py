from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from intentc.rules.base import PlanningRule
from intentc.rules.conditions import AnyOf, CapabilitiesCoverAll, CapabilityContainsAny, GoalContainsAny


class RuleRegistry:
    """Ordered, read-only set of planning rules.

    Registration order is kept and used to break priority ties, so a registry
    can be shared by any number of concurrent planners.
    """

    def __init__(self, rules: Iterable[PlanningRule]) -> None:
        ordered = tuple(rules)
        seen: set[str] = set()
        for rule in ordered:
            if rule.name in seen:
                raise ValueError(f"Duplicate planning rule name '{rule.name}'")
            seen.add(rule.name)
        self._rules: Tuple[PlanningRule, ...] = ordered

    @property
    def rules(self) -> Tuple[PlanningRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[PlanningRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def to_dicts(self) -> list[dict]:
        return [dict(rule.to_dict(), registration_index=index) for index, rule in enumerate(self._rules)]


def default_rules() -> list[PlanningRule]:
    return [
        PlanningRule(
            name="crud_detection",
            condition=AnyOf(
                (
                    GoalContainsAny(("crud", "product catalog", "data management")),
                    CapabilitiesCoverAll(("create", "read")),
                )
            ),
            strategy="crud_generation",
            priority=10,
        ),
        PlanningRule(
            name="api_orchestration",
            condition=CapabilityContainsAny(("api", "integration", "orchestrat")),
            strategy="api_orchestration",
            priority=8,
        ),
        PlanningRule(
            name="data_pipeline",
            condition=CapabilityContainsAny(("pipeline", "transform", "process data")),
            strategy="data_pipeline",
            priority=7,
        ),
        PlanningRule(
            name="ml_workflow",
            condition=CapabilityContainsAny(("machine learning", "train", "model", "predict")),
            strategy="ml_workflow",
            priority=9,
        ),
    ]


def build_registry() -> RuleRegistry:
    return RuleRegistry(default_rules())
