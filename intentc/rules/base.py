from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from intentc.models import STRATEGIES, IntentIR


class RuleCondition(Protocol):
    kind: str

    def matches(self, ir: IntentIR) -> bool:
        ...

    def to_dict(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class PlanningRule:
    name: str
    condition: RuleCondition
    strategy: str
    priority: int

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unsupported strategy '{self.strategy}'. Supported: {', '.join(STRATEGIES)}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "strategy": self.strategy,
            "priority": self.priority,
            "condition": self.condition.to_dict(),
        }
