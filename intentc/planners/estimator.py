from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from intentc.models import ExecutionStep, ResourceRequirement

STEP_UNIT_COSTS: Mapping[str, float] = MappingProxyType(
    {
        "validate": 1,
        "generate_code": 10,
        "create_resource": 15,
        "execute_query": 5,
        "api_call": 8,
        "transform_data": 12,
        "train_model": 50,
        "deploy": 20,
    }
)
UNKNOWN_STEP_COST = 5

COMPUTE_MS_PER_STEP = 100
MEMORY_MB_PER_STEP = 128
STORAGE_MB = 10
NETWORK_MB = 5

COMPUTE_RATE = 0.01
MEMORY_RATE = 0.001


class ResourceEstimator:
    """Deterministic resource and cost model.

    Durations are worst-case bounds (every step running to its timeout), not
    predictions.
    """

    def __init__(self, unit_costs: Optional[Mapping[str, float]] = None) -> None:
        self.unit_costs = MappingProxyType(dict(unit_costs if unit_costs is not None else STEP_UNIT_COSTS))

    def estimate_resources(self, steps: Sequence[ExecutionStep]) -> list[ResourceRequirement]:
        count = len(steps)
        return [
            ResourceRequirement("compute", count * COMPUTE_MS_PER_STEP, "ms"),
            ResourceRequirement("memory", count * MEMORY_MB_PER_STEP, "MB"),
            ResourceRequirement("storage", STORAGE_MB, "MB"),
            ResourceRequirement("network", NETWORK_MB, "MB"),
        ]

    def calculate_cost(self, steps: Sequence[ExecutionStep], resources: Sequence[ResourceRequirement]) -> float:
        cost = 0.0
        for step in steps:
            cost += self.unit_costs.get(step.type, UNKNOWN_STEP_COST)
        for resource in resources:
            if resource.type == "compute":
                cost += resource.amount * COMPUTE_RATE
            elif resource.type == "memory":
                cost += resource.amount * MEMORY_RATE
        return round(cost, 2)

    def estimate_duration_ms(self, steps: Sequence[ExecutionStep]) -> int:
        return sum(step.timeout_ms for step in steps)
