from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple

TOKEN_KINDS = ("keyword", "identifier", "string", "array", "brace", "colon", "comma")

STRATEGIES = (
    "crud_generation",
    "api_orchestration",
    "data_pipeline",
    "ml_workflow",
    "custom_execution",
)
FALLBACK_STRATEGY = "custom_execution"

STEP_TYPES = (
    "validate",
    "generate_code",
    "create_resource",
    "execute_query",
    "api_call",
    "transform_data",
    "train_model",
    "deploy",
)

RESOURCE_TYPES = ("compute", "memory", "storage", "network")

DEFAULT_STEP_TIMEOUT_MS = 30000


def _freeze(value: Any) -> Any:
    """Deep read-only copy: mappings become `MappingProxyType`, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _json_safe(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@dataclass
class Token:
    kind: str
    text: str
    line: int
    column: int


@dataclass
class ASTNode:
    kind: str
    value: Any = None
    children: List["ASTNode"] = field(default_factory=list)


@dataclass(frozen=True)
class IntentMetadata:
    parsed_at: datetime
    source_line_count: int
    complexity_score: int


@dataclass(frozen=True)
class IntentIR:
    """Lowered, validated-shape form of one intent declaration."""

    id: str
    name: str
    goal: Optional[str]
    capabilities: Tuple[str, ...]
    constraints: Tuple[str, ...]
    success_criteria: Optional[str]
    architecture: Optional[Mapping[str, Any]]
    metadata: IntentMetadata

    def __post_init__(self) -> None:
        if self.architecture is not None:
            object.__setattr__(self, "architecture", _freeze(self.architecture))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "intent",
            "name": self.name,
            "goal": self.goal,
            "capabilities": list(self.capabilities),
            "constraints": list(self.constraints),
            "success_criteria": self.success_criteria,
            "architecture": _json_safe(self.architecture),
            "metadata": {
                "parsed_at": self.metadata.parsed_at.isoformat(),
                "source_line_count": self.metadata.source_line_count,
                "complexity_score": self.metadata.complexity_score,
            },
        }


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_ms: int = 1000
    backoff_multiplier: int = 2


@dataclass(frozen=True)
class ExecutionStep:
    id: str
    order: int
    type: str
    action: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    dependencies: Tuple[str, ...] = ()
    timeout_ms: int = DEFAULT_STEP_TIMEOUT_MS
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _freeze(self.parameters))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "order": self.order,
            "type": self.type,
            "action": self.action,
            "parameters": _json_safe(self.parameters),
            "dependencies": list(self.dependencies),
            "timeout_ms": self.timeout_ms,
            "retry_policy": self.retry_policy.__dict__.copy(),
        }


@dataclass(frozen=True)
class ResourceRequirement:
    type: str
    amount: float
    unit: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "amount": self.amount, "unit": self.unit}


@dataclass(frozen=True)
class AuditEntry:
    timestamp: datetime
    stage: str
    decision: str
    reasoning: str
    alternatives: Tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "stage": self.stage,
            "decision": self.decision,
            "reasoning": self.reasoning,
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True)
class ExecutionPlan:
    id: str
    intent_id: str
    strategy: str
    steps: Tuple[ExecutionStep, ...]
    estimated_duration_ms: int
    estimated_cost: float
    resources: Tuple[ResourceRequirement, ...]
    audit_log: Tuple[AuditEntry, ...]
    generated_at: datetime

    def step(self, step_id: str) -> ExecutionStep:
        for candidate in self.steps:
            if candidate.id == step_id:
                return candidate
        raise KeyError(step_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "intent_id": self.intent_id,
            "strategy": self.strategy,
            "steps": [step.to_dict() for step in self.steps],
            "estimated_duration_ms": self.estimated_duration_ms,
            "estimated_cost": self.estimated_cost,
            "resources": [resource.to_dict() for resource in self.resources],
            "audit_log": [entry.to_dict() for entry in self.audit_log],
            "generated_at": self.generated_at.isoformat(),
        }
