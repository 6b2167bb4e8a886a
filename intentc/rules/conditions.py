"""Closed set of rule conditions.

Each condition is a frozen dataclass with a `kind` tag, a pure `matches(ir)`
and a `to_dict()` form, so rules can be listed, serialized and tested on their
own. Text matching is case-insensitive substring matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple

from intentc.models import IntentIR
from intentc.rules.base import RuleCondition


def _normalize_terms(terms: Iterable[str]) -> Tuple[str, ...]:
    normalized = tuple(str(term).lower() for term in terms if str(term).strip())
    if not normalized:
        raise ValueError("A condition needs at least one non-empty term")
    return normalized


@dataclass(frozen=True)
class GoalContainsAny:
    terms: Tuple[str, ...]
    kind: str = "goal_contains_any"

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", _normalize_terms(self.terms))

    def matches(self, ir: IntentIR) -> bool:
        goal = (ir.goal or "").lower()
        return any(term in goal for term in self.terms)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "terms": list(self.terms)}


@dataclass(frozen=True)
class CapabilityContainsAny:
    terms: Tuple[str, ...]
    kind: str = "capability_contains_any"

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", _normalize_terms(self.terms))

    def matches(self, ir: IntentIR) -> bool:
        lowered = [capability.lower() for capability in ir.capabilities]
        return any(term in capability for capability in lowered for term in self.terms)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "terms": list(self.terms)}


@dataclass(frozen=True)
class CapabilitiesCoverAll:
    """Every term must appear in at least one capability (not necessarily the same one)."""

    terms: Tuple[str, ...]
    kind: str = "capabilities_cover_all"

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", _normalize_terms(self.terms))

    def matches(self, ir: IntentIR) -> bool:
        lowered = [capability.lower() for capability in ir.capabilities]
        return all(any(term in capability for capability in lowered) for term in self.terms)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "terms": list(self.terms)}


@dataclass(frozen=True)
class AnyOf:
    conditions: Tuple[RuleCondition, ...]
    kind: str = "any_of"

    def __post_init__(self) -> None:
        conditions = tuple(self.conditions)
        if not conditions:
            raise ValueError("any_of needs at least one condition")
        object.__setattr__(self, "conditions", conditions)

    def matches(self, ir: IntentIR) -> bool:
        return any(condition.matches(ir) for condition in self.conditions)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "conditions": [condition.to_dict() for condition in self.conditions]}
