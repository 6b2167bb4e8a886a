from .base import PlanningRule, RuleCondition
from .conditions import AnyOf, CapabilitiesCoverAll, CapabilityContainsAny, GoalContainsAny
from .registry import RuleRegistry, build_registry, default_rules

__all__ = [
    "AnyOf",
    "CapabilitiesCoverAll",
    "CapabilityContainsAny",
    "GoalContainsAny",
    "PlanningRule",
    "RuleCondition",
    "RuleRegistry",
    "build_registry",
    "default_rules",
]
