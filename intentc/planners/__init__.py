from .audit import AuditLogger, render_audit_log
from .deterministic import DeterministicPlanner, create_plan, validate_plan
from .estimator import ResourceEstimator
from .selector import StrategySelector
from .steps import StepGenerator

__all__ = [
    "AuditLogger",
    "DeterministicPlanner",
    "ResourceEstimator",
    "StepGenerator",
    "StrategySelector",
    "create_plan",
    "render_audit_log",
    "validate_plan",
]
