from .base import StepTemplate, make_step, step_id
from .registry import build_registry

__all__ = ["StepTemplate", "build_registry", "make_step", "step_id"]
