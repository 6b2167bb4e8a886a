"""Intent compiler: declarative intent source to explainable execution plans."""

from ._version import __version__
from .core import CompilationResult, CompilationStage, IntentCompiler
from .parsing import parse_intent, validate_ir
from .planners import create_plan

__all__ = [
    "CompilationResult",
    "CompilationStage",
    "IntentCompiler",
    "__version__",
    "create_plan",
    "parse_intent",
    "validate_ir",
]
