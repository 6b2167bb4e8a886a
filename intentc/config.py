from __future__ import annotations

import os
from dataclasses import dataclass

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class CompilerConfig:
    """Knobs for the compiler façade.

    `strict_lexing` turns dropped characters into `LexError`.
    `validate_before_plan` stops `compile()` at VALIDATION_FAILED instead of
    planning an IR that `validate_ir` flagged.
    """

    strict_lexing: bool = False
    max_complexity: int = 50
    validate_before_plan: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_complexity < 0:
            raise ValueError("max_complexity must be >= 0")
        object.__setattr__(self, "log_level", self.log_level.strip().upper())
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unsupported log_level '{self.log_level}'. Supported: {', '.join(sorted(LOG_LEVELS))}"
            )

    @classmethod
    def from_env(cls) -> "CompilerConfig":
        raw_max = os.getenv("INTENTC_MAX_COMPLEXITY", "").strip()
        try:
            max_complexity = int(raw_max) if raw_max else 50
        except ValueError as exc:
            raise ValueError(f"INTENTC_MAX_COMPLEXITY must be an integer, got '{raw_max}'") from exc
        return cls(
            strict_lexing=_env_flag("INTENTC_STRICT_LEXING", False),
            max_complexity=max_complexity,
            validate_before_plan=_env_flag("INTENTC_VALIDATE_BEFORE_PLAN", False),
            log_level=(os.getenv("INTENTC_LOG_LEVEL") or "WARNING").strip().upper(),
        )
