from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from intentc.models import FALLBACK_STRATEGY, AuditEntry, IntentIR
from intentc.rules.base import PlanningRule
from intentc.rules.registry import RuleRegistry, build_registry

logger = logging.getLogger(__name__)

STAGE = "strategy_selection"


class StrategySelector:
    def __init__(self, registry: Optional[RuleRegistry] = None) -> None:
        self.registry = registry if registry is not None else build_registry()

    def matching_rules(self, ir: IntentIR) -> list[PlanningRule]:
        """Matched rules ordered by priority (high first), then registration order."""
        indexed = [(index, rule) for index, rule in enumerate(self.registry) if rule.condition.matches(ir)]
        indexed.sort(key=lambda pair: (-pair[1].priority, pair[0]))
        return [rule for _, rule in indexed]

    def select_strategy(self, ir: IntentIR) -> tuple[str, AuditEntry]:
        matched = self.matching_rules(ir)
        now = datetime.now(timezone.utc)

        if not matched:
            logger.info("No planning rule matched intent '%s'; falling back to %s", ir.name, FALLBACK_STRATEGY)
            return FALLBACK_STRATEGY, AuditEntry(
                timestamp=now,
                stage=STAGE,
                decision=FALLBACK_STRATEGY,
                reasoning="No matching rules found, using custom execution",
                alternatives=(),
            )

        winner = matched[0]
        alternatives = tuple(rule.name for rule in matched[1:])
        logger.info(
            "Intent '%s' matched %s; selected %s via %s",
            ir.name,
            [rule.name for rule in matched],
            winner.strategy,
            winner.name,
        )
        return winner.strategy, AuditEntry(
            timestamp=now,
            stage=STAGE,
            decision=winner.strategy,
            reasoning=f"Matched rule: {winner.name} (priority: {winner.priority})",
            alternatives=alternatives,
        )
