from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass
class BatchReportService:
    def build_summary(self, batch_results: list[dict[str, Any]]) -> dict[str, Any]:
        ok_count = sum(1 for r in batch_results if r.get("ok"))
        failed_count = sum(1 for r in batch_results if not r.get("ok"))
        invalid_count = sum(1 for r in batch_results if r.get("validation_errors"))

        strategy_counts: dict[str, int] = {}
        stage_counts: dict[str, int] = {}
        for item in batch_results:
            stage = str(item.get("stage", "unknown"))
            stage_counts[stage] = stage_counts.get(stage, 0) + 1
            strategy = item.get("strategy")
            if strategy:
                strategy_counts[str(strategy)] = strategy_counts.get(str(strategy), 0) + 1

        total = len(batch_results)
        elapsed_values = sorted(float(item.get("elapsed_ms", 0.0)) for item in batch_results if item.get("ok") and item.get("elapsed_ms") is not None)
        costs = [float(item["estimated_cost"]) for item in batch_results if item.get("ok") and item.get("estimated_cost") is not None]
        success_rate = (ok_count / total) if total else 0.0

        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total": total,
            "ok": ok_count,
            "failed": failed_count,
            "with_validation_errors": invalid_count,
            "success_rate": round(success_rate, 4),
            "strategy_counts": strategy_counts,
            "stage_counts": stage_counts,
            "avg_elapsed_ms": round(sum(elapsed_values) / len(elapsed_values), 3) if elapsed_values else 0.0,
            "p95_elapsed_ms": round(elapsed_values[min(len(elapsed_values) - 1, int(0.95 * (len(elapsed_values) - 1)))], 3) if elapsed_values else 0.0,
            "avg_estimated_cost": round(sum(costs) / len(costs), 2) if costs else 0.0,
            "results": batch_results,
        }


def validate_ordered_results(results: list[dict[str, Any]]) -> None:
    expected = list(range(len(results)))
    actual = [int(item.get("index", -1)) for item in results]
    if actual != expected:
        raise RuntimeError(f"plan_batch ordering mismatch: expected {expected} got {actual}")
