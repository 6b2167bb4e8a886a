from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from intentc.core import IntentCompiler
from intentc.models import ExecutionPlan


def _dataset_path() -> Path:
    return Path(__file__).resolve().parent / "intents" / "golden.json"


def _plan_signature(plan: ExecutionPlan) -> list[tuple[Any, ...]]:
    """Everything that must be stable between runs (ids and timestamps excluded)."""
    return [
        (step.id, step.order, step.type, step.action, step.dependencies)
        for step in plan.steps
    ] + [("cost", plan.estimated_cost), ("strategy", plan.strategy)]


def _dependencies_ok(plan: ExecutionPlan) -> bool:
    orders = {step.id: step.order for step in plan.steps}
    return all(dep in orders and orders[dep] < step.order for step in plan.steps for dep in step.dependencies)


def main() -> None:
    dataset = json.loads(_dataset_path().read_text(encoding="utf-8"))
    compiler = IntentCompiler()

    total = len(dataset)
    passed = 0
    strategy_score = 0
    shape_score = 0
    deterministic_score = 0
    estimate_score = 0

    for case in dataset:
        result_a = compiler.compile(case["source"])
        result_b = compiler.compile(case["source"])
        if not (result_a.ok and result_b.ok):
            print(f"[FAIL] {case['name']} stage={result_a.stage.value} error={result_a.error}")
            continue

        plan = result_a.plan
        strategy_ok = plan.strategy == case["expected_strategy"]
        if strategy_ok:
            strategy_score += 1

        actions = [step.action for step in plan.steps]
        shape_ok = actions == case["expected_actions"] and _dependencies_ok(plan)
        if shape_ok:
            shape_score += 1

        deterministic_ok = _plan_signature(plan) == _plan_signature(result_b.plan)
        if deterministic_ok:
            deterministic_score += 1

        estimate_ok = plan.estimated_duration_ms == case["expected_duration_ms"]
        if "expected_cost" in case:
            estimate_ok = estimate_ok and abs(plan.estimated_cost - case["expected_cost"]) < 1e-9
        if estimate_ok:
            estimate_score += 1

        case_ok = strategy_ok and shape_ok and deterministic_ok and estimate_ok
        if case_ok:
            passed += 1

        print(
            f"[{'PASS' if case_ok else 'FAIL'}] {case['name']} "
            f"strategy={plan.strategy} ({'ok' if strategy_ok else 'fail'}) "
            f"shape={'ok' if shape_ok else 'fail'} deterministic={'ok' if deterministic_ok else 'fail'} "
            f"estimates={'ok' if estimate_ok else 'fail'} cost={plan.estimated_cost}"
        )

    print(f"\nPass rate: {passed}/{total}")
    print(f"Strategy accuracy: {strategy_score}/{total}")
    print(f"Step shape score: {shape_score}/{total}")
    print(f"Determinism score: {deterministic_score}/{total}")
    print(f"Estimate score: {estimate_score}/{total}")


if __name__ == "__main__":
    main()
