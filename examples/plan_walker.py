"""Dry-run consumer for a plan JSON written with `--plan-file`.

Prints steps in an order that honors their dependencies, the way an executor
would schedule them. Nothing is executed.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path


def walk_plan(path: str) -> list[str]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    pending = {step["id"]: step for step in payload.get("steps", [])}
    done: list[str] = []
    while pending:
        ready = sorted(
            (step for step in pending.values() if all(dep in done for dep in step["dependencies"])),
            key=lambda step: step["order"],
        )
        if not ready:
            raise ValueError(f"Unsatisfiable dependencies in {sorted(pending)}")
        for step in ready:
            policy = step["retry_policy"]
            print(
                f"run {step['id']}: {step['type']}/{step['action']} "
                f"(timeout {step['timeout_ms']}ms, up to {policy['max_attempts']} attempts)"
            )
            done.append(step["id"])
            pending.pop(step["id"])
    return done


if __name__ == "__main__":
    walk_plan(sys.argv[1] if len(sys.argv) > 1 else "artifacts/plan.json")
