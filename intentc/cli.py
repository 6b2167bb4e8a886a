from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path

from .config import LOG_LEVELS, CompilerConfig
from .core import IntentCompiler
from .planners.audit import render_audit_log


def _load_batch_items(path: str) -> list[dict]:
    source = Path(path)
    text = source.read_text(encoding="utf-8").strip()
    if not text:
        return []
    if source.suffix.lower() == ".jsonl":
        return [json.loads(line) for line in text.splitlines() if line.strip()]

    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("Batch input JSON must be a list of objects")
    return payload


def _check_rate_gate(name: str, minimum: float, rate: float) -> None:
    if not (0.0 <= minimum <= 1.0):
        raise ValueError(f"--{name} must be between 0.0 and 1.0")
    if rate < minimum:
        raise SystemExit(f"Batch {name} gate failed: {rate:.4f} < {minimum:.4f}")
    print(f"\n[batch-gate:ok] {name}={rate:.4f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile intent declarations into execution plans")
    parser.add_argument("--source", help="Intent source text")
    parser.add_argument("--source-file", help="Path to an intent source file")
    parser.add_argument("--strict-lexing", action="store_true", help="Fail on characters the lexer does not know")
    parser.add_argument("--max-complexity", type=int, help="Complexity score above which validation fails")
    parser.add_argument("--validate", action="store_true", help="Print validation errors for the parsed intent")
    parser.add_argument(
        "--fail-on-invalid",
        action="store_true",
        help="Stop before planning and exit non-zero when validation reports errors",
    )
    parser.add_argument("--audit", action="store_true", help="Print the audit log as text")
    parser.add_argument("--explain-plan", action="store_true", help="Print IR, plan and audit log as JSON")
    parser.add_argument("--explain-plan-file", help="Optional file path to write explain-plan JSON")
    parser.add_argument("--plan-file", help="Write the execution plan JSON to this path")
    parser.add_argument("--list-rules", action="store_true", help="Print the planning rules and exit")
    parser.add_argument("--batch-input", help="Path to JSON/JSONL batch of {source|path} items")
    parser.add_argument("--batch-report", help="Path to write batch run report JSON")
    parser.add_argument("--batch-fail-fast", action="store_true", help="Stop batch processing on first failed item")
    parser.add_argument(
        "--batch-min-success-rate",
        type=float,
        help="Optional required minimum batch success rate (0.0-1.0); exits non-zero if unmet",
    )
    parser.add_argument("--batch-artifact-dir", help="Folder to store per-item plan and audit artifacts")
    parser.add_argument("--batch-include-explain", action="store_true", help="Include IR and plan for each batch item")
    parser.add_argument("--swarm-workers", type=int, default=1, help="Thread pool size for batch planning")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), help="Logging level (default from INTENTC_LOG_LEVEL)")
    return parser


def _build_config(args: argparse.Namespace) -> CompilerConfig:
    config = CompilerConfig.from_env()
    if args.strict_lexing:
        config = replace(config, strict_lexing=True)
    if args.max_complexity is not None:
        config = replace(config, max_complexity=args.max_complexity)
    if args.fail_on_invalid:
        config = replace(config, validate_before_plan=True)
    if args.log_level:
        config = replace(config, log_level=args.log_level)
    return config


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    config = _build_config(args)
    logging.basicConfig(level=config.log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    compiler = IntentCompiler(config=config)

    if args.list_rules:
        print(json.dumps(compiler.registry.to_dicts(), indent=2))
        return

    if args.batch_input:
        items = _load_batch_items(args.batch_input)
        results = compiler.plan_batch(
            items,
            fail_fast=args.batch_fail_fast,
            include_explain=args.batch_include_explain,
            artifact_dir=args.batch_artifact_dir,
            swarm_workers=args.swarm_workers,
        )
        print(json.dumps(results, indent=2))
        if args.batch_report:
            destination = compiler.write_batch_report(results, args.batch_report)
            print(f"\n[batch-report] written: {destination}")

        if args.batch_min_success_rate is not None:
            total = len(results)
            ok = sum(1 for r in results if r.get("ok"))
            _check_rate_gate("min-success-rate", args.batch_min_success_rate, (ok / total) if total else 0.0)
        return

    if args.source_file:
        source = Path(args.source_file).read_text(encoding="utf-8")
    elif args.source:
        source = args.source
    else:
        raise ValueError("--source or --source-file is required unless --batch-input or --list-rules is provided")

    result = compiler.compile(source)

    if args.validate:
        if result.validation_errors:
            for message in result.validation_errors:
                print(f"[validate:warn] {message}")
        elif result.ir is not None:
            print("[validate:ok] intent is valid")

    if not result.ok:
        raise SystemExit(f"[{result.stage.value}] {result.error}")

    plan = result.plan
    print(
        f"[plan] intent={result.ir.name} strategy={plan.strategy} steps={len(plan.steps)} "
        f"duration_ms={plan.estimated_duration_ms} cost={plan.estimated_cost}"
    )
    for step in plan.steps:
        deps = ", ".join(step.dependencies) or "-"
        print(f"  {step.id:<8} {step.type:<16} {step.action:<22} after: {deps}")

    if args.audit:
        print("\n[audit]")
        print(render_audit_log(plan.audit_log))

    if args.plan_file:
        destination = Path(args.plan_file)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(json.dumps(plan.to_dict(), indent=2), encoding="utf-8")
        print(f"\n[plan-file] written: {destination}")

    if args.explain_plan or args.explain_plan_file:
        explanation = compiler.explain_result(result)
        if args.explain_plan:
            print("\n[explain]")
            print(json.dumps(explanation, indent=2))
        if args.explain_plan_file:
            destination = Path(args.explain_plan_file)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(json.dumps(explanation, indent=2), encoding="utf-8")
            print(f"\n[explain-file] written: {destination}")


if __name__ == "__main__":
    main()
