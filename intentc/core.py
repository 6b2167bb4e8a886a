from __future__ import annotations

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from time import perf_counter
from typing import Any, Mapping, Optional

from intentc.config import CompilerConfig
from intentc.errors import LexError, ParseError, PlanningError
from intentc.models import ExecutionPlan, IntentIR
from intentc.parsing.ir import generate_ir, parse_intent, validate_ir
from intentc.parsing.lexer import Lexer
from intentc.parsing.parser import Parser
from intentc.planners.audit import render_audit_log
from intentc.planners.base import Planner
from intentc.planners.deterministic import DeterministicPlanner
from intentc.rules.registry import RuleRegistry, build_registry
from intentc.services import BatchReportService
from intentc.templates.base import StepTemplate

logger = logging.getLogger(__name__)


class CompilationStage(str, Enum):
    RECEIVED = "received"
    TOKENIZED = "tokenized"
    PARSED = "parsed"
    LOWERED = "lowered"
    VALIDATED = "validated"
    PLANNED = "planned"
    LEX_ERROR = "lex_error"
    PARSE_ERROR = "parse_error"
    VALIDATION_FAILED = "validation_failed"
    PLANNING_ERROR = "planning_error"


@dataclass
class CompilationResult:
    stage: CompilationStage
    history: list[CompilationStage] = field(default_factory=list)
    ir: Optional[IntentIR] = None
    validation_errors: list[str] = field(default_factory=list)
    plan: Optional[ExecutionPlan] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.stage == CompilationStage.PLANNED

    def advance(self, stage: CompilationStage) -> None:
        self.stage = stage
        self.history.append(stage)


class IntentCompiler:
    """Text → IntentIR → ExecutionPlan, plus explain/batch helpers on top."""

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        registry: Optional[RuleRegistry] = None,
        templates: Optional[Mapping[str, StepTemplate]] = None,
        planner: Optional[Planner] = None,
    ) -> None:
        self.config = config or CompilerConfig()
        self.rules = registry if registry is not None else build_registry()
        self.planner: Planner = planner or DeterministicPlanner(registry=self.rules, templates=templates)
        self.report_service = BatchReportService()

    @property
    def registry(self) -> RuleRegistry:
        return self.rules

    def parse_intent(self, source: str) -> IntentIR:
        return parse_intent(source, strict=self.config.strict_lexing)

    def validate_ir(self, ir: IntentIR) -> list[str]:
        return validate_ir(ir, max_complexity=self.config.max_complexity)

    def create_plan(self, ir: IntentIR) -> ExecutionPlan:
        return self.planner.create_plan(ir)

    def compile(self, source: str) -> CompilationResult:
        """Run the whole lifecycle, stopping at the first terminal failure."""
        result = CompilationResult(stage=CompilationStage.RECEIVED, history=[CompilationStage.RECEIVED])

        try:
            tokens = Lexer(strict=self.config.strict_lexing).tokenize(source)
        except LexError as exc:
            result.error = str(exc)
            result.advance(CompilationStage.LEX_ERROR)
            return result
        result.advance(CompilationStage.TOKENIZED)

        try:
            ast = Parser(tokens).parse()
        except ParseError as exc:
            result.error = str(exc)
            result.advance(CompilationStage.PARSE_ERROR)
            return result
        result.advance(CompilationStage.PARSED)

        try:
            ir = generate_ir(ast)
        except ValueError as exc:
            result.error = str(exc)
            result.advance(CompilationStage.PARSE_ERROR)
            return result
        result.ir = replace(ir, metadata=replace(ir.metadata, source_line_count=len(source.split("\n"))))
        result.advance(CompilationStage.LOWERED)

        result.validation_errors = self.validate_ir(result.ir)
        if result.validation_errors and self.config.validate_before_plan:
            result.error = "; ".join(result.validation_errors)
            result.advance(CompilationStage.VALIDATION_FAILED)
            return result
        result.advance(CompilationStage.VALIDATED)

        try:
            result.plan = self.create_plan(result.ir)
        except PlanningError as exc:
            logger.error("Planning failed for intent '%s': %s", result.ir.name, exc)
            result.error = str(exc)
            result.advance(CompilationStage.PLANNING_ERROR)
            return result
        result.advance(CompilationStage.PLANNED)
        return result

    def explain_plan(self, source: str) -> dict[str, Any]:
        return self.explain_result(self.compile(source))

    def explain_result(self, result: CompilationResult) -> dict[str, Any]:
        return {
            "stage": result.stage.value,
            "history": [stage.value for stage in result.history],
            "ok": result.ok,
            "error": result.error,
            "strict_lexing": self.config.strict_lexing,
            "ir": result.ir.to_dict() if result.ir else None,
            "validation_errors": list(result.validation_errors),
            "plan": result.plan.to_dict() if result.plan else None,
            "audit": render_audit_log(result.plan.audit_log) if result.plan else "",
        }

    def _slug(self, text: str) -> str:
        cleaned = re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")
        return cleaned[:48] or "item"

    def _load_item_source(self, item: dict[str, Any]) -> str:
        if not isinstance(item, dict):
            raise ValueError(f"Batch item must be an object, got {type(item).__name__}")
        if "source" in item:
            return str(item["source"])
        if "path" in item:
            return Path(str(item["path"])).read_text(encoding="utf-8")
        raise ValueError("Batch item needs a 'source' or 'path' field")

    def _plan_batch_item(
        self,
        idx: int,
        item: dict[str, Any],
        include_explain: bool,
        artifacts_root: Path | None,
    ) -> dict[str, Any]:
        source = self._load_item_source(item)
        started_at = perf_counter()
        result = self.compile(source)
        elapsed_ms = round((perf_counter() - started_at) * 1000, 3)

        payload: dict[str, Any] = {
            "index": idx,
            "ok": result.ok,
            "stage": result.stage.value,
            "intent": result.ir.name if result.ir else None,
            "validation_errors": list(result.validation_errors),
            "elapsed_ms": elapsed_ms,
        }
        if result.error:
            payload["error"] = result.error
        if result.plan is not None:
            payload["strategy"] = result.plan.strategy
            payload["step_count"] = len(result.plan.steps)
            payload["estimated_duration_ms"] = result.plan.estimated_duration_ms
            payload["estimated_cost"] = result.plan.estimated_cost

        if include_explain:
            payload["explain"] = {
                "ir": result.ir.to_dict() if result.ir else None,
                "plan": result.plan.to_dict() if result.plan else None,
            }

        if artifacts_root and result.plan is not None:
            label = item.get("name") or (result.ir.name if result.ir else "intent")
            item_dir = artifacts_root / f"{idx:03d}_{self._slug(str(label))}"
            item_dir.mkdir(parents=True, exist_ok=True)
            plan_file = item_dir / "plan.json"
            plan_file.write_text(json.dumps(result.plan.to_dict(), indent=2), encoding="utf-8")
            payload["artifact_plan_file"] = str(plan_file)
            audit_file = item_dir / "audit.txt"
            audit_file.write_text(render_audit_log(result.plan.audit_log) + "\n", encoding="utf-8")
            payload["artifact_audit_file"] = str(audit_file)

        return payload

    def plan_batch(
        self,
        items: list[dict[str, Any]],
        fail_fast: bool = False,
        include_explain: bool = False,
        artifact_dir: str | None = None,
        swarm_workers: int = 1,
    ) -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        artifacts_root = Path(artifact_dir) if artifact_dir else None
        if artifacts_root:
            artifacts_root.mkdir(parents=True, exist_ok=True)

        def _safe_item(idx: int, item: dict[str, Any]) -> dict[str, Any]:
            try:
                return self._plan_batch_item(idx, item, include_explain, artifacts_root)
            except (OSError, ValueError) as exc:
                logger.warning("Batch item %d failed: %s", idx, exc)
                return {"index": idx, "ok": False, "stage": CompilationStage.RECEIVED.value, "error": str(exc)}

        if swarm_workers <= 1 or fail_fast:
            for idx, item in enumerate(items):
                payload = _safe_item(idx, item)
                results.append(payload)
                if fail_fast and not payload.get("ok"):
                    break
            return results

        with ThreadPoolExecutor(max_workers=swarm_workers) as executor:
            futures = {executor.submit(_safe_item, idx, item): idx for idx, item in enumerate(items)}
            ordered: dict[int, dict[str, Any]] = {}
            for future in as_completed(futures):
                payload = future.result()
                ordered[payload["index"]] = payload
            for idx in range(len(items)):
                if idx in ordered:
                    results.append(ordered[idx])
        return results

    def write_batch_report(self, batch_results: list[dict[str, Any]], output_file: str) -> str:
        destination = Path(output_file)
        destination.parent.mkdir(parents=True, exist_ok=True)
        summary = self.report_service.build_summary(batch_results)
        destination.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        return str(destination)
