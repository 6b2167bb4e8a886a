import json
from pathlib import Path

import pytest

from intentc import CompilationStage, IntentCompiler
from intentc.config import CompilerConfig
from intentc.errors import PlanningError
from intentc.rules import GoalContainsAny, PlanningRule, RuleRegistry
from intentc.services import validate_ordered_results

CANONICAL = """intent build_crud {
  goal: "Create a simple product catalog API",
  capabilities: ["create products", "read products", "update products", "delete products"],
  constraints: ["validate input data", "require authentication"]
}"""

FALLBACK = 'intent say_hello { goal: "Greet the team", capabilities: ["send greeting"] }'


def test_compile_walks_every_stage() -> None:
    result = IntentCompiler().compile(CANONICAL)
    assert result.ok
    assert result.stage is CompilationStage.PLANNED
    assert [stage.value for stage in result.history] == [
        "received",
        "tokenized",
        "parsed",
        "lowered",
        "validated",
        "planned",
    ]
    assert result.ir.metadata.source_line_count == 5
    assert result.plan.strategy == "crud_generation"
    assert result.error is None


def test_compile_stops_at_parse_error() -> None:
    result = IntentCompiler().compile('intent a { goal "x" }')
    assert not result.ok
    assert result.history == [CompilationStage.RECEIVED, CompilationStage.TOKENIZED, CompilationStage.PARSE_ERROR]
    assert result.error.startswith("Parse error at 1:17")
    assert result.plan is None


def test_lowering_errors_are_reported_as_parse_errors() -> None:
    result = IntentCompiler().compile('intent a { goal: ["x"] }')
    assert result.stage is CompilationStage.PARSE_ERROR
    assert "'goal' must be a string" in result.error


def test_strict_lexing_stops_at_lex_error() -> None:
    source = 'intent a { goal: "x", capabilities: ["y"] } @'
    assert IntentCompiler().compile(source).ok

    result = IntentCompiler(CompilerConfig(strict_lexing=True)).compile(source)
    assert result.history == [CompilationStage.RECEIVED, CompilationStage.LEX_ERROR]
    assert result.error.startswith("Lex error at 1:")


def test_validation_errors_do_not_block_planning_by_default() -> None:
    result = IntentCompiler().compile('intent empty { goal: "do something" }')
    assert result.ok
    assert result.plan.strategy == "custom_execution"
    assert any("capability" in message for message in result.validation_errors)


def test_validate_before_plan_stops_invalid_intents() -> None:
    compiler = IntentCompiler(CompilerConfig(validate_before_plan=True))
    result = compiler.compile('intent empty { goal: "do something" }')
    assert result.stage is CompilationStage.VALIDATION_FAILED
    assert result.plan is None
    assert "capability" in result.error

    assert compiler.compile(CANONICAL).ok


def test_max_complexity_is_taken_from_config() -> None:
    compiler = IntentCompiler(CompilerConfig(max_complexity=5))
    errors = compiler.validate_ir(compiler.parse_intent(CANONICAL))
    assert any("too complex (score 10 > 5)" in message for message in errors)


def test_explain_plan_payload() -> None:
    explanation = IntentCompiler().explain_plan(CANONICAL)
    assert explanation["ok"] is True
    assert explanation["stage"] == "planned"
    assert explanation["strict_lexing"] is False
    assert explanation["ir"]["name"] == "build_crud"
    assert explanation["plan"]["strategy"] == "crud_generation"
    assert "[strategy_selection] crud_generation" in explanation["audit"]
    json.dumps(explanation)


def test_explain_plan_on_failure() -> None:
    explanation = IntentCompiler().explain_plan("not an intent")
    assert explanation["ok"] is False
    assert explanation["stage"] == "parse_error"
    assert explanation["plan"] is None
    assert explanation["audit"] == ""


def test_plan_batch_keeps_input_order_with_workers(tmp_path) -> None:
    intent_file = tmp_path / "fallback.intent"
    intent_file.write_text(FALLBACK, encoding="utf-8")
    items = [
        {"source": CANONICAL},
        {"path": str(intent_file)},
        {"source": "intent broken {"},
        {"name": "no source"},
        None,
    ] * 3

    results = IntentCompiler().plan_batch(items, swarm_workers=4)
    validate_ordered_results(results)
    assert [r["ok"] for r in results] == [True, True, False, False, False] * 3
    assert results[0]["strategy"] == "crud_generation"
    assert results[1]["strategy"] == "custom_execution"
    assert results[2]["stage"] == "parse_error"
    assert results[3]["stage"] == "received"
    assert "'source' or 'path'" in results[3]["error"]
    assert results[4]["stage"] == "received"
    assert results[4]["error"] == "Batch item must be an object, got NoneType"


def test_plan_batch_fail_fast_stops_after_first_failure() -> None:
    items = [{"source": CANONICAL}, {"source": "intent broken {"}, {"source": FALLBACK}]
    results = IntentCompiler().plan_batch(items, fail_fast=True, swarm_workers=4)
    assert [r["index"] for r in results] == [0, 1]
    assert results[1]["ok"] is False


def test_plan_batch_artifacts_and_explain(tmp_path) -> None:
    artifact_dir = tmp_path / "artifacts"
    results = IntentCompiler().plan_batch(
        [{"name": "Product Catalog", "source": CANONICAL}, {"source": FALLBACK}],
        include_explain=True,
        artifact_dir=str(artifact_dir),
    )
    plan_file = artifact_dir / "000_product_catalog" / "plan.json"
    assert results[0]["artifact_plan_file"] == str(plan_file)
    assert json.loads(plan_file.read_text(encoding="utf-8"))["strategy"] == "crud_generation"
    assert (artifact_dir / "001_say_hello" / "audit.txt").read_text(encoding="utf-8").startswith("1. [strategy_selection]")
    assert results[1]["explain"]["ir"]["name"] == "say_hello"


def test_write_batch_report(tmp_path) -> None:
    compiler = IntentCompiler()
    results = compiler.plan_batch([{"source": CANONICAL}, {"source": "intent broken {"}])
    report_path = compiler.write_batch_report(results, str(tmp_path / "reports" / "batch.json"))
    report = json.loads(Path(report_path).read_text(encoding="utf-8"))
    assert report["total"] == 2
    assert report["ok"] == 1
    assert report["failed"] == 1
    assert report["success_rate"] == 0.5
    assert report["strategy_counts"] == {"crud_generation": 1}
    assert report["stage_counts"] == {"planned": 1, "parse_error": 1}


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("INTENTC_STRICT_LEXING", "yes")
    monkeypatch.setenv("INTENTC_MAX_COMPLEXITY", "12")
    monkeypatch.setenv("INTENTC_VALIDATE_BEFORE_PLAN", "0")
    monkeypatch.setenv("INTENTC_LOG_LEVEL", "debug")
    config = CompilerConfig.from_env()
    assert config == CompilerConfig(strict_lexing=True, max_complexity=12, validate_before_plan=False, log_level="DEBUG")


def test_config_from_env_defaults(monkeypatch) -> None:
    for name in ("INTENTC_STRICT_LEXING", "INTENTC_MAX_COMPLEXITY", "INTENTC_VALIDATE_BEFORE_PLAN", "INTENTC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert CompilerConfig.from_env() == CompilerConfig()


def test_config_rejects_bad_values(monkeypatch) -> None:
    with pytest.raises(ValueError):
        CompilerConfig(max_complexity=-1)
    with pytest.raises(ValueError, match="Unsupported log_level"):
        CompilerConfig(log_level="LOUD")
    monkeypatch.setenv("INTENTC_MAX_COMPLEXITY", "lots")
    with pytest.raises(ValueError, match="must be an integer"):
        CompilerConfig.from_env()


class FailingPlanner:
    def create_plan(self, ir):
        raise PlanningError(f"cannot plan {ir.name}")


def test_planner_failures_stop_at_planning_error() -> None:
    result = IntentCompiler(planner=FailingPlanner()).compile(CANONICAL)
    assert result.stage is CompilationStage.PLANNING_ERROR
    assert result.history[-2:] == [CompilationStage.VALIDATED, CompilationStage.PLANNING_ERROR]
    assert result.error == "cannot plan build_crud"
    assert result.ir is not None


def test_custom_registry_is_used_for_planning() -> None:
    registry = RuleRegistry([PlanningRule("everything_is_ml", GoalContainsAny(("catalog",)), "ml_workflow", 1)])
    compiler = IntentCompiler(registry=registry)
    assert compiler.registry is registry
    assert compiler.compile(CANONICAL).plan.strategy == "ml_workflow"


def test_plan_batch_sequential_survives_non_object_items() -> None:
    results = IntentCompiler().plan_batch([{"source": CANONICAL}, None, 42, ["source"]])
    assert [r["ok"] for r in results] == [True, False, False, False]
    assert results[2]["error"] == "Batch item must be an object, got int"
    assert results[3]["error"] == "Batch item must be an object, got list"


def test_config_normalizes_log_level_case() -> None:
    config = CompilerConfig(log_level="debug")
    assert config.log_level == "DEBUG"
    assert config == CompilerConfig(log_level="DEBUG")
