import json
from pathlib import Path

from examples.plan_walker import walk_plan
from intentc.core import IntentCompiler


def _compile_example(name: str):
    return IntentCompiler().compile(Path("examples", name).read_text(encoding="utf-8"))


def test_plan_walker_runs_steps_in_dependency_order(tmp_path, capsys) -> None:
    plan_file = tmp_path / "plan.json"
    plan_file.write_text(json.dumps(_compile_example("build_crud.intent").plan.to_dict()), encoding="utf-8")

    assert walk_plan(str(plan_file)) == [f"step_{i}" for i in range(5)]
    assert "run step_4: deploy/deploy_api" in capsys.readouterr().out


def test_bundled_examples_compile() -> None:
    crud = _compile_example("build_crud.intent")
    churn = _compile_example("churn_model.intent")
    assert crud.plan.strategy == "crud_generation"
    assert churn.plan.strategy == "ml_workflow"
    assert churn.ir.success_criteria == "auc above 0.8"
    assert churn.ir.architecture["storage"] == {"kind": "warehouse", "retention": "ninety days"}
