from __future__ import annotations

import importlib.util
import json
import subprocess
import sys


def test_cli_basic_plan_smoke() -> None:
    proc = subprocess.run(
        [
            sys.executable,
            "-m",
            "intentc.cli",
            "--source-file",
            "examples/build_crud.intent",
            "--audit",
        ],
        check=True,
        capture_output=True,
        text=True,
    )
    assert "strategy=crud_generation" in proc.stdout
    assert "[audit]" in proc.stdout


def test_cli_list_rules_smoke() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "intentc.cli", "--list-rules"],
        check=True,
        capture_output=True,
        text=True,
    )
    names = [rule["name"] for rule in json.loads(proc.stdout)]
    assert names == ["crud_detection", "api_orchestration", "data_pipeline", "ml_workflow"]


def test_cli_parse_error_exits_non_zero() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "intentc.cli", "--source", "intent broken {"],
        capture_output=True,
        text=True,
    )
    assert proc.returncode != 0
    assert "[parse_error]" in proc.stderr


def test_streamlit_app_startup_import_smoke() -> None:
    if importlib.util.find_spec("streamlit") is None:
        return
    proc = subprocess.run(
        [sys.executable, "-m", "py_compile", "app.py"],
        check=True,
        capture_output=True,
        text=True,
    )
    assert proc.returncode == 0
