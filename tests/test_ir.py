import dataclasses

import pytest

from intentc.errors import IntentParsingError, ParseError
from intentc.models import ASTNode
from intentc.parsing.ir import generate_ir, parse_intent, validate_ir

CANONICAL = """intent build_crud {
  goal: "Create a simple product catalog API",
  capabilities: ["create products", "read products", "update products", "delete products"],
  constraints: ["validate input data", "require authentication"]
}"""


def _declaration(body: dict, name: str = "demo") -> ASTNode:
    return ASTNode("IntentDeclaration", name, [ASTNode("ObjectBody", body)])


def test_parse_intent_canonical_example() -> None:
    ir = parse_intent(CANONICAL)
    assert ir.name == "build_crud"
    assert ir.goal == "Create a simple product catalog API"
    assert ir.capabilities == ("create products", "read products", "update products", "delete products")
    assert ir.constraints == ("validate input data", "require authentication")
    assert ir.success_criteria is None
    assert ir.architecture is None
    assert ir.metadata.source_line_count == 5
    assert ir.metadata.complexity_score == 10
    assert ir.id.startswith("intent_")


def test_complexity_score_formula() -> None:
    ir = generate_ir(_declaration({"capabilities": ["a", "b"], "constraints": ["c"]}))
    assert ir.metadata.complexity_score == 5

    with_architecture = generate_ir(
        _declaration({"capabilities": ["a", "b"], "constraints": ["c"], "architecture": {"style": "monolith"}})
    )
    assert with_architecture.metadata.complexity_score == 15


def test_absent_arrays_default_to_empty() -> None:
    ir = generate_ir(_declaration({"goal": "g"}))
    assert ir.capabilities == ()
    assert ir.constraints == ()
    assert ir.metadata.complexity_score == 0
    assert ir.metadata.source_line_count == 0


def test_scalar_architecture_is_wrapped() -> None:
    ir = generate_ir(_declaration({"architecture": "serverless"}))
    assert ir.architecture == {"value": "serverless"}
    assert ir.metadata.complexity_score == 10


def test_ids_are_unique() -> None:
    first = parse_intent(CANONICAL)
    second = parse_intent(CANONICAL)
    assert first.id != second.id


def test_ir_is_immutable() -> None:
    ir = parse_intent(CANONICAL)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ir.name = "other"  # type: ignore[misc]


def test_nested_architecture_is_read_only() -> None:
    ir = parse_intent(
        'intent a { goal: "g", capabilities: ["x"], architecture: { style: mono, db: { engine: pg } } }'
    )
    with pytest.raises(TypeError):
        ir.architecture["style"] = "changed"  # type: ignore[index]
    with pytest.raises(TypeError):
        ir.architecture["db"]["engine"] = "mysql"  # type: ignore[index]
    assert ir.architecture["style"] == "mono"
    assert ir.to_dict()["architecture"] == {"style": "mono", "db": {"engine": "pg"}}


def test_architecture_is_copied_from_the_ast() -> None:
    body = {"architecture": {"style": "mono"}}
    ir = generate_ir(_declaration(body))
    body["architecture"]["style"] = "changed"
    assert ir.architecture == {"style": "mono"}


def test_empty_architecture_block_still_counts() -> None:
    ir = parse_intent('intent a { goal: "g", capabilities: ["x"], architecture: { } }')
    assert ir.architecture == {}
    assert ir.metadata.complexity_score == 12


def test_generate_ir_rejects_other_roots() -> None:
    with pytest.raises(ValueError, match="IntentDeclaration"):
        generate_ir(ASTNode("ObjectBody", {}))


def test_parse_intent_wraps_errors() -> None:
    with pytest.raises(IntentParsingError) as excinfo:
        parse_intent('intent a { goal "x" }')
    assert str(excinfo.value).startswith("Intent parsing failed: Parse error at 1:17")
    assert isinstance(excinfo.value.__cause__, ParseError)


def test_parse_intent_wraps_lowering_errors() -> None:
    with pytest.raises(IntentParsingError, match="'goal' must be a string"):
        parse_intent('intent a { goal: ["x"] }')


def test_parse_intent_strict_mode() -> None:
    source = 'intent a { goal: "x", capabilities: ["y"] } ;'
    assert parse_intent(source).name == "a"
    with pytest.raises(IntentParsingError, match="Lex error"):
        parse_intent(source, strict=True)


def test_validate_ir_accepts_complete_intent() -> None:
    assert validate_ir(parse_intent(CANONICAL)) == []


def test_validate_ir_reports_missing_capabilities() -> None:
    ir = parse_intent('intent empty { goal: "do something" }')
    errors = validate_ir(ir)
    assert any("capability" in message for message in errors)


def test_validate_ir_reports_goal_and_complexity() -> None:
    capabilities = ", ".join(f'"cap {i}"' for i in range(21))
    ir = parse_intent(f"intent big {{ capabilities: [{capabilities}] }}")
    assert ir.metadata.complexity_score == 42
    errors = validate_ir(ir, max_complexity=40)
    assert "Intent must have a goal" in errors
    assert any("too complex" in message and "decomposing" in message for message in errors)
    assert not any("too complex" in message for message in validate_ir(ir))


def test_validate_ir_reports_blank_name_and_goal() -> None:
    ir = dataclasses.replace(parse_intent(CANONICAL), name=" ", goal="")
    errors = validate_ir(ir)
    assert "Intent must have a name" in errors
    assert "Intent must have a goal" in errors
