from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional

from intentc.errors import IntentParsingError
from intentc.models import ASTNode, IntentIR, IntentMetadata
from intentc.parsing.lexer import Lexer
from intentc.parsing.parser import Parser

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMPLEXITY = 50


def complexity_score(capability_count: int, constraint_count: int, has_architecture: bool) -> int:
    return 2 * capability_count + constraint_count + (10 if has_architecture else 0)


def _as_strings(key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(str(item) for item in value)
    raise ValueError(f"'{key}' must be a list of strings")


def _as_text(key: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"'{key}' must be a string")


def _as_architecture(value: Any) -> Optional[dict[str, Any]]:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return value
    return {"value": value}


def generate_ir(ast: ASTNode) -> IntentIR:
    """Lower an `IntentDeclaration` AST into an `IntentIR`.

    `metadata.source_line_count` is left at 0; `parse_intent` fills it in from
    the raw source.
    """
    if ast.kind != "IntentDeclaration":
        raise ValueError(f"Invalid AST: expected IntentDeclaration, got {ast.kind}")

    body: dict[str, Any] = ast.children[0].value if ast.children else {}
    capabilities = _as_strings("capabilities", body.get("capabilities"))
    constraints = _as_strings("constraints", body.get("constraints"))
    architecture = _as_architecture(body.get("architecture"))

    return IntentIR(
        id=f"intent_{uuid.uuid4().hex}",
        name=str(ast.value),
        goal=_as_text("goal", body.get("goal")),
        capabilities=capabilities,
        constraints=constraints,
        success_criteria=_as_text("success_criteria", body.get("success_criteria")),
        architecture=architecture,
        metadata=IntentMetadata(
            parsed_at=datetime.now(timezone.utc),
            source_line_count=0,
            complexity_score=complexity_score(len(capabilities), len(constraints), architecture is not None),
        ),
    )


def validate_ir(ir: IntentIR, max_complexity: int = DEFAULT_MAX_COMPLEXITY) -> list[str]:
    """Advisory structural checks. Never raises; an empty list means valid."""
    errors: list[str] = []
    if not ir.name or not ir.name.strip():
        errors.append("Intent must have a name")
    if not ir.goal or not ir.goal.strip():
        errors.append("Intent must have a goal")
    if not ir.capabilities:
        errors.append("Intent must have at least one capability")
    if ir.metadata.complexity_score > max_complexity:
        errors.append(
            f"Intent is too complex (score {ir.metadata.complexity_score} > {max_complexity}), consider decomposing it"
        )
    if errors:
        logger.warning("Intent '%s' failed validation: %s", ir.name, "; ".join(errors))
    return errors


def parse_intent(source: str, strict: bool = False) -> IntentIR:
    try:
        tokens = Lexer(strict=strict).tokenize(source)
        ast = Parser(tokens).parse()
        ir = generate_ir(ast)
    except (ValueError, IndexError) as exc:
        raise IntentParsingError(f"Intent parsing failed: {exc}") from exc

    ir = replace(ir, metadata=replace(ir.metadata, source_line_count=len(source.split("\n"))))
    logger.info("Parsed intent '%s' (complexity %d)", ir.name, ir.metadata.complexity_score)
    return ir
