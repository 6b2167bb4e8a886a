"""Recursive-descent parser for intent declarations.

Grammar::

    IntentDecl  := 'intent' IDENT ObjectBody
    ObjectBody  := '{' (KeyValue (',')? )* '}'
    KeyValue    := (IDENT | KEYWORD) ':' Value
    Value       := Array | ObjectBody | STRING | IDENT
    Array       := '[' (STRING (',')? )* ']'

Any mismatch raises `ParseError`; there is no recovery.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from intentc.errors import ParseError
from intentc.models import ASTNode, Token

logger = logging.getLogger(__name__)


def _describe(token: Optional[Token]) -> str:
    if token is None:
        return "end of input"
    return f"{token.kind} '{token.text}'"


class Parser:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        self.position = 0

    def peek(self) -> Optional[Token]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def consume(self) -> Token:
        token = self.peek()
        if token is None:
            line, column = self._end_position()
            raise ParseError("unexpected end of input", line, column)
        self.position += 1
        return token

    def expect(self, kind: str, value: Optional[str] = None) -> Token:
        token = self.peek()
        if token is None or token.kind != kind or (value is not None and token.text != value):
            wanted = f"{kind} '{value}'" if value is not None else kind
            line, column = (token.line, token.column) if token else self._end_position()
            raise ParseError(f"expected {wanted}, got {_describe(token)}", line, column)
        self.position += 1
        return token

    def _end_position(self) -> tuple[int, int]:
        if not self.tokens:
            return 1, 1
        last = self.tokens[-1]
        return last.line, last.column + len(last.text)

    def _at(self, kind: str, value: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind and token.text == value

    def parse(self) -> ASTNode:
        self.expect("keyword", "intent")
        name = self.expect("identifier").text
        body = self.parse_object()
        trailing = self.peek()
        if trailing is not None:
            raise ParseError(f"expected end of input, got {_describe(trailing)}", trailing.line, trailing.column)
        logger.debug("Parsed intent '%s' with keys %s", name, sorted(body))
        return ASTNode(kind="IntentDeclaration", value=name, children=[ASTNode(kind="ObjectBody", value=body)])

    def parse_object(self) -> dict[str, Any]:
        self.expect("brace", "{")
        body: dict[str, Any] = {}
        while not self._at("brace", "}"):
            token = self.peek()
            if token is None or token.kind not in ("identifier", "keyword"):
                line, column = (token.line, token.column) if token else self._end_position()
                raise ParseError(f"expected identifier or brace '}}', got {_describe(token)}", line, column)
            key = self.consume().text
            self.expect("colon")
            body[key] = self.parse_value()
            if self._at("comma", ","):
                self.consume()
        self.expect("brace", "}")
        return body

    def parse_value(self) -> Any:
        token = self.peek()
        if token is not None:
            if token.kind == "array" and token.text == "[":
                return self.parse_array()
            if token.kind == "brace" and token.text == "{":
                return self.parse_object()
            if token.kind in ("string", "identifier"):
                return self.consume().text
        line, column = (token.line, token.column) if token else self._end_position()
        raise ParseError(f"expected value, got {_describe(token)}", line, column)

    def parse_array(self) -> list[str]:
        self.expect("array", "[")
        items: list[str] = []
        while not self._at("array", "]"):
            items.append(self.expect("string").text)
            if self._at("comma", ","):
                self.consume()
        self.expect("array", "]")
        return items


def parse(tokens: Sequence[Token]) -> ASTNode:
    return Parser(tokens).parse()
