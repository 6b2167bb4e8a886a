from __future__ import annotations


class IntentcError(Exception):
    """Base class for every error raised by the compiler."""


class LexError(IntentcError, ValueError):
    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Lex error at {line}:{column}: {message}")
        self.line = line
        self.column = column


class ParseError(IntentcError, ValueError):
    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Parse error at {line}:{column}: {message}")
        self.line = line
        self.column = column


class IntentParsingError(IntentcError, ValueError):
    """Raised by `parse_intent` for any lexer, parser or lowering failure."""


class PlanningError(IntentcError, RuntimeError):
    """A plan could not be built from a structurally valid IR."""
