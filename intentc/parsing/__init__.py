from .ir import generate_ir, parse_intent, validate_ir
from .lexer import KEYWORDS, Lexer, tokenize
from .parser import Parser, parse

__all__ = [
    "KEYWORDS",
    "Lexer",
    "Parser",
    "generate_ir",
    "parse",
    "parse_intent",
    "tokenize",
    "validate_ir",
]
