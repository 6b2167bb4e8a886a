from __future__ import annotations

import logging

from intentc.errors import LexError
from intentc.models import Token

logger = logging.getLogger(__name__)

KEYWORDS = frozenset({"intent", "goal", "capabilities", "constraints", "architecture", "success_criteria"})

SINGLE_CHAR_KINDS = {
    "{": "brace",
    "}": "brace",
    "[": "array",
    "]": "array",
    ":": "colon",
    ",": "comma",
}

QUOTES = ("'", '"')


def _is_ident_start(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_ident_char(char: str) -> bool:
    return _is_ident_start(char) or ("0" <= char <= "9")


class Lexer:
    """Hand-written scanner for intent source text.

    In the default lenient mode unknown characters are dropped (and logged) and
    an unterminated string runs to end of input. With ``strict=True`` both
    raise `LexError`.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def tokenize(self, source: str) -> list[Token]:
        tokens: list[Token] = []
        dropped = 0
        line = 1
        column = 1
        i = 0
        length = len(source)

        while i < length:
            char = source[i]

            if char in (" ", "\t", "\r"):
                i += 1
                column += 1
                continue

            if char == "\n":
                i += 1
                line += 1
                column = 1
                continue

            if char == "#":
                while i < length and source[i] != "\n":
                    i += 1
                continue

            kind = SINGLE_CHAR_KINDS.get(char)
            if kind is not None:
                tokens.append(Token(kind, char, line, column))
                i += 1
                column += 1
                continue

            if char in QUOTES:
                start_line, start_column = line, column
                chars: list[str] = []
                i += 1
                column += 1
                terminated = False
                while i < length:
                    current = source[i]
                    if current == char:
                        terminated = True
                        i += 1
                        column += 1
                        break
                    if current == "\\" and i + 1 < length:
                        current = source[i + 1]
                        i += 2
                        column += 2
                    else:
                        i += 1
                        column += 1
                    chars.append(current)
                    if current == "\n":
                        line += 1
                        column = 1
                if not terminated:
                    if self.strict:
                        raise LexError("unterminated string literal", start_line, start_column)
                    logger.warning("Unterminated string starting at %d:%d", start_line, start_column)
                tokens.append(Token("string", "".join(chars), start_line, start_column))
                continue

            if _is_ident_start(char):
                start = i
                start_column = column
                while i < length and _is_ident_char(source[i]):
                    i += 1
                    column += 1
                text = source[start:i]
                tokens.append(Token("keyword" if text in KEYWORDS else "identifier", text, line, start_column))
                continue

            if self.strict:
                raise LexError(f"unexpected character {char!r}", line, column)
            logger.warning("Dropping unexpected character %r at %d:%d", char, line, column)
            dropped += 1
            i += 1
            column += 1

        logger.debug("Tokenized %d tokens (%d characters dropped)", len(tokens), dropped)
        return tokens


def tokenize(source: str, strict: bool = False) -> list[Token]:
    return Lexer(strict=strict).tokenize(source)
