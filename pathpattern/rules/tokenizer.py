#!/usr/bin/env python3
"""Tokenizer for path pattern text.

Scans raw pattern text left to right and produces operator tokens and
literal runs. The escape character ``$`` turns the next character of the
escape alphabet (``* ? $ / \\ & | ( )``) into a plain literal.

Example:
    >>> [t.type.name for t in tokenize("**/$*.c")]
    ['ANY_PATH', 'TEXT']
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from pathpattern.core.constants import (
    ESCAPABLE_CHARS,
    ESCAPE_CHAR,
    INVERSE_MARK,
    PATH_SEPARATORS,
)
from pathpattern.core.errors import BadFormatError


class TokenType(Enum):
    """Pattern token type."""

    TEXT = "text"  # Literal run, escapes resolved
    ANY_CHAR = "any_char"  # ?
    ANY_CHARS = "any_chars"  # *
    ANY_PATH = "any_path"  # **/ or **\
    SPLIT = "split"  # / or \
    AND = "and"  # &
    OR = "or"  # |
    GROUP_START = "group_start"  # (
    INVERSE_GROUP_START = "inverse_group_start"  # (!
    GROUP_END = "group_end"  # )


@dataclass(frozen=True)
class Token:
    """A single token with its source position."""

    type: TokenType
    value: str
    position: int


_SIMPLE_TOKENS = {
    "?": TokenType.ANY_CHAR,
    "&": TokenType.AND,
    "|": TokenType.OR,
    ")": TokenType.GROUP_END,
}


def tokenize(text: str) -> List[Token]:
    """Split pattern text into tokens.

    Args:
        text: Raw pattern text

    Returns:
        List of tokens in source order

    Raises:
        BadFormatError: On a dangling or invalid escape sequence
    """
    tokens: List[Token] = []
    literal: List[str] = []
    literal_start = 0
    length = len(text)
    i = 0

    def flush() -> None:
        if literal:
            tokens.append(Token(TokenType.TEXT, "".join(literal), literal_start))
            literal.clear()

    while i < length:
        c = text[i]

        if c == ESCAPE_CHAR:
            if i + 1 >= length:
                raise BadFormatError("Dangling escape character at end of pattern", i)
            escaped = text[i + 1]
            if escaped not in ESCAPABLE_CHARS:
                raise BadFormatError(f"Invalid escape sequence '{c}{escaped}'", i)
            if not literal:
                literal_start = i
            literal.append(escaped)
            i += 2
            continue

        if c == "*":
            flush()
            if i + 2 < length and text[i + 1] == "*" and text[i + 2] in PATH_SEPARATORS:
                tokens.append(Token(TokenType.ANY_PATH, text[i + 2], i))
                i += 3
            else:
                tokens.append(Token(TokenType.ANY_CHARS, c, i))
                i += 1
            continue

        if c in PATH_SEPARATORS:
            flush()
            tokens.append(Token(TokenType.SPLIT, c, i))
            i += 1
            continue

        if c == "(":
            flush()
            if i + 1 < length and text[i + 1] == INVERSE_MARK:
                tokens.append(Token(TokenType.INVERSE_GROUP_START, text[i : i + 2], i))
                i += 2
            else:
                tokens.append(Token(TokenType.GROUP_START, c, i))
                i += 1
            continue

        token_type = _SIMPLE_TOKENS.get(c)
        if token_type is not None:
            flush()
            tokens.append(Token(token_type, c, i))
            i += 1
            continue

        if not literal:
            literal_start = i
        literal.append(c)
        i += 1

    flush()
    return tokens
