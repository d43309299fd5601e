#!/usr/bin/env python3
"""Tests for the pattern tokenizer."""

import pytest

from pathpattern.core.constants import ErrorCode
from pathpattern.core.errors import BadFormatError
from pathpattern.rules.tokenizer import Token, TokenType, tokenize


def types(text):
    return [t.type for t in tokenize(text)]


class TestTokenizeOperators:
    """Tests for operator recognition."""

    def test_empty_pattern(self):
        """Test empty text yields no tokens."""
        assert tokenize("") == []

    def test_literal_run_is_merged(self):
        """Test adjacent literal characters form one token."""
        assert tokenize("name.ext") == [Token(TokenType.TEXT, "name.ext", 0)]

    def test_wildcards(self):
        """Test '?' and '*' tokens."""
        assert types("a?b*") == [
            TokenType.TEXT,
            TokenType.ANY_CHAR,
            TokenType.TEXT,
            TokenType.ANY_CHARS,
        ]

    def test_separators(self):
        """Test both separators become SPLIT tokens."""
        tokens = tokenize("a/b\\c")
        assert [t.type for t in tokens] == [
            TokenType.TEXT,
            TokenType.SPLIT,
            TokenType.TEXT,
            TokenType.SPLIT,
            TokenType.TEXT,
        ]
        assert tokens[1].value == "/"
        assert tokens[3].value == "\\"

    def test_boolean_operators(self):
        """Test '&' and '|' tokens."""
        assert types("a&b|c") == [
            TokenType.TEXT,
            TokenType.AND,
            TokenType.TEXT,
            TokenType.OR,
            TokenType.TEXT,
        ]

    def test_groups(self):
        """Test plain and inverted group starts."""
        assert types("(a)(!b)") == [
            TokenType.GROUP_START,
            TokenType.TEXT,
            TokenType.GROUP_END,
            TokenType.INVERSE_GROUP_START,
            TokenType.TEXT,
            TokenType.GROUP_END,
        ]

    def test_exclamation_outside_group_is_literal(self):
        """Test '!' is only special right after '('."""
        assert tokenize("a!b") == [Token(TokenType.TEXT, "a!b", 0)]

    def test_positions(self):
        """Test tokens record their source positions."""
        tokens = tokenize("ab*(c)")
        assert [t.position for t in tokens] == [0, 2, 3, 4, 5]


class TestTokenizeAnyPath:
    """Tests for '**' handling."""

    @pytest.mark.parametrize("sep", ["/", "\\"])
    def test_any_path_before_separator(self, sep):
        """Test '**' followed by a separator is one ANY_PATH token."""
        tokens = tokenize(f"**{sep}x")
        assert tokens[0] == Token(TokenType.ANY_PATH, sep, 0)
        assert tokens[1] == Token(TokenType.TEXT, "x", 3)

    def test_bare_double_star(self):
        """Test '**' without separator is two ANY_CHARS tokens."""
        assert types("**") == [TokenType.ANY_CHARS, TokenType.ANY_CHARS]
        assert types("a**b") == [
            TokenType.TEXT,
            TokenType.ANY_CHARS,
            TokenType.ANY_CHARS,
            TokenType.TEXT,
        ]

    def test_triple_star_before_separator(self):
        """Test '***/' is '*' followed by '**/'."""
        assert types("***/") == [TokenType.ANY_CHARS, TokenType.ANY_PATH]

    def test_escaped_star_breaks_any_path(self):
        """Test an escaped star does not form '**/'."""
        assert types("*$*/") == [TokenType.ANY_CHARS, TokenType.TEXT, TokenType.SPLIT]


class TestTokenizeEscapes:
    """Tests for escape handling."""

    @pytest.mark.parametrize("char", list("*?$/\\&|()"))
    def test_escape_alphabet(self, char):
        """Test every escapable character becomes a literal."""
        assert tokenize("$" + char) == [Token(TokenType.TEXT, char, 0)]

    def test_escapes_merge_with_literals(self):
        """Test escaped characters join the surrounding literal run."""
        assert tokenize("a$*b$$c") == [Token(TokenType.TEXT, "a*b$c", 0)]

    def test_escaped_run_position(self):
        """Test a run starting with an escape records the escape position."""
        tokens = tokenize("*$(x")
        assert tokens[1] == Token(TokenType.TEXT, "(x", 1)

    def test_dangling_escape(self):
        """Test '$' at the end of the pattern is rejected."""
        with pytest.raises(BadFormatError) as exc_info:
            tokenize("abc$")
        assert exc_info.value.error_code == ErrorCode.BAD_FORMAT
        assert exc_info.value.position == 3

    def test_invalid_escape(self):
        """Test '$' followed by an ordinary character is rejected."""
        with pytest.raises(BadFormatError) as exc_info:
            tokenize("a$b")
        assert exc_info.value.position == 1
        assert "$b" in str(exc_info.value)
