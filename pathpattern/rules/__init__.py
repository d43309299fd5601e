"""PathPattern Rules System.

This package provides the pattern engine and path filtering:
- tokenizer: escape handling and operator tokens
- compiler: pattern text to node arena
- matcher: evaluation of compiled patterns against paths
- PathPattern / PathFilter: public pattern objects
- RuleEngine: prioritized include/exclude rules
"""

from .compiler import CompiledPattern, Node, compile_pattern
from .engine import Rule, RuleEngine
from .matcher import PathMatcher, basename, match_path, match_segment, split_path
from .patterns import PathFilter, PathPattern
from .tokenizer import Token, TokenType, tokenize

__all__ = [
    # Tokenizer
    "Token",
    "TokenType",
    "tokenize",
    # Compiler
    "Node",
    "CompiledPattern",
    "compile_pattern",
    # Matcher
    "PathMatcher",
    "match_segment",
    "match_path",
    "split_path",
    "basename",
    # Public API
    "PathPattern",
    "PathFilter",
    # Rule engine
    "Rule",
    "RuleEngine",
]
