"""pathpattern - path filtering with a compact pattern language.

Example:
    >>> from pathpattern import PathPattern
    >>> PathPattern("(!*.tmp)").test("notes.txt")
    True
"""

from pathpattern.core.constants import PATHPATTERN_VERSION, ErrorCode, PatternFlags, RuleAction
from pathpattern.core.errors import (
    AllocationError,
    BadArgumentsError,
    BadFormatError,
    PatternError,
)
from pathpattern.rules import PathFilter, PathPattern, Rule, RuleEngine

__version__ = PATHPATTERN_VERSION

__all__ = [
    "PathPattern",
    "PathFilter",
    "PatternFlags",
    "Rule",
    "RuleAction",
    "RuleEngine",
    "ErrorCode",
    "PatternError",
    "BadArgumentsError",
    "BadFormatError",
    "AllocationError",
]
