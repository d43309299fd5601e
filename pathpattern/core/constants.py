"""
PathPattern Core: Constants and Type Definitions

This module provides library-wide constants, error codes, pattern flags
and the node kinds of the compiled pattern tree.
"""
from enum import Enum, IntEnum, IntFlag
from typing import Iterable, TypeAlias, Union

# Version information
PATHPATTERN_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for pattern operations."""

    SUCCESS = 0  # Operation completed successfully
    BAD_ARGUMENTS = 1  # Missing pattern or candidate path
    BAD_FORMAT = 2  # Pattern syntax error
    NO_MEM = 3  # Could not allocate compiled pattern
    NOT_FOUND = 4  # Configuration file doesn't exist
    INVALID_INPUT = 5  # Invalid configuration value
    INTERNAL_ERROR = 6  # Bug in pathpattern


class PatternFlags(IntFlag):
    """Global modifiers applied when a compiled pattern is evaluated."""

    NONE = 0
    INVERSIVE = 1 << 0  # Negate the final verdict
    CASE_SENSITIVE = 1 << 1  # Exact code point comparison of literals
    FULL_PATH = 1 << 2  # Match the whole path instead of the basename


class NodeKind(Enum):
    """Kinds of nodes in a compiled pattern."""

    SEQUENCE = "sequence"  # cmd1 cmd2 ...
    AND = "and"  # ... & ...
    OR = "or"  # ... | ...
    MATCH = "match"  # literal text
    ANY_CHAR = "any_char"  # ?
    ANY_CHARS = "any_chars"  # *
    ANY_PATH = "any_path"  # **/
    SPLIT = "split"  # / or \
    GROUP = "group"  # ( ... ) or (! ... )


class RuleAction(Enum):
    """Action to take when a rule matches."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


# Type aliases for clarity
FlagsLike: TypeAlias = Union[PatternFlags, int, str, Iterable[str], None]

# Pattern syntax
PATH_SEPARATORS = frozenset(("/", "\\"))
ESCAPE_CHAR = "$"
ESCAPABLE_CHARS = frozenset("*?$/\\&|()")
INVERSE_MARK = "!"


class Limits:
    """Resource limits and default values."""

    MAX_PATTERN_LENGTH = 4096
    MAX_GROUP_DEPTH = 32  # each level costs several matcher stack frames


class ConfigKey:
    """Configuration key constants."""

    ROOT = "pathpattern"
    VERSION = "version"
    FLAGS = "flags"
    DEFAULT_ACTION = "default_action"
    RULES = "rules"
    LOGGING = "logging"

    # Rule configuration
    RULE_NAME = "name"
    RULE_ACTION = "action"
    RULE_PATTERN = "pattern"
    RULE_PATTERNS = "patterns"
    RULE_FLAGS = "flags"
    RULE_PRIORITY = "priority"
    RULE_ENABLED = "enabled"


DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        ConfigKey.VERSION: "1.0",
        ConfigKey.FLAGS: [],
        ConfigKey.DEFAULT_ACTION: RuleAction.INCLUDE.value,
        ConfigKey.RULES: [],
        ConfigKey.LOGGING: {
            "level": "INFO",
            "file": None,
        },
    }
}


def parse_flags(value: FlagsLike) -> PatternFlags:
    """Convert a flag specification into PatternFlags.

    Accepts a PatternFlags value, a plain integer bit mask, a flag name
    ("full_path", "FULL_PATH", "case-sensitive") or an iterable of names.

    Args:
        value: Flag specification

    Returns:
        Combined pattern flags

    Raises:
        ValueError: If a flag name is unknown or the mask has unknown bits
    """
    if value is None:
        return PatternFlags.NONE

    if isinstance(value, PatternFlags):
        return value

    if isinstance(value, bool):
        raise ValueError(f"Invalid pattern flags: {value!r}")

    if isinstance(value, int):
        known = PatternFlags.INVERSIVE | PatternFlags.CASE_SENSITIVE | PatternFlags.FULL_PATH
        if value < 0 or value & ~int(known):
            raise ValueError(f"Invalid pattern flags: {value!r}")
        return PatternFlags(value)

    if isinstance(value, str):
        value = [value]

    result = PatternFlags.NONE
    for name in value:
        if not isinstance(name, str):
            raise ValueError(f"Invalid pattern flag: {name!r}")
        key = name.strip().upper().replace("-", "_")
        try:
            result |= PatternFlags[key]
        except KeyError:
            valid = [f.name.lower() for f in PatternFlags if f.name]
            raise ValueError(f"Unknown pattern flag: {name}. Must be one of {valid}")

    return result
