#!/usr/bin/env python3
"""Rule engine for path inclusion decisions.

This module provides rule-based filtering on top of PathPattern:
- Include/exclude rules with priorities
- Several patterns per rule (any of them matches)
- First-match-wins evaluation
- Default action when no rule matches
- Construction from the ``pathpattern`` configuration section

Example:
    >>> engine = RuleEngine()
    >>> engine.add_rule(Rule(
    ...     action=RuleAction.EXCLUDE,
    ...     patterns=["*.pyc", "**/__pycache__/*"],
    ...     flags=PatternFlags.FULL_PATH,
    ... ))
    >>> engine.should_include("pkg/__pycache__/mod.pyc")
    False
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from pathpattern.core.constants import ConfigKey, FlagsLike, PatternFlags, RuleAction, parse_flags
from pathpattern.core.validators import validate_config
from pathpattern.infrastructure.logger import get_logger
from pathpattern.rules.patterns import PathLike, PathPattern

P = TypeVar("P", bound=PathLike)

logger = get_logger("pathpattern.engine")


@dataclass
class Rule:
    """A rule for path inclusion.

    Rules are evaluated by descending priority. The first rule with a
    matching pattern decides.
    """

    action: RuleAction
    patterns: List[str] = field(default_factory=list)
    flags: FlagsLike = PatternFlags.NONE
    name: Optional[str] = None
    priority: int = 0  # Higher priority evaluated first
    enabled: bool = True


class RuleEngine:
    """Evaluates path inclusion rules.

    Features:
    - First-match-wins precedence
    - Priority-based ordering (stable for equal priorities)
    - Default behavior (include or exclude)
    """

    def __init__(self, default_action: RuleAction = RuleAction.INCLUDE):
        """Initialize rule engine.

        Args:
            default_action: Action to take when no rules match
        """
        # Each rule is stored with its compiled patterns
        self._rules: List[Tuple[Rule, List[PathPattern]]] = []
        self._default_action = default_action

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RuleEngine":
        """Build an engine from a ``pathpattern`` configuration section.

        Rule flags default to the section-level ``flags`` value.

        Args:
            config: Configuration section

        Returns:
            Configured rule engine

        Raises:
            ValidationError: If the configuration is invalid
        """
        validate_config(config)

        default_flags = parse_flags(config.get(ConfigKey.FLAGS))
        default_action = RuleAction(config.get(ConfigKey.DEFAULT_ACTION, RuleAction.INCLUDE.value))
        engine = cls(default_action)

        for entry in config.get(ConfigKey.RULES, []):
            patterns = list(entry.get(ConfigKey.RULE_PATTERNS, []))
            if ConfigKey.RULE_PATTERN in entry:
                patterns.insert(0, entry[ConfigKey.RULE_PATTERN])

            engine.add_rule(
                Rule(
                    action=RuleAction(entry[ConfigKey.RULE_ACTION]),
                    patterns=patterns,
                    flags=parse_flags(entry.get(ConfigKey.RULE_FLAGS, default_flags)),
                    name=entry.get(ConfigKey.RULE_NAME),
                    priority=entry.get(ConfigKey.RULE_PRIORITY, 0),
                    enabled=entry.get(ConfigKey.RULE_ENABLED, True),
                )
            )

        return engine

    def add_rule(self, rule: Rule) -> None:
        """Add rule to engine.

        Args:
            rule: Rule to add

        Raises:
            PatternError: If any of the rule's patterns fails to compile
        """
        # Compile first so a bad pattern leaves the engine unchanged
        compiled = [PathPattern(pattern, rule.flags) for pattern in rule.patterns]

        self._rules.append((rule, compiled))
        self._rules.sort(key=lambda entry: entry[0].priority, reverse=True)

        logger.debug(
            "Rule added",
            rule=rule.name or "<unnamed>",
            action=rule.action.value,
            patterns=len(compiled),
        )

    def remove_rule(self, name: str) -> bool:
        """Remove rule by name.

        Args:
            name: Name of rule to remove

        Returns:
            True if rule was found and removed
        """
        for i, (rule, _) in enumerate(self._rules):
            if rule.name == name:
                self._rules.pop(i)
                return True
        return False

    def clear_rules(self) -> None:
        """Clear all rules."""
        self._rules.clear()

    @staticmethod
    def _matches(patterns: List[PathPattern], path: PathLike) -> bool:
        return any(p.test(path) for p in patterns)

    def should_include(self, path: PathLike) -> bool:
        """Determine if path should be included.

        Args:
            path: Candidate path

        Returns:
            True if the first matching rule includes the path, or no rule
            matches and the default action is include
        """
        for rule, patterns in self._rules:
            if rule.enabled and self._matches(patterns, path):
                return rule.action == RuleAction.INCLUDE

        return self._default_action == RuleAction.INCLUDE

    def filter(self, paths: Iterable[P]) -> Iterator[P]:
        """Lazily yield the paths that should be included."""
        for path in paths:
            if self.should_include(path):
                yield path

    def get_rules(self) -> List[Rule]:
        """Return rules in evaluation order."""
        return [rule for rule, _ in self._rules]

    def get_matching_rules(self, path: PathLike) -> List[Rule]:
        """Return all enabled rules with a pattern matching path."""
        return [r for r, patterns in self._rules if r.enabled and self._matches(patterns, path)]

    def set_default_action(self, action: RuleAction) -> None:
        """Set default action when no rules match."""
        self._default_action = action

    def get_default_action(self) -> RuleAction:
        """Return default action."""
        return self._default_action

    def enable_rule(self, name: str) -> bool:
        """Enable rule by name.

        Returns:
            True if rule was found
        """
        return self._set_enabled(name, True)

    def disable_rule(self, name: str) -> bool:
        """Disable rule by name.

        Returns:
            True if rule was found
        """
        return self._set_enabled(name, False)

    def _set_enabled(self, name: str, enabled: bool) -> bool:
        for rule, _ in self._rules:
            if rule.name == name:
                rule.enabled = enabled
                return True
        return False

    def __len__(self) -> int:
        return len(self._rules)
