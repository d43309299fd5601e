"""
PathPattern Core: Input Validators.

Validation functions for pattern text, flags and the ``pathpattern``
configuration section.
"""
from typing import Any, Dict

from pathpattern.core.constants import ConfigKey, ErrorCode, RuleAction, parse_flags
from pathpattern.core.errors import PatternError


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_pattern(pattern: Any) -> bool:
    """Check that pattern is text that compiles.

    Args:
        pattern: Pattern text

    Returns:
        True if the pattern compiles, False otherwise
    """
    # Deferred to avoid an import cycle through pathpattern.rules
    from pathpattern.rules.compiler import compile_pattern

    if not isinstance(pattern, str):
        return False

    try:
        compile_pattern(pattern)
    except PatternError:
        return False

    return True


def validate_flags(flags: Any) -> bool:
    """Validate a flag specification.

    Args:
        flags: Flag name, list of names or integer mask

    Returns:
        True if valid

    Raises:
        ValidationError: If flags are invalid
    """
    try:
        parse_flags(flags)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid flags: {e}")
    return True


def validate_action(action: Any) -> bool:
    """Validate a rule action.

    Raises:
        ValidationError: If action is not a known RuleAction value
    """
    try:
        RuleAction(action)
    except ValueError:
        valid_actions = [a.value for a in RuleAction]
        raise ValidationError(f"Invalid rule action: {action}. Must be one of {valid_actions}")
    return True


def validate_rule_config(rule: Dict[str, Any]) -> bool:
    """Validate rule configuration.

    Args:
        rule: Rule configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If rule is invalid
    """
    if not isinstance(rule, dict):
        raise ValidationError("Rule must be a dictionary")

    # Required field: action
    if ConfigKey.RULE_ACTION not in rule:
        raise ValidationError("Rule must have 'action' field")
    validate_action(rule[ConfigKey.RULE_ACTION])

    # Must have pattern or patterns
    has_pattern = ConfigKey.RULE_PATTERN in rule
    has_patterns = ConfigKey.RULE_PATTERNS in rule

    if not has_pattern and not has_patterns:
        raise ValidationError("Rule must have 'pattern' or 'patterns' field")

    if has_pattern and not validate_pattern(rule[ConfigKey.RULE_PATTERN]):
        raise ValidationError(
            f"Invalid pattern: {rule[ConfigKey.RULE_PATTERN]}", ErrorCode.BAD_FORMAT
        )

    if has_patterns:
        patterns = rule[ConfigKey.RULE_PATTERNS]
        if not isinstance(patterns, list):
            raise ValidationError("Patterns must be a list")

        for pattern in patterns:
            if not validate_pattern(pattern):
                raise ValidationError(f"Invalid pattern in list: {pattern}", ErrorCode.BAD_FORMAT)

    if ConfigKey.RULE_FLAGS in rule:
        validate_flags(rule[ConfigKey.RULE_FLAGS])

    if ConfigKey.RULE_PRIORITY in rule:
        priority = rule[ConfigKey.RULE_PRIORITY]
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise ValidationError(f"Rule priority must be integer: {priority}")

    if ConfigKey.RULE_ENABLED in rule:
        enabled = rule[ConfigKey.RULE_ENABLED]
        if not isinstance(enabled, bool):
            raise ValidationError(f"Rule enabled must be boolean: {enabled}")

    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate the ``pathpattern`` configuration section.

    Args:
        config: Configuration section dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    if ConfigKey.FLAGS in config:
        validate_flags(config[ConfigKey.FLAGS])

    if ConfigKey.DEFAULT_ACTION in config:
        validate_action(config[ConfigKey.DEFAULT_ACTION])

    if ConfigKey.RULES in config:
        rules = config[ConfigKey.RULES]
        if not isinstance(rules, list):
            raise ValidationError("Rules must be a list")

        for i, rule in enumerate(rules):
            try:
                validate_rule_config(rule)
            except ValidationError as e:
                raise ValidationError(f"Invalid rule configuration at index {i}: {e}", e.error_code)

    if ConfigKey.LOGGING in config:
        logging_config = config[ConfigKey.LOGGING]
        if not isinstance(logging_config, dict):
            raise ValidationError("Logging configuration must be a dictionary")
        level = logging_config.get("level")
        if level is not None and str(level).upper() not in (
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ):
            raise ValidationError(f"Invalid log level: {level}")

    return True
