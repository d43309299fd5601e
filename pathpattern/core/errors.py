"""
PathPattern Core: Exceptions

Every exception carries an ErrorCode so callers can classify failures
without matching on exception types.
"""
from typing import Optional

from pathpattern.core.constants import ErrorCode


class PatternError(Exception):
    """Base exception for pattern errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize PatternError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class BadArgumentsError(PatternError):
    """Raised when a required pattern or path is missing or of the wrong type."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.BAD_ARGUMENTS)


class BadFormatError(PatternError):
    """Raised when pattern text does not follow the pattern syntax."""

    def __init__(self, message: str, position: Optional[int] = None):
        """Initialize BadFormatError.

        Args:
            message: Error message
            position: Index of the offending character in the pattern text
        """
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message, ErrorCode.BAD_FORMAT)
        self.position = position


class AllocationError(PatternError):
    """Raised when storage for a compiled pattern cannot be allocated."""

    def __init__(self, message: str = "Out of memory while compiling pattern"):
        super().__init__(message, ErrorCode.NO_MEM)
