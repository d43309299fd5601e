#!/usr/bin/env python3
"""Public path pattern API.

This module provides the user-facing pattern objects:
- PathPattern: compiled pattern with flags and atomic replacement
- PathFilter: include/exclude composition of path patterns

Pattern syntax:
    *             - Any character sequence within one segment
    ?             - Any single character except a separator
    / or \\        - Path separator
    $/            - Escaped character ('*', '?', '$', '/', '\\', '&', '|', '(', ')')
    name.ext      - Strict match of characters
    ... & ...     - Conjunction of two conditions
    ... | ...     - Disjunction of two conditions
    **/ or **\\    - Any path (zero or more whole segments)
    ( ... )       - Pattern group
    (! ... )      - Pattern group with inverse condition

Example:
    >>> pattern = PathPattern("**/((*.c|*.h)&(test-*))", PatternFlags.FULL_PATH)
    >>> pattern.test("src/test-main.c")
    True
    >>> pattern.test("src/main.c")
    False
"""

import os
from typing import Iterable, Iterator, List, Optional, TypeVar, Union

from pathpattern.core.constants import FlagsLike, PatternFlags, parse_flags
from pathpattern.core.errors import BadArgumentsError, PatternError
from pathpattern.infrastructure.logger import get_logger
from pathpattern.rules.compiler import CompiledPattern, compile_pattern
from pathpattern.rules.matcher import match_path

PathLike = Union[str, "os.PathLike[str]"]
P = TypeVar("P", bound=PathLike)

logger = get_logger("pathpattern.patterns")


def _as_text(value: object, what: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, os.PathLike):
        text = os.fspath(value)
        if isinstance(text, str):
            return text
    raise BadArgumentsError(f"Invalid {what}: expected str or path, got {type(value).__name__}")


def _flags(value: FlagsLike) -> PatternFlags:
    try:
        return parse_flags(value)
    except ValueError as e:
        raise BadArgumentsError(str(e)) from None


class PathPattern:
    """Compiled path pattern with global flags.

    An instance starts uncompiled: test() returns False until set()
    succeeds. A failed set() leaves the previous pattern, text and flags
    untouched.

    test() only reads state, so concurrent readers are safe as long as no
    set(), set_flags() or swap() runs at the same time. The class does no
    locking of its own.
    """

    def __init__(
        self,
        pattern: Optional[Union[PathLike, "PathPattern"]] = None,
        flags: FlagsLike = PatternFlags.NONE,
    ):
        """Initialize pattern.

        Args:
            pattern: Optional pattern text to compile immediately
            flags: Pattern flags

        Raises:
            PatternError: If pattern is given and fails to compile
        """
        self._compiled: Optional[CompiledPattern] = None
        self._text = ""
        self._flags = _flags(flags)

        if pattern is not None:
            self.set(pattern, flags)

    def set(
        self, pattern: Union[PathLike, "PathPattern"], flags: FlagsLike = PatternFlags.NONE
    ) -> None:
        """Compile pattern and replace the current one.

        Args:
            pattern: Pattern text, path object, or another PathPattern whose
                text and flags are copied (flags is then ignored)
            flags: Pattern flags

        Raises:
            BadArgumentsError: If pattern is None or of an unsupported type
            BadFormatError: If the pattern text is malformed
            AllocationError: If memory runs out during compilation
        """
        if pattern is None:
            raise BadArgumentsError("Pattern must not be None")

        if isinstance(pattern, PathPattern):
            text, new_flags = pattern._text, pattern._flags
        else:
            text, new_flags = _as_text(pattern, "pattern"), _flags(flags)

        try:
            compiled = compile_pattern(text)
        except PatternError as e:
            logger.debug(
                "Pattern rejected",
                pattern=text,
                error_code=e.error_code.name,
                position=getattr(e, "position", None),
            )
            raise

        self._compiled, self._text, self._flags = compiled, text, new_flags
        logger.debug("Pattern compiled", pattern=text, nodes=len(compiled), flags=int(new_flags))

    def set_pattern(self, pattern: Union[PathLike, "PathPattern"]) -> None:
        """Compile new pattern text keeping the current flags.

        Args:
            pattern: Pattern text, path object, or PathPattern (text only)
        """
        if isinstance(pattern, PathPattern):
            pattern = pattern._text
        self.set(pattern, self._flags)

    def set_flags(self, flags: FlagsLike) -> PatternFlags:
        """Replace flags without recompiling.

        Args:
            flags: New pattern flags

        Returns:
            Previous flags
        """
        new_flags = _flags(flags)
        previous, self._flags = self._flags, new_flags
        return previous

    @property
    def flags(self) -> PatternFlags:
        """Current pattern flags."""
        return self._flags

    @property
    def is_compiled(self) -> bool:
        """True once set() has succeeded."""
        return self._compiled is not None

    @property
    def compiled(self) -> Optional[CompiledPattern]:
        """Compiled node arena, or None when uncompiled."""
        return self._compiled

    def pattern(self) -> str:
        """Return the pattern text exactly as supplied to set()."""
        return self._text

    def test(self, path: PathLike) -> bool:
        """Check whether path matches.

        Args:
            path: Candidate path (str or path object)

        Returns:
            Match verdict; always False while uncompiled

        Raises:
            BadArgumentsError: If path is None or of an unsupported type
        """
        if path is None:
            raise BadArgumentsError("Path must not be None")
        text = _as_text(path, "path")

        compiled = self._compiled
        if compiled is None:
            return False
        return match_path(compiled, text, self._flags)

    def filter(self, paths: Iterable[P]) -> Iterator[P]:
        """Lazily yield the paths that match.

        Args:
            paths: Candidate paths, possibly an unbounded iterator

        Yields:
            Matching paths in input order
        """
        for path in paths:
            if self.test(path):
                yield path

    def swap(self, other: "PathPattern") -> None:
        """Exchange compiled state, text and flags with another pattern.

        Args:
            other: Pattern to swap with
        """
        if not isinstance(other, PathPattern):
            raise BadArgumentsError(f"Cannot swap with {type(other).__name__}")
        self._compiled, other._compiled = other._compiled, self._compiled
        self._text, other._text = other._text, self._text
        self._flags, other._flags = other._flags, self._flags

    def copy(self) -> "PathPattern":
        """Return an independent pattern sharing the immutable compiled tree."""
        clone = PathPattern()
        clone._compiled, clone._text, clone._flags = self._compiled, self._text, self._flags
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPattern):
            return NotImplemented
        return (
            self.is_compiled == other.is_compiled
            and self._text == other._text
            and self._flags == other._flags
        )

    # Mutable: set(), set_flags() and swap() change equality
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self.is_compiled:
            return "PathPattern()"
        return f"PathPattern({self._text!r}, {self._flags!r})"


class PathFilter:
    """Include/exclude composition of path patterns.

    Logic:
    1. If the path matches any exclude pattern → False
    2. If there are no include patterns → True (default allow)
    3. If the path matches any include pattern → True
    4. Otherwise → False
    """

    def __init__(self, flags: FlagsLike = PatternFlags.NONE):
        """Initialize filter.

        Args:
            flags: Default flags for patterns added as text
        """
        self._flags = _flags(flags)
        self._include: List[PathPattern] = []
        self._exclude: List[PathPattern] = []

    def _make(self, pattern: Union[PathLike, PathPattern], flags: FlagsLike) -> PathPattern:
        if isinstance(pattern, PathPattern):
            return pattern
        return PathPattern(pattern, self._flags if flags is None else flags)

    def add_include_pattern(
        self, pattern: Union[PathLike, PathPattern], flags: FlagsLike = None
    ) -> PathPattern:
        """Add include pattern.

        Args:
            pattern: Pattern text or compiled PathPattern
            flags: Flags override for pattern text

        Returns:
            The added PathPattern
        """
        compiled = self._make(pattern, flags)
        self._include.append(compiled)
        return compiled

    def add_exclude_pattern(
        self, pattern: Union[PathLike, PathPattern], flags: FlagsLike = None
    ) -> PathPattern:
        """Add exclude pattern.

        Args:
            pattern: Pattern text or compiled PathPattern
            flags: Flags override for pattern text

        Returns:
            The added PathPattern
        """
        compiled = self._make(pattern, flags)
        self._exclude.append(compiled)
        return compiled

    def matches(self, path: PathLike) -> bool:
        """Check if path should be included.

        Args:
            path: Candidate path

        Returns:
            True if path should be included
        """
        if any(p.test(path) for p in self._exclude):
            return False

        if not self._include:
            return True

        return any(p.test(path) for p in self._include)

    def filter(self, paths: Iterable[P]) -> Iterator[P]:
        """Lazily yield the paths that pass the filter."""
        for path in paths:
            if self.matches(path):
                yield path

    def get_include_patterns(self) -> List[PathPattern]:
        """Return a copy of the include patterns."""
        return self._include.copy()

    def get_exclude_patterns(self) -> List[PathPattern]:
        """Return a copy of the exclude patterns."""
        return self._exclude.copy()

    def clear(self) -> None:
        """Clear all patterns."""
        self._include.clear()
        self._exclude.clear()

    def __len__(self) -> int:
        return len(self._include) + len(self._exclude)
