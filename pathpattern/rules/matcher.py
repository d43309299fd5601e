#!/usr/bin/env python3
"""Evaluation of compiled path patterns against candidate paths.

Matching works on positions in the candidate text. Every node maps a
start position to the set of end positions it can reach, so AND and OR
operands are always compared over identical spans:

- Runs of literals, ``?`` and ``*`` are matched by a dynamic programming
  table (one row per pattern atom, one column per text position).
- ``**/`` reaches the start position and every position right after a
  path separator.
- Results are memoized per (node index, start position), which keeps
  nested groups and repeated ``**/`` polynomial in the path length.

Example:
    >>> compiled = compile_pattern("**/test-*")
    >>> match_path(compiled, "a/b/test-2", PatternFlags.FULL_PATH)
    True
"""

import re
from bisect import bisect_left
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from pathpattern.core.constants import PATH_SEPARATORS, NodeKind, PatternFlags
from pathpattern.rules.compiler import CompiledPattern, Node

_SEPARATOR_RE = re.compile(r"[/\\]")

# Node kinds handled by the segment matcher
_SEGMENT_ATOMS = frozenset((NodeKind.MATCH, NodeKind.ANY_CHAR, NodeKind.ANY_CHARS))


def split_path(path: str) -> List[str]:
    """Split path into segments on '/' and '\\'.

    Args:
        path: Candidate path

    Returns:
        Segments in order; empty segments are kept
    """
    return _SEPARATOR_RE.split(path)


def basename(path: str) -> str:
    """Return the last segment of path."""
    return split_path(path)[-1]


def match_segment(
    nodes: Sequence[Node],
    atoms: Sequence[int],
    text: str,
    starts: Iterable[int],
    case_sensitive: bool,
    folded: Optional[Tuple[str, ...]] = None,
) -> Set[int]:
    """Match a run of literal and wildcard atoms.

    Wildcards never consume a path separator. Literal comparison is exact
    when case_sensitive is set, otherwise code points are compared after
    case folding.

    Args:
        nodes: Node arena
        atoms: Indices of MATCH, ANY_CHAR and ANY_CHARS nodes
        text: Candidate text
        starts: Positions in text where the run may begin
        case_sensitive: Exact literal comparison
        folded: Case-folded text, one entry per code point

    Returns:
        Positions in text where the run can end
    """
    length = len(text)
    row = [False] * (length + 1)
    for start in starts:
        row[start] = True

    if not case_sensitive and folded is None:
        folded = tuple(c.casefold() for c in text)

    for index in atoms:
        node = nodes[index]
        new_row = [False] * (length + 1)

        if node.kind is NodeKind.MATCH:
            size = len(node.text)
            for p in range(length - size + 1):
                if not row[p]:
                    continue
                if case_sensitive:
                    hit = text.startswith(node.text, p)
                else:
                    hit = folded[p : p + size] == node.folded
                if hit:
                    new_row[p + size] = True

        elif node.kind is NodeKind.ANY_CHAR:
            for p in range(length):
                if row[p] and text[p] not in PATH_SEPARATORS:
                    new_row[p + 1] = True

        elif node.kind is NodeKind.ANY_CHARS:
            for p in range(length + 1):
                new_row[p] = row[p] or (
                    p > 0 and new_row[p - 1] and text[p - 1] not in PATH_SEPARATORS
                )

        else:
            raise ValueError(f"Not a segment atom: {node.kind}")

        if not any(new_row):
            return set()
        row = new_row

    return {p for p, reached in enumerate(row) if reached}


class PathMatcher:
    """Evaluates one compiled pattern against one candidate text.

    Instances hold the per-call memo table and are not meant to be reused
    for other texts.
    """

    def __init__(self, compiled: CompiledPattern, text: str, case_sensitive: bool = False):
        """Initialize matcher.

        Args:
            compiled: Compiled pattern
            text: Candidate text (full path or basename)
            case_sensitive: Exact literal comparison
        """
        self._nodes = compiled.nodes
        self._root = compiled.root
        self._text = text
        self._length = len(text)
        self._case_sensitive = case_sensitive
        self._folded = None if case_sensitive else tuple(c.casefold() for c in text)
        self._separators = [i for i, c in enumerate(text) if c in PATH_SEPARATORS]
        self._memo: Dict[Tuple[int, int], FrozenSet[int]] = {}

    def matches(self) -> bool:
        """Return True if the whole text matches the pattern."""
        return self._length in self.ends(self._root, 0)

    def ends(self, index: int, start: int) -> FrozenSet[int]:
        """Return end positions reachable by node index from start.

        Args:
            index: Node index in the arena
            start: Start position in the text

        Returns:
            Set of end positions
        """
        key = (index, start)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        node = self._nodes[index]

        if node.kind is NodeKind.SEQUENCE:
            result = frozenset(self._sequence(node.children, {start}))
        elif node.kind is NodeKind.AND:
            result = self.ends(node.children[0], start)
            for child in node.children[1:]:
                if not result:
                    break
                result = result & self.ends(child, start)
        elif node.kind is NodeKind.OR:
            result = frozenset().union(*(self.ends(child, start) for child in node.children))
        elif node.kind is NodeKind.GROUP:
            result = self._group(node, start)
        else:
            result = frozenset(self._sequence((index,), {start}))

        self._memo[key] = result
        return result

    def _group(self, node: Node, start: int) -> FrozenSet[int]:
        matched = self.ends(node.children[0], start)
        if not node.inverted:
            return matched

        # Single-segment groups are complemented within the current segment
        limit = self._length
        if not node.multi_segment:
            pos = bisect_left(self._separators, start)
            if pos < len(self._separators):
                limit = self._separators[pos]

        return frozenset(range(start, limit + 1)) - matched

    def _sequence(self, children: Sequence[int], starts: Set[int]) -> Set[int]:
        positions = starts
        count = len(children)
        i = 0

        while i < count and positions:
            kind = self._nodes[children[i]].kind

            if kind in _SEGMENT_ATOMS:
                j = i + 1
                while j < count and self._nodes[children[j]].kind in _SEGMENT_ATOMS:
                    j += 1
                positions = match_segment(
                    self._nodes,
                    children[i:j],
                    self._text,
                    positions,
                    self._case_sensitive,
                    self._folded,
                )
                i = j

            elif kind is NodeKind.ANY_PATH:
                # The SPLIT that follows is part of the operator
                positions = self._any_path(positions)
                i += 2

            elif kind is NodeKind.SPLIT:
                positions = {
                    p + 1
                    for p in positions
                    if p < self._length and self._text[p] in PATH_SEPARATORS
                }
                i += 1

            else:
                positions = set().union(*(self.ends(children[i], p) for p in positions))
                i += 1

        return positions

    def _any_path(self, positions: Set[int]) -> Set[int]:
        result = set(positions)
        first = bisect_left(self._separators, min(positions))
        result.update(k + 1 for k in self._separators[first:])
        return result


def match_path(
    compiled: CompiledPattern, path: str, flags: PatternFlags = PatternFlags.NONE
) -> bool:
    """Evaluate a compiled pattern against a candidate path.

    Args:
        compiled: Compiled pattern
        path: Candidate path
        flags: Pattern flags

    Returns:
        Final verdict with INVERSIVE applied
    """
    text = path if flags & PatternFlags.FULL_PATH else basename(path)
    matcher = PathMatcher(compiled, text, bool(flags & PatternFlags.CASE_SENSITIVE))
    verdict = matcher.matches()

    if flags & PatternFlags.INVERSIVE:
        return not verdict
    return verdict
