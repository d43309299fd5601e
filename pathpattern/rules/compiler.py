#!/usr/bin/env python3
"""Compiler turning path pattern tokens into a flat node arena.

Grammar:
    pattern  := sequence
    sequence := term ( term )*
    term     := literal | '?' | '*' | group | split | anypath
    group    := '(' ['!'] alt ')'
    alt      := sequence ( ('&' | '|') sequence )*
    anypath  := '**' split

``&`` and ``|`` share one precedence level and fold strictly left to
right, so ``a&b|c`` compiles as ``(a&b)|c`` and ``a|b&c`` as ``(a|b)&c``.

Nodes live in a tuple and refer to their children by index. A compiled
pattern is immutable and may be shared between threads.

Example:
    >>> compiled = compile_pattern("**/(*.c|*.h)")
    >>> compiled.root_node.kind
    <NodeKind.SEQUENCE: 'sequence'>
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pathpattern.core.constants import Limits, NodeKind
from pathpattern.core.errors import AllocationError, BadFormatError
from pathpattern.rules.tokenizer import Token, TokenType, tokenize


@dataclass(frozen=True)
class Node:
    """A single compiled pattern node."""

    kind: NodeKind
    text: str = ""  # Literal text for MATCH, separator for SPLIT
    folded: Tuple[str, ...] = ()  # Case-folded literal, one entry per code point
    children: Tuple[int, ...] = ()  # Arena indices
    inverted: bool = False  # GROUP only
    multi_segment: bool = False  # GROUP only: child contains separators


@dataclass(frozen=True)
class CompiledPattern:
    """Compiled pattern: node arena plus index of the root sequence."""

    nodes: Tuple[Node, ...]
    root: int

    @property
    def root_node(self) -> Node:
        """Return the root sequence node."""
        return self.nodes[self.root]

    def __len__(self) -> int:
        return len(self.nodes)


_ATOMS = {
    TokenType.ANY_CHAR: NodeKind.ANY_CHAR,
    TokenType.ANY_CHARS: NodeKind.ANY_CHARS,
}

_COMBINATORS = {
    TokenType.AND: NodeKind.AND,
    TokenType.OR: NodeKind.OR,
}


@dataclass
class _Frame:
    """Accumulator for one open group level."""

    position: int
    inverted: bool = False
    items: List[int] = field(default_factory=list)
    operands: List[int] = field(default_factory=list)
    operators: List[Token] = field(default_factory=list)
    multi_segment: bool = False


class _Builder:
    """Appends nodes to the arena and assembles group levels."""

    def __init__(self) -> None:
        self.nodes: List[Node] = []

    def add(self, node: Node) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def sequence(self, items: List[int]) -> int:
        return self.add(Node(NodeKind.SEQUENCE, children=tuple(items)))

    def finish(self, frame: _Frame, end: int, group: bool) -> int:
        """Close a group level and return the index of its expression.

        Args:
            frame: Group level to close
            end: Source position of the closing token (or end of text)
            group: Whether the level is a parenthesized group

        Returns:
            Index of a SEQUENCE, AND or OR node
        """
        if not frame.operators:
            if group and not frame.items:
                raise BadFormatError("Empty group", frame.position)
            return self.sequence(frame.items)

        if not frame.items:
            raise BadFormatError(f"Empty operand after '{frame.operators[-1].value}'", end)
        frame.operands.append(self.sequence(frame.items))

        # Equal precedence, left to right: runs of the same operator share one node
        kind: Optional[NodeKind] = None
        children = [frame.operands[0]]
        for operator, operand in zip(frame.operators, frame.operands[1:]):
            op_kind = _COMBINATORS[operator.type]
            if kind is not None and op_kind != kind:
                children = [self.add(Node(kind, children=tuple(children)))]
            kind = op_kind
            children.append(operand)

        return self.add(Node(kind, children=tuple(children)))


def compile_pattern(text: str) -> CompiledPattern:
    """Compile pattern text.

    Args:
        text: Pattern text

    Returns:
        Compiled pattern whose root is always a SEQUENCE node

    Raises:
        BadFormatError: If the pattern is malformed or too long
        AllocationError: If memory runs out while compiling
    """
    if len(text) > Limits.MAX_PATTERN_LENGTH:
        raise BadFormatError(
            f"Pattern longer than {Limits.MAX_PATTERN_LENGTH} characters", Limits.MAX_PATTERN_LENGTH
        )

    try:
        return _compile(tokenize(text), len(text))
    except MemoryError:
        raise AllocationError() from None


def _compile(tokens: List[Token], length: int) -> CompiledPattern:
    builder = _Builder()
    stack: List[_Frame] = [_Frame(position=0)]

    for token in tokens:
        frame = stack[-1]

        if token.type is TokenType.TEXT:
            folded = tuple(c.casefold() for c in token.value)
            frame.items.append(builder.add(Node(NodeKind.MATCH, text=token.value, folded=folded)))

        elif token.type in _ATOMS:
            frame.items.append(builder.add(Node(_ATOMS[token.type])))

        elif token.type is TokenType.SPLIT:
            frame.items.append(builder.add(Node(NodeKind.SPLIT, text=token.value)))
            frame.multi_segment = True

        elif token.type is TokenType.ANY_PATH:
            frame.items.append(builder.add(Node(NodeKind.ANY_PATH)))
            frame.items.append(builder.add(Node(NodeKind.SPLIT, text=token.value)))
            frame.multi_segment = True

        elif token.type in _COMBINATORS:
            if not frame.items:
                raise BadFormatError(f"Empty operand before '{token.value}'", token.position)
            frame.operands.append(builder.sequence(frame.items))
            frame.operators.append(token)
            frame.items = []

        elif token.type in (TokenType.GROUP_START, TokenType.INVERSE_GROUP_START):
            if len(stack) > Limits.MAX_GROUP_DEPTH:
                raise BadFormatError("Groups nested too deeply", token.position)
            stack.append(
                _Frame(
                    position=token.position,
                    inverted=token.type is TokenType.INVERSE_GROUP_START,
                )
            )

        elif token.type is TokenType.GROUP_END:
            if len(stack) == 1:
                raise BadFormatError("Unbalanced ')'", token.position)
            stack.pop()
            child = builder.finish(frame, token.position, group=True)
            parent = stack[-1]
            parent.items.append(
                builder.add(
                    Node(
                        NodeKind.GROUP,
                        children=(child,),
                        inverted=frame.inverted,
                        multi_segment=frame.multi_segment,
                    )
                )
            )
            parent.multi_segment = parent.multi_segment or frame.multi_segment

    if len(stack) > 1:
        raise BadFormatError("Unterminated group", stack[-1].position)

    top = builder.finish(stack[0], length, group=False)
    if builder.nodes[top].kind is not NodeKind.SEQUENCE:
        top = builder.sequence([top])

    return CompiledPattern(nodes=tuple(builder.nodes), root=top)
