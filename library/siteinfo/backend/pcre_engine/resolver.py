# pcre_engine/resolver.py
#
# Group 1 of a link trail pattern -> the set of characters a link trail may
# consist of. Everything here is a pure function of (node, modifiers).

import logging
from typing import FrozenSet, Optional, Sequence

from .ast import (
    RegexNode, Literal, EscapedClass, CharacterClass,
    Group, Repeated, Alternation,
)
from .exceptions import (
    BoundedRepetitionError, MissingGroupError, MultiCharacterSequenceError,
    UnresolvableClassError, UnsupportedRepetitionBodyError, UnsupportedSyntaxError,
)
from .modifiers import Modifiers
from .parser import Pattern

logger = logging.getLogger(__name__)


# =========================================================
# Group extraction
# =========================================================

def extract_group(pattern: Pattern, index: int = 1) -> Group:
    """Depth-first, source-order search for capture group `index`."""
    found = find_group(pattern.nodes, index)
    if found is None:
        raise MissingGroupError(pattern.source, index)
    return found


def find_group(nodes: Sequence[RegexNode], index: int) -> Optional[Group]:
    for node in nodes:
        hit = find_group_in(node, index)
        if hit is not None:
            return hit
    return None


def find_group_in(n: RegexNode, index: int) -> Optional[Group]:
    if isinstance(n, Group):
        if n.index == index:
            return n
        return find_group(n.body, index)
    if isinstance(n, Repeated):
        return find_group_in(n.body, index)
    if isinstance(n, Alternation):
        for branch in n.branches:
            hit = find_group(branch, index)
            if hit is not None:
                return hit
        return None
    if isinstance(n, (Literal, EscapedClass, CharacterClass)):
        return None

    raise TypeError(f"Unknown AST node type: {type(n)}")


# =========================================================
# Resolution
# =========================================================

def resolve(node: RegexNode, modifiers: Modifiers, pattern: str = "") -> FrozenSet[str]:
    """
    Resolve a group (normally capture group 1) into a flat character set.

    Accepted shapes, after unwrapping single-node groups:
      ()                 -> empty set
      a, [..], \\w        -> that character / those characters
      X*, X+, X{n,}      -> members of X, where X is a single-character item
    Everything else raises a PatternResolveError (or UnsupportedSyntaxError
    for alternation) pointing at the offending construct.
    """
    return Resolver(modifiers, pattern).resolve(node)


class Resolver:

    def __init__(self, modifiers: Modifiers, pattern: str = ""):
        self.modifiers = modifiers
        self.pattern = pattern

    def resolve(self, node: RegexNode) -> FrozenSet[str]:
        alternation = first_alternation(node)
        if alternation is not None:
            raise UnsupportedSyntaxError(
                "unsupported alternation inside the link trail group",
                self.pattern, alternation.position,
            )
        body = node.body if isinstance(node, Group) else (node,)
        return self.resolve_sequence(body)

    def resolve_sequence(self, nodes: Sequence[RegexNode]) -> FrozenSet[str]:
        items = [n for n in nodes if not is_trivial(n)]
        if not items:
            return frozenset()
        if len(items) > 1:
            raise MultiCharacterSequenceError(
                f"sequence of {len(items)} items cannot be a set of single characters",
                self.pattern, items[1].position,
            )
        return self.resolve_single(items[0])

    def resolve_single(self, n: RegexNode) -> FrozenSet[str]:
        if isinstance(n, (Literal, EscapedClass, CharacterClass)):
            return self.members(n)
        if isinstance(n, Group):
            return self.resolve_sequence(n.body)
        if isinstance(n, Repeated):
            if not n.unbounded:
                raise BoundedRepetitionError(
                    f"repetition {{{n.min},{n.max}}} has a finite upper bound",
                    self.pattern, n.position,
                )
            logger.debug("repeated = %r", n.body)
            return self.resolve_repeated(n.body)
        if isinstance(n, Alternation):
            raise UnsupportedSyntaxError("unsupported alternation", self.pattern, n.position)

        raise TypeError(f"Unknown AST node type: {type(n)}")

    def resolve_repeated(self, n: RegexNode) -> FrozenSet[str]:
        """The body of X* must itself be one character item; it is unrolled once."""
        if isinstance(n, (Literal, EscapedClass, CharacterClass)):
            return self.members(n)
        if isinstance(n, Group):
            items = [c for c in n.body if not is_trivial(c)]
            if len(items) == 1:
                return self.resolve_repeated(items[0])
            raise UnsupportedRepetitionBodyError(
                "repeated group does not match exactly one character",
                self.pattern, n.position,
            )
        if isinstance(n, Repeated):
            raise UnsupportedRepetitionBodyError(
                "nested repetition", self.pattern, n.position
            )
        if isinstance(n, Alternation):
            raise UnsupportedSyntaxError("unsupported alternation", self.pattern, n.position)

        raise TypeError(f"Unknown AST node type: {type(n)}")

    def members(self, n: RegexNode) -> FrozenSet[str]:
        if isinstance(n, Literal):
            return frozenset([self.modifiers.fold(n.ch)])
        if isinstance(n, EscapedClass):
            if n.negated:
                raise UnresolvableClassError(
                    f"negated shorthand \\{n.letter} has no finite member list",
                    self.pattern, n.position,
                )
            return frozenset(self.modifiers.fold(c) for c in n.members)
        if isinstance(n, CharacterClass):
            if n.negated:
                raise UnresolvableClassError(
                    "negated character class has no finite member list",
                    self.pattern, n.position,
                )
            if n.open_ended:
                raise UnresolvableClassError(
                    "character class contains a complement and has no finite member list",
                    self.pattern, n.position,
                )
            return frozenset(self.modifiers.fold(c) for c in n.members)

        raise TypeError(f"Not a character item: {type(n)}")


# ========== helper functions ==========

def is_trivial(n: RegexNode) -> bool:
    """Empty groups, possibly nested or repeated, match nothing and add nothing."""
    if isinstance(n, Repeated):
        return is_trivial(n.body)
    return isinstance(n, Group) and all(is_trivial(c) for c in n.body)


def first_alternation(n: RegexNode) -> Optional[Alternation]:
    if isinstance(n, Alternation):
        return n
    if isinstance(n, Group):
        for child in n.body:
            hit = first_alternation(child)
            if hit is not None:
                return hit
        return None
    if isinstance(n, Repeated):
        return first_alternation(n.body)
    return None
