# pcre_engine/ast.py
#
# Closed set of node shapes for the subset of PCRE that MediaWiki link trail
# patterns use. Nodes are frozen; `position` is an offset into the original
# PHP pattern literal and takes no part in equality.

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


class RegexNode:
    """Base interface."""
    position: int


@dataclass(frozen=True, repr=False)
class Literal(RegexNode):
    """Single literal character."""
    ch: str
    position: int = field(default=0, compare=False)

    def __repr__(self):
        return f"'{self.ch}'"


@dataclass(frozen=True, repr=False)
class EscapedClass(RegexNode):
    """Shorthand class such as \\d or \\W, members taken from a fixed table."""
    letter: str
    members: FrozenSet[str]
    negated: bool = False
    position: int = field(default=0, compare=False)

    def __repr__(self):
        return f"\\{self.letter}"


@dataclass(frozen=True, repr=False)
class CharacterClass(RegexNode):
    """
    Bracketed class with ranges already expanded; '.' is a negated class.
    open_ended marks a class that also contains a complement (e.g. [a\\W]),
    which has no finite member list.
    """
    members: FrozenSet[str]
    negated: bool = False
    open_ended: bool = False
    position: int = field(default=0, compare=False)

    def __repr__(self):
        caret = "^" if self.negated else ""
        shown = "".join(sorted(self.members))
        if len(shown) > 16:
            shown = f"{shown[:16]}…({len(self.members)})"
        more = "…" if self.open_ended else ""
        return f"[{caret}{shown}{more}]"


@dataclass(frozen=True, repr=False)
class Group(RegexNode):
    """Parenthesised body; index is None for (?:...)."""
    index: Optional[int]
    body: Tuple[RegexNode, ...] = ()
    position: int = field(default=0, compare=False)

    @property
    def capturing(self) -> bool:
        return self.index is not None

    def __repr__(self):
        inner = "·".join(repr(n) for n in self.body)
        label = f"{self.index}:" if self.capturing else "?:"
        return f"({label}{inner})"


@dataclass(frozen=True, repr=False)
class Repeated(RegexNode):
    """body{min,max}; max None means unbounded."""
    body: RegexNode
    min: int = 0
    max: Optional[int] = None
    position: int = field(default=0, compare=False)

    @property
    def unbounded(self) -> bool:
        return self.max is None

    def __repr__(self):
        upper = "" if self.max is None else str(self.max)
        return f"({self.body}){{{self.min},{upper}}}"


@dataclass(frozen=True, repr=False)
class Alternation(RegexNode):
    """branch | branch | ...; each branch is a sequence of nodes."""
    branches: Tuple[Tuple[RegexNode, ...], ...]
    position: int = field(default=0, compare=False)

    def __repr__(self):
        return "(" + "|".join("·".join(repr(n) for n in b) for b in self.branches) + ")"
