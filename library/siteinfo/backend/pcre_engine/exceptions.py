# pcre_engine/exceptions.py

from typing import Optional


class LinkTrailPatternError(Exception):
    """
    Base class for everything that can go wrong while turning a link trail
    pattern into a character set.

    pattern  = the full PHP PCRE literal as it came from the wiki
    position = offset into that literal, None when it has no single location
    """

    kind = "pattern"

    def __init__(self, message: str, pattern: str, position: Optional[int] = None):
        self.message = message
        self.pattern = pattern
        self.position = position
        super().__init__(self.describe())

    def describe(self) -> str:
        where = f" at index {self.position}" if self.position is not None else ""
        return f"{self.message}{where} in link trail pattern {self.pattern!r}"

    def as_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "position": self.position,
            "pattern": self.pattern,
        }


# =========================================================
# Parse errors: the pattern does not fit the grammar
# =========================================================

class PatternParseError(LinkTrailPatternError):
    kind = "parse"


class MissingDelimiterError(PatternParseError):
    kind = "missing_delimiter"


class UnsupportedSyntaxError(PatternParseError):
    kind = "unsupported_syntax"


class MalformedPatternError(PatternParseError):
    kind = "malformed_pattern"


class MissingGroupError(PatternParseError):
    kind = "missing_group"

    def __init__(self, pattern: str, index: int):
        self.index = index
        super().__init__(f"group {index} not found", pattern)


# =========================================================
# Resolve errors: grammar is fine, shape is not a flat set
# =========================================================

class PatternResolveError(LinkTrailPatternError):
    kind = "resolve"


class MultiCharacterSequenceError(PatternResolveError):
    kind = "multi_character_sequence"


class UnsupportedRepetitionBodyError(PatternResolveError):
    kind = "unsupported_repetition_body"


class BoundedRepetitionError(PatternResolveError):
    kind = "bounded_repetition"


class UnresolvableClassError(PatternResolveError):
    kind = "unresolvable_class"
