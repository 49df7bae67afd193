from .engine import LINK_TRAIL_GROUP_INDEX, LinkTrailEngine, link_trail_characters
from .exceptions import (
    LinkTrailPatternError,
    PatternParseError,
    MissingDelimiterError,
    UnsupportedSyntaxError,
    MalformedPatternError,
    MissingGroupError,
    PatternResolveError,
    MultiCharacterSequenceError,
    UnsupportedRepetitionBodyError,
    BoundedRepetitionError,
    UnresolvableClassError,
)
from .modifiers import Modifiers, parse_modifiers
from .parser import Pattern, RegexParser, parse, split_literal
from .resolver import extract_group, resolve
