from typing import FrozenSet

from .parser import RegexParser
from .resolver import extract_group, resolve

LINK_TRAIL_GROUP_INDEX = 1


class LinkTrailEngine:
    """
    parse -> extract group 1 -> resolve, for one PHP link trail pattern.
    Raises a LinkTrailPatternError subclass when the pattern cannot be
    reduced to a set of single trailing characters.
    """

    def __init__(self, pattern: str, group_index: int = LINK_TRAIL_GROUP_INDEX):
        self.source = pattern
        self.pattern = RegexParser().parse(pattern)
        self.group = extract_group(self.pattern, group_index)
        self.characters: FrozenSet[str] = resolve(self.group, self.pattern.modifiers, pattern)

    def sorted(self):
        return sorted(self.characters)

    def as_string(self) -> str:
        return "".join(self.sorted())

    def __len__(self):
        return len(self.characters)


def link_trail_characters(pattern: str) -> FrozenSet[str]:
    return LinkTrailEngine(pattern).characters
