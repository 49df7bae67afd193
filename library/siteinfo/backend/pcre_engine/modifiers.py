# pcre_engine/modifiers.py

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


# letter -> attribute
FLAG_LETTERS = {
    # used while lexing / resolving
    "i": "caseless",
    "s": "dotall",
    "x": "extended",
    # recognised, no effect on the character set
    "m": "multiline",
    "U": "ungreedy",
    "A": "anchored",
    "D": "dollar_endonly",
    "S": "speedup",
    "X": "extra",
    "J": "dupnames",
    "u": "utf8",
}


@dataclass(frozen=True)
class Modifiers:
    caseless: bool = False
    dotall: bool = False
    extended: bool = False
    multiline: bool = False
    ungreedy: bool = False
    anchored: bool = False
    dollar_endonly: bool = False
    speedup: bool = False
    extra: bool = False
    dupnames: bool = False
    utf8: bool = False

    def fold(self, ch: str) -> str:
        """Lowercase ch under the caseless flag, keeping it a single character."""
        if not self.caseless:
            return ch
        lowered = ch.lower()
        return lowered if len(lowered) == 1 else ch

    def letters(self) -> str:
        return "".join(k for k, v in FLAG_LETTERS.items() if getattr(self, v))


def parse_modifiers(flags: str) -> Modifiers:
    """
    Parse the letters after the closing delimiter of a PHP pattern.
    Unknown letters are skipped: MediaWiki may add flags we do not care about.
    """
    seen = {}
    for c in flags:
        if c.isspace():
            continue
        attr = FLAG_LETTERS.get(c)
        if attr is None:
            logger.debug("ignoring unrecognized PCRE modifier %r", c)
            continue
        seen[attr] = True
    return Modifiers(**seen)
