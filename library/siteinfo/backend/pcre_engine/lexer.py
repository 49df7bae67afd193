# pcre_engine/lexer.py

import re
import string
from enum import Enum, auto
from typing import List, Optional, Tuple

from .exceptions import MalformedPatternError, UnsupportedSyntaxError
from .modifiers import Modifiers


class TokenType(Enum):
    LPAREN = auto()      # (
    LPAREN_NC = auto()   # (?:
    RPAREN = auto()      # )
    STAR = auto()        # *
    PLUS = auto()        # +
    QUESTION = auto()    # ?
    BRACE = auto()       # {n}, {n,}, {n,m}
    UNION = auto()       # |
    DOT = auto()         # .
    CARET = auto()       # ^
    DOLLAR = auto()      # $
    CHAR = auto()        # literal character
    CLASS = auto()       # [...]
    SHORTHAND = auto()   # \d, \w, ...
    END = auto()         # end of pattern


QUANTIFIERS = (TokenType.STAR, TokenType.PLUS, TokenType.QUESTION, TokenType.BRACE)


class Token:
    def __init__(self, token_type: TokenType, ch: str, index: int, value=None):
        self.type = token_type
        self.ch = ch        # only used for CHAR
        self.index = index  # offset into the full PHP literal
        self.value = value  # CLASS / SHORTHAND / BRACE payload

    def __repr__(self):
        if self.type == TokenType.CHAR:
            return f"CHAR('{self.ch}')@{self.index}"
        return f"{self.type.name}@{self.index}"


# =========================================================
# Shorthand tables (PCRE without UCP: ASCII semantics for
# \d \w \s, fixed Unicode lists for \h \v)
# =========================================================

DIGITS = frozenset(string.digits)
WORD = frozenset(string.ascii_letters + string.digits + "_")
SPACE = frozenset(" \t\n\x0b\x0c\r")
HSPACE = frozenset(
    "\t \xa0\u1680\u180e\u202f\u205f\u3000"
    + "".join(chr(c) for c in range(0x2000, 0x200B))
)
VSPACE = frozenset("\n\x0b\x0c\r\x85\u2028\u2029")

SHORTHANDS = {
    "d": DIGITS,
    "w": WORD,
    "s": SPACE,
    "h": HSPACE,
    "v": VSPACE,
}

POSIX_CLASSES = {
    "alpha": frozenset(string.ascii_letters),
    "alnum": frozenset(string.ascii_letters + string.digits),
    "digit": DIGITS,
    "lower": frozenset(string.ascii_lowercase),
    "upper": frozenset(string.ascii_uppercase),
    "space": SPACE,
    "blank": frozenset(" \t"),
    "word": WORD,
    "xdigit": frozenset(string.hexdigits),
    "punct": frozenset(string.punctuation),
}

SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "f": "\x0c",
    "e": "\x1b",
    "a": "\x07",
}

# escape letter -> what PCRE means by it; all outside the supported grammar
UNSUPPORTED_ESCAPES = {
    "b": "word boundary",
    "B": "word boundary",
    "A": "anchor",
    "z": "anchor",
    "Z": "anchor",
    "G": "anchor",
    "K": "match reset",
    "g": "backreference",
    "k": "backreference",
    "p": "Unicode property",
    "P": "Unicode property",
    "X": "extended grapheme cluster",
    "R": "newline sequence",
    "C": "single code unit",
    "Q": "quoted sequence",
    "E": "quoted sequence",
}

# what follows "(?" -> construct name
UNSUPPORTED_GROUPS = (
    ("<=", "lookbehind"),
    ("<!", "lookbehind"),
    ("=", "lookahead"),
    ("!", "lookahead"),
    ("<", "named group"),
    ("P<", "named group"),
    ("'", "named group"),
    ("P=", "backreference"),
    ("P>", "recursion"),
    (">", "atomic group"),
    ("|", "branch reset group"),
    ("#", "comment group"),
    ("(", "conditional group"),
)

BRACE_RE = re.compile(r"\{(\d+)(,(\d*))?\}")
HEX_RE = re.compile(r"[0-9A-Fa-f]{1,2}")
OCTAL_RE = re.compile(r"[0-7]{1,2}")

MAX_CODE_POINT = 0x10FFFF


class Lexer:
    """
    Turns the body of a PHP pattern into tokens. Escapes and bracketed
    classes are fully decoded here so the parser only sees structure.
    """

    def __init__(self, pattern: str, offset: int = 0, modifiers: Optional[Modifiers] = None):
        self.pattern = pattern      # full literal, for error messages
        self.offset = offset        # where the body starts inside it
        self.modifiers = modifiers or Modifiers()

    def lex(self, body: str) -> List[Token]:
        if body is None:
            raise ValueError("body == None")

        self.s = body
        out = []
        i = 0
        n = len(body)

        while i < n:
            c = body[i]
            if self.modifiers.extended and c in " \t\n\r\x0b\x0c":
                i += 1
            elif self.modifiers.extended and c == "#":
                end = body.find("\n", i)
                i = n if end < 0 else end + 1
            elif c == "\\":
                tok, i = self.lex_escape(i)
                out.append(tok)
            elif c == "[":
                tok, i = self.lex_class(i)
                out.append(tok)
            elif c == "(":
                tok, i = self.lex_open(i)
                out.append(tok)
            elif c == ")":
                out.append(Token(TokenType.RPAREN, "\0", self.at(i)))
                i += 1
            elif c in "*+?":
                kind = {"*": TokenType.STAR, "+": TokenType.PLUS, "?": TokenType.QUESTION}[c]
                out.append(Token(kind, "\0", self.at(i)))
                i = self.check_greed(i + 1)
            elif c == "{":
                m = BRACE_RE.match(body, i)
                if m:
                    lo = int(m.group(1))
                    if m.group(2) is None:
                        hi = lo
                    elif m.group(3):
                        hi = int(m.group(3))
                    else:
                        hi = None
                    if hi is not None and hi < lo:
                        raise self.malformed("numbers out of order in {} quantifier", i)
                    out.append(Token(TokenType.BRACE, "\0", self.at(i), (lo, hi)))
                    i = self.check_greed(m.end())
                else:
                    # PCRE reads a '{' that does not start a quantifier literally
                    out.append(Token(TokenType.CHAR, c, self.at(i)))
                    i += 1
            elif c == "|":
                out.append(Token(TokenType.UNION, "\0", self.at(i)))
                i += 1
            elif c == ".":
                out.append(Token(TokenType.DOT, "\0", self.at(i)))
                i += 1
            elif c == "^":
                out.append(Token(TokenType.CARET, "\0", self.at(i)))
                i += 1
            elif c == "$":
                out.append(Token(TokenType.DOLLAR, "\0", self.at(i)))
                i += 1
            else:
                out.append(Token(TokenType.CHAR, c, self.at(i)))
                i += 1

        out.append(Token(TokenType.END, "\0", self.at(n)))
        return out

    # ========= groups / quantifiers ==========

    def lex_open(self, i: int) -> Tuple[Token, int]:
        s = self.s
        if s.startswith("(?:", i):
            return Token(TokenType.LPAREN_NC, "\0", self.at(i)), i + 3
        if s.startswith("(?", i):
            rest = s[i + 2:]
            for prefix, name in UNSUPPORTED_GROUPS:
                if rest.startswith(prefix):
                    raise self.unsupported(name, i)
            raise self.unsupported("inline option or recursion group", i)
        if s.startswith("(*", i):
            raise self.unsupported("backtracking verb", i)
        return Token(TokenType.LPAREN, "\0", self.at(i)), i + 1

    def check_greed(self, i: int) -> int:
        if i < len(self.s):
            if self.s[i] == "?":
                raise self.unsupported("lazy quantifier", i)
            if self.s[i] == "+":
                raise self.unsupported("possessive quantifier", i)
        return i

    # ========= escapes ==========

    def lex_escape(self, i: int) -> Tuple[Token, int]:
        c, kind, value, j = self.decode_escape(i, in_class=False)
        if kind == "char":
            return Token(TokenType.CHAR, value, self.at(i)), j
        letter, members, negated = value
        return Token(TokenType.SHORTHAND, "\0", self.at(i), (letter, members, negated)), j

    def decode_escape(self, i: int, in_class: bool):
        """
        Decode the escape starting at the backslash s[i].
        Returns (letter, kind, value, next_index) where kind is "char"
        (value = the character) or "set" (value = (letter, members, negated)).
        """
        s = self.s
        if i + 1 >= len(s):
            raise self.malformed("pattern ends with a backslash", i)
        c = s[i + 1]
        j = i + 2

        if c.lower() in SHORTHANDS:
            return c, "set", (c, SHORTHANDS[c.lower()], c.isupper()), j
        if c == "N" and not in_class:
            return c, "set", (c, frozenset("\n"), True), j
        if c == "b" and in_class:
            return c, "char", "\x08", j
        if c in SIMPLE_ESCAPES:
            return c, "char", SIMPLE_ESCAPES[c], j
        if c == "x":
            if s.startswith("{", j):
                end = s.find("}", j)
                digits = s[j + 1:end] if end > 0 else ""
                if end < 0 or not digits or not all(d in string.hexdigits for d in digits):
                    raise self.malformed("invalid \\x{...} escape", i)
                return c, "char", self.code_point(int(digits, 16), i), end + 1
            m = HEX_RE.match(s, j)
            if not m:
                return c, "char", "\0", j
            return c, "char", chr(int(m.group(0), 16)), m.end()
        if c == "o" and s.startswith("{", j):
            end = s.find("}", j)
            digits = s[j + 1:end] if end > 0 else ""
            if end < 0 or not digits or not all(d in "01234567" for d in digits):
                raise self.malformed("invalid \\o{...} escape", i)
            return c, "char", self.code_point(int(digits, 8), i), end + 1
        if c == "0":
            m = OCTAL_RE.match(s, j)
            if not m:
                return c, "char", "\0", j
            return c, "char", chr(int(m.group(0), 8)), m.end()
        if c == "c":
            if j >= len(s) or not s[j].isascii():
                raise self.malformed("\\c must be followed by an ASCII character", i)
            return c, "char", chr(ord(s[j].upper()) ^ 0x40), j + 1
        if c in "123456789":
            raise self.unsupported("backreference", i)
        if c in UNSUPPORTED_ESCAPES:
            raise self.unsupported(UNSUPPORTED_ESCAPES[c], i)
        if c.isascii() and c.isalnum():
            raise self.unsupported(f"unknown escape \\{c}", i)
        return c, "char", c, j

    def code_point(self, value: int, i: int) -> str:
        if value > MAX_CODE_POINT:
            raise self.malformed("character code point value is too large", i)
        return chr(value)

    # ========= character classes ==========

    def lex_class(self, i: int) -> Tuple[Token, int]:
        s = self.s
        n = len(s)
        j = i + 1
        negated = False
        if j < n and s[j] == "^":
            negated = True
            j += 1

        members = set()
        open_ended = False
        first = True

        while True:
            if j >= n:
                raise self.malformed("missing terminating ] for character class", i)
            if s[j] == "]" and not first:
                j += 1
                break
            first = False

            start_at = j
            kind, value, j = self.class_atom(j)
            if kind == "set":
                _, found, complement = value
                if complement:
                    open_ended = True
                else:
                    members.update(found)
                continue

            # range a-z, unless the '-' is the last thing before ']'
            if j + 1 < n and s[j] == "-" and s[j + 1] != "]":
                end_kind, end_value, after = self.class_atom(j + 1)
                if end_kind != "char":
                    raise self.malformed("invalid range in character class", start_at)
                if ord(end_value) < ord(value):
                    raise self.malformed("range out of order in character class", start_at)
                members.update(chr(o) for o in range(ord(value), ord(end_value) + 1))
                j = after
            else:
                members.add(value)

        token = Token(TokenType.CLASS, "\0", self.at(i), (frozenset(members), negated, open_ended))
        return token, j

    def class_atom(self, j: int):
        """One member of a class: ("char", c, next) or ("set", (name, members, complement), next)."""
        s = self.s
        if s.startswith("[:", j):
            end = s.find(":]", j + 2)
            if end >= 0:
                name = s[j + 2:end]
                complement = name.startswith("^")
                name = name.lstrip("^")
                if name not in POSIX_CLASSES:
                    raise self.unsupported(f"POSIX class [:{name}:]", j)
                return "set", (name, POSIX_CLASSES[name], complement), end + 2
        if s.startswith("[=", j) or s.startswith("[.", j):
            raise self.unsupported("POSIX collating element", j)
        if s[j] == "\\":
            _, kind, value, after = self.decode_escape(j, in_class=True)
            return kind, value, after
        return "char", s[j], j + 1

    # ========= helpers ==========

    def at(self, i: int) -> int:
        return self.offset + i

    def unsupported(self, what: str, i: int) -> UnsupportedSyntaxError:
        return UnsupportedSyntaxError(f"unsupported {what}", self.pattern, self.at(i))

    def malformed(self, what: str, i: int) -> MalformedPatternError:
        return MalformedPatternError(what, self.pattern, self.at(i))
