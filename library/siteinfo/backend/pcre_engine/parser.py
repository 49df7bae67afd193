# pcre_engine/parser.py

import logging
from typing import List, Tuple

from .ast import (
    RegexNode, Literal, EscapedClass, CharacterClass,
    Group, Repeated, Alternation,
)
from .exceptions import (
    MalformedPatternError, MissingDelimiterError, UnsupportedSyntaxError,
)
from .lexer import Lexer, Token, TokenType, QUANTIFIERS
from .modifiers import Modifiers, parse_modifiers

logger = logging.getLogger(__name__)

BRACKET_DELIMITERS = {"(": ")", "<": ">", "[": "]", "{": "}"}


class Pattern:
    """A parsed PHP PCRE literal: top-level node sequence plus its modifiers."""

    def __init__(self, source: str, body: str, modifiers: Modifiers,
                 nodes: Tuple[RegexNode, ...], group_count: int):
        self.source = source
        self.body = body
        self.modifiers = modifiers
        self.nodes = nodes
        self.group_count = group_count

    def __repr__(self):
        inner = "·".join(repr(n) for n in self.nodes)
        return f"Pattern({inner}, flags={self.modifiers.letters()!r})"


def split_literal(pattern: str) -> Tuple[str, str, int]:
    """
    Split a PHP pattern literal such as "/^([a-z]+)(.*)$/sD" into
    (body, modifier letters, offset of the body inside the literal).
    """
    start = None
    for i, c in enumerate(pattern):
        if c in " \t\n\r\x0b\x0c":
            continue
        if c.isascii() and not c.isalnum() and c != "\\":
            start = i
        break

    if start is None:
        raise MissingDelimiterError("no opening delimiter", pattern, 0)

    closing = BRACKET_DELIMITERS.get(pattern[start], pattern[start])
    end = pattern.rfind(closing, start + 1)
    if end < 0:
        raise MissingDelimiterError(
            f"no closing delimiter {closing!r}", pattern, start
        )
    return pattern[start + 1:end], pattern[end + 1:], start + 1


class RegexParser:

    def __init__(self):
        self.tokens: List[Token] = []
        self.pos = 0
        self.group_count = 0
        self.source = ""
        self.modifiers = Modifiers()

    # ========= PUBLIC ==============
    def parse(self, pattern: str) -> Pattern:
        body, flags, offset = split_literal(pattern)
        self.source = pattern
        self.modifiers = parse_modifiers(flags)
        self.tokens = Lexer(pattern, offset, self.modifiers).lex(body)
        self.pos = 0
        self.group_count = 0

        self.strip_outer_anchors()
        nodes = self.parse_regex()   # regex := alternation
        self.expect(TokenType.END)

        parsed = Pattern(pattern, body, self.modifiers, nodes, self.group_count)
        logger.debug("pattern = %r", parsed)
        return parsed

    # ========= Grammar ==========
    # regex := alternation
    def parse_regex(self) -> Tuple[RegexNode, ...]:
        return self.parse_alternation()

    # alternation := sequence { '|' sequence }
    def parse_alternation(self) -> Tuple[RegexNode, ...]:
        start = self.peek().index
        branches = [self.parse_sequence()]
        while self.match(TokenType.UNION):
            branches.append(self.parse_sequence())
        if len(branches) == 1:
            return branches[0]
        return (Alternation(tuple(branches), position=start),)

    # sequence := { repeat }
    def parse_sequence(self) -> Tuple[RegexNode, ...]:
        nodes = []
        while self.peek().type not in (TokenType.UNION, TokenType.RPAREN, TokenType.END):
            nodes.append(self.parse_repeat())
        return tuple(nodes)

    # repeat := atom quantifier?
    def parse_repeat(self) -> RegexNode:
        base = self.parse_atom()
        t = self.peek()
        if t.type not in QUANTIFIERS:
            return base
        self.next()
        if t.type == TokenType.STAR:
            node = Repeated(base, 0, None, position=base.position)
        elif t.type == TokenType.PLUS:
            node = Repeated(base, 1, None, position=base.position)
        elif t.type == TokenType.QUESTION:
            node = Repeated(base, 0, 1, position=base.position)
        else:
            lo, hi = t.value
            node = Repeated(base, lo, hi, position=base.position)
        if self.peek().type in QUANTIFIERS:
            raise self.malformed("quantifier does not follow a repeatable item", self.peek().index)
        return node

    # atom := CHAR | '.' | CLASS | SHORTHAND | '(' regex ')' | '(?:' regex ')'
    def parse_atom(self) -> RegexNode:
        t = self.peek()
        if t.type == TokenType.CHAR:
            self.next()
            return Literal(t.ch, position=t.index)
        elif t.type == TokenType.DOT:
            self.next()
            excluded = frozenset() if self.modifiers.dotall else frozenset("\n")
            return CharacterClass(excluded, negated=True, position=t.index)
        elif t.type == TokenType.CLASS:
            self.next()
            members, negated, open_ended = t.value
            return CharacterClass(members, negated, open_ended, position=t.index)
        elif t.type == TokenType.SHORTHAND:
            self.next()
            letter, members, negated = t.value
            return EscapedClass(letter, members, negated, position=t.index)
        elif t.type in (TokenType.LPAREN, TokenType.LPAREN_NC):
            self.next()  # consume '('
            index = None
            if t.type == TokenType.LPAREN:
                self.group_count += 1
                index = self.group_count
            inside = self.parse_regex()
            if self.peek().type != TokenType.RPAREN:
                raise self.malformed("missing closing parenthesis", t.index)
            self.next()
            return Group(index, inside, position=t.index)
        elif t.type in (TokenType.CARET, TokenType.DOLLAR):
            raise UnsupportedSyntaxError(
                "unsupported anchor inside the pattern", self.source, t.index
            )
        elif t.type in QUANTIFIERS:
            raise self.malformed("quantifier does not follow a repeatable item", t.index)
        else:
            raise self.malformed(f"unexpected {t.type.name}", t.index)

    # ========= Helpers ==========

    def strip_outer_anchors(self):
        """A leading '^' and a trailing '$' do not change which characters match."""
        if self.tokens[0].type == TokenType.CARET:
            self.tokens.pop(0)
        if len(self.tokens) >= 2 and self.tokens[-2].type == TokenType.DOLLAR:
            self.tokens.pop(-2)

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def next(self) -> Token:
        t = self.tokens[self.pos]
        self.pos = min(self.pos + 1, len(self.tokens) - 1)
        return t

    def match(self, token_type: TokenType) -> bool:
        if self.peek().type == token_type:
            self.next()
            return True
        return False

    def expect(self, token_type: TokenType) -> Token:
        t = self.peek()
        if t.type != token_type:
            if t.type == TokenType.RPAREN:
                raise self.malformed("unmatched closing parenthesis", t.index)
            raise self.malformed(f"expected {token_type.name} but found {t.type.name}", t.index)
        return self.next()

    def malformed(self, msg: str, index: int) -> MalformedPatternError:
        return MalformedPatternError(msg, self.source, index)


def parse(pattern: str) -> Pattern:
    return RegexParser().parse(pattern)
