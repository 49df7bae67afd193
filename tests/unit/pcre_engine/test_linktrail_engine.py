"""
test_linktrail_engine.py
------------------------
End-to-end tests for turning a wiki's linktrail value into characters.
"""
import string

import pytest

from siteinfo.backend.pcre_engine import (
    LinkTrailEngine,
    LinkTrailPatternError,
    MissingDelimiterError,
    MissingGroupError,
    PatternParseError,
    PatternResolveError,
    UnsupportedSyntaxError,
    link_trail_characters,
)


class TestLinkTrailEngine:

    def test_english(self):
        engine = LinkTrailEngine("/^([a-z]+)(.*)$/sD")
        assert engine.as_string() == string.ascii_lowercase
        assert len(engine) == 26
        assert engine.group.index == 1

    def test_sorted_by_code_point(self):
        engine = LinkTrailEngine("/^([äöüßa-z]+)(.*)$/sDu")
        assert engine.sorted()[:3] == ["a", "b", "c"]
        assert engine.sorted()[-4:] == ["ß", "ä", "ö", "ü"]

    def test_keeps_source_and_parsed_pattern(self):
        engine = LinkTrailEngine("/^([a-z]+)(.*)$/sD")
        assert engine.source == "/^([a-z]+)(.*)$/sD"
        assert engine.pattern.modifiers.letters() == "sD"

    def test_other_group(self):
        engine = LinkTrailEngine("/^(x*)(y+)$/", group_index=2)
        assert engine.as_string() == "y"

    def test_empty_link_trail(self):
        engine = LinkTrailEngine("/^()(.*)$/sD")
        assert engine.as_string() == ""
        assert len(engine) == 0

    def test_link_trail_characters(self):
        assert link_trail_characters("/^([a-c]+)(.*)$/sD") == frozenset("abc")


class TestLinkTrailEngineErrors:

    @pytest.mark.parametrize("literal,error", [
        ("^([a-z]+)(.*)$", MissingDelimiterError),
        ("/^(a|b)(.*)$/", UnsupportedSyntaxError),
        ("/^[a-z]+$/", MissingGroupError),
    ])
    def test_parse_errors(self, literal, error):
        with pytest.raises(error) as info:
            LinkTrailEngine(literal)
        assert isinstance(info.value, PatternParseError)

    @pytest.mark.parametrize("literal", [
        "/^(a(bc)*)(.*)$/",
        "/^([^a-z]+)(.*)$/",
        "/^(a?)(.*)$/",
        "/^((?:ab)+)(.*)$/",
    ])
    def test_resolve_errors(self, literal):
        with pytest.raises(PatternResolveError):
            LinkTrailEngine(literal)

    def test_every_error_is_a_link_trail_pattern_error(self):
        with pytest.raises(LinkTrailPatternError) as info:
            LinkTrailEngine("/^(a(bc)*)(.*)$/")
        data = info.value.as_dict()
        assert data == {
            "error": "multi_character_sequence",
            "message": info.value.message,
            "position": 4,
            "pattern": "/^(a(bc)*)(.*)$/",
        }
