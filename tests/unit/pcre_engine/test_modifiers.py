"""
test_modifiers.py
-----------------
Unit tests for PCRE modifier letters.
"""
import logging

from siteinfo.backend.pcre_engine.modifiers import Modifiers, parse_modifiers


class TestParseModifiers:

    def test_common_link_trail_flags(self):
        mods = parse_modifiers("sDu")
        assert mods == Modifiers(dotall=True, dollar_endonly=True, utf8=True)

    def test_empty(self):
        assert parse_modifiers("") == Modifiers()

    def test_whitespace_ignored(self):
        assert parse_modifiers(" i\n") == Modifiers(caseless=True)

    def test_unknown_letter_is_skipped_and_logged(self, caplog, propagate_siteinfo_logs):
        with caplog.at_level(logging.DEBUG, logger="siteinfo"):
            mods = parse_modifiers("iQ")
        assert mods == Modifiers(caseless=True)
        assert "'Q'" in caplog.text

    def test_letters_round_trip_in_canonical_order(self):
        assert parse_modifiers("uDs").letters() == "sDu"


class TestFold:

    def test_no_fold_without_caseless(self):
        assert Modifiers().fold("A") == "A"

    def test_lowercases_under_caseless(self):
        mods = Modifiers(caseless=True)
        assert mods.fold("A") == "a"
        assert mods.fold("Ä") == "ä"
        assert mods.fold("z") == "z"

    def test_multi_character_lowering_kept_as_is(self):
        # "İ".lower() is two code points
        assert Modifiers(caseless=True).fold("İ") == "İ"
