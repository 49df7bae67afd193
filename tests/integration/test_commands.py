"""
test_commands.py
----------------
Integration tests for the fetch_siteconfig and resolve_linktrail
management commands. fetch_query is patched so nothing goes over the wire.
"""
import json
from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from siteinfo.backend.siteinfo_service import FetchError, Query, fetch_query

FETCH_QUERY = "siteinfo.management.commands.fetch_siteconfig.fetch_query"


def run(*args, **options):
    out, err = StringIO(), StringIO()
    call_command(*args, stdout=out, stderr=err, **options)
    return out.getvalue(), err.getvalue()


# ----- fetch_siteconfig -----

class TestFetchSiteconfig:

    def test_rust_to_stdout(self, siteinfo_query_data):
        with mock.patch(FETCH_QUERY, return_value=Query(siteinfo_query_data)) as fetch:
            out, _ = run("fetch_siteconfig", "de.wikipedia.org")
        fetch.assert_called_once_with("de.wikipedia.org")
        assert out.startswith("::parse_wiki_text::ConfigurationSource {\n")
        assert '    redirect_magic_words: &["redirect", "weiterleitung"],\n' in out
        assert out.endswith("}\n")

    def test_json_format(self, siteinfo_query_data):
        with mock.patch(FETCH_QUERY, return_value=Query(siteinfo_query_data)):
            out, _ = run("fetch_siteconfig", "de.wikipedia.org", format="json")
        data = json.loads(out)
        assert data["category_namespaces"] == ["category", "kategorie"]
        assert len(data["link_trail"]) == 30

    def test_output_file(self, siteinfo_query_data, tmp_path):
        target = tmp_path / "de.rs"
        with mock.patch(FETCH_QUERY, return_value=Query(siteinfo_query_data)):
            out, err = run("fetch_siteconfig", "de.wikipedia.org", output=str(target))
        assert out == ""
        assert target.read_text(encoding="utf-8").startswith("::parse_wiki_text::")
        assert str(target) in err

    def test_unwritable_output(self, siteinfo_query_data, tmp_path):
        with mock.patch(FETCH_QUERY, return_value=Query(siteinfo_query_data)):
            with pytest.raises(CommandError, match="I/O error"):
                run("fetch_siteconfig", "de.wikipedia.org", output=str(tmp_path))

    def test_fetch_failure(self):
        with mock.patch(FETCH_QUERY, side_effect=FetchError("connection refused")):
            with pytest.raises(CommandError, match="siteinfo endpoint: connection refused"):
                run("fetch_siteconfig", "de.wikipedia.org")

    def test_malformed_magic_word(self, fake_session_factory, siteinfo_response_data):
        siteinfo_response_data["query"]["magicwords"].append({"aliases": ["__X__"]})
        session = fake_session_factory(siteinfo_response_data)
        with mock.patch(FETCH_QUERY, side_effect=lambda domain: fetch_query(domain, session)):
            with pytest.raises(CommandError, match=r"siteinfo endpoint: magicwords\[4\]\.name"):
                run("fetch_siteconfig", "de.wikipedia.org")

    def test_invalid_domain(self):
        with pytest.raises(CommandError, match="invalid wiki domain"):
            run("fetch_siteconfig", "https://de.wikipedia.org/")

    def test_unsupported_link_trail(self, siteinfo_query_data):
        siteinfo_query_data["general"]["linktrail"] = "/^(a(bc)*)(.*)$/"
        with mock.patch(FETCH_QUERY, return_value=Query(siteinfo_query_data)):
            with pytest.raises(CommandError, match="cannot extract configuration data: link trail"):
                run("fetch_siteconfig", "de.wikipedia.org")


# ----- resolve_linktrail -----

class TestResolveLinktrail:

    def test_characters_to_stdout(self):
        out, err = run("resolve_linktrail", "/^([a-z]+)(.*)$/sD")
        assert out == "abcdefghijklmnopqrstuvwxyz\n"
        assert "26 characters" in err

    def test_quiet(self):
        _, err = run("resolve_linktrail", "/^([a-c]+)(.*)$/sD", verbosity=0)
        assert err == ""

    def test_error(self):
        with pytest.raises(CommandError, match="at index 4"):
            run("resolve_linktrail", "/^(a(bc)*)(.*)$/")
