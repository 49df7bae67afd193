"""
conftest.py
-----------
Shared pytest fixtures for wikiconf tests.

Provides fixtures for:
- Capturing "siteinfo" log records with caplog
- A siteinfo API response shaped like a small German wiki
- A fake HTTP response / session pair for the siteinfo endpoint
"""
import copy
import logging

import pytest
import requests


# ----- Logging Fixtures -----

@pytest.fixture
def propagate_siteinfo_logs(monkeypatch):
    """The "siteinfo" logger does not propagate by default; caplog listens on root."""
    monkeypatch.setattr(logging.getLogger("siteinfo"), "propagate", True)


# ----- Siteinfo Data Fixtures -----

SITEINFO_QUERY = {
    "general": {
        "mainpage": "Hauptseite",
        "sitename": "Wikipedia",
        "linktrail": "/^([äöüßa-z]+)(.*)$/sDu",
        "lang": "de",
    },
    "namespaces": {
        "-2": {"id": -2, "case": "first-letter", "name": "Medium", "canonical": "Media"},
        "0": {"id": 0, "case": "first-letter", "name": "", "content": True},
        "6": {"id": 6, "case": "first-letter", "name": "Datei", "canonical": "File"},
        "14": {"id": 14, "case": "first-letter", "name": "Kategorie", "canonical": "Category"},
    },
    "namespacealiases": [
        {"id": 6, "alias": "Bild"},
        {"id": 6, "alias": "Image"},
        {"id": 14, "alias": "Category"},
    ],
    "magicwords": [
        {"name": "redirect", "aliases": ["#WEITERLEITUNG", "#REDIRECT"], "case-sensitive": False},
        {"name": "notoc", "aliases": ["__KEIN_INHALTSVERZEICHNIS__", "__NOTOC__"], "case-sensitive": False},
        {"name": "toc", "aliases": ["__INHALTSVERZEICHNIS__", "__TOC__"], "case-sensitive": False},
        {"name": "pagename", "aliases": ["SEITENNAME", "PAGENAME"], "case-sensitive": True},
    ],
    "extensiontags": ["<pre>", "<nowiki>", "<ref>", "<References>"],
    "protocols": ["http://", "https://", "FTP://", "mailto:"],
}


@pytest.fixture
def siteinfo_query_data():
    """The `query` object of a siteinfo response."""
    return copy.deepcopy(SITEINFO_QUERY)


@pytest.fixture
def siteinfo_response_data(siteinfo_query_data):
    """A full, successful siteinfo response body."""
    return {"batchcomplete": True, "query": siteinfo_query_data}


# ----- HTTP Fixtures -----

class FakeResponse:
    def __init__(self, data=None, status_code=200, headers=None, text=None):
        self._data = data
        self.status_code = status_code
        self.headers = headers or {"Content-Type": "application/json; charset=utf-8"}
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def json(self):
        if self._data is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._data


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.headers = {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_session_factory():
    """Build a FakeSession answering with the given body / status / error."""
    def make(data=None, status_code=200, error=None):
        return FakeSession(FakeResponse(data, status_code), error)
    return make
