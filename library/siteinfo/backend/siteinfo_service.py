import logging
import re

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

CATEGORIES = (
    "extensiontags",
    "general",
    "magicwords",
    "namespacealiases",
    "namespaces",
    "protocols",
)

LOGGED_HEADERS = (
    "Connection",
    "Content-Encoding",
    "Content-Length",
    "Content-Type",
    "Server",
    "MediaWiki-API-Error",
)

DOMAIN_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::\d{1,5})?$")


class SiteinfoError(Exception):
    """Anything between the domain name and a decoded siteinfo query."""


class EndpointError(SiteinfoError):
    pass


class FetchError(SiteinfoError):
    pass


class MalformedResponseError(SiteinfoError):
    pass


class QueryNotFoundError(MalformedResponseError):
    def __init__(self):
        super().__init__("no errors or warnings, and no query found")


class ApiResponseError(SiteinfoError):
    """The API answered with `errors` or `warnings`."""

    def __init__(self, messages):
        self.messages = list(messages)
        super().__init__("; ".join(format_api_message(m) for m in self.messages))


def format_api_message(m: dict) -> str:
    text = f"siteinfo API [{m.get('module', '')}] {m.get('code', '')} {m.get('text', '')}"
    if m.get("data") is not None:
        text += f" ({m['data']!r})"
    return text


class Query:
    """The `query` object of a siteinfo response (formatversion=2)."""

    def __init__(self, data: dict):
        if not isinstance(data, dict):
            raise MalformedResponseError(f"query is not an object: {data!r}")
        missing = [c for c in CATEGORIES if c not in data]
        if missing:
            raise MalformedResponseError(f"query lacks categories: {', '.join(missing)}")
        for name in CATEGORIES:
            kind = dict if name in ("general", "namespaces") else list
            if not isinstance(data[name], kind):
                raise MalformedResponseError(f"{name} is not {kind.__name__}: {data[name]!r}")

        self.extensiontags = list(data["extensiontags"])
        self.general = dict(data["general"])
        self.magicwords = list(data["magicwords"])
        self.namespacealiases = list(data["namespacealiases"])
        self.namespaces = dict(data["namespaces"])
        self.protocols = list(data["protocols"])

        if not isinstance(self.general.get("linktrail"), str):
            raise MalformedResponseError("general.linktrail is missing or not a string")

        check_strings("extensiontags", self.extensiontags)
        check_strings("protocols", self.protocols)
        for i, mw in enumerate(self.magicwords):
            where = f"magicwords[{i}]"
            check_fields(where, mw, {"name": str})
            check_strings(f"{where}.aliases", mw.get("aliases", []))
        for i, alias in enumerate(self.namespacealiases):
            check_fields(f"namespacealiases[{i}]", alias, {"id": int, "alias": str})
        for key, ns in self.namespaces.items():
            where = f"namespaces[{key!r}]"
            check_fields(where, ns, {"id": int, "name": str})
            if "canonical" in ns and not isinstance(ns["canonical"], str):
                raise MalformedResponseError(f"{where}.canonical is not a string")

    @property
    def linktrail(self) -> str:
        return self.general["linktrail"]

    def sizes(self) -> dict:
        return {
            "extensiontags": len(self.extensiontags),
            "magicwords": len(self.magicwords),
            "namespacealiases": len(self.namespacealiases),
            "namespaces": len(self.namespaces),
            "protocols": len(self.protocols),
        }


def ascii_domain(domain: str) -> str:
    """IDNA-encode the host part, so "bücher.example" becomes "xn--bcher-kva.example"."""
    host, sep, port = domain.partition(":")
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise EndpointError(f"invalid wiki domain: {domain!r}: {exc}") from exc
    return host + sep + port


def check_strings(where: str, items) -> None:
    if not isinstance(items, list):
        raise MalformedResponseError(f"{where} is not a list")
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise MalformedResponseError(f"{where}[{i}] is not a string: {item!r}")


def check_fields(where: str, entry, fields: dict) -> None:
    """entry must be an object holding every key of `fields` with that type."""
    if not isinstance(entry, dict):
        raise MalformedResponseError(f"{where} is not an object: {entry!r}")
    for name, kind in fields.items():
        value = entry.get(name)
        # bool is an int subclass but never a namespace id
        if not isinstance(value, kind) or isinstance(value, bool):
            raise MalformedResponseError(
                f"{where}.{name} is missing or not {kind.__name__}: {value!r}"
            )


class SiteinfoEndpoint:

    def __init__(self, domain: str, session=None, timeout=None, user_agent=None):
        domain = ascii_domain((domain or "").strip())
        if not DOMAIN_RE.match(domain):
            raise EndpointError(f"invalid wiki domain: {domain!r}")

        self.domain = domain
        self.timeout = timeout if timeout is not None else settings.SITEINFO_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent or settings.SITEINFO_USER_AGENT
        logger.debug("user_agent = %r", self.session.headers["User-Agent"])

        params = {
            "action": "query",
            "meta": "siteinfo",
            "siprop": "|".join(CATEGORIES),
            "format": "json",
            "formatversion": "2",
            "errorformat": "plaintext",
        }
        try:
            prepared = requests.Request(
                "GET", f"https://{domain}{settings.SITEINFO_API_PATH}", params=params
            ).prepare()
        except requests.RequestException as exc:
            raise EndpointError(f"cannot build API URL for {domain!r}: {exc}") from exc
        self.url = prepared.url
        logger.debug("url = %s", self.url)

    def fetch(self) -> dict:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"cannot fetch {self.url}: {exc}") from exc

        logger.info("response status: %s", response.status_code)
        for name in LOGGED_HEADERS:
            logger.debug("response header: %s: %r", name, response.headers.get(name))

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"response is not JSON: {exc}") from exc


def query_from_response(data: dict) -> Query:
    if not isinstance(data, dict):
        raise MalformedResponseError(f"response is not an object: {data!r}")
    if data.get("errors"):
        raise ApiResponseError(data["errors"])
    if data.get("warnings"):
        raise ApiResponseError(data["warnings"])
    if "query" not in data:
        raise QueryNotFoundError()
    return Query(data["query"])


def fetch_query(domain: str, session=None) -> Query:
    logger.info("connecting to wiki domain: %r", domain)
    endpoint = SiteinfoEndpoint(domain, session=session)
    query = query_from_response(endpoint.fetch())

    for name, size in query.sizes().items():
        logger.debug("query %s: (%d)", name, size)
    logger.debug("query general: linktrail=%r", query.linktrail)
    return query
