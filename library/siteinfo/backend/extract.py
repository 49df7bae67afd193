"""
Siteinfo query -> the string sets a wikitext parser needs.

Every set is lowercased the same way MediaWiki compares these names, except
the link trail, which comes from the link trail pattern interpreter.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet

from .pcre_engine import LinkTrailEngine, LinkTrailPatternError
from .siteinfo_service import Query

logger = logging.getLogger(__name__)

# link trails longer than this are logged by size only
LINK_TRAIL_LOG_LIMIT = 1 << 7


class ExtractionError(Exception):
    pass


class NamespaceNotFoundError(ExtractionError):
    def __init__(self, canonical: str):
        self.canonical = canonical
        super().__init__(f"namespace not found: {canonical!r}")


class MalformedExtensionTagError(ExtractionError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"extension tag not of the form `<...>`: {tag!r}")


class LinkTrailError(ExtractionError):
    """Wraps the interpreter's error so callers can still inspect kind/position."""

    def __init__(self, cause: LinkTrailPatternError):
        self.cause = cause
        super().__init__(f"link trail: {cause}")


@dataclass
class ConfigurationSource:
    category_namespaces: FrozenSet[str] = field(default_factory=frozenset)
    extension_tags: FrozenSet[str] = field(default_factory=frozenset)
    file_namespaces: FrozenSet[str] = field(default_factory=frozenset)
    link_trail: FrozenSet[str] = field(default_factory=frozenset)
    magic_words: FrozenSet[str] = field(default_factory=frozenset)
    protocols: FrozenSet[str] = field(default_factory=frozenset)
    redirect_magic_words: FrozenSet[str] = field(default_factory=frozenset)


def configuration_source(query: Query) -> ConfigurationSource:
    category_namespaces = namespaces(query, "Category")
    logger.debug("category namespaces: (%d) %s", len(category_namespaces), sorted(category_namespaces))
    file_namespaces = namespaces(query, "File")
    logger.debug("file namespaces: (%d) %s", len(file_namespaces), sorted(file_namespaces))

    tags = extension_tags(query)
    logger.debug("extension tags: (%d) %s", len(tags), sorted(tags))
    protos = protocols(query)
    logger.debug("protocols: (%d) %s", len(protos), sorted(protos))

    trail = link_trail(query)
    if len(trail) <= LINK_TRAIL_LOG_LIMIT:
        logger.debug("link trail: (%d) %r", len(trail), "".join(sorted(trail)))
    else:
        logger.debug("link trail: (%d)", len(trail))

    words = magic_words(query)
    logger.debug("magic words: (%d) %s", len(words), sorted(words))
    redirects = redirect_magic_words(query)
    logger.debug("redirect magic words: (%d) %s", len(redirects), sorted(redirects))

    return ConfigurationSource(
        category_namespaces=category_namespaces,
        extension_tags=tags,
        file_namespaces=file_namespaces,
        link_trail=trail,
        magic_words=words,
        protocols=protos,
        redirect_magic_words=redirects,
    )


def namespaces(query: Query, canonical: str) -> FrozenSet[str]:
    """Local name, canonical name and aliases of one namespace."""
    namespace = next(
        (ns for ns in query.namespaces.values() if ns.get("canonical") == canonical),
        None,
    )
    if namespace is None:
        raise NamespaceNotFoundError(canonical)

    names = [a["alias"] for a in query.namespacealiases if a.get("id") == namespace["id"]]
    names.append(canonical)
    names.append(namespace["name"])
    return frozenset(n.lower() for n in names)


def extension_tags(query: Query) -> FrozenSet[str]:
    tags = set()
    for tag in query.extensiontags:
        if len(tag) < 2 or not tag.startswith("<") or not tag.endswith(">"):
            raise MalformedExtensionTagError(tag)
        tags.add(tag[1:-1].lower())
    return frozenset(tags)


def protocols(query: Query) -> FrozenSet[str]:
    return frozenset(p.lower() for p in query.protocols)


def link_trail(query: Query) -> FrozenSet[str]:
    try:
        return LinkTrailEngine(query.linktrail).characters
    except LinkTrailPatternError as exc:
        raise LinkTrailError(exc) from exc


def magic_words(query: Query) -> FrozenSet[str]:
    """Behaviour switches: every name or alias written as __WORD__."""
    words = set()
    for mw in query.magicwords:
        for name in [*mw.get("aliases", []), mw["name"]]:
            if len(name) >= 4 and name.startswith("__") and name.endswith("__"):
                words.add(name[2:-2].lower())
    return frozenset(words)


def redirect_magic_words(query: Query) -> FrozenSet[str]:
    name = "redirect"
    words = {name}
    for mw in query.magicwords:
        if mw["name"] != name:
            continue
        for alias in mw.get("aliases", []):
            words.add(alias[1:].lower() if alias.startswith("#") else alias.lower())
    return frozenset(words)
