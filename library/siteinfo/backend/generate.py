import json
from typing import Iterable

from .extract import ConfigurationSource

RUST_TYPE = "::parse_wiki_text::ConfigurationSource"

# field name -> True when emitted as a slice of strings, False for one string
FIELDS = (
    ("category_namespaces", True),
    ("extension_tags", True),
    ("file_namespaces", True),
    ("link_trail", False),
    ("magic_words", True),
    ("protocols", True),
    ("redirect_magic_words", True),
)

RUST_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def rust_string(s: str) -> str:
    out = []
    for c in s:
        if c in RUST_ESCAPES:
            out.append(RUST_ESCAPES[c])
        elif not c.isprintable():
            out.append(f"\\u{{{ord(c):x}}}")
        else:
            out.append(c)
    return '"' + "".join(out) + '"'


def rust_slice(items: Iterable[str]) -> str:
    return "&[" + ", ".join(rust_string(s) for s in sorted(items)) + "]"


def render_rust(source: ConfigurationSource) -> str:
    """A constant expression of type parse_wiki_text::ConfigurationSource."""
    lines = [RUST_TYPE + " {"]
    for name, is_slice in FIELDS:
        value = getattr(source, name)
        rendered = rust_slice(value) if is_slice else rust_string("".join(sorted(value)))
        lines.append(f"    {name}: {rendered},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def as_dict(source: ConfigurationSource) -> dict:
    data = {}
    for name, is_slice in FIELDS:
        value = sorted(getattr(source, name))
        data[name] = value if is_slice else "".join(value)
    return data


def render_json(source: ConfigurationSource) -> str:
    return json.dumps(as_dict(source), ensure_ascii=False, indent=2) + "\n"


RENDERERS = {
    "rust": render_rust,
    "json": render_json,
}
