"""Naming utilities for code generation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Iterable, Mapping

RUST_KEYWORDS: frozenset[str] = frozenset({
    "abstract",
    "as",
    "async",
    "await",
    "become",
    "box",
    "break",
    "const",
    "continue",
    "crate",
    "do",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "final",
    "fn",
    "for",
    "gen",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "macro",
    "match",
    "mod",
    "move",
    "mut",
    "override",
    "priv",
    "pub",
    "ref",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "super",
    "trait",
    "true",
    "try",
    "type",
    "typeof",
    "union",
    "unsafe",
    "unsized",
    "use",
    "virtual",
    "where",
    "while",
    "yield",
})

# Keywords that cannot be written as raw identifiers (r#...)
_NON_RAW_KEYWORDS: frozenset[str] = frozenset({"self", "Self", "super", "crate"})

# Common irregular plurals
_IRREGULAR_PLURALS: dict[str, str] = {
    "children": "child",
    "people": "person",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "teeth": "tooth",
    "feet": "foot",
    "data": "datum",
    "criteria": "criterion",
    "analyses": "analysis",
    "indices": "index",
    "appendices": "appendix",
    "matrices": "matrix",
    "vertices": "vertex",
    "houses": "house",
    "movies": "movie",
    "cookies": "cookie",
}

# Words with identical singular and plural forms
_INVARIANT_PLURALS: frozenset[str] = frozenset({
    "aircraft",
    "deer",
    "equipment",
    "fish",
    "information",
    "metadata",
    "news",
    "series",
    "sheep",
    "species",
})

# (suffix, replacement), first match wins
_SUFFIX_RULES: tuple[tuple[str, str], ...] = (
    ("ies", "y"),
    ("sses", "ss"),
    ("uses", "us"),
    ("xes", "x"),
    ("ches", "ch"),
    ("shes", "sh"),
    ("s", ""),
)

# A trailing "s" after these endings is part of the singular word
_SINGULAR_ENDINGS: tuple[str, ...] = ("ss", "us", "is")

_LAST_WORD = re.compile(r"([A-Z]?[a-z0-9]+|[A-Z0-9]+)$")


def _match_case(template: str, word: str) -> str:
    if template.isupper():
        return word.upper()
    if template[:1].isupper():
        return word.capitalize()
    return word


@dataclass(frozen=True)
class Singularizer:
    """Rule-table singularization of English plurals.

    Lookup order: invariant words, irregular plurals, then the first suffix
    rule that matches. Words ending in ``ss``, ``us`` or ``is`` keep their
    trailing ``s``. Every rule produces a word that no rule matches again,
    so ``singularize(singularize(w)) == singularize(w)``.
    """

    irregular: Mapping[str, str] = field(
        default_factory=lambda: dict(_IRREGULAR_PLURALS)
    )
    invariant: frozenset[str] = _INVARIANT_PLURALS
    rules: tuple[tuple[str, str], ...] = _SUFFIX_RULES

    def extend(
        self,
        irregular: Mapping[str, str] | None = None,
        invariant: Iterable[str] | None = None,
    ) -> Singularizer:
        """Return a copy with extra irregular plurals and invariant words."""
        merged = dict(self.irregular)
        merged.update({k.lower(): v.lower() for k, v in (irregular or {}).items()})
        words = self.invariant | {w.lower() for w in (invariant or ())}
        return replace(self, irregular=merged, invariant=frozenset(words))

    def singularize_word(self, word: str) -> str:
        """Singularize a single word, preserving its case pattern."""
        lower = word.lower()
        if lower in self.invariant or lower in self.irregular.values():
            return word
        if lower in self.irregular:
            return _match_case(word, self.irregular[lower])

        for suffix, replacement in self.rules:
            if not lower.endswith(suffix) or len(lower) <= len(suffix):
                continue
            if suffix == "s" and lower.endswith(_SINGULAR_ENDINGS):
                return word
            stem = word[: len(word) - len(suffix)]
            if word[-1].isupper():
                replacement = replacement.upper()
            singular = stem + replacement
            if singular.lower() in self.irregular:
                return _match_case(singular, self.irregular[singular.lower()])
            return singular
        return word

    def __call__(self, name: str) -> str:
        """Singularize the last word of a snake, kebab or camel case name."""
        match = _LAST_WORD.search(name)
        if not match:
            return name
        head, word = name[: match.start()], match.group(0)
        return head + self.singularize_word(word)


DEFAULT_SINGULARIZER = Singularizer()


@lru_cache(maxsize=1024)
def singularize(name: str) -> str:
    """Convert a plural name to singular form with the default rule table.

    Uses caching for repeated calls with the same input.
    """
    return DEFAULT_SINGULARIZER(name)


def _split_words(value: str) -> list[str]:
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    value = re.sub(r"[^A-Za-z0-9]+", "_", value)
    return [part for part in value.split("_") if part]


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_pascal_case("hello_world")
        'HelloWorld'
        >>> to_pascal_case("hello-world")
        'HelloWorld'
        >>> to_pascal_case("helloWorld")
        'HelloWorld'
    """
    return "".join(part.capitalize() for part in _split_words(value))


@lru_cache(maxsize=1024)
def to_snake_case(value: str) -> str:
    """Convert a string to snake_case.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_snake_case("HelloWorld")
        'hello_world'
        >>> to_snake_case("hello-world")
        'hello_world'
    """
    return "_".join(part.lower() for part in _split_words(value))


def _escape_identifier(value: str, fallback: str) -> str:
    if not value:
        return fallback
    if not (value[0].isalpha() or value[0] == "_"):
        value = f"_{value}"
    if value in _NON_RAW_KEYWORDS:
        return f"{value}_"
    if value in RUST_KEYWORDS:
        return f"r#{value}"
    return value


@lru_cache(maxsize=1024)
def sanitize_field_name(value: str) -> str:
    """Sanitize a column name for use as a Rust field name.

    Uses caching for repeated calls with the same input.
    """
    return _escape_identifier(to_snake_case(value), "unnamed")


@lru_cache(maxsize=1024)
def sanitize_type_name(value: str) -> str:
    """Sanitize a database identifier for use as a Rust type name."""
    return _escape_identifier(to_pascal_case(value), "Unnamed")


@lru_cache(maxsize=1024)
def sanitize_variant_name(label: str) -> str:
    """Sanitize an enum label for use as a Rust enum variant."""
    return _escape_identifier(to_pascal_case(label), "Unnamed")


def resolve_type_name(
    table_name: str,
    singular: bool = False,
    singularizer: Singularizer | None = None,
) -> str:
    """Map a table name to a Rust struct name."""
    if singular:
        table_name = (singularizer or DEFAULT_SINGULARIZER)(table_name)
    return sanitize_type_name(table_name)
