"""
Canonical binary paragraph grammar and helpers.

Defines the paragraph field names, identifier and triplet rules, and the two list
grammars the record builder delegates to (qualified dependency specifiers and
default-feature lists). Ships the paragraph EBNF as reference documentation plus the
zero-IO validators/helpers used across the codec. The code is authoritative; the
``field_name``, ``multi_arch`` and ``lower_alnum``/``digit`` productions are checked
against it (at import and in tests).

Responsibilities
- Define the FieldName enum and keep it in sync with the EBNF field_name production.
- Validate identifiers and resolve triplet text to canonical triplet names.
- Parse Depends lists (``name[features]:triplet (platform)``) and Default-Features lists.

Design principles
-----------------
1) One naming standard for the wire format:
   - Field names are Capitalized-Hyphenated (``Port-Version``) exactly as written.
   - Package names, feature names, and triplets are lower-case identifiers
     (``[a-z0-9]+`` runs joined by single hyphens).

2) Syntax only:
   - Nothing here checks that a referenced package or triplet actually exists; callers
     get structured values and decide what they mean.

Downstream usage
----------------
- ``binpara.core.builder`` reads fields by ``FieldName`` value and hands Depends and
  Default-Features text to ``parse_qualified_specifier_list`` and
  ``parse_default_features_list``.
- ``binpara.core.serde`` writes fields in ``FieldName`` declaration order.

Examples
--------
>>> from binpara.core.grammar import canonical_triplet, parse_qualified_specifier_list
>>> canonical_triplet("X64-Linux")
'x64-linux'
>>> [(s.name, s.triplet) for s in parse_qualified_specifier_list("zlib, bzip2:x64-windows")]
[('zlib', None), ('bzip2', 'x64-windows')]
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .errors import GrammarError
from .typing import Triplet

__all__ = [
    "FieldName",
    "EBNF_GRAMMAR",
    "GrammarProduction",
    "ParsedGrammar",
    "PARSED_GRAMMAR",
    "ParsedQualifiedSpecifier",
    # helpers/validators
    "is_identifier",
    "assert_identifier",
    "assert_default_feature",
    "field_name_from_value",
    "canonical_triplet",
    "parse_qualified_specifier_list",
    "parse_default_features_list",
]

# Canonical grammar file next to this module
_EBNF_PATH = Path(__file__).with_name("paragraph.ebnf")


def _load_ebnf_text() -> str:
    # Return the canonical EBNF text (no normalization).
    return _EBNF_PATH.read_text(encoding="utf-8")


EBNF_GRAMMAR: Final[str] = _load_ebnf_text()


@dataclass(slots=True, frozen=True)
class GrammarProduction:
    """Parsed production with convenient accessors."""

    name: str
    expression: str
    alternatives: tuple[str, ...]
    leading_terminals: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ParsedGrammar:
    """Container for parsed grammar productions."""

    productions: dict[str, GrammarProduction]

    def production(self, name: str) -> GrammarProduction:
        try:
            return self.productions[name]
        except KeyError as exc:  # pragma: no cover - defensive
            raise KeyError(f"Unknown grammar production: {name}") from exc

    def terminals(self, name: str) -> tuple[str, ...]:
        return self.production(name).leading_terminals

    @classmethod
    def from_text(cls, text: str) -> ParsedGrammar:
        stripped = _strip_ebnf_comments(text)
        productions: dict[str, GrammarProduction] = {}
        for match in _RULE_RE.finditer(stripped):
            rule_name = match.group(1)
            expression = match.group(2).strip()
            alternatives = _split_alternatives(expression)
            leading = tuple(
                literal
                for literal in (_first_literal(part) for part in alternatives)
                if literal is not None
            )
            productions[rule_name] = GrammarProduction(
                name=rule_name,
                expression=expression,
                alternatives=alternatives,
                leading_terminals=_dedupe_preserving_order(leading),
            )
        return cls(productions=productions)


_COMMENT_RE = re.compile(r"\(\*.*?\*\)", re.DOTALL)
_RULE_RE = re.compile(r"(?ms)^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*;")
_LITERAL_RE = re.compile(r"[\"']([^\"']+)[\"']")


def _strip_ebnf_comments(text: str) -> str:
    return _COMMENT_RE.sub(" ", text)


def _split_alternatives(expression: str) -> tuple[str, ...]:
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0
    quote: str | None = None
    i = 0
    while i < len(expression):
        ch = expression[i]
        if quote is not None:
            buffer.append(ch)
            if ch == quote:
                quote = None
            elif ch == "\\" and i + 1 < len(expression):
                i += 1
                buffer.append(expression[i])
            i += 1
            continue
        if ch in ('"', "'"):
            quote = ch
            buffer.append(ch)
        elif ch in "([{":
            depth += 1
            buffer.append(ch)
        elif ch in ")]}":
            depth = max(0, depth - 1)
            buffer.append(ch)
        elif ch == "|" and depth == 0:
            part = "".join(buffer).strip()
            if part:
                parts.append(part)
            buffer = []
        else:
            buffer.append(ch)
        i += 1
    tail = "".join(buffer).strip()
    if tail:
        parts.append(tail)
    return tuple(parts)


def _first_literal(alt: str) -> str | None:
    match = _LITERAL_RE.search(alt)
    return match.group(1) if match else None


def _dedupe_preserving_order(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return tuple(ordered)


# ============================================================================
# FIELD NAMES
# ============================================================================


class FieldName(Enum):
    """
    Every field a binary paragraph may carry, in serialization order.

    Serialized values are used in:
      - the ``Name: value`` lines of a paragraph
      - EBNF terminals of the ``field_name`` production

    Notes:
      TYPE is a leftover from an abandoned "alias ports" experiment. Readers accept
      and discard it; the serializer never writes it.
    """

    PACKAGE = "Package"
    VERSION = "Version"
    PORT_VERSION = "Port-Version"
    FEATURE = "Feature"
    DEPENDS = "Depends"
    ARCHITECTURE = "Architecture"
    MULTI_ARCH = "Multi-Arch"
    MAINTAINER = "Maintainer"
    ABI = "Abi"
    DESCRIPTION = "Description"
    DEFAULT_FEATURES = "Default-Features"
    TYPE = "Type"


# ============================================================================
# Helpers & Validators (zero I/O)
# ============================================================================

_IDENTIFIER_PATTERN: Final[str] = r"[a-z0-9]+(?:-[a-z0-9]+)*"
_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(_IDENTIFIER_PATTERN)
_TRIPLET_RE: Final[re.Pattern[str]] = re.compile(_IDENTIFIER_PATTERN, re.IGNORECASE)

# Feature names with a fixed meaning that cannot be listed as default features.
_RESERVED_FEATURES: Final[frozenset[str]] = frozenset({"core", "default"})


def is_identifier(value: str) -> bool:
    """
    Check whether a string is a package/feature identifier.

    Args:
      value (str): Candidate string to validate.

    Returns:
      bool: True if value is lower-case alphanumeric runs joined by single hyphens.

    Examples:
      >>> is_identifier("zlib-ng")
      True
      >>> is_identifier("Zlib")
      False
    """
    return bool(_IDENTIFIER_RE.fullmatch(value or ""))


def assert_identifier(value: str, what: str = "value") -> None:
    """
    Validate that a string is an identifier.

    Args:
      value (str): Candidate string to validate.
      what (str): Human-friendly label used in the error message.

    Raises:
      GrammarError: If value is not an identifier.
    """
    if not is_identifier(value):
        raise GrammarError(f"{what} must be a lower-case identifier (got: {value!r})")


def assert_default_feature(value: str) -> None:
    """
    Validate a Default-Features entry: an identifier other than "core" or "default".

    Raises:
      GrammarError: If value is not an identifier or names a reserved feature.
    """
    assert_identifier(value, "default feature")
    if value in _RESERVED_FEATURES:
        raise GrammarError(f"{value!r} is a reserved feature name")


def field_name_from_value(s: str) -> FieldName:
    """
    Parse a field name as written in a paragraph into a FieldName.

    Raises:
      GrammarError: If s is not a known field name.
    """
    try:
        return FieldName(s)
    except ValueError as e:
        raise GrammarError(f"unknown field name {s!r}") from e


def canonical_triplet(text: str) -> Triplet:
    """
    Resolve triplet text to its canonical (lower-case) triplet name.

    Args:
      text (str): Triplet name as written, e.g. "x64-linux" or "X64-Windows".

    Returns:
      Triplet: Canonical triplet name.

    Raises:
      GrammarError: If text is not a syntactically valid triplet name.

    Examples:
      >>> canonical_triplet("arm64-OSX")
      'arm64-osx'
    """
    candidate = (text or "").strip()
    if not _TRIPLET_RE.fullmatch(candidate):
        raise GrammarError(f"invalid triplet name {text!r}")
    return Triplet(candidate.lower())


@dataclass(slots=True, frozen=True)
class ParsedQualifiedSpecifier:
    """
    One entry of a Depends list.

    Attributes:
      name (str): Package name.
      features (tuple[str, ...] | None): Requested features, None when no ``[...]`` given.
      triplet (Triplet | None): Explicit triplet override, None when absent.
      platform (str | None): Raw platform expression text from ``(...)``, None when absent.
    """

    name: str
    features: tuple[str, ...] | None = None
    triplet: Triplet | None = None
    platform: str | None = None


class _Cursor:
    """Character cursor over one list field with GrammarError reporting."""

    def __init__(self, text: str, what: str) -> None:
        self.text = text
        self.pos = 0
        self.what = what

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def fail(self, message: str) -> GrammarError:
        return GrammarError(f"{self.what}: {message} at column {self.pos + 1}", column=self.pos + 1)

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise self.fail(f"expected {ch!r}")
        self.pos += 1

    def identifier(self, kind: str, pattern: re.Pattern[str] = _IDENTIFIER_RE) -> str:
        match = pattern.match(self.text, self.pos)
        if match is None:
            raise self.fail(f"expected {kind}")
        self.pos = match.end()
        return match.group(0)

    def balanced(self, open_ch: str, close_ch: str) -> str:
        self.expect(open_ch)
        start = self.pos
        depth = 1
        while not self.at_end():
            ch = self.text[self.pos]
            if ch == open_ch:
                depth += 1
            elif ch == close_ch:
                depth -= 1
                if depth == 0:
                    inner = self.text[start : self.pos]
                    self.pos += 1
                    return inner.strip()
            self.pos += 1
        raise self.fail(f"unterminated {open_ch!r}")


def _parse_feature_list(cur: _Cursor) -> tuple[str, ...]:
    cur.expect("[")
    features: list[str] = []
    cur.skip_whitespace()
    if cur.peek() == "]":
        cur.pos += 1
        return ()
    while True:
        cur.skip_whitespace()
        features.append(cur.identifier("a feature name"))
        cur.skip_whitespace()
        if cur.peek() == ",":
            cur.pos += 1
            continue
        cur.expect("]")
        return tuple(features)


def _parse_qualified_specifier(cur: _Cursor) -> ParsedQualifiedSpecifier:
    name = cur.identifier("a package name")
    features: tuple[str, ...] | None = None
    triplet: Triplet | None = None
    platform: str | None = None
    if cur.peek() == "[":
        features = _parse_feature_list(cur)
    if cur.peek() == ":":
        cur.pos += 1
        triplet = canonical_triplet(cur.identifier("a triplet name", _TRIPLET_RE))
    cur.skip_whitespace()
    if cur.peek() == "(":
        platform = cur.balanced("(", ")")
    return ParsedQualifiedSpecifier(name=name, features=features, triplet=triplet, platform=platform)


def parse_qualified_specifier_list(text: str) -> list[ParsedQualifiedSpecifier]:
    """
    Parse a comma-separated Depends list.

    Args:
      text (str): Raw field text; may span continuation lines.

    Returns:
      list[ParsedQualifiedSpecifier]: Entries in written order (duplicates kept).

    Raises:
      GrammarError: On any syntax error; ``column`` points into text (1-based).

    Examples:
      >>> s = parse_qualified_specifier_list("curl[ssl,http2]:x64-linux (linux)")[0]
      >>> (s.name, s.features, s.triplet, s.platform)
      ('curl', ('ssl', 'http2'), 'x64-linux', 'linux')
    """
    cur = _Cursor(text or "", "dependency list")
    out: list[ParsedQualifiedSpecifier] = []
    cur.skip_whitespace()
    if cur.at_end():
        return out
    while True:
        cur.skip_whitespace()
        out.append(_parse_qualified_specifier(cur))
        cur.skip_whitespace()
        if cur.at_end():
            return out
        cur.expect(",")


def parse_default_features_list(text: str) -> list[str]:
    """
    Parse a comma-separated Default-Features list.

    Args:
      text (str): Raw field text.

    Returns:
      list[str]: Feature names in written order.

    Raises:
      GrammarError: If an entry is not an identifier or names a reserved feature.

    Examples:
      >>> parse_default_features_list("ssl, zstd")
      ['ssl', 'zstd']
    """
    cur = _Cursor(text or "", "default features list")
    out: list[str] = []
    cur.skip_whitespace()
    if cur.at_end():
        return out
    while True:
        cur.skip_whitespace()
        start = cur.pos
        name = cur.identifier("a feature name")
        if name in _RESERVED_FEATURES:
            cur.pos = start
            raise cur.fail(f"{name!r} is a reserved feature name")
        out.append(name)
        cur.skip_whitespace()
        if cur.at_end():
            return out
        cur.expect(",")


def _assert_production_matches_enum(
    grammar: ParsedGrammar, rule_name: str, enum_cls: type[Enum]
) -> None:
    actual = list(grammar.terminals(rule_name))
    expected = [member.value for member in enum_cls]
    if actual != expected:
        actual_set = set(actual)
        expected_set = set(expected)
        issues: list[str] = []
        missing = expected_set - actual_set
        extra = actual_set - expected_set
        if missing:
            issues.append(f"missing {sorted(missing)}")
        if extra:
            issues.append(f"unexpected {sorted(extra)}")
        if not issues:
            issues.append("ordering differs")
        raise ValueError(
            f"Grammar production {rule_name!r} out of sync with {enum_cls.__name__}: "
            + "; ".join(issues)
        )


PARSED_GRAMMAR: Final[ParsedGrammar] = ParsedGrammar.from_text(EBNF_GRAMMAR)
_assert_production_matches_enum(PARSED_GRAMMAR, "field_name", FieldName)
