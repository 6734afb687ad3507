"""
Core exception types raised by the paragraph grammar, the record builder, and the serializer.

Provides typed exceptions for codec failures:
- GrammarError for tokenizer, triplet, and specifier-list syntax violations.
- SchemaError for schema-level constraints (base of the parse-time errors below).
- ParagraphParseError for the accumulated field diagnostics of one paragraph.
- MultiArchError for a Multi-Arch value other than "same".
- RoundTripError for serializer/parser drift detected by the serializer's self-check.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Model validators in binpara.core.schema raise SchemaError; pydantic surfaces those
      as pydantic.ValidationError at construction time.
    - ParagraphParseError and MultiArchError are deliberately distinct so callers can
      tell "many fields were wrong" from "the record is not a multi-arch paragraph".

Examples:
    Inspect accumulated diagnostics.

    >>> from binpara.core.errors import FieldDiagnostic, ParagraphParseError
    >>> diag = FieldDiagnostic("status", 3, 15, "Port-Version", "port version must be a non-negative integer")
    >>> err = ParagraphParseError("status", "zlib:x64-linux", [diag])
    >>> str(diag)
    'status:3:15: port version must be a non-negative integer'
    >>> len(err.diagnostics)
    1
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

__all__ = [
    "FieldDiagnostic",
    "GrammarError",
    "SchemaError",
    "ParagraphParseError",
    "MultiArchError",
    "RoundTripError",
]


@dataclass(frozen=True)
class FieldDiagnostic:
    """
    One positional problem found while reading a paragraph.

    Attributes:
        origin (str): Where the paragraph came from (path or synthetic label).
        row (int): 1-based line of the offending field (0 when unknown).
        column (int): 1-based column of the offending value (0 when unknown).
        field (str): Field name the diagnostic refers to ("" for paragraph-wide issues).
        message (str): Human-readable description.
    """

    origin: str
    row: int
    column: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.origin}:{self.row}:{self.column}: {self.message}"


class GrammarError(ValueError):
    """Paragraph/specifier syntax failure (bad field line, triplet, or specifier list)."""

    def __init__(self, message: str, *, row: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.row = row
        self.column = column


class SchemaError(ValueError):
    """Schema-level validation failure (required fields, variant rules, policy checks)."""


class ParagraphParseError(SchemaError):
    """
    A paragraph had one or more field diagnostics.

    Attributes:
        origin (str): Paragraph origin label.
        spec (str): Display text of the record identity being parsed.
        diagnostics (tuple[FieldDiagnostic, ...]): Every accumulated diagnostic, in order.
    """

    def __init__(self, origin: str, spec: str, diagnostics: Iterable[FieldDiagnostic]) -> None:
        self.origin = origin
        self.spec = spec
        self.diagnostics = tuple(diagnostics)
        lines = [f"error while parsing the binary paragraph for {spec}"]
        lines.extend(str(d) for d in self.diagnostics)
        super().__init__("\n".join(lines))


class MultiArchError(SchemaError):
    """The Multi-Arch field carried something other than "same"."""

    def __init__(self, spec: str, value: str) -> None:
        self.spec = spec
        self.value = value
        super().__init__(f"{spec}: Multi-Arch must be 'same' but was {value!r}")


class RoundTripError(RuntimeError):
    """
    Serialized output did not parse back into an equal record.

    Attributes:
        original (str): Debug rendering of the record handed to the serializer.
        roundtripped (str): Debug rendering of the re-parsed record ("" if re-parsing failed).
        text (str): The serialized paragraph text.
    """

    def __init__(self, message: str, *, original: str = "", roundtripped: str = "", text: str = "") -> None:
        self.original = original
        self.roundtripped = roundtripped
        self.text = text
        parts = [message]
        if original or roundtripped:
            parts.append("original binary paragraph:" + original)
            parts.append("serialized binary paragraph:" + roundtripped)
        else:
            parts.append(text)
        super().__init__("\n".join(parts))
