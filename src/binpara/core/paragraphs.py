"""
Paragraph tokenizer and field accessor.

Turns raw paragraph text into ordered field/value pairs with source positions, and
exposes a per-parse accessor that hands out required/optional fields while
accumulating positional diagnostics. This module is zero-IO: callers pass text in.

Responsibilities
- Split text into paragraphs (separated by an empty line) and fields (``Name: value``).
- Join continuation lines (leading space or tab) onto the previous field with ``\\n``.
- Track row/column of every value so diagnostics can point at the offending field.
- Accumulate diagnostics per parse in a ParagraphParser owned by a single caller.

Notes
- Continuation lines keep their leading whitespace and lose trailing whitespace; the
  first-line value is stripped on both sides. Consumers that care about indentation
  (Description, Maintainer) trim each line themselves.
- Duplicate field names and lines without a ``:`` are GrammarErrors raised at once;
  nothing downstream can make sense of a paragraph whose fields are ambiguous.

Examples
--------
>>> from binpara.core.paragraphs import parse_single_paragraph
>>> fields = parse_single_paragraph("Package: zlib\\nDescription: a\\n    b\\n", "demo")
>>> fields["Description"].text
'a\\n    b'
>>> fields["Package"].row, fields["Package"].column
(1, 10)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from .errors import FieldDiagnostic, GrammarError, ParagraphParseError
from .grammar import FieldName

__all__ = [
    "FieldValue",
    "Paragraph",
    "parse_paragraphs",
    "parse_single_paragraph",
    "ParagraphParser",
]

_FIELD_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^([A-Za-z0-9-]+):(.*)$")
_BLANKS: Final[str] = " \t"


@dataclass(frozen=True)
class FieldValue:
    """
    One field of a paragraph as read from text.

    Attributes:
        name (str): Field name as written.
        text (str): Field value; continuation lines joined with "\\n".
        row (int): 1-based line of the field name (0 for absent fields).
        column (int): 1-based column where the value starts (0 for absent fields).
    """

    name: str
    text: str = ""
    row: int = 0
    column: int = 0


Paragraph = dict[str, FieldValue]


def _grammar_error(origin: str, row: int, column: int, message: str) -> GrammarError:
    return GrammarError(f"{origin}:{row}:{column}: {message}", row=row, column=column)


def parse_paragraphs(text: str, origin: str) -> list[Paragraph]:
    """
    Tokenize text holding zero or more paragraphs.

    Args:
        text (str): Raw text; "\\r\\n" line endings are accepted.
        origin (str): Label used in error messages (e.g., a file path).

    Returns:
        list[Paragraph]: One ordered field mapping per paragraph, in file order.

    Raises:
        GrammarError: On a malformed field line, a continuation line with no field to
            continue, or a field repeated within one paragraph.
    """
    paragraphs: list[Paragraph] = []
    current: Paragraph = {}
    last: str | None = None
    # Continuation lines collected for the field named by `last`.
    pending: list[str] = []

    def flush_field() -> None:
        nonlocal pending
        if last is not None and pending:
            head = current[last]
            current[last] = FieldValue(
                name=head.name,
                text="\n".join([head.text, *pending]),
                row=head.row,
                column=head.column,
            )
        pending = []

    for row, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip("\r")
        if not line:
            flush_field()
            if current:
                paragraphs.append(current)
            current, last = {}, None
            continue
        if line[0] in _BLANKS:
            if last is None:
                raise _grammar_error(origin, row, 1, "continuation line without a field")
            pending.append(line.rstrip())
            continue
        flush_field()
        match = _FIELD_LINE_RE.match(line)
        if match is None:
            raise _grammar_error(origin, row, 1, "expected a field name followed by ':'")
        name, rest = match.group(1), match.group(2)
        if name in current:
            raise _grammar_error(origin, row, 1, f"duplicate field {name!r}")
        value = rest.strip()
        leading = len(rest) - len(rest.lstrip(_BLANKS))
        column = len(name) + 2 + leading
        current[name] = FieldValue(name=name, text=value, row=row, column=column)
        last = name
    flush_field()
    if current:
        paragraphs.append(current)
    return paragraphs


def parse_single_paragraph(text: str, origin: str) -> Paragraph:
    """
    Tokenize text that must hold exactly one paragraph.

    Raises:
        GrammarError: If the text is malformed or holds zero or several paragraphs.
    """
    paragraphs = parse_paragraphs(text, origin)
    if len(paragraphs) != 1:
        raise GrammarError(f"{origin}: expected exactly one paragraph, found {len(paragraphs)}")
    return paragraphs[0]


def _field_key(name: str | FieldName) -> str:
    return name.value if isinstance(name, FieldName) else name


class ParagraphParser:
    """
    Field accessor with accumulated diagnostics for a single paragraph.

    Each lookup consumes the field. Missing required fields and problems reported via
    add_error are collected rather than raised; error() turns the collection (plus any
    field nobody asked for) into one ParagraphParseError.

    Notes:
        One instance per parse. Instances are never shared across paragraphs.
    """

    def __init__(self, origin: str, fields: Paragraph) -> None:
        self.origin = origin
        self._fields: Paragraph = dict(fields)
        self._diagnostics: list[FieldDiagnostic] = []
        self._row = min((f.row for f in fields.values()), default=0)

    def required_field(self, name: str | FieldName) -> str:
        return self.required_field_with_position(name).text

    def required_field_with_position(self, name: str | FieldName) -> FieldValue:
        key = _field_key(name)
        field = self._fields.pop(key, None)
        if field is None:
            self._diagnostics.append(
                FieldDiagnostic(self.origin, self._row, 0, key, f"missing required field {key!r}")
            )
            return FieldValue(name=key)
        if not field.text:
            self.add_error(field, f"required field {key!r} is empty")
        return field

    def optional_field(self, name: str | FieldName) -> str:
        return self.optional_field_with_position(name).text

    def optional_field_with_position(self, name: str | FieldName) -> FieldValue:
        key = _field_key(name)
        field = self._fields.pop(key, None)
        return field if field is not None else FieldValue(name=key)

    def add_error(self, field: FieldValue, message: str, *, offset: int = 0) -> None:
        """Record a diagnostic at field's position; offset shifts the column into the value."""
        column = field.column + offset if field.column else 0
        self._diagnostics.append(FieldDiagnostic(self.origin, field.row, column, field.name, message))

    def diagnostics(self) -> list[FieldDiagnostic]:
        out = list(self._diagnostics)
        for field in self._fields.values():
            out.append(
                FieldDiagnostic(self.origin, field.row, 1, field.name, f"unexpected field {field.name!r}")
            )
        return out

    def error(self, spec: str) -> ParagraphParseError | None:
        diagnostics = self.diagnostics()
        if not diagnostics:
            return None
        return ParagraphParseError(self.origin, spec, diagnostics)
