"""
Core package aggregator for the binary paragraph codec (grammar, tokenizer, records, builder, serde).

## Contracts (single source of truth)
- Grammar — field names, identifier/triplet rules, Depends and Default-Features lists, EBNF.
- Paragraphs — tokenizer and the per-parse field accessor with accumulated diagnostics.
- Schema — typed records (PackageIdentity, VersionInfo, BinaryRecord) with canonicalization.
- Builder — paragraph fields -> BinaryRecord.
- Serde — BinaryRecord -> paragraph text, with a mandatory round-trip self-check.
- Errors/Constants/Typing — exception types, format literals, NewType aliases.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Records are canonicalized once, at construction; equal content means equal records.
- Parsing collects every field diagnostic of a paragraph before failing.

## Downstream usage
- binpara.io — reads/writes multi-paragraph files via `parse_paragraphs`,
  `parse_binary_paragraph`, and `serialize_many`.
- binpara.cli — `check` and `format` commands.

## Examples
```python
from binpara.core import parse_binary_paragraph, parse_single_paragraph, serialize

text = "Package: zlib\\nVersion: 1.3.1\\nArchitecture: x64-linux\\nMulti-Arch: same\\n"
record = parse_binary_paragraph("demo", parse_single_paragraph(text, "demo"))
record.display_name()  # 'zlib:x64-linux'
serialize(record) == text  # True
```
"""

from .builder import parse_binary_paragraph
from .errors import (
    FieldDiagnostic,
    GrammarError,
    MultiArchError,
    ParagraphParseError,
    RoundTripError,
    SchemaError,
)
from .grammar import FieldName
from .paragraphs import FieldValue, Paragraph, ParagraphParser, parse_paragraphs, parse_single_paragraph
from .schema import (
    BinaryRecord,
    FeatureParagraph,
    PackageIdentity,
    SourceParagraph,
    VersionInfo,
    format_binary_paragraph,
)
from .serde import serialize, serialize_many

__all__ = [
    "BinaryRecord",
    "FeatureParagraph",
    "FieldDiagnostic",
    "FieldName",
    "FieldValue",
    "GrammarError",
    "MultiArchError",
    "PackageIdentity",
    "Paragraph",
    "ParagraphParseError",
    "ParagraphParser",
    "RoundTripError",
    "SchemaError",
    "SourceParagraph",
    "VersionInfo",
    "format_binary_paragraph",
    "parse_binary_paragraph",
    "parse_paragraphs",
    "parse_single_paragraph",
    "serialize",
    "serialize_many",
]
