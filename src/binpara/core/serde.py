"""
Binary paragraph serialization with a mandatory round-trip self-check.

Renders a canonical BinaryRecord to paragraph text in a fixed field order, then parses
the text back through the regular tokenizer and record builder and requires the result
to equal the input. The check is unconditional: it is the only thing that notices the
serializer and the parser drifting apart. This module is zero-IO.

Notes:
    - Field order: Package, Version, Port-Version, Feature, Depends, Architecture,
      Multi-Arch, Maintainer, Abi, Description, Default-Features.
    - Empty fields are omitted, as is Port-Version 0 and Feature on the core variant.
      Architecture and Multi-Arch are always written.
    - A dependency on the record's own triplet is written as a bare name.

References:
    - builder: src/binpara/core/builder.py
    - tokenizer: src/binpara/core/paragraphs.py
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .builder import parse_binary_paragraph
from .constants import LIST_JOINER, MULTI_ARCH_SAME, PARAGRAPH_JOINER, SANITY_PARSE_ORIGIN
from .errors import RoundTripError
from .grammar import FieldName
from .paragraphs import parse_single_paragraph
from .schema import BinaryRecord, PackageIdentity, format_binary_paragraph
from .typing import Triplet

__all__ = [
    "serialize",
    "serialize_many",
]

logger = logging.getLogger(__name__)


def _serialize_string(name: FieldName, value: str, out: list[str]) -> None:
    if not value:
        return
    out.append(f"{name.value}: {value}\n")


def _serialize_array(
    name: FieldName, values: list[str], out: list[str], joiner: str = LIST_JOINER
) -> None:
    if not values:
        return
    out.append(f"{name.value}: {joiner.join(values)}\n")


def _serialize_paragraph(name: FieldName, lines: list[str], out: list[str]) -> None:
    _serialize_array(name, lines, out, PARAGRAPH_JOINER)


def _serialize_deps_list(deps: Iterable[PackageIdentity], target: Triplet) -> str:
    return LIST_JOINER.join(dep.name if dep.triplet == target else str(dep) for dep in deps)


def _check_round_trip(record: BinaryRecord, text: str) -> None:
    """
    Re-parse freshly serialized text and require equality with the source record.

    Raises:
        RoundTripError: If the text does not parse, or parses to a different record.
    """
    try:
        fields = parse_single_paragraph(text, SANITY_PARSE_ORIGIN)
        reparsed = parse_binary_paragraph(SANITY_PARSE_ORIGIN, fields)
    except ValueError as e:
        # GrammarError, SchemaError subclasses, and pydantic.ValidationError
        raise RoundTripError(
            f"failed to parse serialized binary paragraph for {record.display_name()}: {e}",
            text=text,
        ) from e
    if reparsed != record:
        raise RoundTripError(
            f"serialized binary paragraph for {record.display_name()} does not round-trip",
            original=format_binary_paragraph(record),
            roundtripped=format_binary_paragraph(reparsed),
            text=text,
        )


def serialize(record: BinaryRecord) -> str:
    """
    Render a record as paragraph text and verify it parses back to an equal record.

    Args:
        record (BinaryRecord): Canonical record.

    Returns:
        str: Paragraph text; every field line ends with "\\n".

    Raises:
        RoundTripError: If the rendered text does not round-trip (serializer/parser drift,
            or record content the format cannot carry, such as a newline in Version).

    Examples:
        >>> from binpara.core.schema import BinaryRecord, PackageIdentity, VersionInfo
        >>> r = BinaryRecord(spec=PackageIdentity(name="zlib", triplet="x64-linux"),
        ...                  version=VersionInfo(text="1.3.1"))
        >>> print(serialize(r), end="")
        Package: zlib
        Version: 1.3.1
        Architecture: x64-linux
        Multi-Arch: same
    """
    out: list[str] = []
    spec = record.spec

    _serialize_string(FieldName.PACKAGE, spec.name, out)

    _serialize_string(FieldName.VERSION, record.version.text, out)
    if record.version.port_version != 0:
        out.append(f"{FieldName.PORT_VERSION.value}: {record.version.port_version}\n")

    if record.is_feature():
        _serialize_string(FieldName.FEATURE, record.feature, out)

    if record.dependencies:
        _serialize_string(
            FieldName.DEPENDS, _serialize_deps_list(record.dependencies, spec.triplet), out
        )

    _serialize_string(FieldName.ARCHITECTURE, spec.triplet, out)
    _serialize_string(FieldName.MULTI_ARCH, MULTI_ARCH_SAME, out)

    _serialize_paragraph(FieldName.MAINTAINER, record.maintainers, out)

    _serialize_string(FieldName.ABI, record.abi, out)

    _serialize_paragraph(FieldName.DESCRIPTION, record.description, out)

    _serialize_array(FieldName.DEFAULT_FEATURES, record.default_features, out)

    text = "".join(out)
    _check_round_trip(record, text)
    logger.debug("serialized binary paragraph %s", record.display_name())
    return text


def serialize_many(records: Iterable[BinaryRecord]) -> str:
    """Serialize records as consecutive paragraphs separated by one empty line."""
    return "\n".join(serialize(record) for record in records)
