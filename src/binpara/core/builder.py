"""
Record builder: paragraph fields -> canonical BinaryRecord.

Drives a ParagraphParser over one tokenized paragraph, coerces each field, and builds
the record. Field problems are collected across the whole paragraph and reported
together; a paragraph is usually machine-written, and when one field is wrong several
others tend to be wrong too.

Order of checks
1. Identity from Package + Architecture (bad triplet text is fatal right away; a
   package name that is not an identifier is recorded).
2. Version, Port-Version (bad port version is recorded, parsing continues).
3. Feature (must be an identifier when present), Description, Maintainer, Abi.
4. Depends (entries without a triplet take the record's own).
5. Default-Features, core variant only; on a feature variant it stays unconsumed and is
   reported as an unexpected field.
6. Type (legacy, discarded).
7. Any diagnostic -> ParagraphParseError; the Multi-Arch check is skipped.
8. Multi-Arch must be "same" -> otherwise MultiArchError.
9. Construct (and thereby canonicalize) the record.
"""

from __future__ import annotations

import logging

from .coerce import parse_port_version, resolve_dependencies, split_lines
from .constants import MULTI_ARCH_SAME, PORT_VERSION_ERROR
from .errors import GrammarError, MultiArchError
from .grammar import (
    FieldName,
    canonical_triplet,
    is_identifier,
    parse_default_features_list,
    parse_qualified_specifier_list,
)
from .paragraphs import Paragraph, ParagraphParser
from .schema import BinaryRecord, PackageIdentity, VersionInfo
from .typing import Triplet

__all__ = ["parse_binary_paragraph"]

logger = logging.getLogger(__name__)


def parse_binary_paragraph(origin: str, fields: Paragraph) -> BinaryRecord:
    """
    Build a canonical BinaryRecord from one tokenized paragraph.

    Args:
        origin (str): Where the paragraph came from; used in every diagnostic.
        fields (Paragraph): Ordered fields from paragraphs.parse_paragraphs.

    Returns:
        BinaryRecord: The canonicalized record.

    Raises:
        GrammarError: If Architecture is present but not a valid triplet name.
        ParagraphParseError: If any field diagnostic was recorded.
        MultiArchError: If Multi-Arch is not "same" (checked only when no diagnostics).
    """
    parser = ParagraphParser(origin, fields)

    name_field = parser.required_field_with_position(FieldName.PACKAGE)
    name = name_field.text
    if name and not is_identifier(name):
        parser.add_error(name_field, f"invalid package name {name!r}")
    arch = parser.optional_field_with_position(FieldName.ARCHITECTURE)
    triplet: Triplet | None = None
    if arch.row:
        try:
            triplet = canonical_triplet(arch.text)
        except GrammarError as e:
            raise GrammarError(
                f"{origin}:{arch.row}:{arch.column}: {e}", row=arch.row, column=arch.column
            ) from e
    else:
        # Records the missing-field diagnostic.
        parser.required_field(FieldName.ARCHITECTURE)
    spec_text = f"{name}:{triplet or ''}"

    version_field = parser.optional_field_with_position(FieldName.VERSION)
    pv_field = parser.optional_field_with_position(FieldName.PORT_VERSION)
    port_version = 0
    if pv_field.text:
        parsed = parse_port_version(pv_field.text)
        if parsed is None:
            parser.add_error(pv_field, PORT_VERSION_ERROR)
        else:
            port_version = parsed

    feature_field = parser.optional_field_with_position(FieldName.FEATURE)
    feature = feature_field.text
    if feature and not is_identifier(feature):
        parser.add_error(feature_field, f"invalid feature name {feature!r}")
    if feature and (version_field.text or port_version):
        parser.add_error(
            version_field if version_field.row else pv_field,
            "feature paragraphs must not carry a version",
        )
    description = split_lines(parser.optional_field(FieldName.DESCRIPTION))
    maintainers = split_lines(parser.optional_field(FieldName.MAINTAINER))
    abi = parser.optional_field(FieldName.ABI)
    multi_arch = parser.required_field(FieldName.MULTI_ARCH)

    deps_field = parser.optional_field_with_position(FieldName.DEPENDS)
    dependencies: list[PackageIdentity] = []
    try:
        specifiers = parse_qualified_specifier_list(deps_field.text)
    except GrammarError as e:
        parser.add_error(deps_field, str(e), offset=max(e.column - 1, 0))
    else:
        if triplet is not None:
            dependencies = resolve_dependencies(specifiers, triplet)

    default_features: list[str] = []
    if not feature:
        df_field = parser.optional_field_with_position(FieldName.DEFAULT_FEATURES)
        try:
            default_features = parse_default_features_list(df_field.text)
        except GrammarError as e:
            parser.add_error(df_field, str(e), offset=max(e.column - 1, 0))

    # Leftover from an abandoned "alias ports" experiment; accepted and discarded.
    parser.optional_field(FieldName.TYPE)

    error = parser.error(spec_text)
    if error is not None:
        raise error

    # Checked last so that field diagnostics, which say more, win.
    if multi_arch != MULTI_ARCH_SAME:
        raise MultiArchError(spec_text, multi_arch)

    record = BinaryRecord(
        spec=PackageIdentity(name=name, triplet=triplet),
        version=VersionInfo(text=version_field.text, port_version=port_version),
        feature=feature,
        description=description,
        maintainers=maintainers,
        dependencies=dependencies,
        default_features=default_features,
        abi=abi,
    )
    logger.debug("parsed binary paragraph %s from %s", record.display_name(), origin)
    return record
