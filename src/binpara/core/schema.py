"""
Pydantic v2 models for package identities, versions, and binary paragraph records.

A BinaryRecord describes either the core feature of a built package or one named
optional feature of it, for one triplet. Records are canonicalized exactly once, by the
model's field validators, and are frozen afterwards, so two records with the
same logical content compare and serialize identically no matter how their inputs
were ordered.

Responsibilities
- Define PackageIdentity, VersionInfo, SourceParagraph, FeatureParagraph, BinaryRecord.
- Enforce the core/feature variant rule and identifier names at construction time.
- Canonicalize dependencies (sorted, de-duplicated) and multi-line text fields.
- Provide display renderings (display name, debug dump, directory/file stems).

Style
- Zero-IO (stdlib + pydantic only).
- Variant violations raise SchemaError inside validators; pydantic surfaces them as
  pydantic.ValidationError.

References
- grammar: src/binpara/core/grammar.py (triplet canonicalization)
- builder: src/binpara/core/builder.py (text -> BinaryRecord)
- serde: src/binpara/core/serde.py (BinaryRecord -> text, round-trip self-check)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import CORE_FEATURE
from .errors import SchemaError
from .grammar import assert_default_feature, assert_identifier, canonical_triplet
from .typing import Triplet

__all__ = [
    "PackageIdentity",
    "VersionInfo",
    "SourceParagraph",
    "FeatureParagraph",
    "BinaryRecord",
    "canonical_dependencies",
    "canonical_lines",
    "format_binary_paragraph",
]


# ============================================================================
# Identities and versions
# ============================================================================


class PackageIdentity(BaseModel):
    """
    Uniquely identifies a built package instance for one triplet.

    Attributes:
        name (str): Package name (lower-case identifier).
        triplet (Triplet): Canonical triplet name.

    Notes:
        Instances are frozen and hashable, and ordered by (name, triplet); that order is
        the canonical order of a record's dependency list.
        Names must be identifiers because Depends lists are parsed by the identifier
        grammar; anything else could not be read back.

    Examples:
        >>> from binpara.core.schema import PackageIdentity
        >>> str(PackageIdentity(name="zlib", triplet="x64-linux"))
        'zlib:x64-linux'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    triplet: Triplet

    @field_validator("name")
    @classmethod
    def _identifier_name(cls, v: str) -> str:
        assert_identifier(v, "package name")
        return v

    @field_validator("triplet", mode="before")
    @classmethod
    def _canonical_triplet(cls, v: Any) -> Any:
        """Resolve triplet text via grammar.canonical_triplet (GrammarError on bad names)."""
        return canonical_triplet(str(v))

    def sort_key(self) -> tuple[str, str]:
        return (self.name, self.triplet)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageIdentity):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{self.name}:{self.triplet}"

    def dir(self) -> str:
        """Directory stem for this package instance, ``name_triplet``."""
        return f"{self.name}_{self.triplet}"


class VersionInfo(BaseModel):
    """
    Version text plus port revision.

    Attributes:
        text (str): Version text, kept verbatim.
        port_version (int): Non-negative port revision; 0 when absent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = ""
    port_version: int = Field(0, ge=0)

    def __str__(self) -> str:
        if self.port_version:
            return f"{self.text}#{self.port_version}"
        return self.text


# ============================================================================
# Build-time inputs
# ============================================================================


class SourceParagraph(BaseModel):
    """
    The parts of a source package descriptor a core BinaryRecord is built from.

    Attributes:
        name (str): Package name.
        version (VersionInfo): Source version.
        description (list[str]): Description lines.
        maintainers (list[str]): Maintainer lines.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    version: VersionInfo = Field(default_factory=VersionInfo)
    description: list[str] = Field(default_factory=list)
    maintainers: list[str] = Field(default_factory=list)


class FeatureParagraph(BaseModel):
    """Name and description of one optional source feature."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    description: list[str] = Field(default_factory=list)


# ============================================================================
# Canonicalization helpers
# ============================================================================


def canonical_dependencies(deps: Iterable[PackageIdentity]) -> list[PackageIdentity]:
    """Sort by (name, triplet) and drop duplicates."""
    return sorted(set(deps))


def canonical_lines(lines: Iterable[str]) -> list[str]:
    """
    Strip every line; collapse an all-blank list to [].

    Examples:
        >>> canonical_lines(["  a ", "", " b"])
        ['a', '', 'b']
        >>> canonical_lines(["  ", ""])
        []
    """
    stripped = [line.strip() for line in lines]
    if all(not line for line in stripped):
        return []
    return stripped


# ============================================================================
# Binary records
# ============================================================================


class BinaryRecord(BaseModel):
    """
    One binary paragraph: the core feature, or one named feature, of a built package.

    Attributes:
        spec (PackageIdentity): Package name and triplet.
        version (VersionInfo): Version of the core variant; default for feature variants.
        feature (str): "" for the core variant, otherwise the feature name.
        description (list[str]): Description lines.
        maintainers (list[str]): Maintainer lines.
        dependencies (list[PackageIdentity]): Sorted, de-duplicated dependencies.
        default_features (list[str]): Default features (core variant only).
        abi (str): Opaque ABI tag; "" for builds not yet hashed.

    Raises:
        binpara.core.errors.SchemaError: (as pydantic.ValidationError) if a feature
            variant carries a version or default features.
        binpara.core.errors.GrammarError: (as pydantic.ValidationError) if the feature
            name or a default feature is not an identifier, or a default feature is
            reserved ("core", "default").

    Notes:
        Records are frozen: every value is canonicalized by the field validators and
        checked by the variant rule exactly once, at construction. Build a new record
        (or use model_validate) to change one.

    Examples:
        >>> from binpara.core.schema import BinaryRecord, PackageIdentity
        >>> spec = PackageIdentity(name="zlib", triplet="x64-linux")
        >>> BinaryRecord(spec=spec, feature="tools").display_name()
        'zlib[tools]:x64-linux'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    spec: PackageIdentity
    version: VersionInfo = Field(default_factory=VersionInfo)
    feature: str = ""
    description: list[str] = Field(default_factory=list)
    maintainers: list[str] = Field(default_factory=list)
    dependencies: list[PackageIdentity] = Field(default_factory=list)
    default_features: list[str] = Field(default_factory=list)
    abi: str = ""

    @field_validator("feature")
    @classmethod
    def _identifier_feature(cls, v: str) -> str:
        if v:
            assert_identifier(v, "feature name")
        return v

    @field_validator("default_features")
    @classmethod
    def _valid_default_features(cls, v: list[str]) -> list[str]:
        for name in v:
            assert_default_feature(name)
        return v

    @field_validator("dependencies")
    @classmethod
    def _canonical_dependencies(cls, v: list[PackageIdentity]) -> list[PackageIdentity]:
        return canonical_dependencies(v)

    @field_validator("description", "maintainers")
    @classmethod
    def _canonical_lines(cls, v: list[str]) -> list[str]:
        return canonical_lines(v)

    @model_validator(mode="after")
    def _check_variant(self) -> BinaryRecord:
        """
        Enforce the core/feature variant rule.

        Raises:
            SchemaError: If a feature variant carries a version or default features.
        """
        if self.feature:
            if self.version != VersionInfo():
                raise SchemaError(
                    f"feature paragraph {self.display_name()} must not carry a version "
                    f"(got {str(self.version)!r})"
                )
            if self.default_features:
                raise SchemaError(
                    f"feature paragraph {self.display_name()} must not carry default features"
                )
        return self

    @classmethod
    def from_source(
        cls,
        source: SourceParagraph,
        default_features: Iterable[str],
        triplet: str,
        abi_tag: str,
        deps: Iterable[PackageIdentity],
    ) -> BinaryRecord:
        """Build the core record of a freshly built package."""
        return cls(
            spec=PackageIdentity(name=source.name, triplet=triplet),
            version=source.version,
            description=list(source.description),
            maintainers=list(source.maintainers),
            default_features=list(default_features),
            dependencies=list(deps),
            abi=abi_tag,
        )

    @classmethod
    def from_feature(
        cls,
        spec: PackageIdentity,
        feature: FeatureParagraph,
        deps: Iterable[PackageIdentity],
    ) -> BinaryRecord:
        """Build the record of one optional feature; no version, maintainers, or abi."""
        return cls(
            spec=spec,
            feature=feature.name,
            description=list(feature.description),
            dependencies=list(deps),
        )

    def is_feature(self) -> bool:
        return bool(self.feature)

    def display_name(self) -> str:
        if not self.is_feature() or self.feature == CORE_FEATURE:
            return f"{self.spec.name}:{self.spec.triplet}"
        return f"{self.spec.name}[{self.feature}]:{self.spec.triplet}"

    def dir(self) -> str:
        return self.spec.dir()

    def fullstem(self) -> str:
        """File stem ``name_version_triplet`` used for built package archives."""
        return f"{self.spec.name}_{self.version.text}_{self.spec.triplet}"

    def format_debug(self) -> str:
        return format_binary_paragraph(self)


def format_binary_paragraph(record: BinaryRecord) -> str:
    """
    Render every field of a record for diagnostics. The output is never parsed back.

    Returns:
        str: A newline-led, one-field-per-line dump.
    """
    join = '", "'.join
    return (
        f'\nspec: "{record.spec}"'
        f'\nversion: "{record.version.text}"'
        f"\nport_version: {record.version.port_version}"
        f'\ndescription: ["{join(record.description)}"]'
        f'\nmaintainers: ["{join(record.maintainers)}"]'
        f'\nfeature: "{record.feature}"'
        f'\ndefault_features: ["{join(record.default_features)}"]'
        f'\ndependencies: ["{join(str(d) for d in record.dependencies)}"]'
        f'\nabi: "{record.abi}"'
    )
