from __future__ import annotations

import pytest
from pydantic import ValidationError

from binpara.core.schema import (
    BinaryRecord,
    FeatureParagraph,
    PackageIdentity,
    SourceParagraph,
    VersionInfo,
    canonical_dependencies,
    canonical_lines,
    format_binary_paragraph,
)


def pid(name: str, triplet: str = "x64-linux") -> PackageIdentity:
    return PackageIdentity(name=name, triplet=triplet)


def test_identity_canonicalizes_triplet_and_renders() -> None:
    spec = PackageIdentity(name="zlib", triplet="X64-Linux")
    assert spec.triplet == "x64-linux"
    assert str(spec) == "zlib:x64-linux"
    assert spec.dir() == "zlib_x64-linux"


def test_identity_rejects_bad_triplet_and_empty_name() -> None:
    with pytest.raises(ValidationError):
        PackageIdentity(name="zlib", triplet="x64 linux")
    with pytest.raises(ValidationError):
        PackageIdentity(name="", triplet="x64-linux")


def test_identity_is_hashable_and_ordered_by_name_then_triplet() -> None:
    ids = [pid("zlib", "x86-windows"), pid("bzip2"), pid("zlib", "arm64-osx"), pid("bzip2")]
    assert len(set(ids)) == 3
    assert [str(i) for i in sorted(ids)] == [
        "bzip2:x64-linux",
        "bzip2:x64-linux",
        "zlib:arm64-osx",
        "zlib:x86-windows",
    ]


def test_version_info_defaults_and_rendering() -> None:
    assert VersionInfo() == VersionInfo(text="", port_version=0)
    assert str(VersionInfo(text="1.3.1", port_version=2)) == "1.3.1#2"
    assert str(VersionInfo(text="1.3.1")) == "1.3.1"
    with pytest.raises(ValidationError):
        VersionInfo(text="1", port_version=-1)


def test_dependencies_are_sorted_and_deduplicated() -> None:
    record = BinaryRecord(
        spec=pid("curl"),
        dependencies=[pid("zlib"), pid("openssl"), pid("zlib"), pid("openssl", "arm64-linux")],
    )
    assert [str(d) for d in record.dependencies] == [
        "openssl:arm64-linux",
        "openssl:x64-linux",
        "zlib:x64-linux",
    ]


def test_text_lines_are_trimmed_and_blank_lists_collapse() -> None:
    record = BinaryRecord(
        spec=pid("zlib"),
        description=["  Compression ", "", "\tlibrary"],
        maintainers=["   ", ""],
    )
    assert record.description == ["Compression", "", "library"]
    assert record.maintainers == []


def test_canonicalization_is_idempotent() -> None:
    lines = ["  a", " ", "b  "]
    assert canonical_lines(canonical_lines(lines)) == canonical_lines(lines)
    deps = [pid("b"), pid("a"), pid("b")]
    assert canonical_dependencies(canonical_dependencies(deps)) == canonical_dependencies(deps)

    record = BinaryRecord(
        spec=pid("zlib"),
        version=VersionInfo(text="1.3.1"),
        description=[" x "],
        dependencies=[pid("b"), pid("a"), pid("a")],
    )
    again = BinaryRecord.model_validate(record.model_dump())
    assert again == record


def test_input_order_does_not_affect_equality() -> None:
    a = BinaryRecord(spec=pid("zlib"), dependencies=[pid("a"), pid("b")])
    b = BinaryRecord(spec=pid("zlib"), dependencies=[pid("b"), pid("a"), pid("b")])
    assert a == b


def test_equality_covers_every_field() -> None:
    base = BinaryRecord(spec=pid("zlib"), version=VersionInfo(text="1"), abi="x")
    assert base != base.model_copy(update={"abi": "y"})
    assert base != base.model_copy(update={"version": VersionInfo(text="1", port_version=1)})
    assert base != base.model_copy(update={"default_features": ["tools"]})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"version": VersionInfo(text="1.0")},
        {"version": VersionInfo(port_version=1)},
        {"default_features": ["ssl"]},
    ],
)
def test_feature_variant_rejects_core_only_fields(kwargs: dict) -> None:
    with pytest.raises(ValidationError) as ei:
        BinaryRecord(spec=pid("zlib"), feature="tools", **kwargs)
    assert "must not carry" in str(ei.value)


def test_display_names() -> None:
    assert BinaryRecord(spec=pid("zlib")).display_name() == "zlib:x64-linux"
    assert BinaryRecord(spec=pid("zlib"), feature="tools").display_name() == "zlib[tools]:x64-linux"
    assert BinaryRecord(spec=pid("zlib"), feature="core").display_name() == "zlib:x64-linux"


def test_stems() -> None:
    record = BinaryRecord(spec=pid("zlib"), version=VersionInfo(text="1.3.1"))
    assert record.fullstem() == "zlib_1.3.1_x64-linux"
    assert record.dir() == "zlib_x64-linux"


def test_from_source_builds_core_record() -> None:
    source = SourceParagraph(
        name="zlib",
        version=VersionInfo(text="1.3.1", port_version=1),
        description=["Compression library "],
        maintainers=["Jane <jane@example.com>"],
    )
    record = BinaryRecord.from_source(source, ["tools"], "x64-linux", "abc123", [pid("b"), pid("a")])
    assert record.spec == pid("zlib")
    assert record.version == source.version
    assert record.description == ["Compression library"]
    assert record.default_features == ["tools"]
    assert record.abi == "abc123"
    assert [d.name for d in record.dependencies] == ["a", "b"]
    assert not record.is_feature()


def test_from_feature_builds_feature_record() -> None:
    feature = FeatureParagraph(name="tools", description=["Command line tools"])
    record = BinaryRecord.from_feature(pid("zlib"), feature, [pid("zlib")])
    assert record.is_feature()
    assert record.version == VersionInfo()
    assert record.maintainers == []
    assert record.abi == ""
    assert record.default_features == []
    assert record.display_name() == "zlib[tools]:x64-linux"


def test_format_binary_paragraph_dumps_every_field() -> None:
    record = BinaryRecord(
        spec=pid("zlib"),
        version=VersionInfo(text="1.3.1", port_version=2),
        description=["a", "b"],
        dependencies=[pid("bzip2")],
        default_features=["tools"],
        abi="abc",
    )
    dump = format_binary_paragraph(record)
    assert dump == record.format_debug()
    assert dump.splitlines()[1:] == [
        'spec: "zlib:x64-linux"',
        'version: "1.3.1"',
        "port_version: 2",
        'description: ["a", "b"]',
        'maintainers: [""]',
        'feature: ""',
        'default_features: ["tools"]',
        'dependencies: ["bzip2:x64-linux"]',
        'abi: "abc"',
    ]


@pytest.mark.parametrize("name", ["Zlib", "zlib ng", "zlib_ng", "-zlib"])
def test_dependency_names_must_be_identifiers(name: str) -> None:
    with pytest.raises(ValidationError, match="package name must be a lower-case identifier"):
        BinaryRecord(spec=pid("curl"), dependencies=[PackageIdentity(name=name, triplet="x64-linux")])


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("core", "reserved feature name"),
        ("default", "reserved feature name"),
        ("SSL", "default feature must be a lower-case identifier"),
        ("ssl tls", "default feature must be a lower-case identifier"),
    ],
)
def test_default_features_must_be_parseable(value: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        BinaryRecord(spec=pid("curl"), default_features=["http2", value])


@pytest.mark.parametrize("feature", ["Tools", "two words", "tools!"])
def test_feature_name_must_be_identifier(feature: str) -> None:
    with pytest.raises(ValidationError, match="feature name must be a lower-case identifier"):
        BinaryRecord(spec=pid("zlib"), feature=feature)


def test_record_is_frozen_after_construction() -> None:
    record = BinaryRecord(
        spec=pid("zlib"),
        version=VersionInfo(text="1.0"),
        default_features=["tools"],
        dependencies=[pid("a"), pid("b")],
    )
    with pytest.raises(ValidationError):
        record.feature = "tools"
    with pytest.raises(ValidationError):
        record.dependencies = [pid("b"), pid("a"), pid("a")]
    assert record.feature == ""
    assert record == BinaryRecord(
        spec=pid("zlib"),
        version=VersionInfo(text="1.0"),
        default_features=["tools"],
        dependencies=[pid("b"), pid("a"), pid("a")],
    )


def test_revalidating_an_update_applies_every_rule() -> None:
    record = BinaryRecord(spec=pid("zlib"), version=VersionInfo(text="1.0"))
    with pytest.raises(ValidationError, match="must not carry a version"):
        BinaryRecord.model_validate({**record.model_dump(), "feature": "tools"})
    updated = BinaryRecord.model_validate(
        {**record.model_dump(), "dependencies": [pid("b"), pid("a"), pid("a")]}
    )
    assert [d.name for d in updated.dependencies] == ["a", "b"]
