from __future__ import annotations

import pytest

from binpara.core import serde
from binpara.core.builder import parse_binary_paragraph
from binpara.core.errors import RoundTripError
from binpara.core.paragraphs import parse_paragraphs, parse_single_paragraph
from binpara.core.schema import BinaryRecord, FeatureParagraph, PackageIdentity, VersionInfo
from binpara.core.serde import serialize, serialize_many


def pid(name: str, triplet: str = "x64-linux") -> PackageIdentity:
    return PackageIdentity(name=name, triplet=triplet)


def parse(text: str) -> BinaryRecord:
    return parse_binary_paragraph("test", parse_single_paragraph(text, "test"))


FULL = BinaryRecord(
    spec=pid("zlib"),
    version=VersionInfo(text="1.3.1", port_version=2),
    description=["Compression", "library"],
    maintainers=["Jane <jane@example.com>"],
    dependencies=[pid("openssl", "arm64-linux"), pid("bzip2")],
    default_features=["tools"],
    abi="abc123",
)


def test_serialize_full_record_field_order() -> None:
    assert serialize(FULL) == (
        "Package: zlib\n"
        "Version: 1.3.1\n"
        "Port-Version: 2\n"
        "Depends: bzip2, openssl:arm64-linux\n"
        "Architecture: x64-linux\n"
        "Multi-Arch: same\n"
        "Maintainer: Jane <jane@example.com>\n"
        "Abi: abc123\n"
        "Description: Compression\n"
        "    library\n"
        "Default-Features: tools\n"
    )


def test_serialize_feature_record() -> None:
    record = BinaryRecord.from_feature(
        pid("zlib"), FeatureParagraph(name="tools", description=["Build tools"]), [pid("zlib")]
    )
    assert serialize(record) == (
        "Package: zlib\n"
        "Feature: tools\n"
        "Depends: zlib\n"
        "Architecture: x64-linux\n"
        "Multi-Arch: same\n"
        "Description: Build tools\n"
    )


def test_empty_fields_are_omitted() -> None:
    text = serialize(BinaryRecord(spec=pid("zlib")))
    assert text == "Package: zlib\nArchitecture: x64-linux\nMulti-Arch: same\n"
    assert "Maintainer:" not in text
    assert "Abi:" not in text
    assert "Port-Version:" not in text
    assert "Feature:" not in text


def test_dependency_rendering_depends_on_triplet() -> None:
    record = BinaryRecord(spec=pid("curl"), dependencies=[pid("zlib"), pid("zlib", "x64-windows")])
    assert "Depends: zlib, zlib:x64-windows\n" in serialize(record)


@pytest.mark.parametrize(
    "record",
    [
        FULL,
        BinaryRecord(spec=pid("zlib")),
        BinaryRecord(spec=pid("zlib"), feature="core"),
        BinaryRecord(spec=pid("zlib"), description=["a", "", "b"]),
        BinaryRecord(spec=pid("zlib"), description=["", "a"]),
        BinaryRecord(spec=pid("zlib"), description=["a", ""]),
        BinaryRecord(spec=pid("zlib"), maintainers=["A <a@x>", "B <b@x>"]),
        BinaryRecord(spec=pid("zlib"), version=VersionInfo(text="2024-01-01", port_version=7)),
        BinaryRecord(spec=pid("curl"), feature="ssl", dependencies=[pid("openssl", "arm64-osx")]),
    ],
)
def test_round_trip_law(record: BinaryRecord) -> None:
    assert parse(serialize(record)) == record


def test_parsed_records_reserialize_identically() -> None:
    text = (
        "Package: zlib\n"
        "Version: 1.3.1\n"
        "Depends: zlib-ng, bzip2, zlib-ng\n"
        "Architecture: x64-linux\n"
        "Multi-Arch: same\n"
        "Description:   padded  \n"
        "      lines   \n"
        "Type: Port\n"
    )
    once = serialize(parse(text))
    assert once == serialize(parse(once))
    assert "Depends: bzip2, zlib-ng\n" in once
    assert "Description: padded\n    lines\n" in once


def test_serialize_many_separates_paragraphs() -> None:
    text = serialize_many([FULL, BinaryRecord(spec=pid("bzip2"))])
    paragraphs = parse_paragraphs(text, "test")
    assert len(paragraphs) == 2
    assert "\n\nPackage: bzip2\n" in text


def test_unrepresentable_content_fails_self_check() -> None:
    record = BinaryRecord(spec=pid("zlib"), version=VersionInfo(text="1.0\nAbi: forged"))
    with pytest.raises(RoundTripError) as ei:
        serialize(record)
    assert ei.value.text.startswith("Package: zlib\n")


def test_reparse_failure_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(serde, "PARAGRAPH_JOINER", "\n")
    record = BinaryRecord(spec=pid("zlib"), description=["a", "b"])
    with pytest.raises(RoundTripError, match="failed to parse serialized binary paragraph"):
        serialize(record)


def test_mismatch_reports_both_renderings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        serde, "_serialize_deps_list", lambda deps, target: ", ".join(d.name for d in deps)
    )
    record = BinaryRecord(spec=pid("curl"), dependencies=[pid("zlib", "x64-windows")])
    with pytest.raises(RoundTripError, match="does not round-trip") as ei:
        serialize(record)
    assert 'dependencies: ["zlib:x64-windows"]' in ei.value.original
    assert 'dependencies: ["zlib:x64-linux"]' in ei.value.roundtripped
    assert "original binary paragraph:" in str(ei.value)
    assert "serialized binary paragraph:" in str(ei.value)
