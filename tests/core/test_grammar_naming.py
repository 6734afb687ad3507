import pytest

from binpara.core.errors import GrammarError
from binpara.core.grammar import (
    FieldName,
    assert_default_feature,
    assert_identifier,
    canonical_triplet,
    field_name_from_value,
    is_identifier,
    parse_default_features_list,
    parse_qualified_specifier_list,
)


@pytest.mark.parametrize("value", ["zlib", "zlib-ng", "7zip", "a-b-c"])
def test_identifiers_accepted(value: str) -> None:
    assert is_identifier(value)


@pytest.mark.parametrize("value", ["", "Zlib", "zlib_ng", "-zlib", "zlib-", "a--b"])
def test_identifiers_rejected(value: str) -> None:
    assert not is_identifier(value)


def test_canonical_triplet_lowercases() -> None:
    assert canonical_triplet("X64-Windows-Static") == "x64-windows-static"


@pytest.mark.parametrize("bad", ["", "x64 linux", "x64_linux", "x64-linux:"])
def test_canonical_triplet_rejects_malformed(bad: str) -> None:
    with pytest.raises(GrammarError, match="invalid triplet name"):
        canonical_triplet(bad)


def test_field_name_from_value() -> None:
    assert field_name_from_value("Port-Version") is FieldName.PORT_VERSION
    with pytest.raises(GrammarError, match="unknown field name"):
        field_name_from_value("port-version")


def test_specifier_list_empty() -> None:
    assert parse_qualified_specifier_list("") == []
    assert parse_qualified_specifier_list("   ") == []


def test_specifier_list_bare_and_qualified() -> None:
    specs = parse_qualified_specifier_list("zlib, bzip2:X64-Windows")
    assert [(s.name, s.triplet) for s in specs] == [("zlib", None), ("bzip2", "x64-windows")]
    assert specs[0].features is None
    assert specs[0].platform is None


def test_specifier_list_features_and_platform() -> None:
    (spec,) = parse_qualified_specifier_list("curl[ssl, http2]:x64-linux (linux & !uwp)")
    assert spec.name == "curl"
    assert spec.features == ("ssl", "http2")
    assert spec.triplet == "x64-linux"
    assert spec.platform == "linux & !uwp"


def test_specifier_list_spans_continuation_lines() -> None:
    specs = parse_qualified_specifier_list("zlib,\n    bzip2")
    assert [s.name for s in specs] == ["zlib", "bzip2"]


def test_specifier_list_keeps_duplicates() -> None:
    specs = parse_qualified_specifier_list("zlib, zlib")
    assert [s.name for s in specs] == ["zlib", "zlib"]


@pytest.mark.parametrize("bad", ["zlib,", "Zlib", "zlib bzip2", "zlib[ssl", "zlib:", "zlib (linux"])
def test_specifier_list_rejects_malformed(bad: str) -> None:
    with pytest.raises(GrammarError) as ei:
        parse_qualified_specifier_list(bad)
    assert ei.value.column >= 1


def test_default_features_list() -> None:
    assert parse_default_features_list("") == []
    assert parse_default_features_list("ssl, zstd") == ["ssl", "zstd"]


@pytest.mark.parametrize("bad", ["core", "ssl, default", "ssl,", "Ssl"])
def test_default_features_list_rejects(bad: str) -> None:
    with pytest.raises(GrammarError):
        parse_default_features_list(bad)


def test_assert_identifier_names_the_value() -> None:
    assert_identifier("zlib-ng", "package name")
    with pytest.raises(GrammarError, match="package name must be a lower-case identifier"):
        assert_identifier("Zlib", "package name")


@pytest.mark.parametrize("bad", ["core", "default", "SSL", ""])
def test_assert_default_feature_rejects(bad: str) -> None:
    with pytest.raises(GrammarError):
        assert_default_feature(bad)


def test_assert_default_feature_accepts_identifiers() -> None:
    assert_default_feature("http2")
