"""
Value coercers turning raw field text into domain values.

Small pure functions used by the record builder. None of them raise for malformed
input the builder wants to keep reading past; they report failure through the return
value so the builder can record a positional diagnostic and continue.
"""

from __future__ import annotations

from collections.abc import Iterable

from .grammar import ParsedQualifiedSpecifier
from .schema import PackageIdentity
from .typing import Triplet

__all__ = [
    "parse_port_version",
    "split_lines",
    "resolve_dependencies",
]


def parse_port_version(text: str) -> int | None:
    """
    Parse Port-Version text.

    Args:
        text (str): Non-empty field text.

    Returns:
        int | None: The value, or None if text is not a non-negative decimal integer
        (signs, whitespace, and non-ASCII digits are all rejected).

    Examples:
        >>> parse_port_version("3")
        3
        >>> parse_port_version("-1") is None
        True
    """
    if not text or not text.isascii() or not text.isdigit():
        return None
    return int(text)


def split_lines(text: str) -> list[str]:
    """Split a multi-line field on "\\n"; empty text gives []."""
    if not text:
        return []
    return text.split("\n")


def resolve_dependencies(
    specifiers: Iterable[ParsedQualifiedSpecifier], triplet: Triplet
) -> list[PackageIdentity]:
    """
    Map parsed specifiers to identities, defaulting the triplet to the owning record's.

    Feature lists and platform expressions are dropped: a built package depends on
    package instances, and which features were requested is already settled by then.
    """
    return [
        PackageIdentity(name=spec.name, triplet=spec.triplet or triplet) for spec in specifiers
    ]
