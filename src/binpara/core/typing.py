"""
Lightweight typing aliases used across the paragraph codec.

Provides minimal NewTypes to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from binpara.core.typing import Triplet
    >>> def describe(t: Triplet) -> str:
    ...     return f"triplet:{t}"
    >>> describe(Triplet("x64-linux"))
    'triplet:x64-linux'
"""

from __future__ import annotations

from typing import NewType

__all__ = [
    "Triplet",
]

# Canonical (lower-case) triplet name; produce via grammar.canonical_triplet.
Triplet = NewType("Triplet", str)
