"""
Paragraph format constants shared by the builder, serializer, and IO layer.

Defines the literal values the binary paragraph format pins down: the only accepted
Multi-Arch value, the joiners used when rendering list fields, and the synthetic origin
label used by the serializer's self-check. This module is zero-IO.

Notes:
    - Changing PARAGRAPH_JOINER changes the on-disk format; the tokenizer accepts any
      leading whitespace on continuation lines, so older files remain readable.
    - SANITY_PARSE_ORIGIN appears in diagnostics produced while re-parsing freshly
      serialized text, which makes serializer drift easy to tell apart from bad input.
"""

from __future__ import annotations

__all__ = [
    "MULTI_ARCH_SAME",
    "CORE_FEATURE",
    "LIST_JOINER",
    "PARAGRAPH_JOINER",
    "SANITY_PARSE_ORIGIN",
    "PORT_VERSION_ERROR",
]

# The single Multi-Arch value binary paragraphs may carry.
MULTI_ARCH_SAME: str = "same"

# Feature name treated like the core variant when rendering display names.
CORE_FEATURE: str = "core"

# Joiner for comma-separated fields (Depends, Default-Features).
LIST_JOINER: str = ", "

# Joiner for multi-line fields (Description, Maintainer): newline plus continuation indent.
PARAGRAPH_JOINER: str = "\n    "

SANITY_PARSE_ORIGIN: str = "binpara.core.serde.serialize(BinaryRecord)"

PORT_VERSION_ERROR: str = "port version must be a non-negative integer"
