"""
binpara — codec for binary paragraphs, the key/value records describing built packages.

Subpackages
- binpara.core — zero-IO grammar, tokenizer, typed records, builder, serializer.
- binpara.io — multi-paragraph file reading/writing and settings.
- binpara.cli — ``binpara check`` / ``binpara format``.
"""

__version__ = "0.1.0"
