"""
binpara.io — file-level reading and writing of binary paragraph files.

## Responsibilities
- Read files holding consecutive paragraphs into BinaryRecords, reporting every bad
  paragraph at once (or the first one, with fail_fast).
- Write records back atomically (tmp → fsync → os.replace), each paragraph passing the
  serializer's round-trip check before anything touches the destination.

## Public API
- IoSettings — configuration (env > TOML > defaults).
- read_binary_paragraphs / parse_binary_paragraphs — file/text → records.
- write_binary_paragraphs — records → file.

## Import DAG discipline
- Depends only on stdlib and binpara.core.*; MUST NOT import binpara.cli.

## Examples
```python
from binpara.io import IoSettings, read_binary_paragraphs, write_binary_paragraphs

records = read_binary_paragraphs("installed/vcpkg/status")  # doctest: +SKIP
write_binary_paragraphs("status.canonical", records, IoSettings(fsync=False))  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import IoSettings
from .errors import IoConfigError, IoError, IoReadError, IoWriteError
from .read import parse_binary_paragraphs, read_binary_paragraphs
from .write import write_binary_paragraphs

__all__ = [
    "IoSettings",
    "IoError",
    "IoConfigError",
    "IoReadError",
    "IoWriteError",
    "parse_binary_paragraphs",
    "read_binary_paragraphs",
    "write_binary_paragraphs",
]
