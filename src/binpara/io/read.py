"""
Reader for files holding consecutive binary paragraphs (e.g., a package status database).

Overview
- Reads the whole file, tokenizes it with binpara.core.paragraphs.parse_paragraphs, and
  builds one BinaryRecord per paragraph with the file path as origin.
- Collects every failing paragraph into one IoReadError unless IoSettings.fail_fast.

Source of truth
- Paragraph syntax and record rules: binpara.core (grammar, paragraphs, builder).
- IO-layer errors: binpara.io.errors.IoReadError.
"""

from __future__ import annotations

import logging
import os

from binpara.core.builder import parse_binary_paragraph
from binpara.core.errors import GrammarError
from binpara.core.paragraphs import parse_paragraphs
from binpara.core.schema import BinaryRecord

from .config import IoSettings
from .errors import IoReadError
from .fs import read_text

logger = logging.getLogger(__name__)


def parse_binary_paragraphs(text: str, origin: str, settings: IoSettings | None = None) -> list[BinaryRecord]:
    """
    Build records from text holding zero or more paragraphs.

    Args:
        text (str): Paragraph text.
        origin (str): Label used in diagnostics.
        settings (IoSettings | None): fail_fast is honored; defaults otherwise.

    Returns:
        list[BinaryRecord]: Records in text order.

    Raises:
        IoReadError: Tokenizing failed, or one or more paragraphs failed to build.
    """
    s = settings or IoSettings()
    try:
        paragraphs = parse_paragraphs(text, origin)
    except GrammarError as exc:
        raise IoReadError(origin, [(-1, exc)]) from exc

    records: list[BinaryRecord] = []
    failures: list[tuple[int, Exception]] = []
    for index, fields in enumerate(paragraphs):
        try:
            records.append(parse_binary_paragraph(origin, fields))
        except ValueError as exc:
            # GrammarError / ParagraphParseError / MultiArchError
            logger.warning("%s: paragraph %d rejected: %s", origin, index + 1, exc)
            failures.append((index, exc))
            if s.fail_fast:
                break
    if failures:
        raise IoReadError(origin, failures)
    return records


def read_binary_paragraphs(
    path: str | os.PathLike[str], settings: IoSettings | None = None
) -> list[BinaryRecord]:
    """
    Read and build every binary paragraph in a file.

    Args:
        path: File to read.
        settings (IoSettings | None): Encoding and fail_fast; defaults otherwise.

    Returns:
        list[BinaryRecord]: Records in file order.

    Raises:
        IoReadError: If any paragraph fails (see parse_binary_paragraphs).
        OSError: If the file cannot be read.
    """
    s = settings or IoSettings()
    p = os.fspath(path)
    records = parse_binary_paragraphs(read_text(p, s.encoding), p, s)
    logger.info("read %d binary paragraph(s) from %s", len(records), p)
    return records
