"""
Custom exceptions for the binpara.io module.

Purpose
- Provide IO-layer specific error types that map cleanly to responsibilities in binpara.io.
- Keep binpara.core as the source of truth for grammar/schema/round-trip errors (see
  binpara.core.errors).

Source of truth and boundaries
- binpara.core raises GrammarError, ParagraphParseError, MultiArchError, RoundTripError.
- binpara.io raises Io* errors for file-level concerns:
  - IoConfigError: invalid configuration value.
  - IoReadError: one or more paragraphs of a file failed to parse.
  - IoWriteError: serialization or the atomic write path failed.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from collections.abc import Iterable


class IoError(Exception):
    """
    Base class for IO-related errors in binpara.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from binpara.core errors.
    """


class IoConfigError(IoError):
    """
    Raised when IO configuration is invalid.

    Examples:
        - Unknown log level name
    """


class IoReadError(IoError):
    """
    Raised when paragraphs of a file fail to tokenize or build.

    Attributes:
        path (str): File that was read.
        failures (tuple[tuple[int, Exception], ...]): (paragraph index, cause) per failure;
            index -1 marks a tokenizer failure covering the whole file.
    """

    def __init__(self, path: str, failures: Iterable[tuple[int, Exception]]) -> None:
        self.path = path
        self.failures = tuple(failures)
        lines = [f"{path}: {len(self.failures)} paragraph(s) failed to parse"]
        for index, cause in self.failures:
            where = "file" if index < 0 else f"paragraph {index + 1}"
            lines.append(f"[{where}] {cause}")
        super().__init__("\n".join(lines))


class IoWriteError(IoError):
    """
    Raised when a write fails to complete atomically.

    Notes:
        The write path is tmp file → fsync → os.replace(tmp, final). Failures at any step
        (including the serializer's round-trip check) surface as IoWriteError with
        best-effort cleanup of the tmp file.
    """
