"""
Filesystem helpers for binpara.io.

Responsibilities
- Provide a minimal stdlib-only abstraction for the filesystem operations binpara.io
  needs: reading text, directory creation, safe write handles, fsync, and atomic renames.
- Establish clear semantics for the atomic write path: tmp write → fsync → atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem;
  temporary files are therefore created next to their destination.
- All helpers are synchronous; callers decide on concurrency/locking if/when needed.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO


def read_text(path: str, encoding: str = "utf-8") -> str:
    """
    Read a whole text file.

    Args:
        path (str): File to read.
        encoding (str): Text encoding.

    Notes:
        newline="" keeps "\\r\\n" intact; the tokenizer handles both line endings.
    """
    with open(path, encoding=encoding, newline="") as fh:
        return fh.read()


def makedirs(path: str, exist_ok: bool = True) -> None:
    """
    Create directories recursively.

    Args:
        path (str): Directory path to create ("" is a no-op).
        exist_ok (bool): Do not error if the directory already exists.
    """
    if path:
        os.makedirs(path, exist_ok=exist_ok)


@contextmanager
def open_write(path: str) -> Iterator[BinaryIO]:
    """
    Open a file for binary write as a context manager.

    Args:
        path (str): Destination path to open in write-binary mode.

    Yields:
        object: A writable file-like handle supporting .flush() and .fileno().

    Notes:
        Caller is responsible for atomic os.replace of the temporary file to final path.
    """
    fh = open(path, "wb")
    try:
        yield fh
    finally:
        fh.close()


def fsync_file(fh: BinaryIO) -> None:
    """
    Flush and fsync an open file handle.

    Notes:
        Ensures file contents reach the storage device (subject to OS/filesystem semantics).
    """
    fh.flush()
    os.fsync(fh.fileno())


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem.

    Notes:
        Uses os.replace, which is atomic only if src and dst reside on the same filesystem.
    """
    os.replace(src, dst)


def remove_quietly(path: str) -> None:
    """Remove a leftover temporary file; a missing file is not an error."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
