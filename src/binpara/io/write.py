"""
Atomic writer for files holding consecutive binary paragraphs.

Overview
- Serializes records with binpara.core.serde.serialize_many (each one round-trip checked).
- Writes to a temporary file beside the destination, fsyncs it, then os.replace()s it
  into place so readers never observe a half-written file.

Source of truth
- Serialization format and self-check: binpara.core.serde.
- IO-layer errors: binpara.io.errors.IoWriteError.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Iterable

from binpara.core.errors import RoundTripError
from binpara.core.schema import BinaryRecord
from binpara.core.serde import serialize_many

from .config import IoSettings
from .errors import IoWriteError
from .fs import fsync_file, makedirs, open_write, remove_quietly, rename_atomic

logger = logging.getLogger(__name__)


def write_binary_paragraphs(
    path: str | os.PathLike[str],
    records: Iterable[BinaryRecord],
    settings: IoSettings | None = None,
) -> str:
    """
    Serialize records and atomically replace the file at path.

    Args:
        path: Destination file.
        records (Iterable[BinaryRecord]): Records, written in the given order.
        settings (IoSettings | None): Encoding and fsync; defaults otherwise.

    Returns:
        str: The text that was written.

    Raises:
        IoWriteError: If serialization (including its round-trip check) or any write
            step fails. The destination is left untouched in that case.
    """
    s = settings or IoSettings()
    final = os.fspath(path)
    records = list(records)

    try:
        text = serialize_many(records)
    except RoundTripError as exc:
        raise IoWriteError(f"refusing to write {final}: {exc}") from exc

    makedirs(os.path.dirname(final))
    tmp = f"{final}.{uuid.uuid4().hex}.tmp"
    try:
        with open_write(tmp) as fh:
            fh.write(text.encode(s.encoding))
            if s.fsync:
                fsync_file(fh)
        rename_atomic(tmp, final)
    except OSError as exc:
        remove_quietly(tmp)
        raise IoWriteError(f"failed to write {final}: {exc}") from exc

    logger.info("wrote %d binary paragraph(s) to %s", len(records), final)
    return text
