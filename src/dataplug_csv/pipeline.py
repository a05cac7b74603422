"""Drive a CsvFilesWriter from an iterable of chunks."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .writer import CsvFilesWriter, WriteSummary

logger = logging.getLogger(__name__)


def write_chunks(writer: CsvFilesWriter, chunks: Iterable[Mapping[str, object]]) -> WriteSummary:
    """Write every chunk, then end the writer.

    Chunks are consumed one at a time, so a lazy producer is never read ahead
    of the files. If the producer or the writer raises, the writer is
    destroyed and the exception propagates.
    """
    try:
        for chunk in chunks:
            writer.write(chunk)
    except BaseException as exc:
        logger.error("Aborting CSV export for collection %s: %s", writer.collection, exc)
        writer.destroy(exc)
        raise
    return writer.end()


__all__ = ["write_chunks"]
