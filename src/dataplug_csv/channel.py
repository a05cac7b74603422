"""Per-entity output channels: a row encoder composed with a file writer."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Mapping, Protocol, Sequence

from .config import EncoderOptions
from .encoder import CsvRowEncoder
from .errors import WriterClosedError

logger = logging.getLogger(__name__)


class EntityChannel(Protocol):
    """Output resource owning everything written for one entity."""

    path: Path
    columns: Sequence[str]
    rows_written: int

    def write_row(self, row: Mapping[str, object]) -> None:
        """Queue one row; it may be buffered before reaching storage."""

    def end(self) -> None:
        """Flush everything queued and release the underlying file."""

    def destroy(self, error: BaseException | None = None) -> None:
        """Release the underlying file, discarding rows not yet flushed."""


class CsvFileChannel(EntityChannel):
    """Writes CSV lines for one entity, buffering up to ``buffer_size`` bytes."""

    def __init__(
        self,
        path: Path | str,
        columns: Sequence[str],
        options: EncoderOptions | None = None,
        buffer_size: int = 16384,
        fsync: bool = False,
    ) -> None:
        self.path = Path(path)
        self.encoder = CsvRowEncoder(columns, options)
        self.columns = self.encoder.columns
        self.rows_written = 0
        self.bytes_written = 0
        self._encoding = self.encoder.options.encoding
        self._buffer_size = buffer_size
        self._fsync = fsync
        self._pending: List[bytes] = []
        self._pending_bytes = 0
        self._closed = False
        self._handle = self.path.open("wb", buffering=0)
        try:
            if self.encoder.options.header:
                self._push(self.encoder.header())
        except BaseException:
            self._closed = True
            self._handle.close()
            raise
        logger.debug("Opened %s with columns %s", self.path, self.columns)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_bytes(self) -> int:
        return self._pending_bytes

    def write_row(self, row: Mapping[str, object]) -> None:
        self._ensure_open()
        self._push(self.encoder.encode(row))
        self.rows_written += 1

    def end(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._drain()
            if self._fsync:
                os.fsync(self._handle.fileno())
        finally:
            self._handle.close()
        logger.debug("Closed %s after %s rows", self.path, self.rows_written)

    def destroy(self, error: BaseException | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        dropped = self._pending_bytes
        self._pending.clear()
        self._pending_bytes = 0
        self._handle.close()
        logger.debug("Destroyed %s (dropped %s buffered bytes): %s", self.path, dropped, error)

    def _ensure_open(self) -> None:
        if self._closed:
            raise WriterClosedError(f"Channel for {self.path} is closed; cannot write.")

    def _push(self, line: str) -> None:
        data = line.encode(self._encoding)
        self._pending.append(data)
        self._pending_bytes += len(data)
        if self._pending_bytes >= self._buffer_size:
            self._drain()

    def _drain(self) -> None:
        if not self._pending:
            return
        view = memoryview(b"".join(self._pending))
        self._pending.clear()
        self._pending_bytes = 0
        while view:
            written = self._handle.write(view)
            self.bytes_written += written
            view = view[written:]


__all__ = ["CsvFileChannel", "EntityChannel"]
