"""Sink that fans keyed record chunks out into one CSV file per entity."""
from __future__ import annotations

import errno
import logging
import stat
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from .channel import CsvFileChannel, EntityChannel
from .config import EncoderOptions, WriterConfig, parse_writer_config
from .errors import InvalidChunkError, WriterClosedError
from .naming import entity_file_name

logger = logging.getLogger(__name__)

ChannelFactory = Callable[..., EntityChannel]

_OPEN = "open"
_ENDED = "ended"
_DESTROYED = "destroyed"


@dataclass(frozen=True)
class EntityOutput:
    """What one entity file received during a session."""

    path: Path
    columns: Tuple[str, ...]
    rows_written: int


@dataclass(frozen=True)
class WriteSummary:
    collection: str
    target_dir: Path
    chunk_count: int
    entities: Dict[str, EntityOutput] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return sum(output.rows_written for output in self.entities.values())


def _extract_rows(entity: str, value: object) -> Sequence[object]:
    """Return the row list stored under ``entity``, unwrapping data+metadata envelopes."""
    if isinstance(value, Mapping):
        if "data" not in value or "metadata" not in value:
            raise InvalidChunkError(f"Invalid data+metadata format in chunk of '{entity}'")
        value = value["data"]
    if not isinstance(value, (list, tuple)):
        raise InvalidChunkError(f"Invalid data format in chunk of '{entity}'")
    return value


def _ensure_row(entity: str, row: object) -> Mapping[str, object]:
    if not isinstance(row, Mapping):
        raise InvalidChunkError(
            f"Invalid row in chunk of '{entity}': expected a mapping, got {type(row).__name__}"
        )
    return row


class CsvFilesWriter:
    """Writes chunks of ``{entity: rows}`` to ``<collection>---<entity>.csv`` files.

    Files are opened lazily, the first time an entity receives a row, and the
    column order of each file is frozen from that first row. The target
    directory is checked (and created if missing) when the first chunk
    arrives. Use ``end()`` to flush and close every file, or ``destroy()`` to
    abandon the session; as a context manager the writer does one or the
    other depending on how the block exits.
    """

    def __init__(
        self,
        collection: str,
        target_dir: Path | str | None = None,
        options: EncoderOptions | Mapping[str, object] | None = None,
        *,
        entity_name_separator: str = "/",
        safe_entity_name_separator: str = "---",
        buffer_size: int = 16384,
        fsync: bool = False,
        channel_factory: ChannelFactory | None = None,
    ) -> None:
        self.config: WriterConfig = parse_writer_config(
            {
                "collection": collection,
                "target_dir": target_dir,
                "options": options,
                "entity_name_separator": entity_name_separator,
                "safe_entity_name_separator": safe_entity_name_separator,
                "buffer_size": buffer_size,
                "fsync": fsync,
            }
        )
        self._channel_factory = channel_factory or CsvFileChannel
        self._channels: Dict[str, EntityChannel] = {}
        self._directory_ready = False
        self._state = _OPEN
        self._chunk_count = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls, config: WriterConfig, channel_factory: ChannelFactory | None = None
    ) -> "CsvFilesWriter":
        return cls(
            config.collection,
            config.target_dir,
            config.options,
            entity_name_separator=config.entity_name_separator,
            safe_entity_name_separator=config.safe_entity_name_separator,
            buffer_size=config.buffer_size,
            fsync=config.fsync,
            channel_factory=channel_factory,
        )

    @property
    def collection(self) -> str:
        return self.config.collection

    @property
    def target_dir(self) -> Path:
        return self.config.target_dir

    @property
    def ended(self) -> bool:
        return self._state == _ENDED

    @property
    def destroyed(self) -> bool:
        return self._state == _DESTROYED

    @property
    def files(self) -> Dict[str, Path]:
        """Paths of the entity files opened so far."""
        return {entity: channel.path for entity, channel in self._channels.items()}

    def file_path(self, entity: str) -> Path:
        return self.config.target_dir / entity_file_name(
            self.config.collection,
            entity,
            self.config.entity_name_separator,
            self.config.safe_entity_name_separator,
        )

    def write(self, chunk: Mapping[str, object]) -> None:
        """Route every row of ``chunk`` to its entity file.

        Shape errors raise ``InvalidChunkError`` and leave the writer usable;
        rows of entities processed earlier in the same chunk stay written.
        Filesystem errors destroy the writer before propagating.
        """
        with self._lock:
            self._ensure_open()
            if not isinstance(chunk, Mapping):
                raise InvalidChunkError(
                    f"Chunk must map entity names to rows, got {type(chunk).__name__}"
                )
            if not self._directory_ready:
                try:
                    self._ensure_target_dir()
                except OSError as exc:
                    self._destroy(exc)
                    raise
            for entity, value in chunk.items():
                if not isinstance(entity, str):
                    raise InvalidChunkError(f"Entity name must be a string, got {entity!r}")
                rows = _extract_rows(entity, value)
                # No file for an entity until it has rows.
                if len(rows) == 0:
                    continue
                try:
                    self._write_rows(entity, rows)
                except OSError as exc:
                    self._destroy(exc)
                    raise
            self._chunk_count += 1
            logger.debug("Accepted chunk %s with %s entities", self._chunk_count, len(chunk))

    def end(self) -> WriteSummary:
        """Flush and close every entity file, then report what was written."""
        with self._lock:
            self._ensure_open()
            channels = list(self._channels.items())
            for index in range(len(channels) - 1, -1, -1):
                try:
                    channels[index][1].end()
                except Exception as exc:
                    self._destroy(exc)
                    raise
            summary = self._summarize(channels)
            self._channels = {}
            self._state = _ENDED
        logger.info(
            "Wrote %s rows to %s files for collection %s in %s",
            summary.row_count,
            len(summary.entities),
            summary.collection,
            summary.target_dir,
        )
        return summary

    def destroy(self, error: BaseException | None = None) -> BaseException | None:
        """Tear down every entity file without flushing; returns ``error``."""
        with self._lock:
            self._destroy(error)
        return error

    def __enter__(self) -> "CsvFilesWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            self.destroy(exc)
        elif self._state == _OPEN:
            self.end()

    def _ensure_open(self) -> None:
        if self._state != _OPEN:
            raise WriterClosedError(f"Writer for collection '{self.collection}' is {self._state}")

    def _ensure_target_dir(self) -> None:
        target = self.config.target_dir
        try:
            stats = target.stat()
        except FileNotFoundError:
            logger.info("Creating target directory %s", target)
            target.mkdir()
        else:
            if not stat.S_ISDIR(stats.st_mode):
                raise NotADirectoryError(errno.ENOTDIR, "Target path is not a directory", str(target))
        self._directory_ready = True

    def _write_rows(self, entity: str, rows: Sequence[object]) -> None:
        channel = self._channels.get(entity)
        if channel is None:
            channel = self._open_channel(entity, _ensure_row(entity, rows[0]))
        for row in rows:
            channel.write_row(_ensure_row(entity, row))

    def _open_channel(self, entity: str, first_row: Mapping[str, object]) -> EntityChannel:
        channel = self._channel_factory(
            self.file_path(entity),
            list(first_row.keys()),
            self.config.options,
            buffer_size=self.config.buffer_size,
            fsync=self.config.fsync,
        )
        self._channels[entity] = channel
        return channel

    def _destroy(self, error: BaseException | None) -> None:
        if self._state == _DESTROYED:
            return
        if error is not None:
            logger.warning("Destroying writer for collection %s: %s", self.collection, error)
        channels: List[EntityChannel] = list(self._channels.values())
        for channel in reversed(channels):
            try:
                channel.destroy(error)
            except OSError as exc:
                logger.warning("Failed to release %s: %s", channel.path, exc)
        self._channels = {}
        self._state = _DESTROYED

    def _summarize(self, channels: List[Tuple[str, EntityChannel]]) -> WriteSummary:
        return WriteSummary(
            collection=self.collection,
            target_dir=self.target_dir,
            chunk_count=self._chunk_count,
            entities={
                entity: EntityOutput(
                    path=channel.path,
                    columns=tuple(channel.columns),
                    rows_written=channel.rows_written,
                )
                for entity, channel in channels
            },
        )


__all__ = [
    "CsvFilesWriter",
    "EntityOutput",
    "InvalidChunkError",
    "WriteSummary",
    "WriterClosedError",
]
