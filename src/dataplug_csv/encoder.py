"""Row encoder producing one CSV line per record."""
from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime, time
from typing import Iterable, List, Mapping

from .config import EncoderOptions


def cast_cell(value: object) -> object:
    """Convert a field value to what gets written in its CSV cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        # Same casting as the node csv-stringify encoder.
        return "1" if value else ""
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


class CsvRowEncoder:
    """Encodes mappings to CSV lines using a column order fixed at creation."""

    def __init__(self, columns: Iterable[str], options: EncoderOptions | None = None) -> None:
        self.columns: List[str] = list(columns)
        self.options = options or EncoderOptions()
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, **self.options.dialect_kwargs())

    def header(self) -> str:
        return self._encode_values(self.columns)

    def encode(self, row: Mapping[str, object]) -> str:
        """Return the CSV line for ``row``; absent columns become empty cells."""
        return self._encode_values([cast_cell(row.get(column)) for column in self.columns])

    def _encode_values(self, values: List[object]) -> str:
        self._writer.writerow(values)
        line = self._buffer.getvalue()
        self._buffer.seek(0)
        self._buffer.truncate()
        return line


__all__ = ["CsvRowEncoder", "cast_cell"]
