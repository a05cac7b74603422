"""Stream keyed record batches into one CSV file per entity."""
from importlib.metadata import version, PackageNotFoundError

from .config import EncoderOptions, WriterConfig
from .pipeline import write_chunks
from .writer import CsvFilesWriter, InvalidChunkError, WriteSummary, WriterClosedError

try:
    __version__ = version("dataplug-csv")
except PackageNotFoundError:  # pragma: no cover - during local dev without install
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "CsvFilesWriter",
    "EncoderOptions",
    "InvalidChunkError",
    "WriteSummary",
    "WriterClosedError",
    "WriterConfig",
    "write_chunks",
]
