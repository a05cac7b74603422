"""Factory for building CsvFilesWriter instances from the environment."""
from __future__ import annotations

import os

from .config import ConfigLoader
from .writer import CsvFilesWriter

_TRUTHY = {"1", "true", "yes", "on"}


def create_writer(collection: str | None = None) -> CsvFilesWriter:
    """Build a writer from DATAPLUG_CSV_CONFIG_PATH or DATAPLUG_CSV_* variables.

    An explicit ``collection`` overrides the configured one.
    """
    config_path = os.getenv("DATAPLUG_CSV_CONFIG_PATH")
    if config_path:
        config = ConfigLoader(config_path).model
        if collection:
            config = config.model_copy(update={"collection": collection})
        return CsvFilesWriter.from_config(config)

    collection = collection or os.getenv("DATAPLUG_CSV_COLLECTION")
    if not collection:
        raise RuntimeError("DATAPLUG_CSV_COLLECTION is required when no collection is given")
    options: dict = {}
    delimiter = os.getenv("DATAPLUG_CSV_DELIMITER")
    if delimiter:
        options["delimiter"] = delimiter
    header = os.getenv("DATAPLUG_CSV_HEADER")
    if header is not None:
        options["header"] = header.strip().lower() in _TRUTHY
    return CsvFilesWriter(collection, os.getenv("DATAPLUG_CSV_TARGET_DIR"), options)


__all__ = ["create_writer"]
