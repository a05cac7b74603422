"""Typed configuration for CSV writers and their encoder options."""
from __future__ import annotations

import codecs
import csv
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .env import load_env

load_env()

QUOTING_MODES = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "nonnumeric": csv.QUOTE_NONNUMERIC,
    "none": csv.QUOTE_NONE,
}


class EncoderOptions(BaseModel):
    """Options forwarded to the CSV encoder of every entity file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    delimiter: str = ","
    quotechar: str = '"'
    escapechar: str | None = None
    doublequote: bool = True
    quoting: Literal["minimal", "all", "nonnumeric", "none"] = "minimal"
    lineterminator: str = "\n"
    header: bool = False
    encoding: str = "utf-8"

    @field_validator("delimiter", "quotechar", "escapechar")
    @classmethod
    def _single_character(cls, value):
        if value is not None and len(value) != 1:
            raise ValueError("must be a single character")
        return value

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {value!r}") from exc
        return value

    @field_validator("lineterminator")
    @classmethod
    def _non_empty_terminator(cls, value):
        if not value:
            raise ValueError("must not be empty")
        return value

    def dialect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments accepted by ``csv.writer``."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.quotechar,
            "escapechar": self.escapechar,
            "doublequote": self.doublequote,
            "quoting": QUOTING_MODES[self.quoting],
            "lineterminator": self.lineterminator,
        }


class WriterConfig(BaseModel):
    """Fixed parameters of one CsvFilesWriter session."""

    model_config = ConfigDict(extra="forbid")

    collection: str
    target_dir: Path = Field(default_factory=Path.cwd)
    options: EncoderOptions = Field(default_factory=EncoderOptions)
    entity_name_separator: str = "/"
    safe_entity_name_separator: str = "---"
    buffer_size: int = Field(16384, gt=0, description="Bytes buffered per entity file before writing")
    fsync: bool = False

    @field_validator("collection")
    @classmethod
    def _non_empty_collection(cls, value: str) -> str:
        if not value:
            raise ValueError("collection must be a non-empty string")
        return value

    @field_validator("target_dir", mode="before")
    @classmethod
    def _default_target_dir(cls, value):
        if value is None or value == "":
            return Path.cwd()
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _default_options(cls, value):
        if value is None:
            return EncoderOptions()
        return value

    @field_validator("entity_name_separator", "safe_entity_name_separator")
    @classmethod
    def _non_empty_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("separator must be a non-empty string")
        return value


def parse_writer_config(values: Mapping[str, Any]) -> WriterConfig:
    """Validate raw writer settings, reporting problems as ``ValueError``."""
    try:
        return WriterConfig(**values)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


class ConfigLoader:
    """Loads a YAML ``writer:`` section and validates it with Pydantic."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.config_path = Path(
            path or os.getenv("DATAPLUG_CSV_CONFIG_PATH", "config/dataplug_csv.yaml")
        )
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        self.model = self._parse_yaml()

    def _parse_yaml(self) -> WriterConfig:
        raw: dict
        with self.config_path.open("r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp) or {}
        section = raw.get("writer")
        if not isinstance(section, dict):
            raise ValueError(f"Invalid configuration: missing 'writer' mapping in {self.config_path}")
        return parse_writer_config(section)


__all__ = [
    "ConfigLoader",
    "EncoderOptions",
    "WriterConfig",
    "parse_writer_config",
]
