"""Unit tests for the configuration loader."""
from __future__ import annotations

from pathlib import Path

import pytest

from dataplug_csv.config import ConfigLoader, EncoderOptions, WriterConfig


def test_config_loader_parses_writer_section(tmp_path: Path) -> None:
    config_payload = f"""
    writer:
      collection: exports
      target_dir: {tmp_path / "out"}
      safe_entity_name_separator: "__"
      buffer_size: 4096
      options:
        delimiter: ";"
        quoting: all
        header: true
    """
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_payload)

    loader = ConfigLoader(path=config_file)

    assert loader.model.collection == "exports"
    assert loader.model.target_dir == tmp_path / "out"
    assert loader.model.entity_name_separator == "/"
    assert loader.model.safe_entity_name_separator == "__"
    assert loader.model.options == EncoderOptions(delimiter=";", quoting="all", header=True)


def test_config_loader_requires_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader(path=tmp_path / "missing.yaml")


def test_config_loader_rejects_invalid_writer(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("writer:\n  collection: ''\n")
    with pytest.raises(ValueError, match="Invalid configuration"):
        ConfigLoader(path=config_file)


def test_config_loader_requires_writer_section(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("other: 1\n")
    with pytest.raises(ValueError, match="writer"):
        ConfigLoader(path=config_file)


def test_writer_config_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = WriterConfig(collection="c", target_dir=None)
    assert config.target_dir == Path.cwd()
    assert config.options == EncoderOptions()
    assert config.buffer_size == 16384
    assert config.fsync is False
