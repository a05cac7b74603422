from __future__ import annotations

import os
from pathlib import Path

import pytest

from dataplug_csv.env import ENV_FILE_VARIABLE, load_env


@pytest.fixture
def _isolated_collection(monkeypatch):
    # setenv first so monkeypatch restores the variable's absence afterwards.
    monkeypatch.setenv("DATAPLUG_CSV_COLLECTION", "placeholder")
    monkeypatch.delenv("DATAPLUG_CSV_COLLECTION")
    monkeypatch.delenv(ENV_FILE_VARIABLE, raising=False)


@pytest.mark.usefixtures("_isolated_collection")
def test_load_env_reads_explicit_file(tmp_path: Path):
    env_file = tmp_path / "writer.env"
    env_file.write_text("DATAPLUG_CSV_COLLECTION=from_file\n", encoding="utf-8")
    assert load_env(dotenv_path=env_file) is True
    assert os.environ["DATAPLUG_CSV_COLLECTION"] == "from_file"


@pytest.mark.usefixtures("_isolated_collection")
def test_load_env_uses_env_file_variable(tmp_path: Path, monkeypatch):
    env_file = tmp_path / "writer.env"
    env_file.write_text("DATAPLUG_CSV_COLLECTION=via_variable\n", encoding="utf-8")
    monkeypatch.setenv(ENV_FILE_VARIABLE, str(env_file))
    load_env()
    assert os.environ["DATAPLUG_CSV_COLLECTION"] == "via_variable"


@pytest.mark.usefixtures("_isolated_collection")
def test_load_env_keeps_existing_values_unless_overridden(tmp_path: Path, monkeypatch):
    env_file = tmp_path / "writer.env"
    env_file.write_text("DATAPLUG_CSV_COLLECTION=from_file\n", encoding="utf-8")
    monkeypatch.setenv("DATAPLUG_CSV_COLLECTION", "already_set")
    load_env(dotenv_path=env_file)
    assert os.environ["DATAPLUG_CSV_COLLECTION"] == "already_set"
    load_env(dotenv_path=env_file, override=True)
    assert os.environ["DATAPLUG_CSV_COLLECTION"] == "from_file"


def test_load_env_rejects_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_env(dotenv_path=tmp_path / "missing.env")
