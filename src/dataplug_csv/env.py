"""Environment loading for DATAPLUG_CSV_* settings."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE_VARIABLE = "DATAPLUG_CSV_ENV_FILE"


def load_env(dotenv_path: str | Path | None = None, override: bool = False) -> bool:
    """Load writer settings from a .env file into ``os.environ``.

    Without an explicit path the file named by DATAPLUG_CSV_ENV_FILE is used,
    otherwise python-dotenv searches for ``.env``. Returns whether any
    variable was set.
    """
    path = dotenv_path or os.getenv(ENV_FILE_VARIABLE)
    if path is not None and not Path(path).is_file():
        raise FileNotFoundError(f"Environment file not found: {path}")
    return load_dotenv(dotenv_path=path, override=override)


__all__ = ["ENV_FILE_VARIABLE", "load_env"]
