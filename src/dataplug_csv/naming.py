"""File naming rules for entity CSV files."""
from __future__ import annotations

import re

_PATH_SEPARATORS = re.compile(r"[/\\]")


def escape_entity_name(entity: str, separator: str = "/", safe_separator: str = "---") -> str:
    """Make an entity name safe to embed in a single path component.

    Only the first ``separator`` is swapped for ``safe_separator``; every slash
    left afterwards (forward or back) becomes an underscore.
    """
    return _PATH_SEPARATORS.sub("_", entity.replace(separator, safe_separator, 1))


def entity_file_name(
    collection: str,
    entity: str,
    separator: str = "/",
    safe_separator: str = "---",
) -> str:
    if not entity:
        return f"{collection}.csv"
    safe_name = escape_entity_name(entity, separator, safe_separator)
    return f"{collection}{safe_separator}{safe_name}.csv"


__all__ = ["entity_file_name", "escape_entity_name"]
