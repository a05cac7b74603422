#!/usr/bin/env python
"""Import every dataplug_csv module and report the ones that fail."""
from __future__ import annotations

import importlib
import pkgutil
import sys
from typing import List


def discover_modules(package_name: str = "dataplug_csv") -> List[str]:
    package = importlib.import_module(package_name)
    names = [package_name]
    for info in pkgutil.walk_packages(package.__path__, prefix=f"{package_name}."):
        names.append(info.name)
    return sorted(names)


def main() -> int:
    try:
        modules = discover_modules()
    except ImportError as exc:
        print(
            f"[verify_repo_integrity] dataplug_csv is not importable ({exc}); "
            "run `pip install -e '.[dev]'` first.",
            file=sys.stderr,
        )
        return 1
    failures = []
    for module in modules:
        try:
            importlib.import_module(module)
        except Exception as exc:  # pragma: no cover - reported below
            failures.append(f"{module}: {exc}")
    for failure in failures:
        print(f"[verify_repo_integrity] Failed to import {failure}", file=sys.stderr)
    if failures:
        return 1
    print(f"[verify_repo_integrity] Imported {len(modules)} modules: {', '.join(modules)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
