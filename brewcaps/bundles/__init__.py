"""
Packaged capability bundles, one JSON file per device kind.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List
from importlib import resources


class BundleNotFoundError(FileNotFoundError):
    pass


def _normalize_kind(kind: str) -> str:
    if not kind or not kind.strip():
        raise ValueError("load_bundle(kind) requires a non-empty kind.")
    kind = kind.strip()
    if kind.lower().endswith(".json"):
        kind = kind[:-5]
    return kind


def get_bundles() -> List[str]:
    base = resources.files("brewcaps.bundles")
    kinds: List[str] = []
    for entry in base.iterdir():
        if entry.is_file() and entry.name.lower().endswith(".json"):
            kinds.append(Path(entry.name).stem)
    return sorted(set(kinds))


def load_bundle(kind: str) -> dict[str, Any]:
    kind = _normalize_kind(kind)
    res = resources.files("brewcaps.bundles").joinpath(f"{kind}.json")
    if not res.is_file():
        raise BundleNotFoundError(f"Bundle '{kind}' not found. Available: {get_bundles()}")
    with res.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return data if isinstance(data, dict) else {}


def read_bundle_file(path: str | Path) -> dict[str, Any]:
    """
    Read one bundle definition from disk.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not JSON or does not hold a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data
