from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def load_entity_series(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Per-entity series from a bare mapping or from a payload's ``forecasts`` key."""
    data = load_json(path)
    series = data.get("forecasts", data)
    if not isinstance(series, dict):
        raise ValueError(f"Expected an object of entity series in {path}")
    for entity, points in series.items():
        if not isinstance(points, list):
            raise ValueError(f"Series for entity {entity!r} in {path} must be a list")
    return series
