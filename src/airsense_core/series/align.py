from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from airsense_core.series.bounds import normalize_bounds
from airsense_core.series.points import TimePoint, coerce_number

LOGGER = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp"
LOWER_SUFFIX = "_lo"
UPPER_SUFFIX = "_hi"

# Candidate field names per semantic field, highest priority first. A candidate
# counts as present when the key exists and its value is not None.
TIMESTAMP_FIELDS: tuple[str, ...] = ("ts", "timestamp")
VALUE_FIELDS: tuple[str, ...] = ("yhat", "y")
LOWER_FIELDS: tuple[str, ...] = ("yhat_lower", "lower")
UPPER_FIELDS: tuple[str, ...] = ("yhat_upper", "upper")

AlignedRow = dict[str, Any]
RawPoint = Mapping[str, Any]


def _first_present(point: RawPoint, candidates: Sequence[str]) -> Any:
    for name in candidates:
        candidate = point.get(name)
        if candidate is not None:
            return candidate
    return None


def _point_timestamp(point: RawPoint) -> str | None:
    raw = _first_present(point, TIMESTAMP_FIELDS)
    if raw is None:
        return None
    timestamp = str(raw)
    return timestamp or None


def _check_entity_name(entity: str) -> None:
    if entity == TIMESTAMP_KEY:
        raise ValueError(f"Entity name '{TIMESTAMP_KEY}' is reserved for the row key")


def _sorted_rows(rows: dict[str, AlignedRow]) -> list[AlignedRow]:
    # Lexical order equals chronological order only for a single ISO-8601 layout.
    return [rows[timestamp] for timestamp in sorted(rows)]


def resolve_point(point: RawPoint) -> TimePoint | None:
    """Resolve one raw point through the alias lists and clamp its bounds.

    Returns None when no timestamp candidate is present.
    """
    timestamp = _point_timestamp(point)
    if timestamp is None:
        return None

    value = coerce_number(_first_present(point, VALUE_FIELDS))
    raw_lower = _first_present(point, LOWER_FIELDS)
    raw_upper = _first_present(point, UPPER_FIELDS)
    lower, upper = normalize_bounds(
        value,
        value if raw_lower is None else coerce_number(raw_lower),
        value if raw_upper is None else coerce_number(raw_upper),
    )
    return TimePoint(timestamp=timestamp, value=value, lower=lower, upper=upper)


def align_series(entities: Mapping[str, Sequence[RawPoint]] | None) -> list[AlignedRow]:
    """Merge per-entity series into one timestamp-ordered table.

    Every distinct timestamp across all entities gets one row (union). Within a
    row an entity contributes ``name``, ``name_lo`` and ``name_hi``; an entity
    with no point at that timestamp contributes nothing. A repeated timestamp
    within one entity overwrites the earlier point (last write wins).
    """
    if not entities:
        return []

    rows: dict[str, AlignedRow] = {}
    dropped = 0
    for entity, series in entities.items():
        _check_entity_name(entity)
        for raw_point in series or ():
            point = resolve_point(raw_point) if isinstance(raw_point, Mapping) else None
            if point is None:
                dropped += 1
                continue
            row = rows.setdefault(point.timestamp, {TIMESTAMP_KEY: point.timestamp})
            row[entity] = point.value
            row[f"{entity}{LOWER_SUFFIX}"] = point.lower
            row[f"{entity}{UPPER_SUFFIX}"] = point.upper

    if dropped:
        LOGGER.debug("Dropped %d malformed points or points without a timestamp", dropped)
    return _sorted_rows(rows)


def combine_observations(
    series_by_entity: Mapping[str, Sequence[RawPoint]] | None,
    value_field: str = "pm25",
) -> list[AlignedRow]:
    """Merge observed (bound-free) series into rows of ``{timestamp, entity: value}``."""
    if not series_by_entity:
        return []

    rows: dict[str, AlignedRow] = {}
    for entity, series in series_by_entity.items():
        _check_entity_name(entity)
        for raw_point in series or ():
            if not isinstance(raw_point, Mapping):
                continue
            timestamp = _point_timestamp(raw_point)
            if timestamp is None:
                continue
            row = rows.setdefault(timestamp, {TIMESTAMP_KEY: timestamp})
            row[entity] = coerce_number(raw_point.get(value_field))
    return _sorted_rows(rows)


def _is_bound_key(key: str, row: AlignedRow) -> bool:
    for suffix in (LOWER_SUFFIX, UPPER_SUFFIX):
        if key.endswith(suffix) and key[: -len(suffix)] in row:
            return True
    return False


def aligned_entities(rows: Sequence[AlignedRow]) -> list[str]:
    """Entity names present in aligned rows, in first-seen order.

    A ``_lo``/``_hi`` key is a bound only when its base name is in the same row,
    so entities such as ``North_lo`` are kept. Callers that still hold the input
    mapping should pass its keys instead; names that collide with another
    entity's bound fields cannot be told apart from the rows alone.
    """
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            if key == TIMESTAMP_KEY or _is_bound_key(key, row):
                continue
            seen.setdefault(key, None)
    return list(seen)


def entity_points(rows: Sequence[AlignedRow], entity: str) -> list[TimePoint]:
    """Pull one entity's points back out of aligned rows, keeping row order."""
    points: list[TimePoint] = []
    for row in rows:
        if entity not in row:
            continue
        value = row[entity]
        points.append(
            TimePoint(
                timestamp=row[TIMESTAMP_KEY],
                value=value,
                lower=row.get(f"{entity}{LOWER_SUFFIX}", value),
                upper=row.get(f"{entity}{UPPER_SUFFIX}", value),
            )
        )
    return points
