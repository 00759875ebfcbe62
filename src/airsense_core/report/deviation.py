from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from airsense_core.config import DEFAULT_UNIT
from airsense_core.series.points import TimePoint, coerce_number

MISSING_LABEL = "-"


@dataclass(frozen=True)
class DeviationPoint:
    deviation: float
    deviation_label: str


def _point_value(point: TimePoint | Mapping[str, Any]) -> float:
    if isinstance(point, TimePoint):
        return point.value
    return coerce_number(point.get("value"))


def format_deviation(deviation: float, unit: str = DEFAULT_UNIT) -> str:
    if math.isnan(deviation):
        return MISSING_LABEL
    if deviation == 0:
        deviation = 0.0
    sign = "+" if deviation >= 0 else ""
    return f"{sign}{deviation:.2f} {unit}"


def compute_deviations(
    series: Sequence[TimePoint | Mapping[str, Any]],
    mean: float | None,
    *,
    unit: str = DEFAULT_UNIT,
) -> list[DeviationPoint]:
    """Deviation of each point from an externally computed mean.

    Returns an empty list when no mean is available for the entity.
    """
    if mean is None:
        return []
    deviations: list[DeviationPoint] = []
    for point in series:
        deviation = _point_value(point) - coerce_number(mean)
        deviations.append(
            DeviationPoint(deviation=deviation, deviation_label=format_deviation(deviation, unit))
        )
    return deviations
