from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import pandas as pd

from airsense_core.config import DEFAULT_HOURS_PER_DAY, DEFAULT_UNIT
from airsense_core.report.deviation import compute_deviations
from airsense_core.series.points import TimePoint, coerce_number


@dataclass(frozen=True)
class ReportRow:
    label: str
    forecast: float
    lower_bound: float
    upper_bound: float
    deviation: float
    deviation_label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "forecast": self.forecast,
            "lowerBound": self.lower_bound,
            "upperBound": self.upper_bound,
            "deviation": self.deviation,
            "deviationLabel": self.deviation_label,
        }


def _as_time_point(point: TimePoint | Mapping[str, Any]) -> TimePoint:
    if isinstance(point, TimePoint):
        return point
    value = coerce_number(point.get("value"))
    lower = point.get("lower")
    upper = point.get("upper")
    return TimePoint(
        timestamp=point.get("timestamp"),
        value=value,
        lower=value if lower is None else coerce_number(lower),
        upper=value if upper is None else coerce_number(upper),
    )


def _parse_clock(timestamp: Any) -> pd.Timestamp | None:
    if timestamp is None:
        return None
    try:
        parsed = pd.Timestamp(timestamp)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed


def time_label(index: int, timestamp: Any, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> str:
    """``Day N @ h:mm AM`` for hourly points, ``Day i+1`` when the time is unknown.

    The clock reading is the wall time written in the timestamp; no timezone
    conversion is applied.
    """
    parsed = _parse_clock(timestamp)
    if parsed is None:
        return f"Day {index + 1}"
    day_number = index // hours_per_day + 1
    meridiem = "PM" if parsed.hour >= 12 else "AM"
    hour12 = parsed.hour % 12 or 12
    return f"Day {day_number} @ {hour12}:{parsed.minute:02d} {meridiem}"


def build_report_rows(
    series: Sequence[TimePoint | Mapping[str, Any]],
    summary_mean: float | None,
    *,
    hours_per_day: int = DEFAULT_HOURS_PER_DAY,
    unit: str = DEFAULT_UNIT,
) -> list[ReportRow]:
    if not series or summary_mean is None:
        return []

    points = [_as_time_point(point) for point in series]
    deviations = compute_deviations(points, summary_mean, unit=unit)
    return [
        ReportRow(
            label=time_label(index, point.timestamp, hours_per_day),
            forecast=point.value,
            lower_bound=point.lower,
            upper_bound=point.upper,
            deviation=deviation.deviation,
            deviation_label=deviation.deviation_label,
        )
        for index, (point, deviation) in enumerate(zip(points, deviations))
    ]
