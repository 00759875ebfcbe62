from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from airsense_core.config import DEFAULT_HOURS_PER_DAY, DEFAULT_UNIT
from airsense_core.report.deviation import MISSING_LABEL
from airsense_core.report.table_builder import ReportRow, build_report_rows
from airsense_core.series.align import AlignedRow, aligned_entities, entity_points
from airsense_core.series.points import coerce_number

SummaryMap = Mapping[str, Mapping[str, Any]]


@dataclass(frozen=True)
class ForecastOverview:
    cities_forecasted: int
    total_points: int
    best: str | None
    worst: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cities_forecasted": self.cities_forecasted,
            "total_points": self.total_points,
            "best": self.best,
            "worst": self.worst,
        }


def format_concentration(value: Any, unit: str = DEFAULT_UNIT) -> str:
    number = coerce_number(value)
    if math.isnan(number):
        return MISSING_LABEL
    return f"{number:.2f} {unit}"


def summary_mean(summary: SummaryMap | None, entity: str) -> float | None:
    if not summary:
        return None
    stats = summary.get(entity)
    if not stats:
        return None
    mean = stats.get("mean_yhat")
    if mean is None:
        return None
    return coerce_number(mean)


def summarize_forecast(payload: Mapping[str, Any]) -> ForecastOverview:
    summary = payload.get("summary") or {}
    forecasts = payload.get("forecasts") or {}
    total_points = 0
    for stats in summary.values():
        n_points = coerce_number((stats or {}).get("n_points"))
        if not math.isnan(n_points):
            total_points += int(n_points)
    return ForecastOverview(
        cities_forecasted=len(forecasts) or len(summary),
        total_points=total_points,
        best=payload.get("best"),
        worst=payload.get("worst"),
    )


def build_entity_reports(
    rows: Sequence[AlignedRow],
    summary: SummaryMap | None,
    entities: Sequence[str] | None = None,
    *,
    hours_per_day: int = DEFAULT_HOURS_PER_DAY,
    unit: str = DEFAULT_UNIT,
) -> dict[str, list[ReportRow]]:
    """Report rows per entity; an entity without a summary mean gets an empty list.

    ``entities`` defaults to the names found in ``rows``.
    """
    return {
        entity: build_report_rows(
            entity_points(rows, entity),
            summary_mean(summary, entity),
            hours_per_day=hours_per_day,
            unit=unit,
        )
        for entity in (entities if entities is not None else aligned_entities(rows))
    }
