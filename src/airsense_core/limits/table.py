from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping

PlanTier = Literal["free", "pro", "enterprise"]
LimitField = Literal["DaysToScrape", "AnalysisPeriod", "ForecastHorizon", "TrainingWindow"]

PLAN_TIERS: tuple[PlanTier, ...] = ("free", "pro", "enterprise")
LIMIT_FIELDS: tuple[LimitField, ...] = (
    "DaysToScrape",
    "AnalysisPeriod",
    "ForecastHorizon",
    "TrainingWindow",
)
DEFAULT_PLAN_TIER: PlanTier = "free"

# Ceilings in days. Must stay numerically identical to the backend's enforcement.
PLAN_LIMITS: Mapping[PlanTier, Mapping[LimitField, int]] = MappingProxyType(
    {
        "free": MappingProxyType(
            {
                "DaysToScrape": 7,
                "AnalysisPeriod": 7,
                "ForecastHorizon": 7,
                "TrainingWindow": 7,
            }
        ),
        "pro": MappingProxyType(
            {
                "DaysToScrape": 30,
                "AnalysisPeriod": 30,
                "ForecastHorizon": 7,
                "TrainingWindow": 30,
            }
        ),
        "enterprise": MappingProxyType(
            {
                "DaysToScrape": 90,
                "AnalysisPeriod": 90,
                "ForecastHorizon": 30,
                "TrainingWindow": 90,
            }
        ),
    }
)


def normalize_plan_tier(tier: str | None) -> PlanTier:
    if isinstance(tier, str):
        normalized = tier.strip().lower()
        if normalized in PLAN_TIERS:
            return normalized  # type: ignore[return-value]
    return DEFAULT_PLAN_TIER


def normalize_limit_field(field: str) -> LimitField:
    if field in LIMIT_FIELDS:
        return field  # type: ignore[return-value]
    allowed = ", ".join(LIMIT_FIELDS)
    raise ValueError(f"Unknown limit field {field!r}; expected one of: {allowed}")


def ceiling_for(tier: str | None, field: str) -> int:
    return PLAN_LIMITS[normalize_plan_tier(tier)][normalize_limit_field(field)]
