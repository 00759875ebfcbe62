from __future__ import annotations

from airsense_core.limits.table import LimitField, PlanTier, normalize_plan_tier
from airsense_core.limits.validator import ValidationResult

FIELD_LABELS: dict[LimitField, str] = {
    "DaysToScrape": "Days to Scrape",
    "AnalysisPeriod": "Analysis Period (days)",
    "ForecastHorizon": "Forecast Horizon (days)",
    "TrainingWindow": "Training Window (days)",
}

FIELD_PURPOSES: dict[LimitField, str] = {
    "DaysToScrape": "data scraping",
    "AnalysisPeriod": "analysis period",
    "ForecastHorizon": "forecast horizon",
    "TrainingWindow": "training window",
}

UPGRADE_BENEFITS: dict[PlanTier, tuple[str, ...]] = {
    "free": (
        "Pro: Up to 30 days for most features",
        "Enterprise: Up to 90 days for all features",
    ),
    "pro": (
        "Enterprise: Up to 90 days for all features",
        "Advanced AI Assistant access",
    ),
    "enterprise": (),
}


def format_days(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def remediation_message(result: ValidationResult) -> str:
    return (
        f"You've entered {format_days(result.requested_value)} days, "
        f"but your {result.tier} plan only allows up to {result.ceiling} days "
        f"for {FIELD_PURPOSES[result.field]}. "
        "Please reduce the number of days or upgrade your plan for higher limits."
    )


def upgrade_benefits(tier: str | None) -> tuple[str, ...]:
    return UPGRADE_BENEFITS[normalize_plan_tier(tier)]
