from __future__ import annotations

import logging
from dataclasses import dataclass

from airsense_core.limits.table import (
    PLAN_LIMITS,
    LimitField,
    PlanTier,
    normalize_limit_field,
    normalize_plan_tier,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    accepted: bool
    field: LimitField
    requested_value: float
    ceiling: int
    tier: PlanTier


def validate_plan_limit(
    tier: str | None,
    field: str,
    requested_value: float,
) -> ValidationResult:
    """Check a requested day count against the plan ceiling.

    The requested value is reported back untouched; callers must not send a
    rejected value downstream. NaN never compares below a ceiling and is
    therefore rejected. Raises ValueError for a field outside the ceiling table.
    """
    resolved_tier = normalize_plan_tier(tier)
    resolved_field = normalize_limit_field(field)
    ceiling = PLAN_LIMITS[resolved_tier][resolved_field]
    accepted = bool(requested_value <= ceiling)
    if not accepted:
        LOGGER.debug(
            "Rejected %s=%s for %s plan (ceiling %d)",
            resolved_field,
            requested_value,
            resolved_tier,
            ceiling,
        )
    return ValidationResult(
        accepted=accepted,
        field=resolved_field,
        requested_value=requested_value,
        ceiling=ceiling,
        tier=resolved_tier,
    )
