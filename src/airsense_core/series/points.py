from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TimePoint:
    """One sample of one entity at one instant, bounds already normalized."""

    timestamp: str
    value: float
    lower: float
    upper: float


def coerce_number(raw: Any) -> float:
    """Numeric coercion where anything unparsable becomes NaN."""
    if raw is None:
        return math.nan
    if isinstance(raw, str) and "_" in raw:
        # "1_000" is not a numeric payload value even though float() accepts it.
        return math.nan
    try:
        return float(raw)
    except (TypeError, ValueError):
        return math.nan
