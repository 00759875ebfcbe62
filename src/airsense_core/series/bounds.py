from __future__ import annotations

import math


def normalize_bounds(value: float, raw_lower: float, raw_upper: float) -> tuple[float, float]:
    """Clamp a confidence interval so that ``0 <= lower <= upper``.

    Forecast models can emit negative lower bounds near zero, or an upper bound
    below the lower bound on short horizons. ``value`` is accepted for call-site
    symmetry and is never used to move either bound; a forecast may therefore
    sit below the clamped lower bound.

    NaN is propagated rather than clamped: a NaN lower yields NaN for both
    bounds, and a NaN upper yields a NaN upper.
    """
    lower = float(raw_lower)
    if math.isnan(lower):
        return math.nan, math.nan
    lower = max(0.0, lower)
    upper = float(raw_upper)
    if math.isnan(upper):
        return lower, math.nan
    return lower, max(lower, upper)
