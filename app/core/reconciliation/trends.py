"""Trend computation between adjacent comparison columns."""
from typing import Optional

from app.config.limits import TREND_STABLE_PERCENT
from app.core.models.comparison import Trend
from app.core.models.report import TestObservation


def compute_trend(
    current: Optional[TestObservation],
    previous: Optional[TestObservation],
    stable_percent: float = TREND_STABLE_PERCENT,
) -> Trend:
    """Direction of change from previous to current observation.

    Up/down is purely numeric direction; it does not say whether the change
    is clinically better or worse. A previous value of zero always yields
    stable.

    Args:
        current: Observation in the later column (or None)
        previous: Observation in the earlier column (or None)
        stable_percent: Relative change below which the trend is stable

    Returns:
        Trend.NONE if either side is absent or non-numeric
    """
    if current is None or previous is None:
        return Trend.NONE

    curr_val = current.numeric_value
    prev_val = previous.numeric_value
    if curr_val is None or prev_val is None:
        return Trend.NONE

    diff = curr_val - prev_val
    percent_change = abs(diff) / abs(prev_val) * 100 if prev_val != 0 else 0.0

    if percent_change < stable_percent:
        return Trend.STABLE
    return Trend.UP if diff > 0 else Trend.DOWN
