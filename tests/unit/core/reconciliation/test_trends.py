"""Tests for trend computation"""
import pytest

from app.core.models.comparison import Trend
from app.core.models.report import TestObservation
from app.core.reconciliation.trends import compute_trend


def obs(value):
    return TestObservation(name="Hemoglobin", value=value)


class TestComputeTrend:
    """Test direction of change between adjacent columns"""

    def test_down(self):
        """13.0 -> 10.0 is a 23% drop"""
        assert compute_trend(obs(10.0), obs(13.0)) is Trend.DOWN

    def test_up(self):
        """Rise above the threshold"""
        assert compute_trend(obs(120), obs(100)) is Trend.UP

    def test_stable_below_threshold(self):
        """Changes under 5% are stable"""
        assert compute_trend(obs(104.9), obs(100)) is Trend.STABLE
        assert compute_trend(obs(95.1), obs(100)) is Trend.STABLE

    def test_threshold_is_not_stable(self):
        """Exactly 5% counts as a change"""
        assert compute_trend(obs(105), obs(100)) is Trend.UP

    def test_previous_zero_is_stable(self):
        """A zero baseline yields stable"""
        assert compute_trend(obs(3), obs(0)) is Trend.STABLE

    def test_string_values_parsed(self):
        """Numeric prefixes of strings are compared"""
        assert compute_trend(obs("8,0"), obs("10 g/dL")) is Trend.DOWN

    @pytest.mark.parametrize("current,previous", [
        (None, obs(1)),
        (obs(1), None),
        (obs("negative"), obs(1)),
        (obs(1), obs("<5")),
    ])
    def test_none_when_missing_or_non_numeric(self, current, previous):
        """No trend without two numeric values"""
        assert compute_trend(current, previous) is Trend.NONE

    def test_custom_threshold(self):
        """Threshold is configurable"""
        assert compute_trend(obs(108), obs(100), stable_percent=10.0) is Trend.STABLE

    def test_arrows(self):
        """Trend arrows for rendering"""
        assert Trend.UP.arrow == "↑"
        assert Trend.DOWN.arrow == "↓"
        assert Trend.STABLE.arrow == "→"
        assert Trend.NONE.arrow == ""
