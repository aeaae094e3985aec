import pytest

from core.exceptions import ThresholdConfigError
from core.models.metrics import Rating, Threshold
from core.thresholds import (
    CWV_THRESHOLDS, alert_severity, classify, get_threshold, page_tier, thresholds_to_dict
)


@pytest.mark.parametrize("value,expected", [
    (2600, Rating.NEEDS_IMPROVEMENT),
    (4500, Rating.POOR),
    (2000, Rating.GOOD),
])
def test_classify_lcp_examples(value, expected):
    """Test classification against the LCP good/poor pair."""
    assert classify(value, {"good": 2500, "poor": 4000}) == expected


def test_classify_boundaries_are_inclusive_on_the_good_side():
    """Test that a value equal to a boundary falls into the better tier."""
    threshold = Threshold(good=2500, poor=4000)
    assert classify(2500, threshold) == Rating.GOOD
    assert classify(4000, threshold) == Rating.NEEDS_IMPROVEMENT
    assert classify(4000.01, threshold) == Rating.POOR


def test_rating_values_serialize_as_strings():
    """Test that ratings compare equal to their report strings."""
    assert Rating.NEEDS_IMPROVEMENT == "needs-improvement"
    assert classify(0.3, CWV_THRESHOLDS["cls"]).value == "poor"


def test_threshold_requires_good_below_poor():
    """Test that an inverted threshold pair is rejected."""
    with pytest.raises(ThresholdConfigError):
        Threshold(good=300, poor=100)


def test_get_threshold_is_case_insensitive_and_rejects_unknown_metrics():
    """Test threshold lookup by metric name."""
    assert get_threshold("LCP") == CWV_THRESHOLDS["lcp"]
    with pytest.raises(KeyError):
        get_threshold("fps")


@pytest.mark.parametrize("good,expected", [
    ([95, 92, 90, 94], "excellent"),
    ([80, 75, 70, 75], "good"),
    ([50, 50, 50, 50], "needs-work"),
    ([40, 60, 30, 50], "poor"),
    ([], "poor"),
])
def test_page_tier(good, expected):
    """Test page tiers from the mean good% of core metrics."""
    assert page_tier(good) == expected


@pytest.mark.parametrize("poor,expected", [
    (30, "critical"),
    (25, "warning"),
    (12, "warning"),
    (10, None),
    (3, None),
])
def test_alert_severity_default_limits(poor, expected):
    """Test alert severity for the default 25%/10% limits."""
    assert alert_severity(poor) == expected


def test_alert_severity_custom_limits():
    """Test alert severity with configured limits."""
    assert alert_severity(16, critical=15, warning=5) == "critical"
    assert alert_severity(6, critical=15, warning=5) == "warning"


def test_thresholds_to_dict_covers_every_metric():
    """Test the serialized threshold table."""
    table = thresholds_to_dict()
    assert set(table) == {"lcp", "fid", "inp", "cls", "fcp", "ttfb"}
    assert table["ttfb"] == {"good": 800, "poor": 1800}
