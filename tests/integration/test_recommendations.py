import pytest

from core.exceptions import ThresholdConfigError
from core.models.analysis import Alert, Issue
from core.models.metrics import Rating, Threshold
from core.recommendations import (
    RECOMMENDATIONS, generate_recommendations, get_recommendation, validate_catalog
)


def test_get_recommendation_returns_canned_fixes():
    """Test lookup by metric and rating."""
    fixes = get_recommendation("lcp", Rating.POOR)
    assert fixes[0] == "Optimize hero images - convert to WebP, use srcset for responsive images"
    assert len(fixes) == 5
    assert get_recommendation("CLS", "needs-improvement") == RECOMMENDATIONS["cls"][Rating.NEEDS_IMPROVEMENT]


def test_get_recommendation_returns_copy():
    """Test that callers cannot mutate the catalog."""
    fixes = get_recommendation("ttfb", Rating.POOR)
    fixes.append("mutated")
    assert "mutated" not in RECOMMENDATIONS["ttfb"][Rating.POOR]


@pytest.mark.parametrize("metric,severity", [
    ("fps", "poor"),
    ("lcp", "good"),
    ("lcp", "terrible"),
    ("", "poor"),
])
def test_get_recommendation_unknown_returns_empty(metric, severity):
    """Test that unknown metrics or ratings have no fixes."""
    assert get_recommendation(metric, severity) == []


def test_validate_catalog_passes_for_builtin_tables():
    """Test that the shipped catalog matches the threshold table."""
    validate_catalog()


def test_validate_catalog_detects_missing_metric():
    """Test a threshold without recommendations."""
    thresholds = {"lcp": Threshold(2500, 4000), "fps": Threshold(30, 60)}
    catalog = {"lcp": RECOMMENDATIONS["lcp"]}
    with pytest.raises(ThresholdConfigError) as exc_info:
        validate_catalog(catalog, thresholds)
    assert exc_info.value.context["metric"] == "fps"


def test_validate_catalog_detects_extra_metric():
    """Test recommendations for a metric without a threshold."""
    thresholds = {"lcp": Threshold(2500, 4000)}
    catalog = {"lcp": RECOMMENDATIONS["lcp"], "fid": RECOMMENDATIONS["fid"]}
    with pytest.raises(ThresholdConfigError, match="without a threshold"):
        validate_catalog(catalog, thresholds)


def test_validate_catalog_detects_missing_rating():
    """Test a metric that lacks fixes for one rating."""
    thresholds = {"lcp": Threshold(2500, 4000)}
    catalog = {"lcp": {Rating.POOR: ["fix"]}}
    with pytest.raises(ThresholdConfigError, match="needs-improvement"):
        validate_catalog(catalog, thresholds)


def _issue(page, metric):
    return Issue(page=page, metric=metric, value=1, threshold=1, severity="high", rating="poor")


def test_generate_recommendations_counts_unique_critical_pages():
    """Test the critical item counts each page once and ignores anomalies."""
    alerts = [
        Alert("critical", "a.html", "LCP", "msg"),
        Alert("critical", "a.html", "FID", "msg"),
        Alert("critical", "b.html", "LCP", "msg"),
        Alert("warning", "c.html", "LCP", "msg"),
        Alert("critical", "all pages", "LCP", "msg", kind="anomaly"),
    ]
    recommendations = generate_recommendations(alerts, [])

    assert len(recommendations) == 1
    critical = recommendations[0]
    assert critical.priority == "critical"
    assert critical.pages == ["a.html", "b.html"]
    assert critical.affected_pages == 2
    assert critical.description == "2 pages have critical performance issues affecting >25% of users"


def test_generate_recommendations_top_three_issue_metrics():
    """Test one high item per most frequent issue metric, ties in first-seen order."""
    issues = [
        _issue("a", "LCP"), _issue("b", "LCP"), _issue("c", "LCP"),
        _issue("a", "CLS"), _issue("b", "CLS"),
        _issue("a", "FID"),
        _issue("a", "INP"),
    ]
    recommendations = generate_recommendations([], issues)

    assert [r.title for r in recommendations] == [
        "Optimize LCP across 3 pages",
        "Optimize CLS across 2 pages",
        "Optimize FID across 1 pages",
    ]
    assert all(r.priority == "high" for r in recommendations)


def test_generate_recommendations_empty():
    """Test no alerts and no issues produce no recommendations."""
    assert generate_recommendations([], []) == []
