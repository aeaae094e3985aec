import json

import pytest

from core.analysis import (
    aggregate_metrics, analyze_metrics, build_report, group_alerts, history_snapshot
)
from core.analysis.anomaly import describe_trend, detect_metric_anomaly, detect_trends, fit_trend, trend_confidence


@pytest.fixture
def snapshot(make_snapshot, healthy_page, struggling_page):
    return make_snapshot({"healthy.html": healthy_page, "struggling.html": struggling_page})


def test_aggregate_is_sample_weighted(make_snapshot):
    """Test that good% is averaged by sample count across pages."""
    snap = make_snapshot({
        "a.html": {"lcp": (2000, 80, 10, 10, 100)},
        "b.html": {"lcp": (2000, 60, 20, 20, 50)},
    })
    aggregate = aggregate_metrics(snap, metrics=["lcp"])

    assert aggregate["lcp"]["good"] == 73.33
    assert aggregate["lcp"]["samples"] == 150
    assert aggregate["lcp"]["poor"] == 13.33


def test_aggregate_without_samples_reports_zeros(make_snapshot):
    """Test a metric nobody measured."""
    snap = make_snapshot({"a.html": {"lcp": (2000, 80, 10, 10, 100)}})
    aggregate = aggregate_metrics(snap)
    assert aggregate["inp"] == {"good": 0.0, "needs_improvement": 0.0, "poor": 0.0, "samples": 0}


def test_analyze_metrics_alerts(snapshot):
    """Test critical and warning alerts from the poor-experience share."""
    analysis = analyze_metrics(snapshot)

    assert [(a.severity, a.page, a.metric) for a in analysis.alerts] == [
        ("critical", "struggling.html", "LCP"),
        ("warning", "struggling.html", "FID"),
    ]
    assert analysis.alerts[0].message == "30% of users experiencing poor LCP (>4000ms)"
    assert analysis.alerts[1].message == "12% of users experiencing poor FID"
    assert analysis.alerts[0].value == 4500


def test_analyze_metrics_issues_and_ratings(snapshot):
    """Test p75 issues carry the boundary they crossed and canned fixes."""
    analysis = analyze_metrics(snapshot)

    lcp_issue, fid_issue = analysis.issues
    assert (lcp_issue.metric, lcp_issue.severity, lcp_issue.threshold, lcp_issue.rating) == \
        ("LCP", "high", 4000, "poor")
    assert (fid_issue.metric, fid_issue.severity, fid_issue.threshold, fid_issue.rating) == \
        ("FID", "medium", 100, "needs-improvement")
    assert lcp_issue.recommendation
    assert analysis.page_ratings["healthy.html"] == {
        "lcp": "good", "fid": "good", "inp": "good", "cls": "good"
    }


def test_analyze_metrics_tiers_and_recommendations(snapshot):
    """Test page tiers, summary counts and derived recommendations."""
    analysis = analyze_metrics(snapshot)

    assert analysis.page_tiers == {"healthy.html": "excellent", "struggling.html": "needs-work"}
    assert analysis.summary.total_pages == 2
    assert analysis.summary.excellent_pages == 1
    assert analysis.summary.needs_work_pages == 1
    assert [r.priority for r in analysis.recommendations] == ["critical", "high", "high"]
    assert analysis.recommendations[0].pages == ["struggling.html"]


def test_analyze_metrics_respects_alert_limits(snapshot):
    """Test configurable critical and warning percentages."""
    analysis = analyze_metrics(snapshot, critical_percent=50, warning_percent=20)

    assert [(a.severity, a.metric) for a in analysis.alerts] == [("warning", "LCP")]
    assert analysis.critical_alerts == []


def test_analyze_metrics_flags_aggregate_anomaly(snapshot):
    """Test a site-wide good% drop against history becomes an anomaly alert."""
    history = [{"lcp": good} for good in (90, 91, 89)]
    analysis = analyze_metrics(snapshot, history=history)

    anomalies = [a for a in analysis.alerts if a.kind == "anomaly"]
    assert len(anomalies) == 1
    assert anomalies[0].page == "all pages"
    assert anomalies[0].severity == "critical"
    assert "DEGRADATION DETECTED" in anomalies[0].message
    # anomalies never count as critical pages
    assert analysis.recommendations[0].pages == ["struggling.html"]


def test_analyze_metrics_flags_declining_trend(snapshot):
    """Test a steady site-wide good% slide becomes a trend warning."""
    history = [{"lcp": good} for good in (77, 74, 71, 68)]
    analysis = analyze_metrics(snapshot, history=history)

    trends = [a for a in analysis.alerts if a.kind == "trend"]
    assert len(trends) == 1
    assert trends[0].severity == "warning"
    assert trends[0].page == "all pages"
    assert trends[0].metric == "LCP"
    assert trends[0].value == 65.0
    assert "declining 3.0 points per run over 5 runs" in trends[0].message


def test_fit_trend_least_squares():
    """Test slope, intercept and R² of the fitted line."""
    fit = fit_trend([90, 88, 86, 84, 82])
    assert fit["slope"] == pytest.approx(-2.0)
    assert fit["intercept"] == pytest.approx(90.0)
    assert fit["r2"] == pytest.approx(1.0)

    noisy = fit_trend([1, 3, 2, 4, 3])
    assert noisy["slope"] == pytest.approx(0.5)
    assert noisy["r2"] == pytest.approx(2.5 / 5.2)


def test_trend_confidence_buckets():
    """Test R² confidence boundaries."""
    assert trend_confidence(0.71) == "high"
    assert trend_confidence(0.7) == "medium"
    assert trend_confidence(0.41) == "medium"
    assert trend_confidence(0.4) == "low"


def test_describe_trend_needs_five_points_and_a_real_slope():
    """Test short series and shallow slopes are not trends."""
    assert describe_trend([90, 85, 80, 75]) is None
    assert describe_trend([80, 80.2, 80.4, 80.6, 80.8]) is None

    trend = describe_trend([70, 72, 74, 76, 78])
    assert trend == {"slope": 2.0, "r2": 1.0, "confidence": "high", "direction": "improving"}


def test_detect_trends_only_warns_on_confident_declines():
    """Test improving and noisy declining series stay silent."""
    declining = [{"cls": good} for good in (90, 88, 86, 84, 82)]
    improving = [{"cls": good} for good in (82, 84, 86, 88, 90)]
    noisy = [{"cls": good} for good in (90, 70, 95, 65, 88)]

    alerts = detect_trends(declining)
    assert [(a.kind, a.metric, a.value) for a in alerts] == [("trend", "CLS", 82)]
    assert detect_trends(improving) == []
    assert detect_trends(noisy) == []
    assert detect_trends(declining[:4]) == []


def test_detect_metric_anomaly_needs_history():
    """Test that fewer than three points are never anomalous."""
    assert detect_metric_anomaly(10, [80, 80]) is None


def test_detect_metric_anomaly_improvement_is_info():
    """Test improvements are reported at info severity."""
    result = detect_metric_anomaly(95, [80, 81, 79, 80], metric_name="LCP good%")
    assert result["severity"] == "info"
    assert "Improvement detected" in result["message"]


def test_detect_metric_anomaly_flat_history_uses_unit_deviation():
    """Test that a zero-variance history falls back to a deviation of one."""
    assert detect_metric_anomaly(79, [80, 80, 80]) is None
    result = detect_metric_anomaly(77, [80, 80, 80])
    assert result["severity"] == "high"
    assert result["z_score"] == 3.0
    assert result["expected"] == 80


def test_detect_metric_anomaly_higher_is_worse():
    """Test direction handling for metrics where increases are bad."""
    result = detect_metric_anomaly(4000, [2000, 2100, 1900], higher_is_worse=True)
    assert result["severity"] == "critical"
    assert result["deviation"] == 2000


def test_build_report_is_json_ready(snapshot):
    """Test report structure and serializability."""
    analysis = analyze_metrics(snapshot)
    report = build_report(snapshot, analysis, "2025-03-10T09:30:00+00:00")

    assert report["timestamp"] == "2025-03-10T09:30:00+00:00"
    assert report["source"] == "test"
    assert report["summary"]["total_pages"] == 2
    assert set(report["pages"]) == {"healthy.html", "struggling.html"}
    assert report["configuration"]["alert_thresholds"] == {"critical": 25, "warning": 10}
    assert report["configuration"]["thresholds"]["lcp"] == {"good": 2500, "poor": 4000}
    assert json.loads(json.dumps(report)) == report


def test_group_alerts_and_history_snapshot(snapshot):
    """Test the alerts file buckets and the trend history record."""
    analysis = analyze_metrics(snapshot)

    grouped = group_alerts(analysis)
    assert [a["metric"] for a in grouped["critical"]] == ["LCP"]
    assert [a["metric"] for a in grouped["warning"]] == ["FID"]
    assert grouped["info"] == []

    record = history_snapshot(analysis, "2025-03-10")
    assert record["date"] == "2025-03-10"
    assert record["aggregate_good"]["lcp"] == 65.0
    assert record["critical_alerts"] == 1
    assert record["warning_alerts"] == 1
    assert record["issues"] == 2


def test_group_alerts_is_json_ready(snapshot):
    """Test grouped threshold, anomaly and trend alerts survive a JSON round trip."""
    history = [{"lcp": good} for good in (77, 74, 71, 68)]
    grouped = group_alerts(analyze_metrics(snapshot, history=history))

    assert json.loads(json.dumps(grouped)) == grouped
    assert {a["kind"] for a in grouped["warning"]} == {"threshold", "anomaly", "trend"}
