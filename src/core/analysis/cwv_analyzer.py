#!/usr/bin/env python3
"""
Core Web Vitals analyzer.

Classifies every page/metric of a snapshot, raises threshold alerts, lists
p75 issues with their canned fixes and derives high-level recommendations.
"""

import logging
from typing import Dict, Iterable, List, Optional, Any

from core.models.analysis import Alert, Issue, TierSummary, CWVAnalysis
from core.models.metrics import MetricsSnapshot, Threshold
from core.recommendations import get_recommendation, generate_recommendations
from core.thresholds import (
    CWV_THRESHOLDS, CORE_METRICS, DEFAULT_CRITICAL_PERCENT, DEFAULT_WARNING_PERCENT,
    classify, page_tier, alert_severity
)
from .anomaly import detect_aggregate_anomalies, detect_trends

logger = logging.getLogger(__name__)


def _format_boundary(threshold: Threshold) -> str:
    return f"{threshold.poor:g}{threshold.unit}"


def aggregate_metrics(snapshot: MetricsSnapshot,
                      metrics: Iterable[str] = CORE_METRICS) -> Dict[str, Dict[str, float]]:
    """
    Sample-weighted good/needs-improvement/poor percentages across pages.

    Percentages are rounded to two decimals. Metrics with no samples report zeros.
    """
    aggregate = {}
    for metric in metrics:
        good = needs_improvement = poor = 0.0
        samples = 0
        for page in snapshot.pages.values():
            sample = page.get(metric)
            if sample is None:
                continue
            good += sample.good * sample.samples
            needs_improvement += sample.needs_improvement * sample.samples
            poor += sample.poor * sample.samples
            samples += sample.samples

        if samples:
            aggregate[metric] = {
                'good': round(good / samples, 2),
                'needs_improvement': round(needs_improvement / samples, 2),
                'poor': round(poor / samples, 2),
                'samples': samples
            }
        else:
            aggregate[metric] = {'good': 0.0, 'needs_improvement': 0.0, 'poor': 0.0, 'samples': 0}
    return aggregate


def analyze_metrics(snapshot: MetricsSnapshot,
                    thresholds: Optional[Dict[str, Threshold]] = None,
                    critical_percent: float = DEFAULT_CRITICAL_PERCENT,
                    warning_percent: float = DEFAULT_WARNING_PERCENT,
                    history: Optional[List[Dict[str, float]]] = None) -> CWVAnalysis:
    """
    Analyze a snapshot.

    Args:
        snapshot: Measurements to analyze
        thresholds: Metric thresholds, defaults to the CWV table
        critical_percent: poor% above which a critical alert is raised
        warning_percent: poor% above which a warning is raised
        history: Previous per-run site-wide good% dicts, oldest first, for
            anomaly and trend detection

    Returns:
        CWVAnalysis
    """
    thresholds = thresholds or CWV_THRESHOLDS
    summary = TierSummary()
    page_tiers: Dict[str, str] = {}
    page_ratings: Dict[str, Dict[str, str]] = {}
    alerts: List[Alert] = []
    issues: List[Issue] = []

    for page_name, page in snapshot.pages.items():
        core_good = [page.metrics[m].good for m in CORE_METRICS if m in page.metrics]
        tier = page_tier(core_good)
        summary.record(tier)
        page_tiers[page_name] = tier
        page_ratings[page_name] = {}

        for metric, sample in page.metrics.items():
            threshold = thresholds.get(metric)
            if threshold is None:
                logger.debug(f"No threshold for metric {metric} on {page_name}, skipping")
                continue

            rating = classify(sample.p75, threshold)
            page_ratings[page_name][metric] = rating.value
            label = metric.upper()

            severity = alert_severity(sample.poor, critical_percent, warning_percent)
            if severity == 'critical':
                alerts.append(Alert(
                    severity='critical',
                    page=page_name,
                    metric=label,
                    message=f"{sample.poor:g}% of users experiencing poor {label} (>{_format_boundary(threshold)})",
                    value=sample.p75
                ))
            elif severity == 'warning':
                alerts.append(Alert(
                    severity='warning',
                    page=page_name,
                    metric=label,
                    message=f"{sample.poor:g}% of users experiencing poor {label}",
                    value=sample.p75
                ))

            if sample.p75 > threshold.poor:
                issues.append(Issue(
                    page=page_name,
                    metric=label,
                    value=sample.p75,
                    threshold=threshold.poor,
                    severity='high',
                    rating=rating.value,
                    recommendation=get_recommendation(metric, rating)
                ))
            elif sample.p75 > threshold.good:
                issues.append(Issue(
                    page=page_name,
                    metric=label,
                    value=sample.p75,
                    threshold=threshold.good,
                    severity='medium',
                    rating=rating.value,
                    recommendation=get_recommendation(metric, rating)
                ))

    aggregate = aggregate_metrics(snapshot)
    if history:
        alerts.extend(detect_aggregate_anomalies(aggregate, history))
        current_good = {metric: values['good'] for metric, values in aggregate.items()}
        alerts.extend(detect_trends(list(history) + [current_good]))

    recommendations = generate_recommendations(alerts, issues, critical_percent)

    logger.info(
        f"Analyzed {summary.total_pages} pages: {len(alerts)} alerts, "
        f"{len(issues)} issues, {len(recommendations)} recommendations"
    )

    return CWVAnalysis(
        summary=summary,
        page_tiers=page_tiers,
        page_ratings=page_ratings,
        alerts=alerts,
        issues=issues,
        recommendations=recommendations,
        aggregate=aggregate
    )


def build_report(snapshot: MetricsSnapshot, analysis: CWVAnalysis, generated_at: str,
                 thresholds: Optional[Dict[str, Threshold]] = None,
                 critical_percent: float = DEFAULT_CRITICAL_PERCENT,
                 warning_percent: float = DEFAULT_WARNING_PERCENT) -> Dict[str, Any]:
    """Assemble the JSON-ready monitoring report."""
    thresholds = thresholds or CWV_THRESHOLDS
    data = analysis.to_dict()
    return {
        'timestamp': generated_at,
        'date_range': snapshot.date_range,
        'source': snapshot.source,
        'summary': data['summary'],
        'alerts': data['alerts'],
        'recommendations': data['recommendations'],
        'issues': data['issues'],
        'aggregate': data['aggregate'],
        'page_tiers': data['page_tiers'],
        'pages': snapshot.to_dict()['pages'],
        'configuration': {
            'thresholds': {name: t.to_dict() for name, t in thresholds.items()},
            'alert_thresholds': {'critical': critical_percent, 'warning': warning_percent}
        }
    }


def group_alerts(analysis: CWVAnalysis) -> Dict[str, List[Dict[str, Any]]]:
    """Split alerts into critical, warning and info buckets for the alerts file."""
    grouped = {'critical': [], 'warning': [], 'info': []}
    for alert in analysis.alerts:
        if alert.severity == 'critical':
            grouped['critical'].append(alert.to_dict())
        elif alert.severity in ('warning', 'high'):
            grouped['warning'].append(alert.to_dict())
        else:
            grouped['info'].append(alert.to_dict())
    return grouped


def history_snapshot(analysis: CWVAnalysis, generated_at: str) -> Dict[str, Any]:
    """Compact record appended to the CWV trend history."""
    return {
        'date': generated_at,
        'summary': analysis.summary.to_dict(),
        'aggregate_good': {metric: values['good'] for metric, values in analysis.aggregate.items()},
        'critical_alerts': len(analysis.critical_alerts),
        'warning_alerts': len(analysis.warning_alerts),
        'issues': len(analysis.issues)
    }
