#!/usr/bin/env python3
"""
Core Web Vitals thresholds and classification rules.

Lower values are better for every tracked metric.
"""

from typing import Dict, Mapping, Union, Iterable

from core.models.metrics import Rating, Threshold

CWV_THRESHOLDS: Dict[str, Threshold] = {
    'lcp': Threshold(good=2500, poor=4000),     # Largest Contentful Paint
    'fid': Threshold(good=100, poor=300),       # First Input Delay
    'inp': Threshold(good=200, poor=500),       # Interaction to Next Paint
    'cls': Threshold(good=0.1, poor=0.25, unit=""),  # Cumulative Layout Shift
    'fcp': Threshold(good=1800, poor=3000),     # First Contentful Paint
    'ttfb': Threshold(good=800, poor=1800),     # Time to First Byte
}

# Metrics that make up the page tier score
CORE_METRICS = ('lcp', 'fid', 'inp', 'cls')

TIER_EXCELLENT = 90
TIER_GOOD = 75
TIER_NEEDS_WORK = 50

DEFAULT_CRITICAL_PERCENT = 25
DEFAULT_WARNING_PERCENT = 10


def classify(value: float, threshold: Union[Threshold, Mapping[str, float]]) -> Rating:
    """
    Classify a measured value against a good/poor boundary pair.

    Values equal to the good boundary are GOOD; values equal to the poor
    boundary are still NEEDS_IMPROVEMENT.
    """
    if isinstance(threshold, Threshold):
        good, poor = threshold.good, threshold.poor
    else:
        good, poor = threshold['good'], threshold['poor']

    if value <= good:
        return Rating.GOOD
    if value > poor:
        return Rating.POOR
    return Rating.NEEDS_IMPROVEMENT


def get_threshold(metric: str) -> Threshold:
    """Look up a metric threshold; raises KeyError for unknown metrics."""
    return CWV_THRESHOLDS[metric.lower()]


def page_tier(good_percentages: Iterable[float]) -> str:
    """Bucket a page by the mean good% of its core metrics."""
    values = list(good_percentages)
    if not values:
        return 'poor'
    average = sum(values) / len(values)

    if average >= TIER_EXCELLENT:
        return 'excellent'
    elif average >= TIER_GOOD:
        return 'good'
    elif average >= TIER_NEEDS_WORK:
        return 'needs-work'
    return 'poor'


def alert_severity(poor_percent: float,
                   critical: float = DEFAULT_CRITICAL_PERCENT,
                   warning: float = DEFAULT_WARNING_PERCENT):
    """Return 'critical', 'warning' or None for the share of users with a poor experience."""
    if poor_percent > critical:
        return 'critical'
    if poor_percent > warning:
        return 'warning'
    return None


def thresholds_to_dict() -> Dict[str, Dict[str, float]]:
    return {name: threshold.to_dict() for name, threshold in CWV_THRESHOLDS.items()}
