#!/usr/bin/env python3
"""
Statistical anomaly detection against stored history.
"""

import logging
import math
from typing import Dict, Any, List, Optional, Sequence

from core.models.analysis import Alert

logger = logging.getLogger(__name__)

MIN_HISTORY = 3
ANOMALY_STD_DEV = 2

MIN_TREND_POINTS = 5
# good% points per run
TREND_SLOPE = 0.5


def detect_metric_anomaly(current: float, history: Sequence[float],
                          higher_is_worse: bool = False,
                          metric_name: str = 'value') -> Optional[Dict[str, Any]]:
    """
    Compare a value with its history using a population z-score.

    Args:
        current: Latest observed value
        history: Previous values, oldest first
        higher_is_worse: True for metrics where an increase is a degradation
        metric_name: Label used in the message

    Returns:
        None when the history is too short or the value is within 2 standard
        deviations; otherwise a dict with severity, message, expected,
        deviation and z_score. Improvements are always severity 'info'.
    """
    values = [float(v) for v in history]
    if len(values) < MIN_HISTORY:
        return None

    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    std_dev = math.sqrt(variance) or 1

    z = abs((current - mean) / std_dev)
    if z <= ANOMALY_STD_DEV:
        return None

    deviation = current - mean
    degraded = deviation > 0 if higher_is_worse else deviation < 0

    if not degraded:
        severity = 'info'
    elif z > 3:
        severity = 'critical'
    elif z > 2.5:
        severity = 'high'
    else:
        severity = 'warning'

    direction = 'increased' if deviation > 0 else 'decreased'
    message = f"{metric_name} {direction} by {abs(deviation):.1f} ({z:.1f}σ from mean)"
    message += ' - DEGRADATION DETECTED' if degraded else ' - Improvement detected'

    return {
        'severity': severity,
        'message': message,
        'expected': round(mean, 2),
        'deviation': round(deviation, 2),
        'z_score': round(z, 2)
    }


def fit_trend(values: Sequence[float]) -> Dict[str, float]:
    """
    Least-squares line through the values against their run index.

    Returns:
        Dict with slope, intercept and r2. A flat series has r2 1.0.
    """
    n = len(values)
    if n < 2:
        raise ValueError(f"Need at least 2 points to fit a trend, got {n}")

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_x2 = sum(i * i for i in range(n))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x ** 2)
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    ss_total = sum((y - mean_y) ** 2 for y in values)
    ss_residual = sum((y - (slope * i + intercept)) ** 2 for i, y in enumerate(values))
    r2 = 1 - ss_residual / ss_total if ss_total else 1.0

    return {'slope': slope, 'intercept': intercept, 'r2': r2}


def trend_confidence(r2: float) -> str:
    if r2 > 0.7:
        return 'high'
    if r2 > 0.4:
        return 'medium'
    return 'low'


def describe_trend(values: Sequence[float], min_slope: float = TREND_SLOPE) -> Optional[Dict[str, Any]]:
    """
    Direction of a good% series, oldest first.

    Returns:
        None with fewer than MIN_TREND_POINTS values or when the slope is
        within ``min_slope``; otherwise slope, r2, confidence and direction
        ('improving' or 'declining').
    """
    values = [float(v) for v in values]
    if len(values) < MIN_TREND_POINTS:
        return None

    fit = fit_trend(values)
    if abs(fit['slope']) <= min_slope:
        return None

    return {
        'slope': round(fit['slope'], 3),
        'r2': round(fit['r2'], 3),
        'confidence': trend_confidence(fit['r2']),
        'direction': 'improving' if fit['slope'] > 0 else 'declining'
    }


def detect_trends(good_history: List[Dict[str, float]],
                  min_slope: float = TREND_SLOPE) -> List[Alert]:
    """
    Warn about metrics whose site-wide good% keeps falling.

    Only declining trends with high confidence raise an alert; the rest are
    logged.

    Args:
        good_history: Per-run ``{metric: good%}`` dicts, oldest first,
            ending with the current run
        min_slope: Smallest slope, in good% points per run, that counts
    """
    metrics: List[str] = []
    for entry in good_history:
        metrics.extend(m for m in entry if m not in metrics)

    alerts = []
    for metric in metrics:
        series = [entry[metric] for entry in good_history if metric in entry]
        trend = describe_trend(series, min_slope)
        if trend is None:
            continue

        label = metric.upper()
        logger.info(f"{label} good% {trend['direction']} by {trend['slope']}/run "
                    f"(r2 {trend['r2']}, {trend['confidence']} confidence)")
        if trend['direction'] != 'declining' or trend['confidence'] != 'high':
            continue

        alerts.append(Alert(
            severity='warning',
            page='all pages',
            metric=label,
            message=f"{label} good% declining {abs(trend['slope']):.1f} points per run "
                    f"over {len(series)} runs (R² {trend['r2']:.2f})",
            value=series[-1],
            kind='trend'
        ))
    return alerts


def detect_aggregate_anomalies(aggregate: Dict[str, Dict[str, float]],
                               history: List[Dict[str, float]]) -> List[Alert]:
    """
    Flag metrics whose site-wide good% departs from the CWV history.

    Args:
        aggregate: Output of aggregate_metrics for the current run
        history: Previous per-run ``{metric: good%}`` dicts, oldest first
    """
    alerts = []
    for metric, values in aggregate.items():
        past = [entry[metric] for entry in history if metric in entry]
        result = detect_metric_anomaly(values['good'], past, higher_is_worse=False,
                                       metric_name=f"{metric.upper()} good%")
        if result is None:
            continue

        logger.info(f"Anomaly on {metric.upper()}: {result['message']}")
        alerts.append(Alert(
            severity=result['severity'],
            page='all pages',
            metric=metric.upper(),
            message=result['message'],
            value=values['good'],
            kind='anomaly'
        ))
    return alerts
