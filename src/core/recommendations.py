#!/usr/bin/env python3
"""
Static optimization recommendation catalog.

The catalog is keyed by metric, then by rating, and must cover exactly the
metrics of the threshold table; this is checked at import time.
"""

import logging
from collections import Counter
from typing import Dict, List, Union, Mapping, Any

from core.exceptions import ThresholdConfigError
from core.models.metrics import Rating
from core.models.analysis import Recommendation
from core.thresholds import CWV_THRESHOLDS

logger = logging.getLogger(__name__)

RECOMMENDATIONS: Dict[str, Dict[Rating, List[str]]] = {
    'lcp': {
        Rating.POOR: [
            'Optimize hero images - convert to WebP, use srcset for responsive images',
            'Implement critical CSS inlining for above-fold content',
            'Add preload hints for critical resources',
            'Enable CDN for faster asset delivery',
            'Reduce server response time (TTFB)'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Add preconnect hints for external domains',
            'Optimize font loading with font-display: swap',
            'Consider lazy loading below-fold images',
            'Minimize render-blocking resources'
        ]
    },
    'fid': {
        Rating.POOR: [
            'Defer non-critical JavaScript execution',
            'Break up long JavaScript tasks (>50ms)',
            'Remove unused JavaScript code',
            'Implement code splitting',
            'Use web workers for heavy computation'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Optimize event handlers (use passive listeners)',
            'Debounce/throttle expensive operations',
            'Reduce JavaScript bundle size',
            'Lazy load third-party scripts'
        ]
    },
    'inp': {
        Rating.POOR: [
            'Optimize interaction handlers to complete within 200ms',
            'Reduce main thread blocking',
            'Break up long tasks into smaller chunks',
            'Use requestIdleCallback for non-urgent work'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Profile slow interactions with DevTools',
            'Optimize CSS animations (use transform/opacity)',
            'Reduce DOM complexity',
            'Minimize layout thrashing'
        ]
    },
    'cls': {
        Rating.POOR: [
            'Add explicit width/height to all images',
            'Reserve space for dynamic content (ads, embeds)',
            'Use font-display: swap to prevent FOIT',
            'Avoid inserting content above existing content',
            'Use CSS aspect-ratio for responsive media'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Audit layout shifts with DevTools',
            'Preload web fonts',
            'Avoid animations that cause layout changes',
            'Set dimensions on video/iframe elements'
        ]
    },
    'fcp': {
        Rating.POOR: [
            'Inline critical CSS',
            'Reduce server response time',
            'Eliminate render-blocking resources',
            'Optimize web font loading'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Minimize CSS file size',
            'Defer non-critical CSS',
            'Optimize above-fold rendering'
        ]
    },
    'ttfb': {
        Rating.POOR: [
            'Enable server-side caching',
            'Use a CDN for static assets',
            'Optimize database queries',
            'Implement HTTP/2 or HTTP/3',
            'Consider edge computing'
        ],
        Rating.NEEDS_IMPROVEMENT: [
            'Review server configuration',
            'Optimize backend performance',
            'Enable compression (gzip/brotli)'
        ]
    }
}


def validate_catalog(catalog: Mapping[str, Any] = None, thresholds: Mapping[str, Any] = None) -> None:
    """
    Check that the catalog and threshold table describe the same metrics.

    Raises:
        ThresholdConfigError: On the first metric present in one table but not the other,
            or a metric without both POOR and NEEDS_IMPROVEMENT entries.
    """
    catalog = RECOMMENDATIONS if catalog is None else catalog
    thresholds = CWV_THRESHOLDS if thresholds is None else thresholds

    for metric in thresholds:
        if metric not in catalog:
            raise ThresholdConfigError(metric, "no recommendations defined")
        for rating in (Rating.POOR, Rating.NEEDS_IMPROVEMENT):
            if not catalog[metric].get(rating):
                raise ThresholdConfigError(metric, f"no recommendations for rating '{rating.value}'")

    for metric in catalog:
        if metric not in thresholds:
            raise ThresholdConfigError(metric, "recommendations defined without a threshold")


def get_recommendation(metric: str, severity: Union[Rating, str]) -> List[str]:
    """
    Look up the canned fixes for a metric/rating pair.

    Unknown metrics or ratings return an empty list.
    """
    if not metric:
        return []
    try:
        rating = Rating(severity)
    except ValueError:
        return []
    return list(RECOMMENDATIONS.get(metric.lower(), {}).get(rating, []))


def generate_recommendations(alerts, issues, critical_percent: float = 25) -> List[Recommendation]:
    """
    Build high-level action items for a CWV analysis.

    Emits one critical item for pages with critical alerts, then one high item
    for each of the three most frequent issue metrics.
    """
    recommendations = []

    critical_pages = []
    for alert in alerts:
        if alert.severity == 'critical' and alert.kind == 'threshold' and alert.page not in critical_pages:
            critical_pages.append(alert.page)

    if critical_pages:
        recommendations.append(Recommendation(
            priority='critical',
            title='Critical Performance Issues Detected',
            description=f"{len(critical_pages)} pages have critical performance issues affecting >{critical_percent:g}% of users",
            action='Investigate and fix immediately',
            pages=critical_pages,
            affected_pages=len(critical_pages)
        ))

    # Counter.most_common keeps first-seen order for ties
    metric_counts = Counter(issue.metric for issue in issues)
    for metric, count in metric_counts.most_common(3):
        recommendations.append(Recommendation(
            priority='high',
            title=f"Optimize {metric} across {count} pages",
            description=f"{metric} is the most common performance issue",
            action=f"Review {metric} optimization guide and implement fixes",
            affected_pages=count
        ))

    logger.debug(f"Generated {len(recommendations)} high-level recommendations")
    return recommendations


validate_catalog()
