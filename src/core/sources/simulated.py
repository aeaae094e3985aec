#!/usr/bin/env python3
"""
Simulated metrics source.

Generates plausible real-user measurements for the landing pages until a live
analytics integration exists. Every value is drawn from a fixed, documented
range so downstream thresholds see realistic data.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional, Tuple

from core.models.metrics import MetricSample, PageMetrics, MetricsSnapshot
from core.models.strategy import IterationRecord, UXPage, UXSnapshot, PatternStats, StrategyInput
from .base import MetricsSource, SourceMetadata

logger = logging.getLogger(__name__)

DEFAULT_PAGES = [
    'animations-demo.html',
    'aspirational.html',
    'automators.html',
    'bundling.html',
    'comparison.html',
    'creators.html',
    'operators.html',
    'productivity.html',
    'research.html',
    'trust.html',
    'valentines.html',
    'workspace.html',
    'writers.html',
    'index.html'
]

# metric -> (low, high) for p75, good%, needs-improvement%, poor%, samples
METRIC_RANGES: Dict[str, Dict[str, Tuple[float, float]]] = {
    'lcp': {'p75': (1500, 3500), 'good': (70, 90), 'needs_improvement': (5, 20),
            'poor': (5, 15), 'samples': (500, 2000)},
    'fid': {'p75': (20, 100), 'good': (85, 95), 'needs_improvement': (3, 10),
            'poor': (2, 7), 'samples': (400, 1600)},
    'inp': {'p75': (100, 250), 'good': (75, 95), 'needs_improvement': (3, 15),
            'poor': (2, 12), 'samples': (300, 1300)},
    'cls': {'p75': (0, 0.15), 'good': (80, 95), 'needs_improvement': (3, 13),
            'poor': (2, 9), 'samples': (450, 1750)},
    'fcp': {'p75': (1000, 2500), 'good': (75, 95), 'needs_improvement': (5, 17),
            'poor': (3, 11), 'samples': (500, 2000)},
    'ttfb': {'p75': (300, 1100), 'good': (70, 90), 'needs_improvement': (10, 25),
             'poor': (5, 15), 'samples': (500, 2000)},
}

DEVICE_RANGES = {'mobile': (60, 80), 'desktop': (15, 35), 'tablet': (5, 15)}
CONNECTION_RANGES = {'4g': (50, 70), 'wifi': (30, 45), '3g': (5, 15), '5g': (5, 15)}

PATTERN_NAMES = [
    'hero-social-proof',
    'sticky-cta',
    'benefit-bullets',
    'urgency-banner',
    'testimonial-carousel',
    'simplified-form'
]


class SimulatedMetricsSource(MetricsSource):
    """Generates CWV measurements from documented ranges."""

    def __init__(self, pages: Optional[List[str]] = None, seed: Optional[int] = None,
                 config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.pages = list(pages) if pages else list(DEFAULT_PAGES)
        self.seed = seed
        self._rng = random.Random(seed)

    def _between(self, low: float, high: float) -> int:
        return int(round(low + self._rng.random() * (high - low)))

    def _sample(self, name: str) -> MetricSample:
        ranges = METRIC_RANGES[name]
        low, high = ranges['p75']
        if name == 'cls':
            p75 = round(low + self._rng.random() * (high - low), 3)
        else:
            p75 = self._between(low, high)

        return MetricSample(
            name=name,
            p75=p75,
            good=self._between(*ranges['good']),
            needs_improvement=self._between(*ranges['needs_improvement']),
            poor=self._between(*ranges['poor']),
            samples=self._between(*ranges['samples'])
        )

    def _page(self, page: str) -> PageMetrics:
        return PageMetrics(
            page=page,
            metrics={name: self._sample(name) for name in METRIC_RANGES},
            devices={device: self._between(*r) for device, r in DEVICE_RANGES.items()},
            connections={conn: self._between(*r) for conn, r in CONNECTION_RANGES.items()}
        )

    def fetch_snapshot(self, date_range: str = "last7days") -> MetricsSnapshot:
        logger.info(f"Generating simulated metrics for {len(self.pages)} pages")
        return MetricsSnapshot(
            date_range=date_range,
            timestamp=datetime.now(),
            source='simulated',
            pages={page: self._page(page) for page in self.pages}
        )

    def get_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name='simulated',
            display_name='Simulated Data',
            description='Randomized real-user metrics within documented ranges',
            metrics=list(METRIC_RANGES.keys()),
            simulated=True
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            'available': True,
            'pages': len(self.pages),
            'seeded': self.seed is not None
        }


def simulate_iterations(count: int, seed: Optional[int] = None,
                        pages: Optional[List[str]] = None,
                        start: Optional[datetime] = None) -> StrategyInput:
    """
    Fabricate iteration history for the strategy optimizer.

    Produces ``count`` iteration summaries two weeks apart, one UX snapshot per
    iteration and cumulative pattern statistics.
    """
    rng = random.Random(seed)
    pages = list(pages) if pages else list(DEFAULT_PAGES)
    start = start or datetime(2025, 1, 6)

    iterations = []
    snapshots = []
    pattern_totals: Dict[str, List[float]] = {}
    base_quality = {page: 25 + rng.random() * 15 for page in pages}

    for index in range(1, max(0, count) + 1):
        date = (start + timedelta(days=14 * (index - 1))).isoformat()
        pilot_pages = rng.randint(2, 4)
        pages_scaled = rng.randint(3, 8)
        changes = rng.randint(20, 80)
        gained = round(changes * (1.5 + rng.random() * 2.5), 1)

        applied = rng.sample(PATTERN_NAMES, rng.randint(1, 3))
        for name in applied:
            pattern_totals.setdefault(name, []).append(round(3 + rng.random() * 12, 1))

        iterations.append(IterationRecord(
            iteration=index,
            date=date,
            pilot_pages=pilot_pages,
            pages_scaled=pages_scaled,
            changes_applied=changes,
            quality_points_gained=gained,
            patterns=applied
        ))

        ux_pages = []
        for page in pages:
            base_quality[page] = min(100.0, base_quality[page] + rng.random() * 4)
            ux_pages.append(UXPage(
                name=page,
                quality_score=round(base_quality[page], 1),
                conversion_rate=round(2 + rng.random() * 6, 2),
                bounce_rate=round(30 + rng.random() * 40, 2)
            ))
        snapshots.append(UXSnapshot(date=date, pages=ux_pages))

    patterns = [
        PatternStats(
            name=name,
            count=len(gains),
            average_improvement=round(sum(gains) / len(gains), 1),
            total_improvement=round(sum(gains), 1)
        )
        for name, gains in pattern_totals.items()
    ]

    logger.debug(f"Simulated {len(iterations)} iterations with {len(patterns)} patterns")
    return StrategyInput(iterations=iterations, ux_snapshots=snapshots, patterns=patterns)
