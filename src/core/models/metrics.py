#!/usr/bin/env python3
"""
Performance metric data models.

Contains the measurement records produced by metrics sources and the static
threshold pairs they are classified against.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field

from dateutil import parser as date_parser

from core.exceptions import ThresholdConfigError


class Rating(str, Enum):
    """Qualitative tier of a measured value."""
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"


@dataclass(frozen=True)
class Threshold:
    """Good/poor boundary pair for a single metric. Lower values are better."""
    good: float
    poor: float
    unit: str = "ms"

    def __post_init__(self):
        if not self.good < self.poor:
            raise ThresholdConfigError(
                "threshold",
                f"good boundary {self.good} must be lower than poor boundary {self.poor}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {'good': self.good, 'poor': self.poor}


@dataclass
class MetricSample:
    """
    A named measurement for one page.

    ``good``, ``needs_improvement`` and ``poor`` are the percentage of users in
    each bucket; ``p75`` is the 75th percentile value in the metric's unit.
    """
    name: str
    p75: float
    good: float
    needs_improvement: float
    poor: float
    samples: int

    def __post_init__(self):
        self.name = self.name.strip().lower()
        self.samples = max(0, int(self.samples))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'p75': self.p75,
            'good': self.good,
            'needs_improvement': self.needs_improvement,
            'poor': self.poor,
            'samples': self.samples
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'MetricSample':
        """Create from a dictionary loaded from JSON."""
        return cls(
            name=name,
            p75=float(data['p75']),
            good=data['good'],
            needs_improvement=data.get('needs_improvement', data.get('needsImprovement', 0)),
            poor=data['poor'],
            samples=data.get('samples', 0)
        )


@dataclass
class PageMetrics:
    """All metric samples and traffic mix for a single landing page."""
    page: str
    metrics: Dict[str, MetricSample]
    devices: Dict[str, int] = field(default_factory=dict)
    connections: Dict[str, int] = field(default_factory=dict)

    def get(self, metric: str) -> Optional[MetricSample]:
        return self.metrics.get(metric.lower())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metrics': {name: sample.to_dict() for name, sample in self.metrics.items()},
            'devices': dict(self.devices),
            'connections': dict(self.connections)
        }

    @classmethod
    def from_dict(cls, page: str, data: Dict[str, Any]) -> 'PageMetrics':
        metrics = {
            name.lower(): MetricSample.from_dict(name, values)
            for name, values in data.get('metrics', {}).items()
        }
        return cls(
            page=page,
            metrics=metrics,
            devices=dict(data.get('devices', {})),
            connections=dict(data.get('connections', {}))
        )


@dataclass
class MetricsSnapshot:
    """One run's worth of measurements across every tracked page."""
    date_range: str
    timestamp: datetime
    source: str
    pages: Dict[str, PageMetrics]

    def page_names(self):
        return list(self.pages.keys())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'date_range': self.date_range,
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
            'pages': {name: page.to_dict() for name, page in self.pages.items()}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MetricsSnapshot':
        """Create from dictionary loaded from JSON."""
        timestamp: Union[str, datetime, None] = data.get('timestamp')
        if isinstance(timestamp, str):
            timestamp = date_parser.isoparse(timestamp)
        elif timestamp is None:
            timestamp = datetime.now()

        pages = {
            name: PageMetrics.from_dict(name, page_data)
            for name, page_data in data.get('pages', {}).items()
        }
        return cls(
            date_range=data.get('date_range', data.get('dateRange', 'unknown')),
            timestamp=timestamp,
            source=data.get('source', 'file'),
            pages=pages
        )
