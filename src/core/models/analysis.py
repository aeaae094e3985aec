#!/usr/bin/env python3
"""
Analysis result data models.

Contains the derived classification, alert and recommendation records that
the analyzers attach to a metrics snapshot.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class Alert:
    """A page/metric combination that crossed an alerting threshold."""
    severity: str  # critical, high, warning, info
    page: str
    metric: str
    message: str
    value: Optional[float] = None
    kind: str = "threshold"  # "threshold", "anomaly" or "trend"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'severity': self.severity,
            'page': self.page,
            'metric': self.metric,
            'message': self.message,
            'value': self.value,
            'kind': self.kind
        }


@dataclass
class Issue:
    """A p75 value outside the good range, with canned fixes."""
    page: str
    metric: str
    value: float
    threshold: float
    severity: str  # "high" when over the poor boundary, "medium" otherwise
    rating: str
    recommendation: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'metric': self.metric,
            'value': self.value,
            'threshold': self.threshold,
            'severity': self.severity,
            'rating': self.rating,
            'recommendation': list(self.recommendation)
        }


@dataclass
class Recommendation:
    """High-level action item derived from the full analysis."""
    priority: str
    title: str
    description: str
    action: str
    pages: List[str] = field(default_factory=list)
    affected_pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'priority': self.priority,
            'title': self.title,
            'description': self.description,
            'action': self.action,
            'pages': list(self.pages),
            'affected_pages': self.affected_pages
        }


@dataclass
class TierSummary:
    """Page counts per quality tier."""
    total_pages: int = 0
    excellent_pages: int = 0
    good_pages: int = 0
    needs_work_pages: int = 0
    poor_pages: int = 0

    def record(self, tier: str) -> None:
        self.total_pages += 1
        if tier == 'excellent':
            self.excellent_pages += 1
        elif tier == 'good':
            self.good_pages += 1
        elif tier == 'needs-work':
            self.needs_work_pages += 1
        else:
            self.poor_pages += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_pages': self.total_pages,
            'excellent_pages': self.excellent_pages,
            'good_pages': self.good_pages,
            'needs_work_pages': self.needs_work_pages,
            'poor_pages': self.poor_pages
        }


@dataclass
class CWVAnalysis:
    """Everything the CWV analyzer derives from one snapshot."""
    summary: TierSummary
    page_tiers: Dict[str, str]
    page_ratings: Dict[str, Dict[str, str]]
    alerts: List[Alert]
    issues: List[Issue]
    recommendations: List[Recommendation]
    aggregate: Dict[str, Dict[str, float]]

    @property
    def critical_alerts(self) -> List[Alert]:
        return [a for a in self.alerts if a.severity == 'critical']

    @property
    def warning_alerts(self) -> List[Alert]:
        return [a for a in self.alerts if a.severity == 'warning']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary.to_dict(),
            'page_tiers': dict(self.page_tiers),
            'page_ratings': {page: dict(r) for page, r in self.page_ratings.items()},
            'alerts': [a.to_dict() for a in self.alerts],
            'issues': [i.to_dict() for i in self.issues],
            'recommendations': [r.to_dict() for r in self.recommendations],
            'aggregate': {m: dict(v) for m, v in self.aggregate.items()}
        }
