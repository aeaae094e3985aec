#!/usr/bin/env python3
"""
A/B experiment data models.
"""

from datetime import datetime
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from dateutil import parser as date_parser


@dataclass
class Experiment:
    """A deployed landing-page experiment."""
    experiment_id: str
    name: str
    page: str
    levers: List[str]
    expected_lift: float  # fraction, 0.12 == +12%
    deployed_at: datetime
    status: str = "live"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Experiment':
        """Create from a deployment record; accepts "+12%" style lifts."""
        expected = data.get('expected_lift')
        if expected is None:
            expected = data.get('expectedMetrics', {}).get('conversionLift', 0)
        if isinstance(expected, str):
            expected = float(expected.replace('+', '').replace('%', '').strip() or 0) / 100

        deployed_at = data.get('deployed_at') or data.get('deployedAt')
        if isinstance(deployed_at, str):
            deployed_at = date_parser.isoparse(deployed_at)
        elif deployed_at is None:
            raise ValueError(f"Experiment {data.get('experiment_id', '?')} has no deployment date")

        return cls(
            experiment_id=data.get('experiment_id') or data.get('experimentId', ''),
            name=data.get('name') or data.get('experimentName', ''),
            page=data.get('page', ''),
            levers=list(data.get('levers', [])),
            expected_lift=float(expected),
            deployed_at=deployed_at,
            status=data.get('status', 'live')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'experiment_id': self.experiment_id,
            'name': self.name,
            'page': self.page,
            'levers': list(self.levers),
            'expected_lift': self.expected_lift,
            'deployed_at': self.deployed_at.isoformat(),
            'status': self.status
        }


@dataclass
class VariantStats:
    """Traffic and conversions for one arm of an experiment."""
    impressions: int
    conversions: int

    @property
    def conversion_rate(self) -> float:
        if self.impressions <= 0:
            return 0.0
        return self.conversions / self.impressions

    def to_dict(self) -> Dict[str, Any]:
        return {
            'impressions': self.impressions,
            'conversions': self.conversions,
            'conversion_rate': round(self.conversion_rate, 6)
        }


@dataclass
class ExperimentMetrics:
    """Simulated measurement of a running experiment."""
    duration_days: int
    control: VariantStats
    variant: VariantStats
    lift: float
    z_score: float
    confidence: float
    is_significant: bool
    daily_revenue: int
    annual_revenue: int

    @property
    def status(self) -> str:
        return 'Significant' if self.is_significant else 'Running'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'duration_days': self.duration_days,
            'control': self.control.to_dict(),
            'variant': self.variant.to_dict(),
            'lift': round(self.lift, 6),
            'z_score': round(self.z_score, 4),
            'confidence': self.confidence,
            'is_significant': self.is_significant,
            'daily_revenue': self.daily_revenue,
            'annual_revenue': self.annual_revenue,
            'status': self.status
        }


@dataclass
class ExperimentResult:
    """Evaluation of one experiment: bucket, decision and learning."""
    experiment: Experiment
    metrics: ExperimentMetrics
    outcome: str  # winner, loser, neutral, inconclusive
    recommendation: str  # SCALE, STOP, NEUTRAL, CONTINUE
    learning: str
    chi_square: Dict[str, Any] = field(default_factory=dict)
    intervals: Dict[str, Dict[str, float]] = field(default_factory=dict)
    scaling_plan: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'experiment': self.experiment.to_dict(),
            'metrics': self.metrics.to_dict(),
            'outcome': self.outcome,
            'recommendation': self.recommendation,
            'learning': self.learning,
            'chi_square': dict(self.chi_square),
            'intervals': {arm: dict(ci) for arm, ci in self.intervals.items()},
            'scaling_plan': self.scaling_plan
        }
