#!/usr/bin/env python3
"""
Iteration tracking data models.

An iteration is one optimization cycle: a batch of page changes whose quality
impact feeds the long-term trend analysis.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class IterationRecord:
    """Summary of one optimization iteration."""
    iteration: int
    date: str
    pilot_pages: int = 0
    pages_scaled: int = 0
    changes_applied: int = 0
    quality_points_gained: float = 0.0
    patterns: List[Any] = field(default_factory=list)

    @property
    def pages_improved(self) -> int:
        return self.pilot_pages + self.pages_scaled

    def to_dict(self) -> Dict[str, Any]:
        return {
            'iteration': self.iteration,
            'date': self.date,
            'summary': {
                'pilot_pages': self.pilot_pages,
                'pages_scaled': self.pages_scaled,
                'pages_improved': self.pages_improved,
                'changes_applied': self.changes_applied,
                'quality_points_gained': self.quality_points_gained
            },
            'patterns': list(self.patterns)
        }


@dataclass
class UXPage:
    """Per-page engagement figures inside a UX snapshot."""
    name: str
    quality_score: float
    conversion_rate: float = 0.0
    bounce_rate: float = 0.0
    grade: Optional[str] = None


@dataclass
class UXSnapshot:
    """Engagement analysis captured at one point in time."""
    date: str
    pages: List[UXPage] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PatternStats:
    """How often a pattern has been applied and what it gained."""
    name: str
    count: int
    average_improvement: float
    total_improvement: float


@dataclass
class StrategyInput:
    """Everything the strategy optimizer reads before analysing."""
    iterations: List[IterationRecord] = field(default_factory=list)
    ux_snapshots: List[UXSnapshot] = field(default_factory=list)
    patterns: List[PatternStats] = field(default_factory=list)
    history_records: int = 0

    @property
    def data_points(self) -> int:
        return len(self.iterations) + len(self.ux_snapshots)
