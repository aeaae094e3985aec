#!/usr/bin/env python3
"""
Core data models for landing-page reporting.

Contains all data structures used throughout the application.
"""

from .metrics import Rating, Threshold, MetricSample, PageMetrics, MetricsSnapshot
from .analysis import Alert, Issue, Recommendation, TierSummary, CWVAnalysis
from .experiments import Experiment, VariantStats, ExperimentMetrics, ExperimentResult
from .strategy import IterationRecord, UXPage, UXSnapshot, PatternStats, StrategyInput

__all__ = [
    'Rating', 'Threshold', 'MetricSample', 'PageMetrics', 'MetricsSnapshot',
    'Alert', 'Issue', 'Recommendation', 'TierSummary', 'CWVAnalysis',
    'Experiment', 'VariantStats', 'ExperimentMetrics', 'ExperimentResult',
    'IterationRecord', 'UXPage', 'UXSnapshot', 'PatternStats', 'StrategyInput'
]
