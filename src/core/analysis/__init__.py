#!/usr/bin/env python3
"""
Analyzers for landing page reporting.

Provides the Core Web Vitals analyzer, anomaly detection, the A/B experiment
monitor, the page quality scorer and the iteration strategy optimizer.
"""

from .cwv_analyzer import analyze_metrics, aggregate_metrics, build_report, group_alerts, history_snapshot
from .anomaly import detect_metric_anomaly, detect_aggregate_anomalies, detect_trends
from .experiment_monitor import ExperimentMonitor, load_experiments
from .quality_scorer import QualityScorer
from .strategy_optimizer import StrategyOptimizer, load_strategy_input

__all__ = [
    'analyze_metrics', 'aggregate_metrics', 'build_report', 'group_alerts', 'history_snapshot',
    'detect_metric_anomaly', 'detect_aggregate_anomalies', 'detect_trends',
    'ExperimentMonitor', 'load_experiments',
    'QualityScorer',
    'StrategyOptimizer', 'load_strategy_input'
]
