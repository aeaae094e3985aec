#!/usr/bin/env python3
"""
Metrics sources for landing-page performance data.

Supports simulated measurements and replaying stored snapshots.
"""

from .base import MetricsSource, SourceMetadata
from .simulated import SimulatedMetricsSource, simulate_iterations, DEFAULT_PAGES, METRIC_RANGES
from .file import FileMetricsSource
from .registry import (
    SourceRegistry, register_source, get_source, list_available_sources, get_metrics_source
)

__all__ = [
    'MetricsSource', 'SourceMetadata', 'SimulatedMetricsSource', 'FileMetricsSource',
    'simulate_iterations', 'DEFAULT_PAGES', 'METRIC_RANGES',
    'SourceRegistry', 'register_source', 'get_source', 'list_available_sources',
    'get_metrics_source'
]
