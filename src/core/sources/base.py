#!/usr/bin/env python3
"""
Base classes for metrics sources.

Defines the abstract interface every provider of page performance data
implements, whether it generates, replays or fetches measurements.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
from dataclasses import dataclass

from core.models.metrics import MetricsSnapshot


@dataclass
class SourceMetadata:
    """Metadata about a metrics source."""
    name: str
    display_name: str
    description: str
    metrics: List[str]
    simulated: bool = False


class MetricsSource(ABC):
    """
    Abstract base class for all metrics sources.

    Implementations must provide a snapshot, metadata and a health check.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize metrics source.

        Args:
            config: Source-specific configuration
        """
        self.config = config or {}

    @abstractmethod
    def fetch_snapshot(self, date_range: str = "last7days") -> MetricsSnapshot:
        """
        Produce measurements for every tracked page.

        Args:
            date_range: Label of the reporting window

        Returns:
            MetricsSnapshot with one PageMetrics per page
        """
        pass

    @abstractmethod
    def get_metadata(self) -> SourceMetadata:
        pass

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        """
        Check if source is available and working.

        Returns:
            Health status dictionary
        """
        pass
