#!/usr/bin/env python3
"""
Metrics source registry for dynamic source selection.

Provides centralized registration and discovery of metrics sources.
"""

import logging
from typing import Dict, List, Type, Optional, Any

from .base import MetricsSource
from .simulated import SimulatedMetricsSource
from .file import FileMetricsSource

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Registry for metrics sources."""

    def __init__(self):
        """Initialize empty registry."""
        self._sources: Dict[str, Type[MetricsSource]] = {}

    def register_source(self, source_class: Type[MetricsSource], name: Optional[str] = None):
        """
        Register a metrics source class.

        Args:
            source_class: MetricsSource subclass to register
            name: Optional custom name (derived from class name if not provided)
        """
        if name is None:
            name = source_class.__name__.lower().replace('metricssource', '')

        self._sources[name] = source_class
        logger.debug(f"Registered metrics source: {name}")

    def get_source(self, name: str, **kwargs: Any) -> MetricsSource:
        """
        Get a metrics source instance.

        Args:
            name: Source name
            **kwargs: Constructor arguments for the source

        Returns:
            MetricsSource instance

        Raises:
            KeyError: If source not found
        """
        if name not in self._sources:
            available = list(self._sources.keys())
            raise KeyError(f"Source '{name}' not found. Available: {available}")

        source_class = self._sources[name]
        return source_class(**kwargs)

    def list_available_sources(self) -> List[str]:
        """Get list of available source names."""
        return list(self._sources.keys())


# Global registry instance
_global_registry = SourceRegistry()
_global_registry.register_source(SimulatedMetricsSource, 'simulated')
_global_registry.register_source(FileMetricsSource, 'file')


def register_source(source_class: Type[MetricsSource], name: Optional[str] = None):
    """Register a source in the global registry."""
    _global_registry.register_source(source_class, name)


def get_source(name: str, **kwargs: Any) -> MetricsSource:
    """Get a source from the global registry."""
    return _global_registry.get_source(name, **kwargs)


def list_available_sources() -> List[str]:
    """List available sources in the global registry."""
    return _global_registry.list_available_sources()


def get_metrics_source(config, source_name: str = 'simulated',
                       snapshot_path: Optional[str] = None,
                       seed: Optional[int] = None) -> MetricsSource:
    """
    Build the metrics source for a run.

    Args:
        config: Application Config
        source_name: 'simulated' or 'file'
        snapshot_path: Snapshot JSON for the file source
        seed: Overrides the configured simulation seed

    Raises:
        KeyError: For an unknown source name
        ValueError: If the file source has no snapshot path
    """
    if source_name == 'file':
        if not snapshot_path:
            raise ValueError("The file source requires a snapshot path (--snapshot)")
        return get_source('file', path=snapshot_path)

    if config.ga4.enabled:
        logger.warning(
            "GA4 integration is enabled but not implemented; using simulated data "
            f"(property {config.ga4.property_id})"
        )

    if seed is None:
        seed = config.reporting.simulation_seed
    return get_source(source_name, seed=seed)
