#!/usr/bin/env python3
"""
Service container for the reporting commands.

Commands pull configuration, the report writer, the run metrics collector
and the Slack notifier from here instead of building them inline, so tests
can swap any of them for a prepared instance.
"""

import logging
from typing import Any, Dict, Callable, TypeVar, Optional
from functools import wraps
import threading
from datetime import datetime

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Container:
    """Named services built by singleton or per-call factories."""

    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a factory whose first result is reused.

        Args:
            service_name: Unique name for the service
            factory: Function that creates the service instance
        """
        factory._is_singleton = True
        with self._lock:
            self._factories[service_name] = factory
            self._singletons.pop(service_name, None)

    def register_factory(self, service_name: str, factory: Callable[[], T]) -> None:
        """Register a factory called on every ``get``."""
        with self._lock:
            self._factories[service_name] = factory

    def register_instance(self, service_name: str, instance: T) -> None:
        """Register a ready-made instance, e.g. a writer pointed at a temp dir."""
        with self._lock:
            self._singletons[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.

        Raises:
            KeyError: If service is not registered
        """
        if service_name in self._singletons:
            return self._singletons[service_name]

        if service_name not in self._factories:
            raise KeyError(f"Service '{service_name}' not registered")

        # Factories must not call back into get(); the lock is not reentrant
        with self._lock:
            factory = self._factories[service_name]

            if getattr(factory, '_is_singleton', False):
                if service_name not in self._singletons:
                    self._singletons[service_name] = factory()
                    logger.debug(f"Created singleton instance for '{service_name}'")
                return self._singletons[service_name]

            logger.debug(f"Creating new instance for '{service_name}'")
            return factory()

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singletons.clear()


def singleton(factory_func: Callable[[], T]) -> Callable[[], T]:
    """
    Mark a factory function as singleton.

    Usage:
        @singleton
        def create_writer():
            return ReportWriter("reports")
    """
    @wraps(factory_func)
    def wrapper():
        return factory_func()

    wrapper._is_singleton = True
    return wrapper


_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance (thread-safe singleton)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = Container()
                _setup_default_services(_container)
    return _container


def reset_container() -> None:
    """Drop the global container; the next get_container() rebuilds it."""
    global _container
    with _container_lock:
        if _container:
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:

    @singleton
    def create_config():
        from core.config import get_config
        return get_config()

    @singleton
    def create_report_writer():
        from core.reporting import ReportWriter
        config = create_config()
        tz = config.tz
        return ReportWriter(config.reporting.reports_dir, clock=lambda: datetime.now(tz))

    @singleton
    def create_metrics_collector():
        from core.metrics_collector import MetricsCollector
        config = create_config()
        tz = config.tz
        return MetricsCollector(config.reporting.reports_dir, clock=lambda: datetime.now(tz))

    def create_slack_notifier():
        from integrations.slack_notifier import SlackNotifier
        config = create_config()
        if not config.has_slack():
            raise ValueError("Slack configuration not found (set SLACK_WEBHOOK_URL)")
        return SlackNotifier(config.integrations.slack_webhook_url)

    container.register_singleton('config', create_config)
    container.register_singleton('report_writer', create_report_writer)
    container.register_singleton('metrics_collector', create_metrics_collector)
    container.register_factory('slack_notifier', create_slack_notifier)

    logger.debug("Default services registered in container")
