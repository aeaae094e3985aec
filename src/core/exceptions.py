#!/usr/bin/env python3
"""
Standardized exception hierarchy for the landing-page reporting toolchain.

Provides specific exception types for the few error conditions the reporting
pipeline signals itself. Filesystem errors are not wrapped and propagate as-is.
"""

from typing import Optional, Dict, Any


class LandingInsightsError(Exception):
    """Base exception for all reporting toolchain errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Catalog-related exceptions
class ThresholdConfigError(LandingInsightsError):
    """Threshold or recommendation tables are inconsistent."""

    def __init__(self, metric: str, issue: str):
        message = f"Invalid threshold configuration for {metric}: {issue}"
        context = {
            'metric': metric,
            'issue': issue
        }
        super().__init__(message, context=context)


# Report file exceptions
class ReportReadError(LandingInsightsError):
    """A report or history file exists but could not be parsed."""

    def __init__(self, path: str, original_error: Exception):
        message = f"Failed to read report data from {path}"
        context = {
            'path': path,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class ReportWriteError(LandingInsightsError):
    """A report could not be serialized."""

    def __init__(self, path: str, original_error: Exception):
        message = f"Failed to write report {path}"
        context = {
            'path': path,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)

