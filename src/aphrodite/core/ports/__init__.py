"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import AppConfig, ConfigProviderPort, TrackerConfig
from .issue_tracker import (
    AphroditeError,
    AuthenticationError,
    ConfigError,
    IssueTrackerPort,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ReconcileResult,
    ReconciliationError,
    TransientError,
)

__all__ = [
    # Ports
    "IssueTrackerPort",
    "ConfigProviderPort",
    # Results and configuration
    "ReconcileResult",
    "TrackerConfig",
    "AppConfig",
    # Issue tracker exceptions
    "AphroditeError",
    "AuthenticationError",
    "NotFoundError",
    "PermissionError",
    "TransientError",
    "RateLimitError",
    "ReconciliationError",
    "ConfigError",
]
