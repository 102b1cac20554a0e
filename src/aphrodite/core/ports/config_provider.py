"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from env vars and an optional YAML file
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class TrackerConfig:
    """Configuration for a Jira tracker."""

    url: str
    username: str | None = None
    password: str = ""  # Password, or a personal access token when username is empty

    # Search
    page_size: int = 100

    # Batch operations
    max_workers: int = 10

    # Project holding the cumulative patch release versions
    cp_project: str = "JBEAP"

    request_timeout: float = 30.0

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.url and self.password)

    @property
    def uses_token(self) -> bool:
        """True when authenticating with a bearer token instead of basic auth."""
        return not self.username


@dataclass
class AppConfig:
    """Complete application configuration."""

    tracker: TrackerConfig

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.tracker.url:
            errors.append("Missing tracker URL (JIRA_URL)")
        if not self.tracker.password:
            errors.append("Missing API token (JIRA_API_TOKEN)")
        if self.tracker.page_size <= 0:
            errors.append(f"Page size must be positive, got {self.tracker.page_size}")
        if self.tracker.max_workers <= 0:
            errors.append(f"Worker count must be positive, got {self.tracker.max_workers}")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - Environment variables
    - YAML config files
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration

        Raises:
            ConfigError: If a value cannot be parsed
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found
        """
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Set a configuration value, overriding every source."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
