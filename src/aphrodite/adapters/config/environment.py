"""
Environment Config Provider - Loads tracker configuration from env vars.

An optional YAML file supplies base values; environment variables override
the file, and values passed to set() override both.

YAML layout:

    jira:
      url: https://issues.example.com
      username: jdoe
      api_token: secret
      page_size: 100
      max_workers: 10
      cp_project: JBEAP
      timeout: 30
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ...core.ports.config_provider import AppConfig, ConfigProviderPort, TrackerConfig
from ...core.ports.issue_tracker import ConfigError


# config key -> (environment variables, YAML key under 'jira')
ENV_KEYS: dict[str, tuple[tuple[str, ...], str]] = {
    "tracker.url": (("JIRA_URL",), "url"),
    "tracker.username": (("JIRA_USERNAME",), "username"),
    "tracker.password": (("JIRA_API_TOKEN", "JIRA_PASSWORD"), "api_token"),
    "tracker.page_size": (("JIRA_PAGE_SIZE",), "page_size"),
    "tracker.max_workers": (("JIRA_MAX_WORKERS",), "max_workers"),
    "tracker.cp_project": (("JIRA_CP_PROJECT",), "cp_project"),
    "tracker.request_timeout": (("JIRA_TIMEOUT",), "timeout"),
}

INT_KEYS = frozenset({"tracker.page_size", "tracker.max_workers"})
FLOAT_KEYS = frozenset({"tracker.request_timeout"})


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider backed by environment variables.
    """

    def __init__(
        self,
        config_file: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ):
        """
        Args:
            config_file: Optional YAML file with base values
            env: Environment to read; defaults to os.environ
        """
        self.config_file = Path(config_file) if config_file else None
        self._env = env if env is not None else os.environ
        self._overrides: dict[str, Any] = {}
        self._config: AppConfig | None = None
        self.logger = logging.getLogger("EnvironmentConfigProvider")

    @property
    def name(self) -> str:
        return "Environment"

    def load(self) -> AppConfig:
        values = self._collect()
        tracker = TrackerConfig(url=values.pop("tracker.url", "") or "")
        for key, value in values.items():
            setattr(tracker, key.split(".", 1)[1], value)

        self._config = AppConfig(tracker=tracker)
        self.logger.debug(f"Loaded configuration for {tracker.url or '<no url>'}")
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        return self._collect().get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in ENV_KEYS:
            raise ConfigError(f"Unknown configuration key: {key}")
        self._overrides[key] = self._convert(key, value)
        self._config = None

    def validate(self) -> list[str]:
        try:
            config = self._config or self.load()
        except ConfigError as e:
            return [str(e)]
        return config.validate()

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _collect(self) -> dict[str, Any]:
        file_values = self._read_file()
        values: dict[str, Any] = {}

        for key, (env_names, yaml_key) in ENV_KEYS.items():
            raw = next((self._env[n] for n in env_names if self._env.get(n)), None)
            if raw is None:
                raw = file_values.get(yaml_key)
            if raw is not None:
                values[key] = self._convert(key, raw)

        values.update(self._overrides)
        return values

    def _read_file(self) -> dict[str, Any]:
        if self.config_file is None:
            return {}
        try:
            with self.config_file.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {self.config_file}: {e}", cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_file}: {e}", cause=e) from e

        section = data.get("jira", {}) if isinstance(data, dict) else None
        if not isinstance(section, dict):
            raise ConfigError(f"Config file {self.config_file} has no 'jira' mapping")
        return section

    @staticmethod
    def _convert(key: str, value: Any) -> Any:
        try:
            if key in INT_KEYS:
                return int(value)
            if key in FLOAT_KEYS:
                return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}", cause=e) from e
        return str(value)
