"""
Configuration providers.
"""

from .environment import EnvironmentConfigProvider

__all__ = ["EnvironmentConfigProvider"]
