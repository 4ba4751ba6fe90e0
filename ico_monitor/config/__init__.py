"""
Configuration management for ICO Monitor.

Settings come from environment variables and an optional .env file; sale
configs and event logs are loaded from JSON files.
"""

from ico_monitor.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
