"""Configuration management for SpotScan."""

from spotscan.core.config.loader import ConfigLoader
from spotscan.core.config.settings import (
    AnalyzerSettings,
    BuildSettings,
    JavaSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "Settings",
    "BuildSettings",
    "AnalyzerSettings",
    "JavaSettings",
    "LoggingSettings",
    "get_settings",
]
