"""Exception definitions module."""

from spotscan.core.exceptions.errors import (
    AnalysisError,
    BuildError,
    CommandError,
    ConfigurationError,
    DiscoveryError,
    NoCompatibleBuilderError,
    SourcePathNotFoundError,
    SpotScanError,
)

__all__ = [
    "SpotScanError",
    "ConfigurationError",
    "DiscoveryError",
    "NoCompatibleBuilderError",
    "SourcePathNotFoundError",
    "CommandError",
    "BuildError",
    "AnalysisError",
]
