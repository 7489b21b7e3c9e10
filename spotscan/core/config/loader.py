"""YAML configuration file loader."""

import os
from pathlib import Path
from typing import Any

import yaml

from spotscan.core.exceptions.errors import ConfigurationError

# Top-level keys of a configuration file, one per settings model
SECTIONS = ("build", "analyzer", "java", "logging")


def expand_value(value: Any) -> Any:
    """Expand ``~`` and environment variables in string values."""
    if isinstance(value, str):
        return os.path.expanduser(os.path.expandvars(value))
    return value


class ConfigLoader:
    """Load the settings sections of a YAML configuration file.

    A file looks like::

        build:
          maven_path: /opt/maven/bin/mvn
          fail_never: true
        java:
          version: "11"
          sdkman_dir: ~/.sdkman
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path
        self._sections: dict[str, dict[str, Any]] = {}

    def load(self, path: Path | None = None) -> dict[str, dict[str, Any]]:
        """Load and validate a configuration file.

        Args:
            path: Path to YAML file. Uses config_path if not provided.

        Returns:
            Configuration values keyed by section.

        Raises:
            ConfigurationError: If the file can't be read or isn't laid out
                as settings sections.
        """
        load_path = path or self.config_path
        if not load_path:
            return {}

        try:
            with open(load_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(
                f"Unable to read configuration file {load_path}: {e.strerror or e}",
                config_key=str(load_path),
            ) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {load_path}",
                config_key=str(load_path),
                details={"error": str(e)},
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {load_path}",
                config_key=str(load_path),
            )

        unknown = sorted(str(key) for key in loaded if key not in SECTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration sections in {load_path}: {', '.join(unknown)}",
                config_key=unknown[0],
                details={"allowed": list(SECTIONS)},
            )

        sections: dict[str, dict[str, Any]] = {}
        for name, values in loaded.items():
            if values is None:
                values = {}
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Configuration section '{name}' must be a mapping",
                    config_key=name,
                )
            sections[name] = {key: expand_value(value) for key, value in values.items()}

        self._sections = sections
        return self._sections

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by ``section.name`` key, e.g. ``build.maven_path``."""
        section, _, name = key.partition(".")
        return self._sections.get(section, {}).get(name, default)

    def get_section(self, section: str) -> dict[str, Any]:
        """Get the values of a section, empty when absent."""
        return dict(self._sections.get(section, {}))
