"""Application settings using Pydantic Settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spotscan.core.config.loader import ConfigLoader
from spotscan.core.exceptions.errors import ConfigurationError

# Gradle snippet appended to build.gradle for static Groovy compilation
DEFAULT_STATIC_COMPILATION_OVERLAY = (
    Path(__file__).parent.parent.parent
    / "layers"
    / "l2_build"
    / "resources"
    / "static_compilation.gradle"
)

CONFIG_PATH_VARIABLE = "SPOTSCAN_CONFIG"
CONFIG_FILE_NAMES = ("spotscan.yaml", ".spotscan.yaml")


class BuildSettings(BaseSettings):
    """Build toolchain configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTSCAN_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    compile: bool = Field(
        default=True,
        description="Compile source code before analysis",
    )
    fail_never: bool = Field(
        default=False,
        description="Ignore compilation failures and attempt the scan anyway",
    )
    ant_path: str = Field(default="ant", description="Path to the ant executable")
    ant_home: str = Field(default="", description="ANT_HOME given to ant builds")
    gradle_path: str = Field(default="gradle", description="Path to the gradle executable")
    maven_path: str = Field(default="mvn", description="Path to the mvn executable")
    maven_repo_path: str = Field(
        default_factory=lambda: str(Path.home() / ".m2" / "repository"),
        description="Maven local repository",
    )
    maven_cli_opts: str = Field(
        default="--batch-mode -DskipTests=true",
        description="Extra arguments for the maven CLI",
    )
    sbt_path: str = Field(default="sbt", description="Path to the sbt executable")
    static_compilation_overlay: Path = Field(
        default=DEFAULT_STATIC_COMPILATION_OVERLAY,
        description="Gradle configuration appended for static Groovy compilation",
    )
    timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout in seconds for each build command (none by default)",
    )


class AnalyzerSettings(BaseSettings):
    """SpotBugs engine configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTSCAN_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    spotbugs_home: Path = Field(
        default=Path("/spotbugs/dist"),
        description="SpotBugs distribution directory",
    )
    plugin_list: str = Field(
        default="/fsb/lib/findsecbugs-plugin.jar",
        description="SpotBugs plugin jars",
    )
    exclude_filter: Path = Field(
        default=Path("/spotbugs/exclude.xml"),
        description="SpotBugs exclude filter file",
    )
    include_filter: Path = Field(
        default=Path("/spotbugs/include.xml"),
        description="SpotBugs include filter file",
    )
    jars_list_path: Path = Field(
        default=Path("/tmp/jars.list"),
        description="File receiving the auxiliary classpath",
    )
    output_path: Path = Field(
        default=Path("/tmp/SpotBugs.xml"),
        description="SpotBugs XML report location",
    )
    java_opts: str = Field(default="-Xmx1900M", description="JAVA_OPTS for SpotBugs")
    timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout in seconds for each SpotBugs run (none by default)",
    )


class JavaSettings(BaseSettings):
    """Java toolchain configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTSCAN_JAVA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    java_path: str = Field(default="java", description="Path to the java executable")
    version: str = Field(default="8", description="Major Java version to use")
    java_8_version: str = Field(default="8.0.242.hs-adpt", description="Java 8 sdkman candidate")
    java_11_version: str = Field(default="11.0.6.hs-adpt", description="Java 11 sdkman candidate")
    sdkman_dir: Path = Field(
        default=Path("/usr/local/sdkman"),
        description="sdkman home directory",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTSCAN_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    build: BuildSettings = Field(default_factory=BuildSettings)
    analyzer: AnalyzerSettings = Field(default_factory=AnalyzerSettings)
    java: JavaSettings = Field(default_factory=JavaSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file.

        Values of the file take precedence over environment variables, which
        take precedence over defaults.

        Args:
            path: Path to YAML configuration file.

        Raises:
            ConfigurationError: If the file is unreadable or malformed.
        """
        loader = ConfigLoader(path)
        loader.load()

        sections: dict[str, BaseSettings] = {}
        for name, settings_class in SECTION_SETTINGS.items():
            try:
                sections[name] = settings_class(**loader.get_section(name))
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid '{name}' settings in {path}: {e.error_count()} error(s)",
                    config_key=name,
                    details={"errors": [error["msg"] for error in e.errors()]},
                ) from e

        return cls(**sections)

    @classmethod
    def load(cls, directory: Path | None = None) -> "Settings":
        """Load settings, reading a configuration file when one is found.

        The file named by ``SPOTSCAN_CONFIG`` is used if set, otherwise the
        first of ``spotscan.yaml`` and ``.spotscan.yaml`` found in
        ``directory`` (the working directory by default).
        """
        config_path = os.environ.get(CONFIG_PATH_VARIABLE)
        if config_path:
            return cls.from_yaml(Path(config_path))

        directory = directory or Path.cwd()
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return cls.from_yaml(candidate)

        return cls()


SECTION_SETTINGS: dict[str, type[BaseSettings]] = {
    "build": BuildSettings,
    "analyzer": AnalyzerSettings,
    "java": JavaSettings,
    "logging": LoggingSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
