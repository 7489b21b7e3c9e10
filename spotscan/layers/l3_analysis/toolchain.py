"""Java toolchain selection through sdkman.

SpotBugs and the build tools must run on the same Java. Unless a custom
java executable is configured, the selected sdkman candidate is installed
if needed and made the default one.
"""

from pathlib import Path

from spotscan.core.config.settings import JavaSettings
from spotscan.core.exceptions.errors import CommandError
from spotscan.core.logger.logger import get_logger
from spotscan.core.utils.process import run_checked

logger = get_logger(__name__)

SUPPORTED_VERSIONS = ("8", "11")


def uses_custom_java_path(settings: JavaSettings) -> bool:
    return settings.java_path not in ("java", "")


def java_path(settings: JavaSettings) -> str:
    """Return the java executable running SpotBugs."""
    if uses_custom_java_path(settings):
        return settings.java_path

    return str(Path(settings.sdkman_dir) / "candidates" / "java" / "current" / "bin" / "java")


def selected_java_version(settings: JavaSettings) -> str:
    """Return the sdkman candidate of the selected major Java version."""
    if settings.version == "11":
        return settings.java_11_version

    if settings.version != "8":
        logger.warning(
            f"Java version {settings.version} is not supported. "
            f"Valid values are {', '.join(SUPPORTED_VERSIONS)}. Using Java 8."
        )

    return settings.java_8_version


def sdkman_setup_script(settings: JavaSettings) -> str:
    """Return the shell snippet installing and selecting the Java candidate."""
    version = selected_java_version(settings)
    # `sdk install` exits with 1 when the candidate is already installed
    return (
        f"source {settings.sdkman_dir}/bin/sdkman-init.sh"
        f' && (sdk list java | grep -qv "installed.*{version}" || sdk install java {version})'
        f" && sdk default java {version}"
    )


async def setup_system_java(settings: JavaSettings) -> None:
    """Make the selected Java the system default.

    Does nothing when a custom java executable is configured. Failures are
    logged and otherwise ignored: the analysis then runs on whatever Java
    sdkman currently points to.
    """
    if uses_custom_java_path(settings):
        return

    try:
        await run_checked(["/bin/bash", "-c", sdkman_setup_script(settings)])
    except CommandError as e:
        logger.warning(f"Failed to set system Java: {e.message}")
