"""Build system registry.

Each supported build system is a Builder identified by the name of a
signature file. BUILDERS is ordered by priority: when a directory holds the
signature files of several build systems, the first builder of the list
wins. Most capable builders come first, e.g. SBT before Gradle and wrapper
scripts before the tool they wrap.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

from spotscan.core.utils.process import command_environment, run_checked, run_with_text_error_detection
from spotscan.layers.l2_build.procedures import build_generic, build_gradle

if TYPE_CHECKING:
    from spotscan.core.config.settings import BuildSettings
    from spotscan.layers.l1_discovery.project import Project


class Builder(ABC):
    """A build system, recognized by its signature file."""

    name: str = ""
    filename: str = ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, filename={self.filename!r})"

    def matches(self, file_name: str) -> bool:
        """Return True if the file is this builder's signature file."""
        return file_name == self.filename

    @abstractmethod
    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        """Return the command building the project."""

    def environment(self, settings: "BuildSettings") -> dict[str, str]:
        """Return environment overrides for the build command."""
        return {}

    async def run(self, settings: "BuildSettings", project: "Project") -> None:
        """Run the build command once in the project directory.

        Raises:
            CommandError: If the command fails.
        """
        await run_checked(
            self.command(settings, project),
            cwd=project.path,
            env=command_environment(self.environment(settings)),
            timeout=settings.timeout,
        )

    @abstractmethod
    async def build(self, settings: "BuildSettings", project: "Project") -> None:
        """Build the project.

        Raises:
            BuildError: If the project can't be built.
        """


class GradleFamilyBuilder(Builder):
    """Builder able to compile Groovy sources statically."""

    async def build(self, settings: "BuildSettings", project: "Project") -> None:
        await build_gradle(
            self.name,
            project,
            lambda: self.run(settings, project),
            settings.static_compilation_overlay,
        )


class GenericBuilder(Builder):
    """Builder running its command once, without static compilation support."""

    async def build(self, settings: "BuildSettings", project: "Project") -> None:
        await build_generic(self.name, project, lambda: self.run(settings, project))


class SbtBuilder(GradleFamilyBuilder):
    name = "SBT"
    filename = "build.sbt"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [settings.sbt_path, "compile"]


class GrailswBuilder(GradleFamilyBuilder):
    """Runs the grailsw wrapper, which exits with 0 even when compilation fails."""

    name = "Grailsw"
    filename = "grailsw"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [str(project.path / "grailsw"), "compile"]

    async def run(self, settings: "BuildSettings", project: "Project") -> None:
        await run_with_text_error_detection(
            self.command(settings, project),
            error_text="BUILD FAILED",
            message="grails failed to compile the project",
            cwd=project.path,
            env=command_environment(self.environment(settings)),
            timeout=settings.timeout,
        )


class GradlewBuilder(GradleFamilyBuilder):
    name = "Gradlew"
    filename = "gradlew"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [str(project.path / "gradlew"), "build"]


class GradleBuilder(GradleFamilyBuilder):
    name = "Gradle"
    filename = "build.gradle"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [settings.gradle_path, "build"]


def maven_arguments(settings: "BuildSettings") -> list[str]:
    """Return the arguments of a Maven install, without empty strings."""
    args = [f"-Dmaven.repo.local={settings.maven_repo_path}"]
    args.extend(settings.maven_cli_opts.split(" "))
    args.append("install")
    return [arg for arg in args if arg]


class MvnwBuilder(GenericBuilder):
    name = "Mvnw"
    filename = "mvnw"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [str(project.path / "mvnw"), *maven_arguments(settings)]


class MavenBuilder(GenericBuilder):
    name = "Maven"
    filename = "pom.xml"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [settings.maven_path, *maven_arguments(settings)]


class AntBuilder(GenericBuilder):
    name = "Ant"
    filename = "build.xml"

    def command(self, settings: "BuildSettings", project: "Project") -> list[str]:
        return [settings.ant_path]

    def environment(self, settings: "BuildSettings") -> dict[str, str]:
        if settings.ant_home:
            return {"ANT_HOME": settings.ant_home}
        return {}


# Ordered by priority, highest first
BUILDERS: tuple[Builder, ...] = (
    SbtBuilder(),
    GrailswBuilder(),
    GradlewBuilder(),
    GradleBuilder(),
    MvnwBuilder(),
    MavenBuilder(),
    AntBuilder(),
)


def has_builder(file_name: str) -> bool:
    """Return True if the file is recognized by any of the builders."""
    return any(builder.matches(file_name) for builder in BUILDERS)


def best_builder(file_names: Iterable[str]) -> Builder | None:
    """Return the highest priority builder matching a set of files.

    Args:
        file_names: Names of the files of a single directory.

    Returns:
        The matching builder with the lowest index in BUILDERS, or None.
    """
    names = set(file_names)

    for builder in BUILDERS:
        if any(builder.matches(name) for name in names):
            return builder

    return None

