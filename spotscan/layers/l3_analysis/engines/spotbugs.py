"""
SpotBugs Engine - Find Security Bugs analysis of compiled JVM projects.

SpotBugs analyzes the class files produced by the build. Its report refers
to source files through package paths only (``com/acme/App.java``); mapping
them back to the repository is done by the analyzer.
"""

import os
from pathlib import Path

from spotscan.core.config.settings import AnalyzerSettings, BuildSettings, JavaSettings
from spotscan.core.exceptions.errors import AnalysisError, CommandError
from spotscan.core.logger.logger import get_logger
from spotscan.core.utils.process import run_command
from spotscan.layers.l1_discovery.project import Project
from spotscan.layers.l3_analysis.models import BugInstance, parse_bug_instances
from spotscan.layers.l3_analysis.toolchain import java_path

logger = get_logger(__name__)

NO_CLASS_FILES_MESSAGE = "No classfiles specified; output will have no warnings"
TARGET_DIRECTORY = "target"


class SpotBugsEngine:
    """
    SpotBugs static analysis engine with the Find Security Bugs plugin.

    Projects are analyzed one at a time: the jars list and the XML report
    live at fixed locations shared by every run.
    """

    name = "spotbugs"
    description = "SpotBugs with Find Security Bugs"

    def __init__(
        self,
        settings: AnalyzerSettings,
        build_settings: BuildSettings,
        java_settings: JavaSettings,
    ):
        """
        Initialize the engine.

        Args:
            settings: SpotBugs installation and run settings.
            build_settings: Build settings, for the Maven local repository.
            java_settings: Java toolchain running SpotBugs.
        """
        self.settings = settings
        self.build_settings = build_settings
        self.java_settings = java_settings

    @property
    def spotbugs_jar(self) -> Path:
        return Path(self.settings.spotbugs_home) / "lib" / "spotbugs.jar"

    def maven_repository(self, project: Project) -> Path:
        """Return the Maven local repository, relative paths being project relative."""
        repository = Path(self.build_settings.maven_repo_path)
        if not repository.is_absolute():
            repository = project.path / repository
        return repository

    def build_jars_list(self, project: Project) -> Path:
        """Write the jars used by the project into the jars list file.

        Only Maven projects get a classpath, made of every jar of the local
        repository. For other projects the file is left empty.

        Returns:
            Path of the jars list file.

        Raises:
            AnalysisError: If the file or the repository can't be accessed.
        """
        jars: list[str] = []
        if project.uses_maven():
            jars = _find_files(self.maven_repository(project), ".jar")

        jars_list = Path(self.settings.jars_list_path)
        try:
            jars_list.write_text("".join(f"{jar}\n" for jar in jars), encoding="utf-8")
        except OSError as e:
            raise AnalysisError(
                f"Unable to write jars list {jars_list}: {e.strerror or e}",
                project_path=str(project.path),
            ) from e

        return jars_list

    def get_target_dirs(self, project: Project) -> list[str]:
        """Return every directory named ``target`` in the project, in walk order."""
        targets: list[str] = []

        def on_error(error: OSError) -> None:
            raise error

        try:
            for root, dirs, _ in os.walk(project.path, onerror=on_error):
                dirs.sort()
                targets.extend(
                    os.path.join(root, name) for name in dirs if name == TARGET_DIRECTORY
                )
        except OSError as e:
            raise AnalysisError(
                f"Couldn't get a list of target directories in {project.path}: {e}",
                project_path=str(project.path),
            ) from e

        return targets

    def build_params(self, project: Project) -> list[str]:
        """Build the arguments of the java command running SpotBugs."""
        home = Path(self.settings.spotbugs_home)
        # Packages not declared in the sources belong to dependencies
        only_analyze = ",".join(f"{package}.*" for package in sorted(project.packages))

        params = ["-cp", f"{home}/lib/*"]
        params.extend(opt for opt in self.settings.java_opts.split(" ") if opt)
        params.extend(
            [
                "-jar", str(self.spotbugs_jar),
                "-pluginList", self.settings.plugin_list,
                "-exclude", str(self.settings.exclude_filter),
                "-include", str(self.settings.include_filter),
                "-onlyAnalyze", only_analyze,
                "-quiet",
                "-effort:max",
                "-low",
                "-noClassOk",
                "-xml:withMessages",
                "-auxclasspathFromFile", str(self.settings.jars_list_path),
                "-output", str(self.settings.output_path),
                str(project.path),
            ]
        )
        params.extend(self.get_target_dirs(project))
        return params

    async def analyze_project(self, project: Project) -> list[BugInstance]:
        """
        Run SpotBugs on a compiled project.

        Args:
            project: Project to analyze.

        Returns:
            Bug instances with the paths reported by SpotBugs.

        Raises:
            AnalysisError: If SpotBugs fails or its report can't be read.
        """
        self.build_jars_list(project)
        cmd = [java_path(self.java_settings), *self.build_params(project)]

        try:
            result = await run_command(cmd, cwd=project.path, timeout=self.settings.timeout)
        except CommandError as e:
            logger.error(f"SpotBugs analysis failed for {project.path}: {e.message}")
            raise AnalysisError(
                f"SpotBugs analysis failed for {project.path}: {e.message}",
                project_path=str(project.path),
                output=e.output,
            ) from e

        if not result.success:
            logger.error(
                f"SpotBugs analysis failed for {project.path}: exit status {result.return_code}"
            )
            raise AnalysisError(
                f"SpotBugs analysis failed for {project.path}",
                project_path=str(project.path),
                output=result.output,
                details={"exit_code": result.return_code},
            )

        if NO_CLASS_FILES_MESSAGE in result.output:
            # Usually means the build produced nothing
            logger.warning(f"SpotBugs didn't find any class file to analyze in {project.path}!")
        else:
            logger.info(f"SpotBugs analysis succeeded for {project.path}!")

        return self.read_report(project)

    def read_report(self, project: Project) -> list[BugInstance]:
        """Parse the XML report written by the last SpotBugs run."""
        output_path = Path(self.settings.output_path)
        try:
            content = output_path.read_bytes()
        except OSError as e:
            logger.error(f"Unable to open XML report {output_path}: {e.strerror or e}")
            raise AnalysisError(
                f"Unable to open XML report {output_path}",
                project_path=str(project.path),
            ) from e

        return parse_bug_instances(content)


def _find_files(root: Path, suffix: str) -> list[str]:
    """Return the files under root with this suffix, in walk order.

    Raises:
        AnalysisError: If a directory can't be read.
    """
    found: list[str] = []

    def on_error(error: OSError) -> None:
        raise error

    try:
        for directory, dirs, files in os.walk(root, onerror=on_error):
            dirs.sort()
            found.extend(os.path.join(directory, name) for name in sorted(files) if name.endswith(suffix))
    except OSError as e:
        raise AnalysisError(f"Unable to list {suffix} files in {root}: {e}") from e

    return found
