"""
Repository analyzer.

Discovers the projects of a repository, compiles them if asked, runs
SpotBugs on each one and returns the bug instances with paths relative to
the repository root.
"""

import os
from pathlib import Path

from spotscan.core.config.settings import Settings
from spotscan.core.exceptions.errors import AnalysisError, SourcePathNotFoundError
from spotscan.core.logger.logger import get_logger
from spotscan.layers.l1_discovery.project import Project
from spotscan.layers.l1_discovery.walker import find_projects
from spotscan.layers.l2_build.executor import BuildExecutor
from spotscan.layers.l3_analysis.engines.spotbugs import SpotBugsEngine
from spotscan.layers.l3_analysis.metadata import ANALYZER_USAGE
from spotscan.layers.l3_analysis.models import BugInstance
from spotscan.layers.l3_analysis.toolchain import setup_system_java

logger = get_logger(__name__)


def correct_path(
    repository_path: Path | str,
    project: Project,
    bug_instances: list[BugInstance],
) -> list[BugInstance]:
    """Rewrite reported source paths so they are relative to the repository root.

    Instances whose file isn't a project source file are dropped: the code
    comes from a dependency archive.

    Raises:
        AnalysisError: If a resolved path can't be made repository relative.
    """
    result: list[BugInstance] = []

    for bug in bug_instances:
        reported_path = bug.source_line.source_path
        try:
            project_relative_path = project.relative_path(reported_path)
        except SourcePathNotFoundError:
            logger.debug(f"Dropping issue in {reported_path}, not a project source file")
            continue

        full_path = project.path / project_relative_path
        try:
            repository_relative_path = os.path.relpath(full_path, Path(repository_path).absolute())
        except ValueError as e:
            raise AnalysisError(
                f"Unable to make {full_path} relative to {repository_path}: {e}",
                project_path=str(project.path),
            ) from e

        source_line = bug.source_line.model_copy(update={"source_path": repository_relative_path})
        result.append(bug.model_copy(update={"source_line": source_line}))

    return result


def sort_instances(bug_instances: list[BugInstance]) -> list[BugInstance]:
    """Sort by file, then start line, then short message, for repeatable reports."""
    return sorted(bug_instances, key=BugInstance.sort_key)


async def analyze(
    repository_path: Path | str,
    settings: Settings,
    compile: bool | None = None,
    fail_never: bool | None = None,
) -> list[BugInstance]:
    """
    Analyze every buildable project of a repository.

    Args:
        repository_path: Repository root.
        settings: Application settings.
        compile: Build projects before analysis. Defaults to ``build.compile``.
        fail_never: Analyze even when builds fail. Defaults to ``build.fail_never``.

    Returns:
        Sorted bug instances with repository relative paths.

    Raises:
        DiscoveryError: If the repository can't be walked.
        BuildError: If a build fails and fail_never isn't set.
        AnalysisError: If the analysis of any project fails.
    """
    logger.info(ANALYZER_USAGE)

    if compile is None:
        compile = settings.build.compile

    await setup_system_java(settings.java)

    projects = find_projects(repository_path)
    logger.info(f"Found {len(projects)} analyzable projects.")

    if compile:
        await BuildExecutor(settings.build).compile(projects, fail_never=fail_never)

    engine = SpotBugsEngine(settings.analyzer, settings.build, settings.java)
    instances: list[BugInstance] = []

    for project in projects:
        # Any failed project aborts the whole run
        bug_instances = await engine.analyze_project(project)
        instances.extend(correct_path(repository_path, project, bug_instances))

    return sort_instances(instances)
