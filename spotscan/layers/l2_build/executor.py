"""Build executor compiling discovered projects before analysis."""

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from spotscan.core.config.settings import BuildSettings
from spotscan.core.exceptions.errors import BuildError
from spotscan.core.logger.logger import get_logger

if TYPE_CHECKING:
    from spotscan.layers.l1_discovery.project import Project

logger = get_logger(__name__)


@dataclass
class BuildResult:
    """Result of building one project.

    Attributes:
        project_path: Root of the built project.
        builder: Name of the builder used.
        success: Whether the build succeeded.
        duration_seconds: Time taken by the build.
        error: The build failure, if any.
    """

    project_path: str
    builder: str
    success: bool
    duration_seconds: float = 0.0
    error: BuildError | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "project_path": self.project_path,
            "builder": self.builder,
            "success": self.success,
            "duration_seconds": self.duration_seconds,
            "exit_code": self.error.exit_code if self.error else None,
            "error_message": self.error.message if self.error else None,
        }


class BuildExecutor:
    """Builds projects one after the other.

    Build tools expect exclusive use of their local caches (e.g. the Maven
    local repository), so projects are never built concurrently.
    """

    def __init__(self, settings: BuildSettings):
        """Initialize the build executor.

        Args:
            settings: Build toolchain settings.
        """
        self.settings = settings

    async def build(self, project: "Project") -> BuildResult:
        """Build a single project.

        Returns:
            BuildResult describing the outcome.
        """
        start_time = time.time()

        try:
            await project.build(self.settings)
        except BuildError as e:
            return BuildResult(
                project_path=str(project.path),
                builder=project.builder.name,
                success=False,
                duration_seconds=time.time() - start_time,
                error=e,
            )

        return BuildResult(
            project_path=str(project.path),
            builder=project.builder.name,
            success=True,
            duration_seconds=time.time() - start_time,
        )

    async def compile(
        self,
        projects: list["Project"],
        fail_never: bool | None = None,
    ) -> list[BuildResult]:
        """Build every project with its own builder.

        Args:
            projects: Projects to build, in order.
            fail_never: Keep going after a failed build. Defaults to the
                ``fail_never`` setting.

        Returns:
            One BuildResult per project.

        Raises:
            BuildError: On the first failed build unless fail_never is set.
        """
        if fail_never is None:
            fail_never = self.settings.fail_never

        results: list[BuildResult] = []
        for project in projects:
            result = await self.build(project)
            results.append(result)

            if result.success:
                continue

            if not fail_never:
                raise result.error

            logger.warning(f"Building failed for {project.path}. Attempting scan anyway.")

        return results
