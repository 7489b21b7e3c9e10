"""Buildable project representation.

A Project is a directory containing a buildable JVM project. It offers:

- a coroutine building the project with the detected builder,
- a method expanding the partial paths found in SpotBugs reports into paths
  relative to the project root,
- the set of packages declared by the project's source files.
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from spotscan.core.exceptions.errors import DiscoveryError, NoCompatibleBuilderError
from spotscan.core.logger.logger import get_logger
from spotscan.layers.l1_discovery.directory import Directory
from spotscan.layers.l1_discovery.walker import files_first_walk
from spotscan.layers.l2_build.builders import Builder, best_builder

if TYPE_CHECKING:
    from spotscan.core.config.settings import BuildSettings

logger = get_logger(__name__)

PACKAGE_PATTERN = re.compile(r"package\s+([a-z][a-z0-9_.]*)")
SOURCE_FILE_PATTERN = re.compile(r"\.(groovy|java|scala)$")
GROOVY_FILE_PATTERN = re.compile(r"\.groovy$")

MAVEN_BUILDERS = frozenset({"Maven", "Mvnw"})


class Project:
    """A buildable project rooted at a directory.

    Attributes:
        path: Absolute path of the project root.
        source_files_tree: Every source file of the project, relative to path.
        builder: Builder selected for the project.
    """

    def __init__(self, path: Path | str):
        """Index the project's source files and select its builder.

        Args:
            path: Project root directory.

        Raises:
            NoCompatibleBuilderError: If no builder recognizes the project.
            DiscoveryError: If the project tree can't be read.
        """
        self.path = Path(path).absolute()
        self.source_files_tree = Directory()
        self.builder: Builder | None = None
        self._packages: set[str] = set()

        files_first_walk(self.path, self._record_source_files)

        if self.builder is None:
            raise NoCompatibleBuilderError(str(self.path))

    def __repr__(self) -> str:
        builder = self.builder.name if self.builder else None
        return f"Project(path={str(self.path)!r}, builder={builder!r})"

    @property
    def packages(self) -> set[str]:
        """Packages declared in the project source files, without duplicates."""
        return set(self._packages)

    def uses_maven(self) -> bool:
        """Return True if the project is built by Maven or its wrapper."""
        return self.builder is not None and self.builder.name in MAVEN_BUILDERS

    def is_groovy(self) -> bool:
        """Return True if Groovy source files are present in the project."""
        return self.source_files_tree.has_matching_descendant_file(GROOVY_FILE_PATTERN)

    async def build(self, settings: "BuildSettings") -> None:
        """Build the project.

        Raises:
            BuildError: If the build fails.
        """
        await self.builder.build(settings, self)

    def relative_path(self, path: str) -> str:
        """Expand a path reported by SpotBugs into a path relative to the project root.

        Example:
            path: ``org/gizmotech/awesometool/Wow.java``
            result: ``mysubfolder/src/main/java/org/gizmotech/awesometool/Wow.java``

        Raises:
            SourcePathNotFoundError: If the file isn't part of the project sources.
        """
        directory, file_name = self.source_files_tree.get_matching_path(path)
        directory_path = directory.path_relative_to(self.source_files_tree)

        if not directory_path:
            return file_name
        return f"{directory_path}/{file_name}"

    def _record_source_files(self, directory: Path, file_names: list[str]) -> None:
        """Index the source files of a directory and pick a builder if none yet."""
        if self.builder is None:
            self.builder = best_builder(file_names)

        for name in file_names:
            if SOURCE_FILE_PATTERN.search(name):
                self._add_source_file(directory / name)

    def _add_source_file(self, path: Path) -> None:
        relative = os.path.relpath(path, self.path)
        self.source_files_tree.add_source_file_components(relative.split(os.sep))
        self._add_package_from_source_file(path)

    def _add_package_from_source_file(self, path: Path) -> None:
        """Record the package declared by a source file, if any."""
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DiscoveryError(
                f"Unable to read source file {path}: {e.strerror or e}",
                path=str(path),
            ) from e

        match = PACKAGE_PATTERN.search(content)
        if match is None:
            logger.debug(f"No package declaration in {path}")
            return

        self._packages.add(match.group(1))
