"""Files-first tree traversal and project discovery.

``os.walk`` hands out directories one entry at a time, which is unsuitable
here: the builder for a directory can only be chosen once the full list of
its files is known. ``files_first_walk`` gives the callback every file of a
directory before descending into its subdirectories.
"""

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from spotscan.core.exceptions.errors import DiscoveryError
from spotscan.core.logger.logger import get_logger
from spotscan.layers.l2_build.builders import has_builder

if TYPE_CHECKING:
    from spotscan.layers.l1_discovery.project import Project

logger = get_logger(__name__)

# Build-tool managed configuration (gradle/wrapper) is never source nor a project root
EXCLUDED_DIRECTORIES = frozenset({"gradle"})

WalkFunc = Callable[[Path, list[str]], None]


def _list_entries(directory: Path) -> tuple[list[str], list[str]]:
    """Split the entries of a directory into (files, subdirectories).

    Symbolic links are never followed: a link to a directory is a file here.

    Raises:
        DiscoveryError: If the directory can't be read.
    """
    files: list[str] = []
    subdirectories: list[str] = []

    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    subdirectories.append(entry.name)
                else:
                    files.append(entry.name)
    except OSError as e:
        raise DiscoveryError(
            f"Unable to read directory {directory}: {e.strerror or e}",
            path=str(directory),
        ) from e

    return sorted(files), sorted(subdirectories)


def files_first_walk(root: Path, walk_fn: WalkFunc) -> None:
    """Walk a tree, giving ``walk_fn`` the file names of each directory.

    ``walk_fn`` is called for a directory before any of its subdirectories is
    visited. Subdirectories named in EXCLUDED_DIRECTORIES are not visited.
    Errors raised by ``walk_fn`` or while reading the tree propagate.

    Args:
        root: Directory to start from.
        walk_fn: Callback receiving (directory path, sorted file names).

    Raises:
        DiscoveryError: If a directory of the tree can't be read.
    """
    files, subdirectories = _list_entries(root)

    walk_fn(root, files)

    for name in subdirectories:
        if name in EXCLUDED_DIRECTORIES:
            continue
        files_first_walk(root / name, walk_fn)


def find_projects(path: Path | str, quiet: bool = False) -> list["Project"]:
    """Find every buildable project below a directory.

    A project is created wherever a directory directly contains the
    signature file of a known builder. The walk carries on inside that
    directory, so nested modules become projects of their own.

    Args:
        path: Repository root.
        quiet: Don't log each project found.

    Returns:
        Projects in discovery order.

    Raises:
        DiscoveryError: If the tree can't be fully read.
    """
    from spotscan.layers.l1_discovery.project import Project

    root = Path(path).absolute()
    projects: list[Project] = []

    def visit(directory: Path, file_names: list[str]) -> None:
        if not any(has_builder(name) for name in file_names):
            return

        project = Project(directory)
        if not quiet:
            logger.info(f"Found {project.builder.name} project in {directory} directory")

        projects.append(project)

    files_first_walk(root, visit)

    return projects
