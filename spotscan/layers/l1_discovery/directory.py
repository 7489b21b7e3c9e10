"""Source file tree used to match partial file paths to actual ones.

SpotBugs reports source files by their package-qualified path only
(``com/acme/App.java``). A project keeps a tree of every source file it
contains so those partial paths can be expanded back to the real location
(``src/main/java/com/acme/App.java``).
"""

import re
from collections.abc import Iterator

from spotscan.core.exceptions.errors import SourcePathNotFoundError
from spotscan.core.logger.logger import get_logger

logger = get_logger(__name__)


class Directory:
    """A file system directory with its child directories and files.

    Attributes:
        name: Directory name; empty for the tree root.
        parent: Enclosing directory, None for the tree root. Not owning.
        files: Names of the files directly inside this directory.
        directories: Child directories, in insertion order, unique by name.
    """

    def __init__(self, name: str = "", parent: "Directory | None" = None):
        self.name = name
        self.parent = parent
        self.files: set[str] = set()
        self.directories: list[Directory] = []

    def __repr__(self) -> str:
        return f"Directory(name={self.name!r}, files={len(self.files)}, directories={len(self.directories)})"

    def _add_or_create_file(self, name: str) -> None:
        self.files.add(name)

    def _add_or_create_directory(self, name: str) -> "Directory":
        """Return the child directory with this name, creating it if missing."""
        for directory in self.directories:
            if directory.name == name:
                return directory

        directory = Directory(name, parent=self)
        self.directories.append(directory)
        return directory

    def add_source_file_components(self, components: list[str]) -> None:
        """Add a file to the tree from its path components.

        Every component but the last is a directory; the last one is the file
        name. Adding the same components twice leaves the tree unchanged.

        Args:
            components: Path segments relative to this directory.

        Raises:
            ValueError: If components is empty.
        """
        if not components:
            raise ValueError("Cannot add a source file without path components")

        current = self
        for name in components[:-1]:
            current = current._add_or_create_directory(name)
        current._add_or_create_file(components[-1])

    def get_matching_path(self, path: str) -> tuple["Directory", str]:
        """Find the directory holding the file designated by a partial path.

        The partial path only needs to match the innermost directories; the
        first match in traversal order wins when several directories qualify.

        Args:
            path: Slash separated partial path, e.g. ``com/acme/App.java``.

        Returns:
            Tuple of (matching directory, file name).

        Raises:
            SourcePathNotFoundError: If no indexed file matches the path.
        """
        components = path.split("/")
        file_name = components[-1]
        directory_components = components[:-1]

        candidates = [
            directory
            for directory in self._directories_containing_file(file_name)
            if directory._parents_match(directory_components)
        ]

        if not candidates:
            raise SourcePathNotFoundError(path)

        if len(candidates) > 1:
            logger.debug(
                f"{len(candidates)} directories match {path}, using "
                f"{candidates[0].path_relative_to(self) or '.'}"
            )

        return candidates[0], file_name

    def path_relative_to(self, root: "Directory") -> str:
        """Return this directory's path relative to one of its ancestors.

        Args:
            root: An ancestor of this directory (or the directory itself).

        Returns:
            Slash separated path; empty when ``root`` is this directory.

        Raises:
            ValueError: If ``root`` is not an ancestor of this directory.
        """
        names: list[str] = []
        current: Directory | None = self

        while current is not root:
            if current is None:
                raise ValueError(f"{root!r} is not an ancestor of {self!r}")
            names.append(current.name)
            current = current.parent

        return "/".join(reversed(names))

    def has_matching_descendant_file(self, pattern: re.Pattern[str]) -> bool:
        """Return True if a file in this tree has a name matching the pattern."""
        if any(pattern.search(name) for name in self.files):
            return True

        return any(
            directory.has_matching_descendant_file(pattern)
            for directory in self.directories
        )

    def iter_files(self, prefix: str = "") -> Iterator[str]:
        """Yield the path of every file in the tree, relative to this directory."""
        for name in sorted(self.files):
            yield f"{prefix}/{name}" if prefix else name

        for directory in self.directories:
            child_prefix = f"{prefix}/{directory.name}" if prefix else directory.name
            yield from directory.iter_files(child_prefix)

    def count(self) -> tuple[int, int]:
        """Return the number of (directories, files) below and including this one."""
        directories, files = 1, len(self.files)
        for directory in self.directories:
            child_directories, child_files = directory.count()
            directories += child_directories
            files += child_files
        return directories, files

    def _directories_containing_file(self, file_name: str) -> list["Directory"]:
        """Return every directory of the tree containing the file, in pre-order."""
        results = [self] if file_name in self.files else []

        for directory in self.directories:
            results.extend(directory._directories_containing_file(file_name))

        return results

    def _parents_match(self, components: list[str]) -> bool:
        """Check this directory and its ancestors against the path components.

        The last component must equal this directory's name, the one before
        it the parent's name, and so on.
        """
        current: Directory | None = self

        for name in reversed(components):
            if current is None or current.parent is None or current.name != name:
                return False
            current = current.parent

        return True
