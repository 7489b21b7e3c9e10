"""Composable build procedures.

A procedure is a coroutine function taking no argument and raising on
failure. The helpers here wrap a procedure with extra behavior (file backup,
cleanup of build leftovers, static compilation) and return a new procedure,
so strategies can be stacked:

    await with_cleanup(path, with_gradle_static_compilation(project, overlay, build))()
"""

import os
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING

from spotscan.core.exceptions.errors import BuildError, CommandError
from spotscan.core.logger.logger import get_logger

if TYPE_CHECKING:
    from spotscan.layers.l1_discovery.project import Project

logger = get_logger(__name__)

Procedure = Callable[[], Awaitable[None]]


def with_file_restoration(file_path: Path, build: Procedure) -> Procedure:
    """Run a procedure after backing up a file, then restore the file content.

    The file is restored whatever the outcome of the procedure.
    """

    async def procedure() -> None:
        backup = file_path.with_name(file_path.name + ".bak")
        shutil.copyfile(file_path, backup)

        try:
            await build()
        finally:
            shutil.copyfile(backup, file_path)
            backup.unlink()

    return procedure


def with_cleanup(directory: Path, build: Procedure) -> Procedure:
    """Run a procedure and remove the entries it created if it fails.

    Only the direct entries of ``directory`` are compared, before and after
    the run. Leftovers of a failed build would otherwise be picked up by a
    later attempt or a later discovery walk.
    """

    async def procedure() -> None:
        old_entries = set(os.listdir(directory))

        try:
            await build()
        except Exception:
            for name in sorted(set(os.listdir(directory)) - old_entries):
                _remove_entry(directory / name)
            raise

    return procedure


def _remove_entry(path: Path) -> None:
    logger.debug(f"Removing {path} created by the failed build")
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        logger.warning(f"Couldn't remove {path} after failed build ({e})")


def with_gradle_static_compilation(
    project: "Project",
    overlay: Path,
    build: Procedure,
) -> Procedure:
    """Run a procedure with build.gradle configured for static Groovy compilation.

    The overlay is appended to the project's build.gradle, whose original
    content is restored afterwards.
    """
    build_file = project.path / "build.gradle"

    async def procedure() -> None:
        extra_configuration = overlay.read_text(encoding="utf-8")
        with open(build_file, "a", encoding="utf-8") as f:
            f.write("\n")
            f.write(extra_configuration)

        await build()

    return with_file_restoration(build_file, procedure)


async def build_generic(builder_name: str, project: "Project", build: Procedure) -> None:
    """Build a project with the given procedure, cleaning up on failure.

    Raises:
        BuildError: If the build fails.
    """
    logger.info(f"Building {builder_name} project at {project.path}.")

    try:
        await with_cleanup(project.path, build)()
    except CommandError as e:
        logger.error(f"Project couldn't be built: {e.message}")
        raise BuildError.from_command_error(e, str(project.path)) from e

    logger.info("Project built.")


async def build_gradle(
    builder_name: str,
    project: "Project",
    build: Procedure,
    overlay: Path,
) -> None:
    """Build a Gradle-like project, trying static compilation first.

    For Groovy projects a statically compiled build lets Find Security Bugs
    find more vulnerabilities. If it fails, a regular build is attempted.

    Raises:
        BuildError: If the regular build fails.
    """
    if project.is_groovy():
        logger.info(f"Building {builder_name} project at {project.path} with static compilation.")

        try:
            await with_cleanup(
                project.path,
                with_gradle_static_compilation(project, overlay, build),
            )()
        except (CommandError, OSError) as e:
            logger.info(f"Building failed, trying building without static compilation: {e}")
        else:
            logger.info("Project built.")
            return

    await build_generic(builder_name, project, build)
