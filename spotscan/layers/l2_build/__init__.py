"""L2 Build Layer - compiling discovered projects.

This layer provides:
- The builder registry (SBT, Grailsw, Gradlew, Gradle, Mvnw, Maven, Ant)
- Composable build procedures (backup/restore, cleanup, static compilation)
- The build executor compiling projects before analysis
"""

from spotscan.layers.l2_build.builders import (
    BUILDERS,
    Builder,
    best_builder,
    has_builder,
)
from spotscan.layers.l2_build.executor import BuildExecutor, BuildResult
from spotscan.layers.l2_build.procedures import (
    build_generic,
    build_gradle,
    with_cleanup,
    with_file_restoration,
    with_gradle_static_compilation,
)

__all__ = [
    "BUILDERS",
    "Builder",
    "best_builder",
    "has_builder",
    "BuildExecutor",
    "BuildResult",
    "build_generic",
    "build_gradle",
    "with_cleanup",
    "with_file_restoration",
    "with_gradle_static_compilation",
]
