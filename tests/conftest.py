"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest

from spotscan.core.config.settings import AnalyzerSettings, BuildSettings, JavaSettings, Settings

FileTree = Callable[[Path, dict[str, str]], Path]

APP_SOURCE = """package com.acme;

public class App {
    public static void main(String[] args) {
        System.out.println(args[0]);
    }
}
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def make_tree() -> FileTree:
    """Return a factory writing files below a root directory.

    Keys are slash separated paths relative to the root, values the file
    contents.
    """

    def _make_tree(root: Path, files: dict[str, str]) -> Path:
        for relative_path, content in files.items():
            path = root / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make_tree


@pytest.fixture
def maven_project(temp_dir: Path, make_tree: FileTree) -> Path:
    """Create a single module Maven project declaring package com.acme."""
    return make_tree(
        temp_dir / "repo",
        {
            "pom.xml": "<project/>\n",
            "src/main/java/com/acme/App.java": APP_SOURCE,
        },
    )


@pytest.fixture
def build_settings(temp_dir: Path) -> BuildSettings:
    """Build settings not depending on the machine running the tests."""
    return BuildSettings(
        maven_repo_path=str(temp_dir / "m2"),
        maven_cli_opts="--batch-mode -DskipTests=true",
    )


@pytest.fixture
def analyzer_settings(temp_dir: Path) -> AnalyzerSettings:
    """SpotBugs settings writing their files in the temporary directory."""
    return AnalyzerSettings(
        spotbugs_home=Path("/opt/spotbugs"),
        jars_list_path=temp_dir / "jars.list",
        output_path=temp_dir / "SpotBugs.xml",
        java_opts="-Xmx1900M",
    )


@pytest.fixture
def java_settings() -> JavaSettings:
    return JavaSettings(java_path="/usr/bin/java", sdkman_dir=Path("/usr/local/sdkman"))


@pytest.fixture
def settings(
    build_settings: BuildSettings,
    analyzer_settings: AnalyzerSettings,
    java_settings: JavaSettings,
) -> Settings:
    return Settings(build=build_settings, analyzer=analyzer_settings, java=java_settings)
