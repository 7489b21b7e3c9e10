"""Tests for the files-first walk and project discovery."""

from pathlib import Path
from unittest.mock import patch

import pytest

from spotscan.core.exceptions.errors import DiscoveryError
from spotscan.layers.l1_discovery.walker import files_first_walk, find_projects


class TestFilesFirstWalk:
    """Tests for files_first_walk."""

    def test_files_given_before_subdirectories(self, temp_dir: Path, make_tree) -> None:
        """Test each directory is visited with all its files before its children."""
        make_tree(
            temp_dir,
            {
                "pom.xml": "",
                "README.md": "",
                "a/build.gradle": "",
                "a/b/App.java": "",
                "c/Other.java": "",
            },
        )
        visits: list[tuple[str, list[str]]] = []

        files_first_walk(
            temp_dir,
            lambda directory, files: visits.append(
                (directory.relative_to(temp_dir).as_posix(), files)
            ),
        )

        assert visits == [
            (".", ["README.md", "pom.xml"]),
            ("a", ["build.gradle"]),
            ("a/b", ["App.java"]),
            ("c", ["Other.java"]),
        ]

    def test_gradle_directory_skipped(self, temp_dir: Path, make_tree) -> None:
        """Test directories named gradle are not visited."""
        make_tree(temp_dir, {"gradle/wrapper/gradle-wrapper.properties": "", "build.gradle": ""})
        visited: list[Path] = []

        files_first_walk(temp_dir, lambda directory, files: visited.append(directory))

        assert visited == [temp_dir]

    def test_callback_errors_propagate(self, temp_dir: Path, make_tree) -> None:
        """Test an exception raised by the callback stops the walk."""
        make_tree(temp_dir, {"a/A.java": ""})

        def fail(directory: Path, files: list[str]) -> None:
            raise RuntimeError("stop")

        with pytest.raises(RuntimeError):
            files_first_walk(temp_dir, fail)

    def test_unreadable_directory(self, temp_dir: Path) -> None:
        """Test a missing directory raises DiscoveryError."""
        with pytest.raises(DiscoveryError) as exc_info:
            files_first_walk(temp_dir / "missing", lambda directory, files: None)

        assert exc_info.value.details["path"] == str(temp_dir / "missing")


class TestFindProjects:
    """Tests for find_projects."""

    def test_no_project(self, temp_dir: Path, make_tree) -> None:
        """Test a tree without build file has no project."""
        make_tree(temp_dir, {"src/App.java": "package com.acme;"})

        assert find_projects(temp_dir) == []

    def test_single_maven_project(self, maven_project: Path) -> None:
        """Test a Maven project is found at its root."""
        projects = find_projects(maven_project)

        assert len(projects) == 1
        assert projects[0].path == maven_project.absolute()
        assert projects[0].builder.name == "Maven"

    def test_nested_projects(self, temp_dir: Path, make_tree) -> None:
        """Test a nested build file yields a second project."""
        make_tree(
            temp_dir,
            {
                "pom.xml": "",
                "src/main/java/com/acme/App.java": "package com.acme;",
                "plugin/build.gradle": "",
                "plugin/src/main/java/com/acme/plugin/Plugin.java": "package com.acme.plugin;",
            },
        )

        projects = find_projects(temp_dir)

        assert [(p.builder.name, p.path) for p in projects] == [
            ("Maven", temp_dir.absolute()),
            ("Gradle", (temp_dir / "plugin").absolute()),
        ]
        # The outer project indexes the nested one too
        assert projects[0].packages == {"com.acme", "com.acme.plugin"}
        assert projects[1].packages == {"com.acme.plugin"}

    def test_build_files_in_gradle_directory_ignored(self, temp_dir: Path, make_tree) -> None:
        """Test build files below a gradle directory don't make projects."""
        make_tree(temp_dir, {"build.gradle": "", "gradle/build.xml": ""})

        projects = find_projects(temp_dir)

        assert len(projects) == 1
        assert projects[0].builder.name == "Gradle"

    def test_relative_path_made_absolute(self, maven_project: Path, monkeypatch) -> None:
        """Test a relative repository path gives absolute project paths."""
        monkeypatch.chdir(maven_project.parent)

        projects = find_projects(maven_project.name)

        assert projects[0].path.is_absolute()
        assert projects[0].path == maven_project.absolute()

    def test_quiet_doesnt_log_projects(self, maven_project: Path) -> None:
        """Test quiet discovery logs nothing per project."""
        with patch("spotscan.layers.l1_discovery.walker.logger") as mock_logger:
            find_projects(maven_project, quiet=True)
            mock_logger.info.assert_not_called()

            find_projects(maven_project)
            mock_logger.info.assert_called_once()
