"""Tests for the builder registry and build commands."""

import itertools
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from spotscan.core.config.settings import BuildSettings
from spotscan.core.exceptions.errors import BuildError, CommandError
from spotscan.core.utils.process import CommandResult
from spotscan.layers.l1_discovery.project import Project
from spotscan.layers.l2_build.builders import (
    BUILDERS,
    AntBuilder,
    GrailswBuilder,
    best_builder,
    has_builder,
    maven_arguments,
)


class TestRegistry:
    """Tests for builder lookup."""

    def test_priority_order(self) -> None:
        """Test builders are ordered from most to least capable."""
        assert [b.name for b in BUILDERS] == [
            "SBT",
            "Grailsw",
            "Gradlew",
            "Gradle",
            "Mvnw",
            "Maven",
            "Ant",
        ]

    def test_has_builder(self) -> None:
        """Test signature files are recognized."""
        for name in ("build.sbt", "grailsw", "gradlew", "build.gradle", "mvnw", "pom.xml", "build.xml"):
            assert has_builder(name)

        assert not has_builder("settings.gradle")
        assert not has_builder("App.java")

    def test_best_builder_none(self) -> None:
        """Test no builder for files without a signature file."""
        assert best_builder(["README.md", "App.java"]) is None
        assert best_builder([]) is None

    def test_sbt_beats_gradle(self) -> None:
        """Test SBT wins over Gradle."""
        assert best_builder(["build.gradle", "build.sbt"]).name == "SBT"

    def test_wrapper_beats_tool(self) -> None:
        """Test wrapper scripts win over the tool they wrap."""
        assert best_builder(["pom.xml", "mvnw"]).name == "Mvnw"
        assert best_builder(["build.gradle", "gradlew"]).name == "Gradlew"

    def test_priority_independent_of_order(self) -> None:
        """Test the selected builder doesn't depend on the file order."""
        names = ["build.xml", "pom.xml", "gradlew", "README.md"]

        for permutation in itertools.permutations(names):
            assert best_builder(permutation).name == "Gradlew"


class TestCommands:
    """Tests for the command of each builder."""

    @pytest.fixture
    def project(self, maven_project: Path) -> Project:
        return Project(maven_project)

    def test_maven_arguments(self, build_settings: BuildSettings) -> None:
        """Test repository, CLI options and goal, without empty strings."""
        settings = build_settings.model_copy(
            update={"maven_repo_path": "/m2", "maven_cli_opts": "--batch-mode  -DskipTests=true "}
        )

        assert maven_arguments(settings) == [
            "-Dmaven.repo.local=/m2",
            "--batch-mode",
            "-DskipTests=true",
            "install",
        ]

    def test_maven_arguments_without_options(self, build_settings: BuildSettings) -> None:
        """Test empty CLI options."""
        settings = build_settings.model_copy(update={"maven_repo_path": "/m2", "maven_cli_opts": ""})

        assert maven_arguments(settings) == ["-Dmaven.repo.local=/m2", "install"]

    def test_commands(self, project: Project, build_settings: BuildSettings) -> None:
        """Test the command line of every builder."""
        commands = {b.name: b.command(build_settings, project) for b in BUILDERS}

        assert commands["SBT"] == ["sbt", "compile"]
        assert commands["Grailsw"] == [str(project.path / "grailsw"), "compile"]
        assert commands["Gradlew"] == [str(project.path / "gradlew"), "build"]
        assert commands["Gradle"] == ["gradle", "build"]
        assert commands["Mvnw"][0] == str(project.path / "mvnw")
        assert commands["Maven"][0] == "mvn"
        assert commands["Maven"][-1] == "install"
        assert commands["Ant"] == ["ant"]

    def test_ant_home_environment(self, build_settings: BuildSettings) -> None:
        """Test ANT_HOME is only set when configured."""
        builder = AntBuilder()

        assert builder.environment(build_settings.model_copy(update={"ant_home": ""})) == {}
        assert builder.environment(build_settings.model_copy(update={"ant_home": "/opt/ant"})) == {
            "ANT_HOME": "/opt/ant"
        }


class TestBuild:
    """Tests for running builds."""

    @pytest.mark.asyncio
    async def test_maven_build_runs_in_project(self, maven_project: Path, build_settings: BuildSettings) -> None:
        """Test the Maven command runs in the project directory."""
        project = Project(maven_project)

        with patch("spotscan.layers.l2_build.builders.run_checked", new_callable=AsyncMock) as mock_run:
            await project.build(build_settings)

        args, kwargs = mock_run.call_args
        assert args[0][0] == "mvn"
        assert kwargs["cwd"] == project.path

    @pytest.mark.asyncio
    async def test_failed_build_raises_build_error(self, maven_project: Path, build_settings: BuildSettings) -> None:
        """Test a failing command becomes a BuildError carrying the output."""
        project = Project(maven_project)
        error = CommandError("Command returned a non zero exit status", exit_code=1, output="[ERROR] boom")

        with patch("spotscan.layers.l2_build.builders.run_checked", new=AsyncMock(side_effect=error)):
            with pytest.raises(BuildError) as exc_info:
                await project.build(build_settings)

        assert exc_info.value.output == "[ERROR] boom"
        assert exc_info.value.project_path == str(project.path)

    @pytest.mark.asyncio
    async def test_grailsw_detects_failure_in_output(self, temp_dir: Path, make_tree, build_settings: BuildSettings) -> None:
        """Test grailsw output containing BUILD FAILED fails the build."""
        make_tree(temp_dir, {"grailsw": ""})
        project = Project(temp_dir)
        assert isinstance(project.builder, GrailswBuilder)

        result = CommandResult(command=["grailsw"], return_code=0, output="...\nBUILD FAILED\n")

        with patch("spotscan.core.utils.process.run_command", new=AsyncMock(return_value=result)):
            with pytest.raises(BuildError) as exc_info:
                await project.build(build_settings)

        assert "grails failed to compile the project" in str(exc_info.value)
