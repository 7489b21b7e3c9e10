"""Main CLI entry point for SpotScan."""

import asyncio
from pathlib import Path

import click
from pydantic import BaseModel

from spotscan.cli.display import console, show_error, show_projects, show_report_summary, show_success
from spotscan.core.config.settings import Settings, get_settings
from spotscan.core.exceptions.errors import SpotScanError
from spotscan.core.logger.logger import setup_logging
from spotscan.layers.l1_discovery.walker import find_projects
from spotscan.layers.l3_analysis.analyzer import analyze as analyze_repository
from spotscan.layers.l3_analysis.convert import build_report, convert as convert_report


def _override(model: BaseModel, **values) -> BaseModel:
    """Return a copy of a settings model with the given non-None values."""
    updates = {key: value for key, value in values.items() if value is not None}
    if not updates:
        return model
    return model.model_copy(update=updates)


def _write_report(json_report: str, output: str | None) -> None:
    if output:
        Path(output).write_text(json_report, encoding="utf-8")
        show_success("Report Written", f"Report written to: {output}")
    else:
        click.echo(json_report)


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file",
)
@click.option("--debug", is_flag=True, help="Log debug messages, including command output")
@click.pass_context
def main(ctx: click.Context, version: bool, config_path: str | None, debug: bool) -> None:
    """SpotScan - SpotBugs security analysis of JVM projects.

    Finds every buildable project of a repository, compiles it and runs
    SpotBugs with Find Security Bugs on the result.
    """
    if version:
        from spotscan import __version__

        click.echo(f"SpotScan version {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    try:
        settings = Settings.from_yaml(Path(config_path)) if config_path else get_settings()
    except SpotScanError as e:
        show_error("Configuration Error", str(e))
        raise SystemExit(1) from e

    if debug:
        settings = settings.model_copy(
            update={"logging": settings.logging.model_copy(update={"level": "DEBUG"})}
        )

    setup_logging(settings.logging)
    ctx.obj = settings


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file for the JSON report")
@click.option(
    "--compile/--no-compile",
    default=None,
    envvar="COMPILE",
    help="Compile source code. Not needed if the code is already compiled. Defaults to build.compile.",
)
@click.option(
    "--fail-never/--no-fail-never",
    default=None,
    envvar="FAIL_NEVER",
    help="Ignore compilation failures, attempt scan anyway. Defaults to build.fail_never.",
)
@click.option("--ant-path", envvar="ANT_PATH", help="Path to the ant executable.")
@click.option("--ant-home", envvar="ANT_HOME", help="ANT_HOME given to ant builds.")
@click.option("--gradle-path", envvar="GRADLE_PATH", help="Path to the gradle executable.")
@click.option("--maven-path", envvar="MAVEN_PATH", help="Path to the mvn executable.")
@click.option("--maven-repo-path", envvar="MAVEN_REPO_PATH", help="Path to the Maven local repository.")
@click.option("--maven-cli-opts", envvar="MAVEN_CLI_OPTS", help="Optional arguments for the maven CLI.")
@click.option("--sbt-path", envvar="SBT_PATH", help="Path to the sbt executable.")
@click.option("--java-opts", envvar="JAVA_OPTS", help="JAVA_OPTS of the SpotBugs run.")
@click.option("--java-path", envvar="JAVA_PATH", help="Path to the java executable.")
@click.option("--java-version", envvar="SAST_JAVA_VERSION", help="Major Java version to use (8 or 11).")
@click.option("--java-8-version", envvar="JAVA_8_VERSION", help="sdkman candidate used for Java 8.")
@click.option("--java-11-version", envvar="JAVA_11_VERSION", help="sdkman candidate used for Java 11.")
@click.option("--sdkman-dir", envvar="SDKMAN_DIR", help="Path to the sdkman home directory.")
@click.pass_obj
def analyze(
    settings: Settings,
    path: str,
    output: str | None,
    compile: bool | None,
    fail_never: bool | None,
    ant_path: str | None,
    ant_home: str | None,
    gradle_path: str | None,
    maven_path: str | None,
    maven_repo_path: str | None,
    maven_cli_opts: str | None,
    sbt_path: str | None,
    java_opts: str | None,
    java_path: str | None,
    java_version: str | None,
    java_8_version: str | None,
    java_11_version: str | None,
    sdkman_dir: str | None,
) -> None:
    """Compile and analyze every project found in PATH.

    Example:
        spotscan analyze /path/to/repository -o gl-sast-report.json
        spotscan analyze . --no-compile
    """
    settings = settings.model_copy(
        update={
            "build": _override(
                settings.build,
                ant_path=ant_path,
                ant_home=ant_home,
                gradle_path=gradle_path,
                maven_path=maven_path,
                maven_repo_path=maven_repo_path,
                maven_cli_opts=maven_cli_opts,
                sbt_path=sbt_path,
            ),
            "analyzer": _override(settings.analyzer, java_opts=java_opts),
            "java": _override(
                settings.java,
                java_path=java_path,
                version=java_version,
                java_8_version=java_8_version,
                java_11_version=java_11_version,
                sdkman_dir=Path(sdkman_dir) if sdkman_dir else None,
            ),
        }
    )

    try:
        instances = asyncio.run(
            analyze_repository(path, settings, compile=compile, fail_never=fail_never)
        )
    except SpotScanError as e:
        show_error("Analysis Failed", str(e))
        raise SystemExit(1) from e

    report = build_report(instances)
    _write_report(report.to_json(), output)

    if output:
        show_report_summary(report)


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
def search(path: str) -> None:
    """List the buildable projects found in PATH.

    Example:
        spotscan search /path/to/repository
    """
    try:
        projects = find_projects(path, quiet=True)
    except SpotScanError as e:
        show_error("Discovery Failed", str(e))
        raise SystemExit(1) from e

    show_projects(projects)


@main.command()
@click.argument("report_xml", type=click.Path(exists=True, dir_okay=False))
@click.option("--prepend-path", default="", help="Path prepended to every file location")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file for the JSON report")
def convert(report_xml: str, prepend_path: str, output: str | None) -> None:
    """Convert a SpotBugs XML report into a JSON security report.

    Example:
        spotscan convert SpotBugs.xml --prepend-path app -o report.json
    """
    try:
        report = convert_report(Path(report_xml).read_bytes(), prepend_path)
    except SpotScanError as e:
        show_error("Conversion Failed", str(e))
        raise SystemExit(1) from e

    _write_report(report.to_json(), output)

    if output:
        console.print(f"  Vulnerabilities: {len(report.vulnerabilities)}")


if __name__ == "__main__":
    main()
