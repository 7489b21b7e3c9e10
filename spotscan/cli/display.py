"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spotscan.layers.l1_discovery.project import Project
from spotscan.layers.l3_analysis.models import Report, SeverityLevel

console = Console()

SEVERITY_STYLES = {
    SeverityLevel.CRITICAL: "bold red",
    SeverityLevel.HIGH: "red",
    SeverityLevel.MEDIUM: "yellow",
    SeverityLevel.LOW: "green",
    SeverityLevel.UNKNOWN: "dim",
}


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_projects(projects: list[Project]) -> None:
    """Display discovered projects in a table.

    Args:
        projects: Projects in discovery order.
    """
    console.print()

    if not projects:
        console.print("[yellow]No buildable project found.[/]")
        return

    table = Table(title=f"[bold]Projects ({len(projects)})[/]")
    table.add_column("Builder", style="cyan")
    table.add_column("Path", style="white")
    table.add_column("Packages", style="dim")

    for project in projects:
        table.add_row(
            project.builder.name,
            escape(str(project.path)),
            escape(", ".join(sorted(project.packages)) or "-"),
        )

    console.print(table)


def show_report_summary(report: Report) -> None:
    """Display the issues of a report, most severe first."""
    console.print()

    if not report.vulnerabilities:
        console.print("[green]No vulnerability found.[/]")
        return

    order = list(SeverityLevel)
    vulnerabilities = sorted(report.vulnerabilities, key=lambda v: order.index(v.severity))

    table = Table(title=f"[bold]Vulnerabilities ({len(vulnerabilities)})[/]")
    table.add_column("Severity")
    table.add_column("Confidence", style="dim")
    table.add_column("Location", style="cyan")
    table.add_column("Message", style="white")

    for vulnerability in vulnerabilities:
        style = SEVERITY_STYLES[vulnerability.severity]
        location = vulnerability.location
        table.add_row(
            f"[{style}]{vulnerability.severity.value}[/]",
            vulnerability.confidence.value,
            escape(f"{location.file}:{location.start_line}"),
            escape(vulnerability.message),
        )

    console.print(table)
