"""
L3 Analysis Layer - SpotBugs analysis and report generation.

This layer runs SpotBugs with Find Security Bugs on the compiled projects,
maps reported paths back to the repository and converts the results into
a security report.
"""

from spotscan.layers.l3_analysis.analyzer import analyze, correct_path, sort_instances
from spotscan.layers.l3_analysis.convert import build_report, convert, to_vulnerability
from spotscan.layers.l3_analysis.engines.spotbugs import SpotBugsEngine
from spotscan.layers.l3_analysis.models import (
    BugInstance,
    ConfidenceLevel,
    Identifier,
    Location,
    Report,
    SeverityLevel,
    SourceLine,
    Vulnerability,
    parse_bug_instances,
)
from spotscan.layers.l3_analysis.toolchain import java_path, setup_system_java

__all__ = [
    # Analyzer
    "analyze",
    "correct_path",
    "sort_instances",
    # Conversion
    "build_report",
    "convert",
    "to_vulnerability",
    # Engine
    "SpotBugsEngine",
    # Models
    "BugInstance",
    "ConfidenceLevel",
    "Identifier",
    "Location",
    "Report",
    "SeverityLevel",
    "SourceLine",
    "Vulnerability",
    "parse_bug_instances",
    # Toolchain
    "java_path",
    "setup_system_java",
]
