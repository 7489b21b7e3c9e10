"""Conversion of SpotBugs bug instances into a security report."""

from collections.abc import Iterable

from spotscan.layers.l3_analysis.metadata import ISSUE_SCANNER, REPORT_SCANNER
from spotscan.layers.l3_analysis.models import (
    BugInstance,
    Report,
    Vulnerability,
    parse_bug_instances,
)


def to_vulnerability(bug: BugInstance, prepend_path: str = "") -> Vulnerability:
    """Translate one bug instance into a normalized issue."""
    return Vulnerability(
        name=bug.short_message,
        message=bug.short_message,
        description=bug.long_message,
        cve=bug.compare_key(),
        severity=bug.severity(),
        confidence=bug.confidence(),
        scanner=ISSUE_SCANNER,
        location=bug.location(prepend_path),
        identifiers=bug.identifiers(),
    )


def build_report(bugs: Iterable[BugInstance], prepend_path: str = "") -> Report:
    """Build a report from bug instances whose paths are repository relative."""
    return Report(
        vulnerabilities=[to_vulnerability(bug, prepend_path) for bug in bugs],
        scanner=REPORT_SCANNER,
    )


def convert(xml_content: str | bytes, prepend_path: str = "") -> Report:
    """Translate a SpotBugs XML report into a security report.

    Raises:
        AnalysisError: If the report is malformed.
    """
    return build_report(parse_bug_instances(xml_content), prepend_path)
