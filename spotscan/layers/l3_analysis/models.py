"""
L3 Analysis Data Models

SpotBugs report entries (BugInstance) and the normalized security report
they are converted to.
"""

import posixpath
import re
import unicodedata
import xml.etree.ElementTree as ET
from enum import Enum

from pydantic import BaseModel, Field

from spotscan.core.exceptions.errors import AnalysisError

SPOTBUGS_URL = "https://spotbugs.readthedocs.io/en/latest/bugDescriptions.html#"
FIND_SEC_BUGS_URL = "https://find-sec-bugs.github.io/bugs.htm#"
CWE_URL = "https://cwe.mitre.org/data/definitions/{}.html"

# Bug types documented by SpotBugs itself rather than Find Security Bugs
SPOTBUGS_IDENTIFIERS = frozenset(
    {
        "DMI_CONSTANT_DB_PASSWORD",
        "DMI_EMPTY_DB_PASSWORD",
        "HRS_REQUEST_PARAMETER_TO_COOKIE",
        "HRS_REQUEST_PARAMETER_TO_HTTP_HEADER",
        "PT_ABSOLUTE_PATH_TRAVERSAL",
        "PT_RELATIVE_PATH_TRAVERSAL",
        "SQL_NONCONSTANT_STRING_PASSED_TO_EXECUTE",
        "SQL_PREPARED_STATEMENT_GENERATED_FROM_NONCONSTANT_STRING",
        "XSS_REQUEST_PARAMETER_TO_JSP_WRITER",
        "XSS_REQUEST_PARAMETER_TO_SEND_ERROR",
        "XSS_REQUEST_PARAMETER_TO_SERVLET_WRITER",
    }
)


class SeverityLevel(str, Enum):
    """Normalized severity of an issue."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNKNOWN = "Unknown"


class ConfidenceLevel(str, Enum):
    """Normalized confidence of an issue."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    EXPERIMENTAL = "Experimental"
    IGNORE = "Ignore"
    UNKNOWN = "Unknown"


def slugify(text: str) -> str:
    """Lowercase ASCII slug with words joined by dashes."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class Identifier(BaseModel):
    """External identifier of an issue (bug type, CWE)."""

    type: str = Field(..., description="Identifier type")
    name: str = Field(..., description="Human readable name")
    value: str = Field(..., description="Identifier value")
    url: str | None = Field(default=None, description="Reference URL")

    @classmethod
    def cwe(cls, cwe_id: int) -> "Identifier":
        return cls(
            type="cwe",
            name=f"CWE-{cwe_id}",
            value=str(cwe_id),
            url=CWE_URL.format(cwe_id),
        )


class Location(BaseModel):
    """Location of an issue in the repository."""

    file: str = Field(..., description="File path relative to the repository root")
    start_line: int = Field(default=0, description="Start line")
    end_line: int = Field(default=0, description="End line")
    class_name: str = Field(default="", alias="class", description="Enclosing class")
    method: str = Field(default="", description="Enclosing method")

    model_config = {"populate_by_name": True}


class SourceLine(BaseModel):
    """Source file and line range of a SpotBugs bug instance."""

    start: int = 0
    end: int = 0
    source_path: str = ""


class BugInstance(BaseModel):
    """A bug, in our case a vulnerability, found by SpotBugs."""

    type: str = ""
    cwe_id: int = 0
    rank: int = 0
    abbrev: str = ""
    priority: int = 0
    instance_hash: str = ""
    short_message: str = ""
    long_message: str = ""
    class_name: str = ""
    method_name: str = ""
    source_line: SourceLine = Field(default_factory=SourceLine)

    @classmethod
    def from_element(cls, element: ET.Element) -> "BugInstance":
        """Build a bug instance from a ``<BugInstance>`` XML element.

        Raises:
            ValueError: If a numeric attribute isn't an integer.
        """
        class_element = element.find("Class")
        method_element = element.find("Method")
        source_line_element = element.find("SourceLine")

        source_line = SourceLine()
        if source_line_element is not None:
            source_line = SourceLine(
                start=_int_attribute(source_line_element, "start"),
                end=_int_attribute(source_line_element, "end"),
                source_path=source_line_element.get("sourcepath", ""),
            )

        return cls(
            type=element.get("type", ""),
            cwe_id=_int_attribute(element, "cweid"),
            rank=_int_attribute(element, "rank"),
            abbrev=element.get("abbrev", ""),
            priority=_int_attribute(element, "priority"),
            instance_hash=element.get("instanceHash", ""),
            short_message=element.findtext("ShortMessage", default=""),
            long_message=element.findtext("LongMessage", default=""),
            class_name=class_element.get("classname", "") if class_element is not None else "",
            method_name=method_element.get("name", "") if method_element is not None else "",
            source_line=source_line,
        )

    def compare_key(self) -> str:
        """Return a key telling whether two issues are the same."""
        key = ":".join(
            [
                self.instance_hash,
                self.type,
                self.source_line.source_path,
                str(self.source_line.start),
            ]
        )
        return "" if key == ":::0" else key

    def severity(self) -> SeverityLevel:
        """Severity derived from the SpotBugs bug rank (1 = scariest)."""
        if 1 <= self.rank <= 4:
            return SeverityLevel.CRITICAL
        if 5 <= self.rank <= 9:
            return SeverityLevel.HIGH
        if 10 <= self.rank <= 14:
            return SeverityLevel.MEDIUM
        if 15 <= self.rank <= 20:
            return SeverityLevel.LOW
        return SeverityLevel.UNKNOWN

    def confidence(self) -> ConfidenceLevel:
        """Confidence derived from the SpotBugs priority."""
        return {
            1: ConfidenceLevel.HIGH,
            2: ConfidenceLevel.MEDIUM,
            3: ConfidenceLevel.LOW,
            4: ConfidenceLevel.EXPERIMENTAL,
            5: ConfidenceLevel.IGNORE,
        }.get(self.priority, ConfidenceLevel.UNKNOWN)

    def location(self, prepend_path: str = "") -> Location:
        file = self.source_line.source_path
        if prepend_path:
            file = posixpath.normpath(posixpath.join(prepend_path, file))

        return Location(
            file=file,
            start_line=self.source_line.start,
            end_line=self.source_line.end,
            class_name=self.class_name,
            method=self.method_name,
        )

    def identifiers(self) -> list[Identifier]:
        identifiers = [
            Identifier(
                type="find_sec_bugs_type",
                name=f"Find Security Bugs-{self.type}",
                value=self.type,
                url=self.bug_url(),
            )
        ]

        if self.cwe_id != 0:
            identifiers.append(Identifier.cwe(self.cwe_id))

        return identifiers

    def bug_url(self) -> str:
        """Return the URL of the bug type description."""
        if self.type in SPOTBUGS_IDENTIFIERS:
            slug_type = self.type.replace("_", "-")
            return SPOTBUGS_URL + slugify(f"{self.abbrev}-{self.short_message}-{slug_type}")
        return FIND_SEC_BUGS_URL + self.type

    def sort_key(self) -> tuple[str, int, str]:
        """Ordering used for repeatable reports: path, start line, message."""
        return (self.source_line.source_path, self.source_line.start, self.short_message)


def _int_attribute(element: ET.Element, name: str) -> int:
    value = element.get(name)
    if value is None or value == "":
        return 0
    return int(value)


def parse_bug_instances(xml_content: str | bytes) -> list[BugInstance]:
    """Parse the bug instances of a SpotBugs XML report.

    Args:
        xml_content: Content of a report produced with ``-xml:withMessages``.

    Returns:
        Bug instances in report order.

    Raises:
        AnalysisError: If the report is malformed.
    """
    try:
        root = ET.fromstring(xml_content)
        return [BugInstance.from_element(element) for element in root.iter("BugInstance")]
    except (ET.ParseError, ValueError) as e:
        raise AnalysisError(f"Unable to parse SpotBugs XML report: {e}") from e


class ScannerInfo(BaseModel):
    """Scanner that produced an issue."""

    id: str
    name: str


class ScannerDetails(BaseModel):
    """Identifying information about the security scanner."""

    id: str
    name: str
    version: str
    vendor: dict[str, str] = Field(default_factory=dict)
    url: str | None = None


class Vulnerability(BaseModel):
    """A normalized security issue."""

    category: str = Field(default="sast", description="Scan category")
    name: str = Field(..., description="Short name")
    message: str = Field(..., description="Short message")
    description: str = Field(default="", description="Detailed description")
    cve: str = Field(default="", description="Compare key identifying the issue")
    severity: SeverityLevel = Field(default=SeverityLevel.UNKNOWN)
    confidence: ConfidenceLevel = Field(default=ConfidenceLevel.UNKNOWN)
    scanner: ScannerInfo
    location: Location
    identifiers: list[Identifier] = Field(default_factory=list)


class Report(BaseModel):
    """Security report aggregating the issues of every project."""

    version: str = Field(default="2.0")
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)
    scanner: ScannerDetails | None = None
    scan_type: str = Field(default="sast")

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)
