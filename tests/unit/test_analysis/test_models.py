"""Tests for SpotBugs report models."""

import pytest

from spotscan.core.exceptions.errors import AnalysisError
from spotscan.layers.l3_analysis.models import (
    BugInstance,
    ConfidenceLevel,
    SeverityLevel,
    SourceLine,
    parse_bug_instances,
    slugify,
)

REPORT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<BugCollection version="4.0.2" sequence="0" timestamp="1583000000000" analysisTimestamp="1583000000000" release="">
  <Project projectName="">
    <Jar>/repo/target/classes</Jar>
  </Project>
  <BugInstance type="XSS_REQUEST_PARAMETER_TO_SEND_ERROR" priority="1" rank="5" abbrev="XSS" category="SECURITY" instanceHash="a1b2c3" cweid="79">
    <ShortMessage>Servlet reflected cross site scripting vulnerability in error page</ShortMessage>
    <LongMessage>HTTP parameter written to Servlet error page in com.acme.App.doGet(HttpServletRequest, HttpServletResponse)</LongMessage>
    <Class classname="com.acme.App" primary="true">
      <SourceLine classname="com.acme.App" start="10" end="40" sourcefile="App.java" sourcepath="com/acme/App.java"/>
    </Class>
    <Method classname="com.acme.App" name="doGet" signature="()V" isStatic="false" primary="true">
      <SourceLine classname="com.acme.App" start="20" end="25" sourcepath="com/acme/App.java"/>
    </Method>
    <SourceLine classname="com.acme.App" start="22" end="22" sourcefile="App.java" sourcepath="com/acme/App.java"/>
  </BugInstance>
  <BugInstance type="PREDICTABLE_RANDOM" priority="2" rank="12" abbrev="SECPR" category="SECURITY" instanceHash="d4e5f6" cweid="0">
    <ShortMessage>Predictable pseudorandom number generator</ShortMessage>
    <LongMessage>The use of java.util.Random is predictable</LongMessage>
    <Class classname="com.acme.Token"/>
    <SourceLine classname="com.acme.Token" start="7" end="7" sourcepath="com/acme/Token.java"/>
  </BugInstance>
</BugCollection>
"""


class TestParseBugInstances:
    """Tests for reading SpotBugs XML."""

    def test_parse(self) -> None:
        """Test attributes and direct children are read."""
        bugs = parse_bug_instances(REPORT_XML)

        assert len(bugs) == 2
        bug = bugs[0]
        assert bug.type == "XSS_REQUEST_PARAMETER_TO_SEND_ERROR"
        assert bug.cwe_id == 79
        assert bug.rank == 5
        assert bug.priority == 1
        assert bug.abbrev == "XSS"
        assert bug.instance_hash == "a1b2c3"
        assert bug.short_message.startswith("Servlet reflected")
        assert bug.class_name == "com.acme.App"
        assert bug.method_name == "doGet"
        # The bug's own SourceLine, not the class or method one
        assert bug.source_line == SourceLine(start=22, end=22, source_path="com/acme/App.java")

    def test_missing_method(self) -> None:
        """Test instances without Method element."""
        bug = parse_bug_instances(REPORT_XML)[1]

        assert bug.method_name == ""
        assert bug.cwe_id == 0

    def test_empty_collection(self) -> None:
        assert parse_bug_instances("<BugCollection/>") == []

    def test_malformed_xml(self) -> None:
        """Test a truncated report raises AnalysisError."""
        with pytest.raises(AnalysisError):
            parse_bug_instances(REPORT_XML[:200])

    def test_non_numeric_rank(self) -> None:
        with pytest.raises(AnalysisError):
            parse_bug_instances('<BugCollection><BugInstance rank="high"/></BugCollection>')


class TestBugInstance:
    """Tests for the derived issue fields."""

    @pytest.mark.parametrize(
        ("rank", "severity"),
        [
            (1, SeverityLevel.CRITICAL),
            (4, SeverityLevel.CRITICAL),
            (5, SeverityLevel.HIGH),
            (9, SeverityLevel.HIGH),
            (10, SeverityLevel.MEDIUM),
            (14, SeverityLevel.MEDIUM),
            (15, SeverityLevel.LOW),
            (20, SeverityLevel.LOW),
            (0, SeverityLevel.UNKNOWN),
            (21, SeverityLevel.UNKNOWN),
        ],
    )
    def test_severity(self, rank: int, severity: SeverityLevel) -> None:
        assert BugInstance(rank=rank).severity() == severity

    @pytest.mark.parametrize(
        ("priority", "confidence"),
        [
            (1, ConfidenceLevel.HIGH),
            (2, ConfidenceLevel.MEDIUM),
            (3, ConfidenceLevel.LOW),
            (4, ConfidenceLevel.EXPERIMENTAL),
            (5, ConfidenceLevel.IGNORE),
            (0, ConfidenceLevel.UNKNOWN),
        ],
    )
    def test_confidence(self, priority: int, confidence: ConfidenceLevel) -> None:
        assert BugInstance(priority=priority).confidence() == confidence

    def test_compare_key(self) -> None:
        bug = parse_bug_instances(REPORT_XML)[0]

        assert bug.compare_key() == "a1b2c3:XSS_REQUEST_PARAMETER_TO_SEND_ERROR:com/acme/App.java:22"

    def test_compare_key_empty(self) -> None:
        """Test an instance without identifying data has no key."""
        assert BugInstance().compare_key() == ""

    def test_spotbugs_identifier_url(self) -> None:
        """Test bug types documented by SpotBugs link to its documentation."""
        bug = BugInstance(
            type="XSS_REQUEST_PARAMETER_TO_SEND_ERROR",
            abbrev="XSS",
            short_message="Servlet reflected cross site scripting vulnerability in error page",
        )

        assert bug.bug_url() == (
            "https://spotbugs.readthedocs.io/en/latest/bugDescriptions.html#"
            "xss-servlet-reflected-cross-site-scripting-vulnerability-in-error-page-"
            "xss-request-parameter-to-send-error"
        )

    def test_find_sec_bugs_identifier_url(self) -> None:
        bug = BugInstance(type="PREDICTABLE_RANDOM")

        assert bug.bug_url() == "https://find-sec-bugs.github.io/bugs.htm#PREDICTABLE_RANDOM"

    def test_identifiers(self) -> None:
        """Test the bug type identifier comes first, then the CWE."""
        bug = BugInstance(type="PREDICTABLE_RANDOM", cwe_id=330)

        identifiers = bug.identifiers()

        assert [i.type for i in identifiers] == ["find_sec_bugs_type", "cwe"]
        assert identifiers[0].name == "Find Security Bugs-PREDICTABLE_RANDOM"
        assert identifiers[0].value == "PREDICTABLE_RANDOM"
        assert identifiers[1].name == "CWE-330"
        assert identifiers[1].value == "330"
        assert identifiers[1].url == "https://cwe.mitre.org/data/definitions/330.html"

    def test_identifiers_without_cwe(self) -> None:
        assert len(BugInstance(type="PREDICTABLE_RANDOM").identifiers()) == 1

    def test_location(self) -> None:
        bug = parse_bug_instances(REPORT_XML)[0]

        location = bug.location("app")

        assert location.file == "app/com/acme/App.java"
        assert location.start_line == 22
        assert location.end_line == 22
        assert location.class_name == "com.acme.App"
        assert location.method == "doGet"

    def test_location_without_prepend_path(self) -> None:
        bug = BugInstance(source_line=SourceLine(source_path="src/App.java"))

        assert bug.location().file == "src/App.java"

    @pytest.mark.parametrize(
        "prepend_path, expected",
        [
            (".", "src/App.java"),
            ("app/", "app/src/App.java"),
            ("./app", "app/src/App.java"),
            ("services/../app", "app/src/App.java"),
        ],
    )
    def test_location_prepend_path_cleaned(self, prepend_path: str, expected: str) -> None:
        bug = BugInstance(source_line=SourceLine(source_path="src/App.java"))

        assert bug.location(prepend_path).file == expected


class TestSlugify:
    """Tests for slugify."""

    def test_slugify(self) -> None:
        assert slugify("SQL-Nonconstant string passed to execute") == "sql-nonconstant-string-passed-to-execute"

    def test_punctuation_and_accents(self) -> None:
        assert slugify("  Héllo, (World)!  ") == "hello-world"
