"""Identifying information about the analyzer and its scanner."""

from spotscan import __version__
from spotscan.layers.l3_analysis.models import ScannerDetails, ScannerInfo

ANALYZER_VENDOR = "SpotScan"
ANALYZER_VERSION = __version__

SCANNER_ID = "find_sec_bugs"
SCANNER_NAME = "Find Security Bugs"
SCANNER_URL = "https://spotbugs.github.io"
# Must match the Find Security Bugs plugin shipped next to SpotBugs
SCANNER_VERSION = "4.0.2"

ANALYZER_USAGE = f"{ANALYZER_VENDOR} {SCANNER_NAME} analyzer v{ANALYZER_VERSION}"

ISSUE_SCANNER = ScannerInfo(id=SCANNER_ID, name=SCANNER_NAME)

REPORT_SCANNER = ScannerDetails(
    id=SCANNER_ID,
    name=SCANNER_NAME,
    version=SCANNER_VERSION,
    vendor={"name": ANALYZER_VENDOR},
    url=SCANNER_URL,
)
