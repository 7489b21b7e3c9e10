"""SpotScan - JVM project discovery, build and SpotBugs analysis."""

__version__ = "0.1.0"
