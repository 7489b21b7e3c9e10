"""
Analysis engines.
"""

from spotscan.layers.l3_analysis.engines.spotbugs import SpotBugsEngine

__all__ = [
    "SpotBugsEngine",
]
