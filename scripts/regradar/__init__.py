"""
RegulatorRadar - plain-English impact analysis of regulatory feed items.

Classifies SEC feed items, scores their severity, extracts penalties and
timelines, and turns them into prioritized compliance action items.
"""

__version__ = "1.0.0"
