"""
Regulation Analysis Module

Rule-based classification and impact scoring of regulatory feed items.

This module provides:
- Regulation type classification (enforcement, final rule, proposed rule)
- Severity scoring, penalty extraction and implementation timeline estimates
- Business impact categorization
- Plain-English translation with prioritized action items
- The ImpactAnalyzer that runs the whole pipeline
"""

from .classifier import classify
from .engine import ImpactAnalyzer, analysis_statistics, validate_feed_item
from .extraction import estimate_timeline, extract_penalty, to_plain_english
from .impact import categorize
from .scoring import apply_adjustment, score_severity
from .translator import Translator, fallback_translation

__all__ = [
    "classify",
    "score_severity",
    "apply_adjustment",
    "extract_penalty",
    "estimate_timeline",
    "to_plain_english",
    "categorize",
    "Translator",
    "fallback_translation",
    "ImpactAnalyzer",
    "analysis_statistics",
    "validate_feed_item",
]
