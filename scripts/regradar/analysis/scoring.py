"""
Severity scoring for regulatory items.

Scores are integers from 1 (informational) to 10 (act now), built from a
per-type base score plus keyword, penalty and urgency adjustments.
"""

import logging

from ..models import FeedItem, RegulationType
from .extraction import extract_amounts_in_millions, round_half_up
from .keywords import HIGH_IMPACT_KEYWORDS, URGENCY_KEYWORDS, contains_any, count_matches

logger = logging.getLogger(__name__)

MIN_SEVERITY = 1
MAX_SEVERITY = 10

DEFAULT_SEVERITY = {
    RegulationType.ENFORCEMENT: 8,
    RegulationType.FINAL_RULE: 5,
    RegulationType.PROPOSED_RULE: 2,
}


def clamp_severity(score: int) -> int:
    return max(MIN_SEVERITY, min(MAX_SEVERITY, score))


def score_severity(regulation_type: RegulationType, item: FeedItem) -> int:
    """
    Calculate the severity score for an item.

    Args:
        regulation_type: Classified type of the item.
        item: The feed item.

    Returns:
        Score in [1, 10]. On any extraction error the type default is
        returned without adjustments.
    """
    base = DEFAULT_SEVERITY[regulation_type]
    try:
        content = item.content.lower()
        adjustment = 0

        high_impact = count_matches(content, HIGH_IMPACT_KEYWORDS)
        if high_impact >= 3:
            adjustment += 2
        elif high_impact >= 1:
            adjustment += 1

        if regulation_type == RegulationType.ENFORCEMENT:
            amounts = extract_amounts_in_millions(content)
            if amounts:
                largest = max(amounts)
                if largest >= 10:
                    adjustment += 2
                elif largest >= 1:
                    adjustment += 1

        if contains_any(content, URGENCY_KEYWORDS):
            adjustment += 1

        return clamp_severity(base + adjustment)
    except Exception as e:
        logger.warning("Severity scoring failed for '%s', using default: %s", item.title, e)
        return base


def apply_adjustment(score: int, factor: float) -> int:
    """Scale a severity score by the configured adjustment factor and clamp it."""
    return clamp_severity(round_half_up(score * factor))
