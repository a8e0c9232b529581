"""
Regulation type classification.
"""

import logging

from ..models import FeedItem, RegulationType
from .keywords import ENFORCEMENT_KEYWORDS, FINAL_RULE_KEYWORDS, contains_any

logger = logging.getLogger(__name__)


def classify(item: FeedItem) -> RegulationType:
    """
    Classify a feed item as an enforcement action, final rule or proposed rule.

    Enforcement keywords are checked first, then final-rule keywords; anything
    else is treated as a proposed rule. Never raises.
    """
    try:
        content = item.content.lower()

        if contains_any(content, ENFORCEMENT_KEYWORDS):
            return RegulationType.ENFORCEMENT

        if contains_any(content, FINAL_RULE_KEYWORDS):
            return RegulationType.FINAL_RULE
    except Exception as e:
        logger.warning("Classification failed, defaulting to proposed rule: %s", e)

    return RegulationType.PROPOSED_RULE
