"""
Business impact categorization.
"""

import logging
from typing import Tuple

from ..models import BusinessImpactArea, FeedItem
from .keywords import IMPACT_AREA_KEYWORDS, contains_any

logger = logging.getLogger(__name__)


def categorize(item: FeedItem) -> Tuple[BusinessImpactArea, ...]:
    """
    Map an item to the business areas it affects.

    Areas are non-exclusive. The result is never empty: an item matching no
    keyword set is assigned to Operations.
    """
    try:
        content = item.content.lower()
        areas = tuple(
            area for area, keywords in IMPACT_AREA_KEYWORDS.items() if contains_any(content, keywords)
        )
    except Exception as e:
        logger.warning("Impact categorization failed for '%s': %s", item.title, e)
        areas = ()

    return areas or (BusinessImpactArea.OPERATIONS,)
