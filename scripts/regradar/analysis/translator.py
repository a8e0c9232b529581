"""
Plain-English translation of regulatory updates.

Turns a classified feed item into a business-friendly summary, a prioritized
list of time-estimated action items, detected compliance deadlines and the key
requirements stated in the text. Rule-based and deterministic for a given
reference time.
"""

import logging
import re
import time
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import AnalysisConfig
from ..models import (
    ActionCategory,
    ActionItem,
    ActionPriority,
    BusinessImpactArea,
    ComplianceDeadline,
    FeedItem,
    RegulationType,
    TranslationResult,
)
from .extraction import DATE_PATTERN, parse_absolute_date, round_half_up, timeframe_to_days, to_plain_english
from .keywords import COMPLEXITY_INDICATORS, FINTECH_KEYWORDS, GENERAL_SUBJECTS, count_matches

logger = logging.getLogger(__name__)

# (description, priority, estimated hours, category)
ActionTemplate = Tuple[str, ActionPriority, int, ActionCategory]

TYPE_ACTIONS: Dict[RegulationType, List[ActionTemplate]] = {
    RegulationType.ENFORCEMENT: [
        (
            "Review your company's practices for similar compliance risks",
            ActionPriority.HIGH,
            4,
            ActionCategory.LEGAL,
        ),
        (
            "Update risk management procedures based on this enforcement case",
            ActionPriority.MEDIUM,
            6,
            ActionCategory.OPERATIONAL,
        ),
    ],
    RegulationType.FINAL_RULE: [
        (
            "Read the full rule text and identify specific requirements",
            ActionPriority.HIGH,
            3,
            ActionCategory.LEGAL,
        ),
        (
            "Update company policies to meet new rule requirements",
            ActionPriority.HIGH,
            12,
            ActionCategory.OPERATIONAL,
        ),
        (
            "Train relevant staff on new compliance requirements",
            ActionPriority.MEDIUM,
            8,
            ActionCategory.OPERATIONAL,
        ),
    ],
    RegulationType.PROPOSED_RULE: [
        (
            "Review proposed rule and assess potential business impact",
            ActionPriority.MEDIUM,
            3,
            ActionCategory.LEGAL,
        ),
        (
            "Consider submitting a comment letter during the comment period",
            ActionPriority.LOW,
            6,
            ActionCategory.LEGAL,
        ),
    ],
}

TYPE_CONTEXT = {
    RegulationType.ENFORCEMENT: "The SEC has taken action against a company for violating regulations.",
    RegulationType.FINAL_RULE: "The SEC has created new rules that companies must follow.",
    RegulationType.PROPOSED_RULE: "The SEC is considering new rules and wants public feedback.",
}

TYPE_URGENCY = {
    RegulationType.ENFORCEMENT: (
        "Immediate review is recommended to ensure your company is not at risk "
        "for similar violations."
    ),
    RegulationType.FINAL_RULE: (
        "You must update your procedures to comply with these new requirements."
    ),
    RegulationType.PROPOSED_RULE: (
        "While not yet final, you should begin planning for potential implementation."
    ),
}

# Estimated hours are scaled by how urgently the regulation has to be handled
URGENCY_MULTIPLIER = {
    RegulationType.ENFORCEMENT: 0.8,
    RegulationType.FINAL_RULE: 1.0,
    RegulationType.PROPOSED_RULE: 1.2,
}

# Days until high-priority action items are due
ACTION_DEADLINE_DAYS = {
    RegulationType.ENFORCEMENT: 14,
    RegulationType.FINAL_RULE: 30,
}

TIMEFRAME = r"\d+\s+(?:days?|weeks?|months?|years?)"

DEADLINE_PATTERNS: List[re.Pattern] = [
    re.compile(r"effective\s+(?:date|on)\s*:?\s*([^.]+)"),
    re.compile(r"compliance\s+(?:date|deadline|required\s+by)\s*:?\s*([^.]+)"),
    re.compile(r"must\s+(?:be\s+)?(?:completed|implemented|filed)\s+(?:by|before|within)\s+([^.]+)"),
    re.compile(r"deadline\s+(?:for|of)\s+([^.]+)"),
    re.compile(rf"(?:within|by)\s+({TIMEFRAME})"),
    re.compile(r"no\s+later\s+than\s+([^.]+)"),
    re.compile(rf"implement\s+(?:remedial\s+)?measures\s+within\s+({TIMEFRAME})"),
    re.compile(rf"within\s+({TIMEFRAME}\s+(?:of|from)\s+[^.]+)"),
]

REQUIREMENT_PATTERNS: List[re.Pattern] = [
    re.compile(r"\b(?:must|shall|required to|obligated to)\s+([^.]+)", re.IGNORECASE),
    re.compile(r"\b(?:prohibition|prohibited|may not|cannot)\s+([^.]+)", re.IGNORECASE),
    re.compile(r"\b(?:compliance with|adherence to)\s+([^.]+)", re.IGNORECASE),
    re.compile(
        r"\b(?:reporting|disclosure|filing)\s+(?:requirements?|obligations?)\s+([^.]+)",
        re.IGNORECASE,
    ),
]

_DATE_IN_TEXT = re.compile(rf"({DATE_PATTERN})", re.IGNORECASE)
_TIMEFRAME_IN_TEXT = re.compile(r"(\d+)\s+(days?|weeks?|months?|years?)")

MAX_KEY_REQUIREMENTS = 5
HIGH_PRIORITY_WINDOW_DAYS = 90
DEDUP_PREFIX_LENGTH = 50


def fallback_translation(
    item: FeedItem, regulation_type: RegulationType, processing_time_ms: float = 0.0
) -> TranslationResult:
    """Generic translation used when the rule-based translation fails."""
    return TranslationResult(
        summary=(
            f"The SEC has issued a {regulation_type.label}: {item.title}. "
            "Please review the full details to understand the impact on your business."
        ),
        action_items=[
            ActionItem(
                description="Review the regulation details and assess business impact",
                priority=ActionPriority.HIGH,
                estimated_hours=4,
                category=ActionCategory.LEGAL,
            )
        ],
        deadlines=[],
        key_requirements=["Review regulation for compliance requirements"],
        business_impact_summary=(
            "This regulation may affect your business operations. "
            "A detailed review is recommended."
        ),
        confidence=0.3,
        processing_time_ms=processing_time_ms,
    )


class Translator:
    """Converts regulatory updates into plain-English summaries and action items."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        """
        Initialize the translator.

        Args:
            config: Analysis settings. Uses defaults if not provided.
        """
        self.config = config or AnalysisConfig()

    async def translate(
        self,
        item: FeedItem,
        regulation_type: RegulationType,
        impact_areas: Sequence[BusinessImpactArea],
        now: Optional[datetime] = None,
    ) -> TranslationResult:
        """
        Translate a regulation into plain English.

        Args:
            item: The feed item.
            regulation_type: Classified type of the item.
            impact_areas: Business areas the item affects.
            now: Reference time for deadlines (defaults to the current time).

        Returns:
            TranslationResult. Internal failures produce the fallback result
            instead of raising.
        """
        started = time.perf_counter()
        now = now or datetime.now()

        try:
            summary = self.generate_summary(item, regulation_type)
            action_items = self.generate_action_items(item, regulation_type, impact_areas, now)
            deadlines = self.detect_deadlines(item, now)
            requirements = self.extract_key_requirements(item)
            impact_summary = self.generate_business_impact_summary(
                item, regulation_type, impact_areas
            )
            confidence = self.calculate_confidence(item, summary, action_items)

            return TranslationResult(
                summary=summary,
                action_items=action_items,
                deadlines=deadlines,
                key_requirements=requirements,
                business_impact_summary=impact_summary,
                confidence=confidence,
                processing_time_ms=(time.perf_counter() - started) * 1000,
            )
        except Exception:
            logger.exception("Translation failed for '%s', using fallback", item.title)
            return fallback_translation(
                item, regulation_type, (time.perf_counter() - started) * 1000
            )

    # Summary

    def generate_summary(self, item: FeedItem, regulation_type: RegulationType) -> str:
        """Compose the plain-English summary, truncated to the configured length."""
        parts = [
            TYPE_CONTEXT[regulation_type],
            f"This regulation deals with {self.extract_main_subject(item.title)}.",
            to_plain_english(item.description),
            self._business_context(item, regulation_type),
        ]
        summary = " ".join(part for part in parts if part)

        max_length = self.config.max_summary_length
        if len(summary) > max_length:
            summary = summary[: max_length - 3] + "..."

        return summary.strip()

    def extract_main_subject(self, title: str) -> str:
        """First fintech or general-finance subject found in the title."""
        title_lower = (title or "").lower()

        for keyword in FINTECH_KEYWORDS:
            if keyword in title_lower:
                return keyword.replace("-", " ")

        for subject in GENERAL_SUBJECTS:
            if subject in title_lower:
                return subject

        return "financial services"

    def _business_context(self, item: FeedItem, regulation_type: RegulationType) -> str:
        context = []
        if regulation_type == RegulationType.ENFORCEMENT:
            context.append("Companies should review their practices to avoid similar penalties.")
        elif regulation_type == RegulationType.FINAL_RULE:
            context.append("Your company needs to update its procedures to comply.")

        title_lower = (item.title or "").lower()
        if any(keyword in title_lower for keyword in FINTECH_KEYWORDS):
            context.append("This is particularly relevant for fintech and digital asset companies.")

        return " ".join(context)

    # Action items

    def generate_action_items(
        self,
        item: FeedItem,
        regulation_type: RegulationType,
        impact_areas: Sequence[BusinessImpactArea],
        now: datetime,
    ) -> List[ActionItem]:
        """
        Build the ranked action item list.

        Type-specific, impact-area and content-triggered items are combined,
        time estimates applied, then sorted by priority (stable) and capped.
        """
        templates: List[ActionTemplate] = []
        templates.extend(TYPE_ACTIONS[regulation_type])
        templates.extend(self._impact_area_actions(impact_areas, regulation_type))
        templates.extend(self._content_actions(item))

        items = [self._build_action(t, regulation_type, now) for t in templates]
        items.sort(key=lambda a: a.priority.weight, reverse=True)
        return items[: self.config.max_action_items]

    def _build_action(
        self, template: ActionTemplate, regulation_type: RegulationType, now: datetime
    ) -> ActionItem:
        description, priority, hours, category = template
        deadline = None

        if self.config.include_time_estimates:
            hours = max(1, round_half_up(hours * URGENCY_MULTIPLIER[regulation_type]))
            if priority == ActionPriority.HIGH and regulation_type in ACTION_DEADLINE_DAYS:
                deadline = now + timedelta(days=ACTION_DEADLINE_DAYS[regulation_type])

        return ActionItem(
            description=description,
            priority=priority,
            estimated_hours=hours,
            category=category,
            deadline=deadline,
        )

    def _impact_area_actions(
        self, areas: Sequence[BusinessImpactArea], regulation_type: RegulationType
    ) -> List[ActionTemplate]:
        actions: List[ActionTemplate] = []
        for area in areas:
            if area == BusinessImpactArea.OPERATIONS:
                actions.append(
                    (
                        "Review and update operational procedures affected by this "
                        f"{regulation_type.value.replace('-', ' ')}",
                        ActionPriority.HIGH
                        if regulation_type == RegulationType.ENFORCEMENT
                        else ActionPriority.MEDIUM,
                        8,
                        ActionCategory.OPERATIONAL,
                    )
                )
            elif area == BusinessImpactArea.REPORTING:
                actions.append(
                    (
                        "Update reporting systems and procedures to meet new requirements",
                        ActionPriority.HIGH,
                        16,
                        ActionCategory.TECHNICAL,
                    )
                )
            elif area == BusinessImpactArea.TECHNOLOGY:
                actions.append(
                    (
                        "Assess technology systems for compliance with new requirements",
                        ActionPriority.MEDIUM,
                        12,
                        ActionCategory.TECHNICAL,
                    )
                )
        return actions

    def _content_actions(self, item: FeedItem) -> List[ActionTemplate]:
        content = item.content.lower()
        actions: List[ActionTemplate] = []

        if "aml" in content or "anti-money laundering" in content:
            actions.append(
                (
                    "Review and update AML compliance procedures",
                    ActionPriority.HIGH,
                    10,
                    ActionCategory.LEGAL,
                )
            )

        if "kyc" in content or "know your customer" in content:
            actions.append(
                (
                    "Update customer identification and verification procedures",
                    ActionPriority.HIGH,
                    8,
                    ActionCategory.OPERATIONAL,
                )
            )

        if "disclosure" in content or "reporting" in content:
            actions.append(
                (
                    "Review disclosure and reporting obligations",
                    ActionPriority.MEDIUM,
                    4,
                    ActionCategory.LEGAL,
                )
            )

        return actions

    # Deadlines and requirements

    def detect_deadlines(self, item: FeedItem, now: datetime) -> List[ComplianceDeadline]:
        """
        Find compliance deadlines mentioned in the item.

        Returns:
            Deadlines deduplicated by description prefix, high priority first.
        """
        content = item.content.lower()
        candidates = []

        for pattern in DEADLINE_PATTERNS:
            for match in pattern.finditer(content):
                text = match.group(1).strip()
                if not text:
                    continue
                deadline = self._parse_deadline(text, now)
                if deadline:
                    candidates.append(deadline)

        seen = set()
        unique = []
        for deadline in candidates:
            key = deadline.description.lower()[:DEDUP_PREFIX_LENGTH]
            if key in seen:
                continue
            seen.add(key)
            unique.append(deadline)

        unique.sort(key=lambda d: d.priority.weight, reverse=True)
        return unique

    def _parse_deadline(self, text: str, now: datetime) -> Optional[ComplianceDeadline]:
        date = None
        estimated = None

        date_match = _DATE_IN_TEXT.search(text)
        if date_match:
            date = parse_absolute_date(date_match.group(1))

        if date is None:
            timeframe = _TIMEFRAME_IN_TEXT.search(text)
            if timeframe:
                days = timeframe_to_days(int(timeframe.group(1)), timeframe.group(2))
                estimated = now + timedelta(days=days)

        if date is None and estimated is None:
            return None

        window_end = now + timedelta(days=HIGH_PRIORITY_WINDOW_DAYS)
        if date is not None or estimated <= window_end:
            priority = ActionPriority.HIGH
        else:
            priority = ActionPriority.MEDIUM

        return ComplianceDeadline(
            description=to_plain_english(text),
            priority=priority,
            date=date,
            estimated_date=estimated,
        )

    def extract_key_requirements(self, item: FeedItem) -> List[str]:
        """Up to five requirement statements, converted to plain English."""
        content = item.content
        requirements: List[str] = []

        for pattern in REQUIREMENT_PATTERNS:
            for match in pattern.finditer(content):
                requirement = to_plain_english(match.group(1).strip())
                if 10 <= len(requirement) <= 200 and requirement not in requirements:
                    requirements.append(requirement)

        return requirements[:MAX_KEY_REQUIREMENTS]

    # Business impact and confidence

    def generate_business_impact_summary(
        self,
        item: FeedItem,
        regulation_type: RegulationType,
        areas: Sequence[BusinessImpactArea],
    ) -> str:
        parts = []
        if len(areas) == 1:
            parts.append(f"This regulation primarily affects your {areas[0].value.lower()} processes.")
        elif len(areas) > 1:
            names = ", ".join(area.value.lower() for area in areas)
            parts.append(f"This regulation affects multiple areas of your business: {names}.")

        parts.append(TYPE_URGENCY[regulation_type])
        parts.extend(self._resource_implications(item, areas))
        return " ".join(parts)

    def _resource_implications(
        self, item: FeedItem, areas: Sequence[BusinessImpactArea]
    ) -> List[str]:
        content = item.content.lower()
        implications = []

        complexity = count_matches(content, COMPLEXITY_INDICATORS)
        if complexity >= 3 or len(areas) > 2:
            implications.append(
                "This may require significant time and resources to implement properly."
            )
        elif complexity >= 1:
            implications.append("This will require some dedicated time and effort to address.")

        if BusinessImpactArea.TECHNOLOGY in areas:
            implications.append(
                "Consider involving your technical team early in the planning process."
            )

        if "penalty" in content or "fine" in content:
            implications.append("Non-compliance could result in significant financial penalties.")

        return implications

    def calculate_confidence(
        self, item: FeedItem, summary: str, action_items: Sequence[ActionItem]
    ) -> float:
        """Heuristic translation quality score in [0, 1]."""
        score = 0.5

        description = item.description or ""
        if len(description) > 200:
            score += 0.1
        if 100 < len(summary) < 400:
            score += 0.1
        if len(action_items) >= 3:
            score += 0.1
        if any(a.priority == ActionPriority.HIGH for a in action_items):
            score += 0.1

        if not item.title:
            score -= 0.3
        if len(description) < 50:
            score -= 0.2
        if "..." in summary:
            score -= 0.1

        return round(max(0.0, min(1.0, score)), 2)
