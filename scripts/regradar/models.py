"""
Data model for RegulatorRadar.

Feed items come in, regulation analyses come out. Analyses are immutable once
built; the constructor clamps the severity score and guarantees a non-empty
set of business impact areas.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RegulationType(Enum):
    """Kind of regulatory action an item describes."""

    ENFORCEMENT = "enforcement"
    FINAL_RULE = "final-rule"
    PROPOSED_RULE = "proposed-rule"

    @property
    def label(self) -> str:
        """Human-readable name used in summaries."""
        return {
            RegulationType.ENFORCEMENT: "enforcement action",
            RegulationType.FINAL_RULE: "final rule",
            RegulationType.PROPOSED_RULE: "proposed rule",
        }[self]


class BusinessImpactArea(Enum):
    """Business areas a regulation can touch."""

    OPERATIONS = "Operations"
    REPORTING = "Reporting"
    TECHNOLOGY = "Technology"


class ActionPriority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return {ActionPriority.HIGH: 3, ActionPriority.MEDIUM: 2, ActionPriority.LOW: 1}[self]


class ActionCategory(Enum):
    LEGAL = "legal"
    TECHNICAL = "technical"
    OPERATIONAL = "operational"


class AnalysisErrorKind(Enum):
    """Failure kinds reported by the analysis pipeline."""

    MISSING_TITLE = "missing_title"
    MISSING_DESCRIPTION = "missing_description"
    INVALID_URL = "invalid_url"
    INVALID_DATE = "invalid_date"
    TRANSLATION_FAILED = "translation_failed"
    BATCH_FAILURE = "batch_failure"
    UNEXPECTED = "unexpected"


class AnalysisError(Exception):
    """An analysis failure with a structured kind."""

    def __init__(self, kind: AnalysisErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class FeedItem:
    """A single item from a regulatory RSS feed."""

    title: str
    link: str
    published_at: Optional[datetime]
    description: str
    guid: str = ""

    @property
    def content(self) -> str:
        """Title and description joined for keyword scanning."""
        return f"{self.title or ''} {self.description or ''}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "published_at": _iso(self.published_at),
            "description": self.description,
            "guid": self.guid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedItem":
        return cls(
            title=data.get("title", ""),
            link=data.get("link", ""),
            published_at=_parse_iso(data.get("published_at")),
            description=data.get("description", ""),
            guid=data.get("guid", ""),
        )


@dataclass(frozen=True)
class ActionItem:
    """A concrete follow-up task generated for a regulation."""

    description: str
    priority: ActionPriority
    estimated_hours: int
    category: ActionCategory
    deadline: Optional[datetime] = None
    completed: bool = False

    def __post_init__(self) -> None:
        if self.estimated_hours <= 0:
            object.__setattr__(self, "estimated_hours", 1)

    def mark_completed(self) -> "ActionItem":
        """Return a copy of this item flagged as completed."""
        return replace(self, completed=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "estimated_hours": self.estimated_hours,
            "category": self.category.value,
            "deadline": _iso(self.deadline),
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionItem":
        return cls(
            description=data["description"],
            priority=ActionPriority(data.get("priority", "medium")),
            estimated_hours=int(data.get("estimated_hours") or 1),
            category=ActionCategory(data.get("category", "operational")),
            deadline=_parse_iso(data.get("deadline")),
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class ComplianceDeadline:
    """A deadline mentioned in the regulation text."""

    description: str
    priority: ActionPriority
    date: Optional[datetime] = None
    estimated_date: Optional[datetime] = None
    source: str = "regulation text"

    @property
    def due(self) -> Optional[datetime]:
        return self.date or self.estimated_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "date": _iso(self.date),
            "estimated_date": _iso(self.estimated_date),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComplianceDeadline":
        return cls(
            description=data["description"],
            priority=ActionPriority(data.get("priority", "medium")),
            date=_parse_iso(data.get("date")),
            estimated_date=_parse_iso(data.get("estimated_date")),
            source=data.get("source", "regulation text"),
        )


@dataclass
class TranslationResult:
    """Output of the plain-English translator."""

    summary: str
    action_items: List[ActionItem] = field(default_factory=list)
    deadlines: List[ComplianceDeadline] = field(default_factory=list)
    key_requirements: List[str] = field(default_factory=list)
    business_impact_summary: str = ""
    confidence: float = 0.0
    processing_time_ms: float = 0.0


@dataclass(frozen=True)
class RegulationAnalysis:
    """The finished analysis of one feed item."""

    id: str
    title: str
    severity_score: int
    regulation_type: RegulationType
    business_impact_areas: Tuple[BusinessImpactArea, ...]
    estimated_penalty: float
    implementation_timeline_days: int
    plain_english_summary: str
    action_items: Tuple[ActionItem, ...]
    original_url: str
    processed_at: datetime
    compliance_deadlines: Tuple[ComplianceDeadline, ...] = ()
    key_requirements: Tuple[str, ...] = ()
    business_impact_summary: str = ""
    translation_confidence: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity_score", max(1, min(10, int(self.severity_score))))

        # Canonical order, no duplicates, never empty
        areas = set(self.business_impact_areas or ())
        ordered = tuple(area for area in BusinessImpactArea if area in areas)
        object.__setattr__(
            self, "business_impact_areas", ordered or (BusinessImpactArea.OPERATIONS,)
        )

        object.__setattr__(self, "estimated_penalty", max(0.0, float(self.estimated_penalty)))
        object.__setattr__(
            self, "implementation_timeline_days", max(1, int(self.implementation_timeline_days))
        )
        object.__setattr__(self, "action_items", tuple(self.action_items))
        object.__setattr__(self, "compliance_deadlines", tuple(self.compliance_deadlines))
        object.__setattr__(self, "key_requirements", tuple(self.key_requirements))

    @property
    def severity_band(self) -> str:
        """Severity bucket used for reporting."""
        if self.severity_score >= 8:
            return "High (8-10)"
        if self.severity_score >= 5:
            return "Medium (5-7)"
        return "Low (1-4)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "severity_score": self.severity_score,
            "regulation_type": self.regulation_type.value,
            "business_impact_areas": [area.value for area in self.business_impact_areas],
            "estimated_penalty": self.estimated_penalty,
            "implementation_timeline_days": self.implementation_timeline_days,
            "plain_english_summary": self.plain_english_summary,
            "action_items": [item.to_dict() for item in self.action_items],
            "original_url": self.original_url,
            "processed_at": _iso(self.processed_at),
            "compliance_deadlines": [d.to_dict() for d in self.compliance_deadlines],
            "key_requirements": list(self.key_requirements),
            "business_impact_summary": self.business_impact_summary,
            "translation_confidence": self.translation_confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegulationAnalysis":
        return cls(
            id=data["id"],
            title=data["title"],
            severity_score=data["severity_score"],
            regulation_type=RegulationType(data["regulation_type"]),
            business_impact_areas=tuple(
                BusinessImpactArea(area) for area in data.get("business_impact_areas", [])
            ),
            estimated_penalty=data.get("estimated_penalty", 0),
            implementation_timeline_days=data.get("implementation_timeline_days", 30),
            plain_english_summary=data.get("plain_english_summary", ""),
            action_items=tuple(ActionItem.from_dict(a) for a in data.get("action_items", [])),
            original_url=data.get("original_url", ""),
            processed_at=_parse_iso(data.get("processed_at")) or datetime.now(),
            compliance_deadlines=tuple(
                ComplianceDeadline.from_dict(d) for d in data.get("compliance_deadlines", [])
            ),
            key_requirements=tuple(data.get("key_requirements", [])),
            business_impact_summary=data.get("business_impact_summary", ""),
            translation_confidence=data.get("translation_confidence", 0.0),
        )


@dataclass
class AnalysisResult:
    """Outcome of analyzing one feed item."""

    success: bool = False
    analysis: Optional[RegulationAnalysis] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time_ms: float = 0.0
    error_kinds: List[AnalysisErrorKind] = field(default_factory=list)

    def add_error(self, error: AnalysisError) -> None:
        self.errors.append(error.message)
        self.error_kinds.append(error.kind)

    def __str__(self) -> str:
        if self.success and self.analysis:
            return (
                f"{self.analysis.id}: {self.analysis.regulation_type.value}, "
                f"severity {self.analysis.severity_score}"
                f"{f' ({len(self.warnings)} warnings)' if self.warnings else ''}"
            )
        return f"Failed: {'; '.join(self.errors) or 'unknown error'}"


@dataclass
class StoredRegulation:
    """A persisted analysis along with the feed item it came from."""

    id: str
    title: str
    original: FeedItem
    analysis: RegulationAnalysis
    created_at: datetime
    updated_at: datetime


def generate_regulation_id(item: FeedItem) -> str:
    """Build a stable id from the GUID, or from the publish date and title."""
    if item.guid:
        return re.sub(r"[^a-zA-Z0-9-]", "-", item.guid).lower()

    title_slug = re.sub(r"[^a-zA-Z0-9\s]", "", item.title.lower())
    title_slug = re.sub(r"\s+", "-", title_slug)[:50]
    published = item.published_at or datetime.now()
    return f"{published.strftime('%Y-%m-%d')}-{title_slug}"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
