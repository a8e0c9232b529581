"""
Impact analysis engine.

Runs a feed item through validation, classification, severity scoring,
penalty and timeline extraction, impact categorization and translation, and
assembles the final RegulationAnalysis. Each stage falls back to a documented
default on failure; only validation problems fail an item.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from ..config import AnalysisConfig
from ..models import (
    AnalysisError,
    AnalysisErrorKind,
    AnalysisResult,
    BusinessImpactArea,
    FeedItem,
    RegulationAnalysis,
    RegulationType,
    TranslationResult,
    generate_regulation_id,
)
from .classifier import classify
from .extraction import DEFAULT_TIMELINE_DAYS, estimate_timeline, extract_penalty
from .impact import categorize
from .scoring import DEFAULT_SEVERITY, apply_adjustment, score_severity
from .translator import Translator, fallback_translation

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 0.6

# Warning thresholds
HIGH_SEVERITY = 8
SIGNIFICANT_PENALTY = 1_000_000
SHORT_TIMELINE_DAYS = 30
LIMITED_DESCRIPTION_LENGTH = 100


def is_valid_url(url: str) -> bool:
    """Whether the string is an absolute URL with a scheme and host."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return False
    return bool(parsed.scheme and parsed.netloc)


def validate_feed_item(item: FeedItem) -> List[AnalysisError]:
    """
    Check the fields the pipeline needs.

    Returns:
        One AnalysisError per invalid field; empty if the item is valid.
    """
    errors = []
    if not item.title or not item.title.strip():
        errors.append(AnalysisError(AnalysisErrorKind.MISSING_TITLE, "Feed item missing title"))
    if not item.description or not item.description.strip():
        errors.append(
            AnalysisError(AnalysisErrorKind.MISSING_DESCRIPTION, "Feed item missing description")
        )
    if not item.link or not is_valid_url(item.link):
        errors.append(
            AnalysisError(AnalysisErrorKind.INVALID_URL, "Feed item missing or invalid URL")
        )
    if not isinstance(item.published_at, datetime):
        errors.append(
            AnalysisError(
                AnalysisErrorKind.INVALID_DATE, "Feed item missing or invalid publication date"
            )
        )
    return errors


def basic_summary(item: FeedItem, regulation_type: RegulationType) -> str:
    """One-line summary used when plain-English summaries are disabled."""
    return (
        f"The SEC has issued a {regulation_type.label}: {item.title}. "
        "Please review the full details and assess impact on your organization."
    )


class ImpactAnalyzer:
    """Analyzes regulatory feed items for severity and business impact."""

    def __init__(
        self, config: Optional[AnalysisConfig] = None, translator: Optional[Translator] = None
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            config: Analysis settings. Uses defaults if not provided.
            translator: Translator to use. Built from config if not provided.
        """
        self.config = config or AnalysisConfig()
        self.translator = translator or Translator(self.config)

    async def analyze(self, item: FeedItem, now: Optional[datetime] = None) -> AnalysisResult:
        """
        Perform a complete impact analysis of one feed item.

        Args:
            item: The feed item to analyze.
            now: Reference time for timelines and deadlines.

        Returns:
            AnalysisResult with the analysis on success, or the validation
            errors on failure. processing_time_ms is always set.
        """
        started = time.perf_counter()
        result = AnalysisResult()

        try:
            validation_errors = validate_feed_item(item)
            if validation_errors:
                for error in validation_errors:
                    result.add_error(error)
                logger.info("Rejected feed item '%s': %s", item.title, "; ".join(result.errors))
                return result

            now = now or datetime.now()

            regulation_type = self._classify(item)
            severity = self._score(regulation_type, item)
            penalty = self._extract_penalty(item)
            timeline = self._estimate_timeline(regulation_type, item, now)
            areas = self._categorize(item)

            translation = await self._translate(item, regulation_type, areas, now)
            summary, action_items = self._apply_feature_switches(
                item, regulation_type, translation
            )

            analysis = RegulationAnalysis(
                id=generate_regulation_id(item),
                title=item.title,
                severity_score=severity,
                regulation_type=regulation_type,
                business_impact_areas=areas,
                estimated_penalty=penalty,
                implementation_timeline_days=timeline,
                plain_english_summary=summary,
                action_items=tuple(action_items),
                original_url=item.link,
                processed_at=datetime.now(),
                compliance_deadlines=tuple(translation.deadlines if translation else ()),
                key_requirements=tuple(translation.key_requirements if translation else ()),
                business_impact_summary=translation.business_impact_summary if translation else "",
                translation_confidence=translation.confidence if translation else 0.0,
            )

            result.success = True
            result.analysis = analysis

            if translation and translation.confidence < LOW_CONFIDENCE_THRESHOLD:
                result.warnings.append(
                    "Translation confidence is low - manual review recommended"
                )
            result.warnings.extend(self._analysis_warnings(analysis, item))

        except AnalysisError as e:
            result.add_error(e)
            logger.error("Impact analysis error [%s]: %s", e.kind.value, e.message)
        except Exception as e:
            logger.exception("Unexpected error during impact analysis")
            result.add_error(
                AnalysisError(
                    AnalysisErrorKind.UNEXPECTED, f"Unexpected error during analysis: {e}"
                )
            )
        finally:
            result.processing_time_ms = (time.perf_counter() - started) * 1000

        return result

    async def analyze_batch(self, items: Sequence[FeedItem]) -> List[AnalysisResult]:
        """
        Analyze several items in order.

        One item's failure never affects the others; the result list has the
        same length and order as the input.
        """
        results = []
        for item in items:
            try:
                results.append(await self.analyze(item))
            except Exception as e:
                logger.exception("Batch analysis failed for '%s'", getattr(item, "title", ""))
                failed = AnalysisResult()
                failed.add_error(
                    AnalysisError(
                        AnalysisErrorKind.BATCH_FAILURE, f"Batch analysis failed: {e}"
                    )
                )
                results.append(failed)
        return results

    # Guarded stages

    def _classify(self, item: FeedItem) -> RegulationType:
        try:
            return classify(item)
        except Exception as e:
            logger.warning("Error determining regulation type, defaulting to proposed rule: %s", e)
            return RegulationType.PROPOSED_RULE

    def _score(self, regulation_type: RegulationType, item: FeedItem) -> int:
        try:
            score = score_severity(regulation_type, item)
            return apply_adjustment(score, self.config.severity_adjustment_factor)
        except Exception as e:
            logger.warning("Error calculating severity score, using default: %s", e)
            return DEFAULT_SEVERITY[regulation_type]

    def _extract_penalty(self, item: FeedItem) -> float:
        try:
            return extract_penalty(item)
        except Exception as e:
            logger.warning("Error extracting penalty amount: %s", e)
            return 0.0

    def _estimate_timeline(
        self, regulation_type: RegulationType, item: FeedItem, now: datetime
    ) -> int:
        try:
            return estimate_timeline(regulation_type, item, now)
        except Exception as e:
            logger.warning("Error estimating timeline, using default: %s", e)
            return DEFAULT_TIMELINE_DAYS[regulation_type]

    def _categorize(self, item: FeedItem) -> Tuple[BusinessImpactArea, ...]:
        try:
            return categorize(item)
        except Exception as e:
            logger.warning("Error categorizing business impact, using default: %s", e)
            return (BusinessImpactArea.OPERATIONS,)

    async def _translate(
        self,
        item: FeedItem,
        regulation_type: RegulationType,
        areas: Tuple[BusinessImpactArea, ...],
        now: datetime,
    ) -> Optional[TranslationResult]:
        if not (
            self.config.enable_plain_english_summary or self.config.enable_action_item_generation
        ):
            return None
        try:
            return await self.translator.translate(item, regulation_type, areas, now)
        except Exception:
            logger.exception("Translator raised for '%s', using fallback translation", item.title)
            return fallback_translation(item, regulation_type)

    def _apply_feature_switches(
        self,
        item: FeedItem,
        regulation_type: RegulationType,
        translation: Optional[TranslationResult],
    ) -> Tuple[str, list]:
        if translation and self.config.enable_plain_english_summary:
            summary = translation.summary
        else:
            summary = basic_summary(item, regulation_type)

        if translation and self.config.enable_action_item_generation:
            action_items = list(translation.action_items)[: self.config.max_action_items]
        else:
            action_items = []

        return summary, action_items

    def _analysis_warnings(self, analysis: RegulationAnalysis, item: FeedItem) -> List[str]:
        warnings = []
        if analysis.severity_score >= HIGH_SEVERITY:
            warnings.append("High severity regulation requires immediate attention")
        if analysis.estimated_penalty > SIGNIFICANT_PENALTY:
            warnings.append("Significant penalty amounts identified in enforcement action")
        if analysis.implementation_timeline_days < SHORT_TIMELINE_DAYS:
            warnings.append("Short implementation timeline may require urgent action")
        if len(item.description) < LIMITED_DESCRIPTION_LENGTH:
            warnings.append("Limited description available - manual review recommended")
        if len(analysis.business_impact_areas) > 2:
            warnings.append("Regulation affects multiple business areas - coordinate response")
        return warnings


def analysis_statistics(results: Sequence[AnalysisResult]) -> Dict[str, Any]:
    """
    Summarize a set of analysis results.

    Returns:
        Dictionary with totals, success/failure counts, average processing
        time and severity/type distributions.
    """
    successful = [r for r in results if r.success and r.analysis]
    severity_distribution: Dict[str, int] = {}
    type_distribution = {t.value: 0 for t in RegulationType}

    for result in successful:
        band = result.analysis.severity_band
        severity_distribution[band] = severity_distribution.get(band, 0) + 1
        type_distribution[result.analysis.regulation_type.value] += 1

    total_time = sum(r.processing_time_ms for r in results)
    return {
        "total_analyzed": len(results),
        "successful_analyses": len(successful),
        "failed_analyses": len(results) - len(successful),
        "average_processing_time_ms": total_time / len(results) if results else 0.0,
        "severity_distribution": severity_distribution,
        "type_distribution": type_distribution,
    }
