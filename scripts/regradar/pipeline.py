"""
Regulation processing pipeline.

Fetches feed items, analyzes their impact, applies the severity threshold and
stores the results. Also answers queries over what has been stored.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from tqdm import tqdm

from .analysis.engine import ImpactAnalyzer
from .config import ProcessingConfig
from .database import RegulationStore
from .feeds.base import FetchResult, SourceAdapter
from .feeds.registry import fetch_all_sources
from .models import (
    AnalysisResult,
    BusinessImpactArea,
    FeedItem,
    RegulationAnalysis,
    RegulationType,
    StoredRegulation,
    generate_regulation_id,
)

logger = logging.getLogger(__name__)

RAW_SEVERITY = 5
RAW_TIMELINE_DAYS = 90
TIME_LIMIT_WARNING = "Processing time limit reached - some regulations may not have been processed"


@dataclass
class ProcessingResult:
    """Results from one pipeline run."""

    success: bool = False
    processed_count: int = 0
    new_regulations: List[StoredRegulation] = field(default_factory=list)
    alerts: List[StoredRegulation] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time_ms: float = 0.0
    fetch_result: Optional[FetchResult] = None
    analysis_results: List[AnalysisResult] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"Processed {self.processed_count} regulations in {self.processing_time_ms:.0f}ms"
            f"{f' ({len(self.alerts)} alerts)' if self.alerts else ''}"
            f"{f' ({len(self.errors)} errors)' if self.errors else ''}"
        )


def raw_analysis(item: FeedItem) -> RegulationAnalysis:
    """Placeholder analysis stored when impact analysis is disabled."""
    return RegulationAnalysis(
        id=f"raw-{generate_regulation_id(item)}",
        title=item.title,
        severity_score=RAW_SEVERITY,
        regulation_type=RegulationType.PROPOSED_RULE,
        business_impact_areas=(BusinessImpactArea.OPERATIONS,),
        estimated_penalty=0.0,
        implementation_timeline_days=RAW_TIMELINE_DAYS,
        plain_english_summary=f"Regulation: {item.title}. Please review the full details.",
        action_items=(),
        original_url=item.link,
        processed_at=datetime.now(),
    )


class RegulationProcessor:
    """Runs the fetch, analyze and store pipeline."""

    def __init__(
        self,
        analyzer: ImpactAnalyzer,
        store: RegulationStore,
        config: Optional[ProcessingConfig] = None,
        adapters: Optional[Sequence[SourceAdapter]] = None,
    ) -> None:
        """
        Initialize the processor.

        Args:
            analyzer: Impact analyzer for new items.
            store: Regulation store to write to and query.
            config: Pipeline settings. Uses defaults if not provided.
            adapters: Feed adapters used when process() is given no items.
        """
        self.analyzer = analyzer
        self.store = store
        self.config = config or ProcessingConfig()
        self.adapters = list(adapters or [])
        self.last_run: Optional[datetime] = None

    async def process(
        self, items: Optional[Sequence[FeedItem]] = None, progress: bool = False
    ) -> ProcessingResult:
        """
        Run the pipeline.

        Args:
            items: Items to process. Fetched from the adapters if not provided.
            progress: Show a progress bar.

        Returns:
            ProcessingResult with stored regulations, alerts, errors and warnings.
        """
        started = time.perf_counter()
        result = ProcessingResult()

        try:
            if items is None:
                existing = [r.original for r in self.store.get_all()]
                result.fetch_result = fetch_all_sources(self.adapters, existing=existing)
                result.errors.extend(result.fetch_result.errors)
                items = result.fetch_result.entries

            logger.info("Found %d new regulations to process", len(items))

            if self.config.enable_impact_analysis:
                await self._process_analyzed(items, result, started, progress)
            else:
                logger.warning("Impact analysis disabled - storing raw feed items")
                for item in items:
                    self._keep(item, raw_analysis(item), result)

            result.success = True
        except Exception as e:
            logger.exception("Pipeline processing failed")
            result.errors.append(f"Pipeline processing failed: {e}")
        finally:
            result.processing_time_ms = (time.perf_counter() - started) * 1000

        self.last_run = datetime.now()
        logger.info("%s", result)
        if result.warnings:
            logger.info("%d warnings generated", len(result.warnings))
        return result

    async def _process_analyzed(
        self,
        items: Sequence[FeedItem],
        result: ProcessingResult,
        started: float,
        progress: bool,
    ) -> None:
        for item in tqdm(items, desc="Analyzing", unit="item", disable=not progress):
            analysis_result = await self.analyzer.analyze(item)
            result.analysis_results.append(analysis_result)

            if analysis_result.success and analysis_result.analysis:
                analysis = analysis_result.analysis
                if analysis.severity_score >= self.config.severity_threshold:
                    self._keep(item, analysis, result)
                else:
                    result.warnings.append(
                        f'Regulation "{analysis.title}" below severity threshold '
                        f"({analysis.severity_score} < {self.config.severity_threshold})"
                    )
            else:
                result.errors.extend(analysis_result.errors)
                logger.warning("Failed to analyze regulation: %s", item.title)

            if time.perf_counter() - started > self.config.max_processing_seconds:
                result.warnings.append(TIME_LIMIT_WARNING)
                logger.warning(TIME_LIMIT_WARNING)
                break

    def _keep(self, item: FeedItem, analysis: RegulationAnalysis, result: ProcessingResult) -> None:
        now = datetime.now()
        stored = StoredRegulation(
            id=analysis.id,
            title=analysis.title,
            original=item,
            analysis=analysis,
            created_at=now,
            updated_at=now,
        )
        result.new_regulations.append(stored)
        result.processed_count += 1

        if analysis.severity_score >= self.config.immediate_alert_threshold:
            result.alerts.append(stored)

        if self.config.enable_storage and not self.store.upsert(item, analysis):
            result.errors.append(f"Failed to store regulation {analysis.id}")

    def high_priority(self, min_severity: int = 8) -> List[StoredRegulation]:
        """Stored regulations at or above min_severity, most severe first."""
        return self.store.get_all(min_severity=min_severity)

    def recent(self, hours: int = 24) -> List[StoredRegulation]:
        """Regulations stored within the last `hours` hours, newest first."""
        cutoff = datetime.now() - timedelta(hours=hours)
        regulations = self.store.get_all(since=cutoff)
        return sorted(regulations, key=lambda r: r.created_at, reverse=True)

    def statistics(self) -> Dict[str, Any]:
        """
        Get statistics over stored regulations.

        Returns:
            Dictionary with totals, counts by type and severity band, average
            severity and the time of the last pipeline run.
        """
        regulations = self.store.get_all()
        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}

        for regulation in regulations:
            analysis = regulation.analysis
            by_type[analysis.regulation_type.value] = by_type.get(analysis.regulation_type.value, 0) + 1
            by_severity[analysis.severity_band] = by_severity.get(analysis.severity_band, 0) + 1

        total_severity = sum(r.analysis.severity_score for r in regulations)
        return {
            "total_regulations": len(regulations),
            "by_type": by_type,
            "by_severity": by_severity,
            "average_severity": total_severity / len(regulations) if regulations else 0.0,
            "last_processing_time": self.last_run,
        }

    def cleanup(self, days_to_keep: int = 30) -> int:
        """Remove regulations older than days_to_keep. Returns the number removed."""
        return self.store.delete_older_than(days_to_keep)
