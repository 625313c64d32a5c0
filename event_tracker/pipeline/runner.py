"""Scan pipeline: search, extract, validate, merge."""

import threading
from datetime import date
from typing import Callable, List, Optional, Tuple
from uuid import uuid4

from event_tracker.config.environment import EnvironmentConfig
from event_tracker.config.models import AppConfig, LLMConfig
from event_tracker.llm.client import AnthropicClient, build_client
from event_tracker.llm.exceptions import LLMError, LLMHTTPError
from event_tracker.llm.parsing import parse_candidates
from event_tracker.llm.prompts import PromptRenderer
from event_tracker.logging import get_logger
from event_tracker.logging.context import log_context
from event_tracker.normalization.service import EventNormalizer
from event_tracker.persistence.repositories import EventRepository, MetadataRepository
from event_tracker.persistence.storage import store_lock
from event_tracker.utils.timestamps import format_date, utc_now

from .merge import merge_candidates
from .models import ProgressSink, ScanResult, ScanStatus
from .progress import ProgressReporter

logger = get_logger(__name__, component="pipeline")

ClientFactory = Callable[[Optional[str], LLMConfig], AnthropicClient]


class ScanPipeline:
    """
    Runs the AI web scan and merges its findings into the event store.

    Stages, in order: one search call per configured query (failures are
    skipped), one extraction call over the aggregated text (failure ends the
    run), validation of each candidate, deduplicating append-only merge,
    metadata update. At most one scan runs at a time; a call made while one
    is running returns immediately with status SKIPPED.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        event_repo: EventRepository,
        meta_repo: MetadataRepository,
        client_factory: ClientFactory = build_client,
    ):
        """
        Args:
            app_config: Application configuration
            env_config: Environment configuration (holds the API key)
            event_repo: Event collection
            meta_repo: Scan metadata record
            client_factory: Builds the language-model client for each run
        """
        self.app_config = app_config
        self.env_config = env_config
        self.event_repo = event_repo
        self.meta_repo = meta_repo
        self.client_factory = client_factory
        self.prompts = PromptRenderer(app_config.region)
        self._lock = threading.Lock()

    def is_scan_in_progress(self) -> bool:
        return self._lock.locked()

    def run_scan(
        self,
        reference_date: Optional[date] = None,
        progress: Optional[ProgressSink] = None,
    ) -> ScanResult:
        """
        Execute one scan.

        Args:
            reference_date: Earliest event date of interest; defaults to today (UTC)
            progress: Optional callable receiving ProgressMessage objects

        Returns:
            ScanResult. Failures are reported through the result and the
            progress sink; this method does not raise.
        """
        started_at = utc_now()
        today = format_date(reference_date or started_at)
        reporter = ProgressReporter(progress)
        result = ScanResult(
            status=ScanStatus.FAILED,
            scan_id=uuid4().hex[:12],
            reference_date=today,
            started_at=started_at,
        )

        if not self.env_config.has_api_key:
            result.error = "ANTHROPIC_API_KEY is not set. Add it to your environment."
            reporter.err(result.error)
            logger.error(
                "Scan refused: no API key configured",
                extra={"event": "scan.run.misconfigured", "scan_id": result.scan_id},
            )
            result.finished_at = utc_now()
            return result

        if not self._lock.acquire(blocking=False):
            logger.warning(
                "Scan skipped: previous scan still in progress",
                extra={"event": "scan.run.skipped", "scan_id": result.scan_id, "reason": "lock_held"},
            )
            reporter.err("Scan already in progress")
            result.status = ScanStatus.SKIPPED
            result.finished_at = utc_now()
            return result

        try:
            with log_context(scan_id=result.scan_id, reference_date=today):
                logger.info("Scan started", extra={"event": "scan.run.started"})
                try:
                    self._execute(result, reporter)
                except Exception as e:
                    result.status = ScanStatus.FAILED
                    result.error = str(e)
                    logger.error(
                        f"Unexpected error during scan: {e}",
                        extra={"event": "scan.run.crashed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    reporter.err(f"Scan failed: {e}")

                result.finished_at = utc_now()
                logger.info(
                    f"Scan finished: {result.status.value}",
                    extra={
                        "event": "scan.run.finished",
                        "status": result.status.value,
                        "duration_ms": int(result.duration_seconds * 1000),
                        "queries_total": result.queries_total,
                        "queries_failed": result.queries_failed,
                        "extracted": result.extracted,
                        "dropped": result.dropped,
                        "duplicates": result.duplicates,
                        "added": result.added,
                    },
                )
                return result
        finally:
            self._lock.release()

    def _execute(self, result: ScanResult, reporter: ProgressReporter) -> None:
        today = result.reference_date
        reporter.info("Starting AI web scan...")
        reporter.info(f"Date: {today}")

        client = self.client_factory(self.env_config.anthropic_api_key, self.app_config.llm)
        try:
            aggregated = self._search_all(client, today, result, reporter)

            reporter.info("Structuring events with AI...")
            try:
                candidates = self._extract(client, aggregated, today)
            except LLMError as e:
                result.status = ScanStatus.FAILED
                result.error = str(e)
                logger.error(
                    f"Extraction failed: {e}",
                    extra={"event": "scan.extract.failed", "error_type": type(e).__name__},
                )
                reporter.err(f"Parse error: {e}")
                return
        finally:
            client.close()

        result.extracted = len(candidates)
        logger.info(
            f"Extraction returned {len(candidates)} candidates",
            extra={"event": "scan.extract.completed", "candidates": len(candidates)},
        )
        reporter.ok(f"Extracted {len(candidates)} events")

        normalized = EventNormalizer(self.app_config.region.name, today).normalize_all(candidates)
        result.dropped = normalized.dropped

        with store_lock:
            records = self.event_repo.read_records()
            merge = merge_candidates(records, normalized.drafts, self.event_repo.next_id(records))
            if merge.added:
                self.event_repo.append(merge.added)
            self.meta_repo.record_scan(added=len(merge.added), highest_id=merge.highest_id)

        result.duplicates = merge.duplicates
        result.added = len(merge.added)
        result.status = ScanStatus.COMPLETED
        logger.info(
            f"Merged {result.added} new events, skipped {result.duplicates} duplicates",
            extra={
                "event": "scan.merge.completed",
                "added": result.added,
                "duplicates": result.duplicates,
                "added_ids": [event.id for event in merge.added],
            },
        )
        reporter.ok(f"Done! {result.added} new event(s) added.")

    def _search_all(
        self,
        client: AnthropicClient,
        today: str,
        result: ScanResult,
        reporter: ProgressReporter,
    ) -> str:
        """Run every query in order and concatenate the labelled replies."""
        queries = self.app_config.render_queries(int(today[:4]))
        system_prompt = self.prompts.search_system(today)
        chunks: List[str] = []

        for query in queries:
            result.queries_total += 1
            reporter.note(f'Searching: "{query}"')
            try:
                text = client.search(query, system_prompt, self.prompts.search_user(query))
            except LLMError as e:
                result.queries_failed += 1
                logger.warning(
                    f"Search failed for query: {query}",
                    extra={"event": "scan.query.failed", "query": query, "error_type": type(e).__name__},
                )
                reporter.err(_describe_search_error(e))
                continue

            chunks.append(f"\n\n=== {query} ===\n{text}")
            reporter.ok("Results received")

        return "".join(chunks)

    def _extract(self, client: AnthropicClient, aggregated: str, today: str) -> list:
        raw = client.extract(
            self.prompts.extract_system(today),
            self.prompts.extract_user(aggregated),
        )
        return parse_candidates(raw)


def _describe_search_error(error: LLMError) -> str:
    if isinstance(error, LLMHTTPError) and error.status_code:
        return f"HTTP {error.status_code} on search, skipping"
    return f"Search error: {error}"


def summarize(result: ScanResult) -> Tuple[str, int]:
    """One-line summary and process exit code for a CLI-triggered scan."""
    if result.status == ScanStatus.COMPLETED:
        return f"Scan completed: {result.added} new event(s) added", 0
    if result.status == ScanStatus.SKIPPED:
        return "Scan skipped: another scan is in progress", 1
    return f"Scan failed: {result.error}", 1
