"""Generic signal-to-story pipeline shared by every job."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, List

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..models import (
    Priority,
    PublishOutcome,
    RunOptions,
    RunSummary,
    StoryBundle,
    StoryCandidate,
)
from ..services.narrative import NarrativeGenerator
from ..services.publisher import IdempotentPublisher, make_identity_key
from ..services.run_log import RunLog
from ..services.targets import TargetResolver
from ..utils.datetime_utils import ensure_utc, get_current_timestamp
from .coordinator import BatchRunCoordinator
from .strategies import DetectionStrategy

logger = logging.getLogger(__name__)


@dataclass
class BundleOutcome:
    """What one bundle produced; folded into the summary on the main thread."""

    generated: bool = False
    published: int = 0
    hero_published: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


class SignalStoryPipeline:
    """Detect -> generate -> resolve -> publish, under a time budget."""

    def __init__(
        self,
        job_name: str,
        strategy: DetectionStrategy,
        narrative: NarrativeGenerator,
        resolver: TargetResolver,
        publisher: IdempotentPublisher,
        run_log: RunLog,
        coordinator: BatchRunCoordinator,
        default_days: int,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self.job_name = job_name
        self.strategy = strategy
        self.narrative = narrative
        self.resolver = resolver
        self.publisher = publisher
        self.run_log = run_log
        self.coordinator = coordinator
        self.default_days = default_days
        self._clock = clock

    def run(self, options: RunOptions | None = None) -> RunSummary:
        options = options or RunOptions()
        started_at = self._clock()
        now = ensure_utc(options.now or started_at)
        options = replace(options, days=options.days or self.default_days, now=now)

        summary = RunSummary(job_name=self.job_name, started_at=started_at)
        logger.info(
            "Starting %s (window %d days%s%s)",
            self.job_name,
            options.days,
            f", target {options.target}" if options.target else "",
            ", sample data" if options.sample else "",
        )

        self.coordinator.start()
        success = False
        try:
            self.publisher.prepare()
            detection = self.strategy.detect(options, now, summary)
            if detection.outage:
                logger.error("%s aborted: ingestion source unavailable", self.job_name)
            else:
                summary.budget_exhausted = self.coordinator.run(
                    detection.bundles,
                    worker=lambda bundle: self._process(bundle, now, options),
                    on_result=lambda bundle, outcome: self._record(summary, outcome),
                    on_error=lambda bundle, exc: summary.add_error(bundle.label, exc),
                )
                success = True
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed before completing its core loop", self.job_name)
            summary.add_error("run", exc)
        finally:
            summary.finalize(success, self._clock())
            self.run_log.write(summary)
            _log_stats(summary)
        return summary

    # ------------------------------------------------------------------
    # Per-bundle work (runs on worker threads)
    # ------------------------------------------------------------------

    def _pending_targets(self, bundle: StoryBundle, keys: dict) -> List[str]:
        pending = []
        for target in bundle.targets:
            try:
                if self.publisher.already_published(keys[target]):
                    logger.info("Skipping %s for %s: already published", bundle.label, target)
                    continue
            except Exception as exc:  # noqa: BLE001
                # the unique index still rejects a duplicate insert
                logger.warning("Fast-path lookup failed for %s: %s", keys[target], exc)
            pending.append(target)
        return pending

    def _process(self, bundle: StoryBundle, now: datetime, options: RunOptions) -> BundleOutcome:
        outcome = BundleOutcome()
        keys = {
            target: make_identity_key(bundle.domain, target, now, *bundle.identity_attrs)
            for target in bundle.targets
        }
        pending = self._pending_targets(bundle, keys)
        outcome.skipped += len(bundle.targets) - len(pending)
        if not pending:
            return outcome

        try:
            draft = self.narrative.generate(bundle)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Narrative generation failed for %s: %s", bundle.label, exc)
            outcome.errors.append(f"{bundle.label}: narrative generation failed: {exc}")
            outcome.skipped += len(pending)
            return outcome
        if draft is None:
            logger.warning("No narrative produced for %s; skipping", bundle.label)
            outcome.skipped += len(pending)
            return outcome
        outcome.generated = True

        extra = {"job_name": self.job_name}
        if options.sample:
            extra["is_sample"] = True

        for target in pending:
            try:
                canonical = self.resolver.resolve(target, bundle.alias_prefixes)
                if canonical is None:
                    outcome.skipped += 1
                    outcome.errors.append(f"{bundle.label}: target {target} not found")
                    continue

                candidate = StoryCandidate(
                    domain=bundle.domain,
                    target_id=target,
                    identity_key=keys[target],
                    headline=draft.headline,
                    body=draft.body,
                    preview_text=draft.preview_text,
                    category_label=bundle.category_label,
                    priority=bundle.priority,
                    prompt_label=f"{self.job_name}: {bundle.label}",
                )
                result = self.publisher.publish(candidate, canonical, extra=extra)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not publish %s for %s: %s", bundle.label, target, exc)
                outcome.skipped += 1
                outcome.errors.append(f"{bundle.label}: target {target}: {exc}")
                continue

            if result.outcome is PublishOutcome.CREATED:
                outcome.published += 1
                if candidate.priority is Priority.HERO:
                    outcome.hero_published += 1
            elif result.outcome is PublishOutcome.ALREADY_EXISTS:
                outcome.skipped += 1
            else:
                outcome.errors.append(f"{bundle.label}: publish to {canonical} failed: {result.message}")
        return outcome

    @staticmethod
    def _record(summary: RunSummary, outcome: BundleOutcome) -> None:
        if outcome.generated:
            summary.stories_generated += 1
        summary.published += outcome.published
        summary.hero_published += outcome.hero_published
        summary.skipped += outcome.skipped
        summary.errors.extend(outcome.errors)


def _log_stats(summary: RunSummary) -> None:
    logger.info("=== %s statistics ===", summary.job_name)
    logger.info("Success: %s", summary.success)
    logger.info("Records scanned: %d", summary.records_scanned)
    logger.info("Detected: %d", summary.detected)
    logger.info("Stories generated: %d", summary.stories_generated)
    logger.info("Published: %d (hero %d)", summary.published, summary.hero_published)
    logger.info("Skipped: %d", summary.skipped)
    if summary.budget_exhausted:
        logger.info("Stopped early: time budget exhausted")
    if summary.errors:
        logger.info("Errors: %d", len(summary.errors))
    logger.info("=====================================")


__all__ = ["BundleOutcome", "SignalStoryPipeline"]
