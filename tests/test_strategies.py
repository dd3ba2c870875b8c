import unittest
from unittest.mock import MagicMock
import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.catalog.calendars import CITY_PREFIXES, DESIGN_WEEKS
from signal_story.catalog.coverage import NYC_COVERAGE
from signal_story.catalog.editorial import DESIGN_WEEK_EDITORIAL, NUISANCE_EDITORIAL
from signal_story.catalog.sources import COMPLAINT_SIGNALS, COMPLAINTS, EXACT_LOCATION_COMPLAINTS, sample_records
from signal_story.models import (
    BundleKind,
    EventState,
    IngestionResult,
    Priority,
    RunOptions,
    RunSummary,
    SignalRecord,
)
from signal_story.services.clustering import ClusterPolicy
from signal_story.workflows.strategies import CalendarStrategy, ClusterStrategy, display_target

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _rodents(target, count, address="210 WEST 20 STREET", hours_ago=3):
    return [
        SignalRecord(
            id=f"{target}-{address}-{i}",
            domain=COMPLAINTS,
            category="Rodent",
            occurred_at=NOW - timedelta(hours=hours_ago + i),
            target_id=target,
            address=address,
            street=address.split(" ", 1)[1],
        )
        for i in range(count)
    ]


class TestClusterStrategy(unittest.TestCase):

    def setUp(self):
        self.ingestor = MagicMock()
        self.summary = RunSummary(job_name="nuisance-watch", started_at=NOW)

    def _strategy(self, **overrides):
        kwargs = dict(
            domain=COMPLAINTS,
            ingestor=self.ingestor,
            coverage=NYC_COVERAGE,
            policy=ClusterPolicy(threshold=5, exact_location_categories=EXACT_LOCATION_COMPLAINTS),
            editorial=NUISANCE_EDITORIAL,
            sample_source=sample_records,
            ingest_limit=2000,
            baseline_windows=4,
            alias_prefixes=("nyc-",),
            signals=COMPLAINT_SIGNALS,
        )
        kwargs.update(overrides)
        return ClusterStrategy(**kwargs)

    def test_sample_run_consolidates_hotspots_into_one_roundup(self):
        detection = self._strategy().detect(RunOptions(days=7, sample=True), NOW, self.summary)

        self.ingestor.fetch.assert_not_called()
        self.assertEqual(self.summary.records_scanned, 21)
        self.assertEqual(self.summary.detected, 3)
        self.assertEqual(len(detection.bundles), 1)
        bundle = detection.bundles[0]
        self.assertEqual(bundle.kind, BundleKind.ROUNDUP)
        self.assertEqual(bundle.targets, ("nyc-greenwich-village",))
        self.assertEqual(bundle.category_label, "Nuisance Roundup")
        self.assertEqual(len(bundle.context["clusters"]), 3)
        self.assertEqual(self.summary.counters["by_category"]["Rodent"], 1)

    def test_standalone_bundle(self):
        self.ingestor.fetch.return_value = IngestionResult(records=_rodents("nyc-chelsea", 6))
        detection = self._strategy().detect(RunOptions(days=1), NOW, self.summary)

        bundle = detection.bundles[0]
        self.assertEqual(bundle.kind, BundleKind.STANDALONE)
        self.assertEqual(bundle.identity_attrs, ("Rodent", "200 Block of West 20 Street"))
        self.assertEqual(bundle.category_label, "Block Watch")
        self.assertEqual(bundle.context["signal"], "Sanitation decline")
        self.assertEqual(bundle.context["neighborhood"], "Chelsea")
        self.assertEqual(bundle.alias_prefixes, ("nyc-",))

    def test_fetch_reaches_back_over_baseline_windows(self):
        self.ingestor.fetch.return_value = IngestionResult(records=[])
        self._strategy().detect(RunOptions(days=7), NOW, self.summary)
        domain, since, limit = self.ingestor.fetch.call_args[0]
        self.assertEqual(since, NOW - timedelta(days=35))
        self.assertEqual(limit, 2000)

    def test_spike_against_history_changes_label(self):
        records = _rodents("nyc-chelsea", 16) + _rodents("nyc-chelsea", 4, hours_ago=40)
        self.ingestor.fetch.return_value = IngestionResult(records=records)
        detection = self._strategy().detect(RunOptions(days=1), NOW, self.summary)
        self.assertEqual(detection.bundles[0].category_label, "Community Alert")

    def test_total_outage(self):
        self.ingestor.fetch.return_value = IngestionResult(error="503 from source")
        detection = self._strategy().detect(RunOptions(days=7), NOW, self.summary)
        self.assertTrue(detection.outage)
        self.assertTrue(self.summary.ingestion_failed)
        self.assertEqual(self.summary.errors, ["ingestion: 503 from source"])

    def test_partial_failure_still_clusters(self):
        self.ingestor.fetch.return_value = IngestionResult(records=_rodents("nyc-chelsea", 5), error="timeout")
        detection = self._strategy().detect(RunOptions(days=1), NOW, self.summary)
        self.assertFalse(detection.outage)
        self.assertEqual(len(detection.bundles), 1)
        self.assertTrue(self.summary.ingestion_failed)

    def test_empty_source_is_a_quiet_day(self):
        self.ingestor.fetch.return_value = IngestionResult(records=[])
        detection = self._strategy().detect(RunOptions(days=7), NOW, self.summary)
        self.assertFalse(detection.outage)
        self.assertEqual(detection.bundles, [])
        self.assertEqual(self.summary.errors, [])

    def test_candidate_cap(self):
        records = _rodents("nyc-chelsea", 5) + _rodents("nyc-soho", 5) + _rodents("nyc-tribeca", 5)
        self.ingestor.fetch.return_value = IngestionResult(records=records)
        detection = self._strategy(max_candidates=2).detect(RunOptions(days=1), NOW, self.summary)
        self.assertEqual(len(detection.bundles), 2)
        self.assertEqual(self.summary.detected, 3)

    def test_target_override(self):
        records = _rodents("nyc-chelsea", 5) + _rodents("nyc-soho", 5)
        self.ingestor.fetch.return_value = IngestionResult(records=records)
        detection = self._strategy().detect(RunOptions(days=1, target="nyc-soho"), NOW, self.summary)
        self.assertEqual([b.targets for b in detection.bundles], [("nyc-soho",)])


class TestCalendarStrategy(unittest.TestCase):

    def setUp(self):
        self.strategy = CalendarStrategy("design-weeks", DESIGN_WEEKS, DESIGN_WEEK_EDITORIAL, CITY_PREFIXES)
        self.summary = RunSummary(job_name="design-week", started_at=NOW)

    def test_live_event_fans_out_to_all_targets(self):
        now = datetime(2026, 4, 14, 9, 0, tzinfo=timezone.utc)
        detection = self.strategy.detect(RunOptions(days=7), now, self.summary)

        self.assertEqual(len(detection.bundles), 1)
        bundle = detection.bundles[0]
        self.assertEqual(bundle.kind, BundleKind.EVENT)
        self.assertEqual(bundle.targets, ("brera", "porta-nuova", "centro-storico", "navigli"))
        self.assertEqual(bundle.priority, Priority.HERO)
        self.assertEqual(bundle.category_label, "Design Week: Fuorisalone Brera")
        self.assertEqual(bundle.identity_attrs, ("salone-del-mobile", "Live", "day2"))
        self.assertEqual(bundle.alias_prefixes, ("milan-",))
        self.assertEqual(self.summary.records_scanned, len(DESIGN_WEEKS))
        self.assertEqual(self.summary.counters["by_state"]["Live"], 1)

    def test_quiet_day(self):
        detection = self.strategy.detect(RunOptions(days=7), datetime(2026, 8, 1, tzinfo=timezone.utc), self.summary)
        self.assertEqual(detection.bundles, [])
        self.assertEqual(self.summary.detected, 0)

    def test_sample_preview(self):
        options = RunOptions(days=7, sample=True, sample_state=EventState.PREVIEW)
        detection = self.strategy.detect(options, NOW, self.summary)
        bundle = detection.bundles[0]
        self.assertEqual(bundle.category_label, "Design Week: Preview")
        self.assertEqual(bundle.priority, Priority.STANDARD)
        self.assertEqual(bundle.identity_attrs, ("salone-del-mobile", "Preview"))

    def test_target_override_narrows_fan_out(self):
        now = datetime(2026, 4, 14, 9, 0, tzinfo=timezone.utc)
        detection = self.strategy.detect(RunOptions(days=7, target="navigli"), now, self.summary)
        self.assertEqual(detection.bundles[0].targets, ("navigli",))

        detection = self.strategy.detect(RunOptions(days=7, target="soho"), now, self.summary)
        self.assertEqual(detection.bundles, [])


class TestDisplayTarget(unittest.TestCase):

    def test_strips_prefix_and_title_cases(self):
        self.assertEqual(display_target("nyc-west-village", ("nyc-",)), "West Village")
        self.assertEqual(display_target("brera"), "Brera")


if __name__ == '__main__':
    unittest.main()
