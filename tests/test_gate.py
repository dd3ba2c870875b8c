import unittest
import os
import sys
from datetime import date, datetime, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.models import Cluster, Severity, SignalRecord, Trend
from signal_story.catalog.calendars import DESIGN_WEEKS
from signal_story.services.calendar import resolve_state
from signal_story.services.gate import consolidate, is_active, passes_threshold

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _cluster(key, count, target="nyc-chelsea", category="Rodent"):
    members = tuple(
        SignalRecord(id=f"{key}-{i}", domain="complaints", category=category, occurred_at=NOW, target_id=target)
        for i in range(count)
    )
    return Cluster(
        key=key,
        display_location=key.title(),
        category=category,
        members=members,
        severity=Severity.LOW,
        trend=Trend.ELEVATED,
        target_id=target,
    )


class TestGate(unittest.TestCase):

    def test_passes_threshold(self):
        self.assertFalse(passes_threshold(_cluster("a", 4), 5))
        self.assertTrue(passes_threshold(_cluster("a", 5), 5))

    def test_three_clusters_for_one_target_become_one_roundup(self):
        clusters = [_cluster("a", 6), _cluster("b", 7), _cluster("c", 9)]
        groups = consolidate(clusters, threshold=5)
        self.assertEqual(len(groups), 1)
        self.assertTrue(groups[0].is_roundup)
        self.assertEqual([c.key for c in groups[0].clusters], ["a", "b", "c"])
        self.assertEqual(groups[0].total_count, 22)

    def test_single_cluster_is_standalone(self):
        groups = consolidate([_cluster("a", 6), _cluster("b", 2)], threshold=5)
        self.assertEqual(len(groups), 1)
        self.assertFalse(groups[0].is_roundup)

    def test_groups_per_target_keep_first_seen_order(self):
        clusters = [
            _cluster("a", 6, target="nyc-soho"),
            _cluster("b", 6, target="nyc-chelsea"),
            _cluster("c", 6, target="nyc-soho"),
        ]
        groups = consolidate(clusters, threshold=5)
        self.assertEqual([g.target_id for g in groups], ["nyc-soho", "nyc-chelsea"])
        self.assertEqual([len(g.clusters) for g in groups], [2, 1])

    def test_clusters_without_target_are_dropped(self):
        self.assertEqual(consolidate([_cluster("a", 6, target=None)], threshold=5), [])

    def test_only_non_dormant_events_are_active(self):
        salone = DESIGN_WEEKS[0]
        self.assertTrue(is_active(resolve_state(salone, date(2026, 4, 14))))
        self.assertFalse(is_active(resolve_state(salone, date(2026, 8, 1))))


if __name__ == '__main__':
    unittest.main()
