import unittest
import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.models import Severity, SignalRecord, Trend
from signal_story.services.clustering import (
    ClusterPolicy,
    block_location,
    build_baseline,
    cluster_records,
    severity_for,
    trend_for,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
WINDOW_START = NOW - timedelta(days=1)


def _record(idx, hours_ago=1.0, category="Noise - Commercial", address="123 MAIN STREET",
            street="MAIN STREET", cross_streets="", target="nyc-chelsea", record_id=None):
    return SignalRecord(
        id=record_id or f"r{idx}",
        domain="complaints",
        category=category,
        occurred_at=NOW - timedelta(hours=hours_ago),
        target_id=target,
        address=address,
        street=street,
        cross_streets=cross_streets,
        descriptor="Loud Music/Party",
    )


class TestClassification(unittest.TestCase):

    def setUp(self):
        self.policy = ClusterPolicy(threshold=5)

    def test_trend_against_baseline_of_four(self):
        self.assertEqual(trend_for(9, 4, self.policy), Trend.SPIKE)
        self.assertEqual(trend_for(5, 4, self.policy), Trend.ELEVATED)
        self.assertEqual(trend_for(4, 4, self.policy), Trend.NORMAL)

    def test_missing_baseline_defaults_to_elevated(self):
        self.assertEqual(trend_for(50, None, self.policy), Trend.ELEVATED)
        self.assertEqual(trend_for(50, 0, self.policy), Trend.ELEVATED)

    def test_severity_boundaries_follow_threshold_multiples(self):
        self.assertEqual(severity_for(7, self.policy), Severity.LOW)
        self.assertEqual(severity_for(8, self.policy), Severity.MEDIUM)
        self.assertEqual(severity_for(14, self.policy), Severity.MEDIUM)
        self.assertEqual(severity_for(15, self.policy), Severity.HIGH)

    def test_severity_is_monotonic_in_count(self):
        for count in range(0, 60):
            lower = severity_for(count, self.policy).rank
            higher = severity_for(count + 1, self.policy).rank
            self.assertLessEqual(lower, higher, f"severity dropped between {count} and {count + 1}")


class TestBlockLocation(unittest.TestCase):

    def test_rounds_house_number_down_to_block(self):
        self.assertEqual(block_location("145 BLEECKER STREET", "BLEECKER STREET"), "100 Block of Bleecker Street")

    def test_block_zero_is_just_the_street(self):
        self.assertEqual(block_location("45 PERRY STREET", "PERRY STREET"), "Perry Street")

    def test_street_is_parsed_from_address_when_missing(self):
        self.assertEqual(block_location("250 W 10 ST", ""), "200 Block of W 10 St")

    def test_falls_back_to_cross_streets(self):
        self.assertEqual(
            block_location("", "", "WEST 4 STREET and GROVE STREET"),
            "West 4 Street And Grove Street",
        )

    def test_no_location_at_all(self):
        self.assertEqual(block_location("", "", ""), "")


class TestClusterRecords(unittest.TestCase):

    def setUp(self):
        self.policy = ClusterPolicy(threshold=5, exact_location_categories=frozenset({"Noise - Commercial"}))

    def test_seven_commercial_noise_complaints_against_baseline_of_two(self):
        current = [_record(i, hours_ago=1 + i * 2) for i in range(7)]
        # eight complaints spread over the four preceding one-day windows
        history = [_record(100 + i, hours_ago=30 + i * 10) for i in range(8)]
        baseline = build_baseline(history, self.policy, windows=4, before=WINDOW_START)

        clusters = cluster_records(current + history, self.policy, WINDOW_START, NOW, baseline)

        self.assertEqual(len(clusters), 1)
        cluster = clusters[0]
        self.assertEqual(cluster.count, 7)
        self.assertEqual(cluster.count, len(cluster.members))
        self.assertEqual(cluster.severity, Severity.LOW)
        self.assertEqual(cluster.trend, Trend.SPIKE)
        self.assertEqual(cluster.baseline, 2.0)
        self.assertEqual(cluster.percent_change, 250)
        self.assertEqual(cluster.display_location, "123 Main Street")
        self.assertTrue(cluster.exact_location)
        self.assertEqual(cluster.target_id, "nyc-chelsea")

    def test_threshold_gate_is_monotonic(self):
        four = [_record(i) for i in range(4)]
        five = [_record(i) for i in range(5)]
        self.assertEqual(cluster_records(four, self.policy, WINDOW_START, NOW), [])
        self.assertEqual(len(cluster_records(five, self.policy, WINDOW_START, NOW)), 1)

    def test_records_without_location_are_excluded(self):
        records = [_record(i, address="", street="", cross_streets="") for i in range(8)]
        self.assertEqual(cluster_records(records, self.policy, WINDOW_START, NOW), [])

    def test_records_outside_window_are_dropped(self):
        inside = [_record(i, hours_ago=2) for i in range(4)]
        stale = [_record(10 + i, hours_ago=72) for i in range(3)]
        future = [_record(20, hours_ago=-5)]
        self.assertEqual(cluster_records(inside + stale + future, self.policy, WINDOW_START, NOW), [])

    def test_residential_addresses_group_by_block(self):
        records = [
            _record(i, category="Noise - Residential", address=f"{140 + i * 10} BLEECKER STREET",
                    street="BLEECKER STREET")
            for i in range(5)
        ]
        clusters = cluster_records(records, self.policy, WINDOW_START, NOW)
        self.assertEqual(len(clusters), 1)
        self.assertEqual(clusters[0].display_location, "100 Block of Bleecker Street")
        self.assertFalse(clusters[0].exact_location)

    def test_duplicate_delivery_is_counted_once(self):
        records = [_record(0, record_id="same-key") for _ in range(6)]
        self.assertEqual(cluster_records(records, self.policy, WINDOW_START, NOW), [])

    def test_no_baseline_history_means_elevated(self):
        clusters = cluster_records([_record(i) for i in range(6)], self.policy, WINDOW_START, NOW, {})
        self.assertEqual(clusters[0].trend, Trend.ELEVATED)
        self.assertIsNone(clusters[0].percent_change)

    def test_clusters_ordered_by_severity_then_count(self):
        records = (
            [_record(i, category="Rodent", address="300 HUDSON STREET", street="HUDSON STREET") for i in range(6)]
            + [_record(100 + i, category="Trash", address="500 GREENWICH STREET", street="GREENWICH STREET")
               for i in range(16)]
            + [_record(200 + i, category="Graffiti", address="700 WASHINGTON STREET", street="WASHINGTON STREET")
               for i in range(9)]
        )
        clusters = cluster_records(records, self.policy, WINDOW_START, NOW)
        self.assertEqual([c.category for c in clusters], ["Trash", "Graffiti", "Rodent"])
        self.assertEqual([c.severity for c in clusters], [Severity.HIGH, Severity.MEDIUM, Severity.LOW])

    def test_entity_grouping_splits_businesses_at_one_address(self):
        policy = ClusterPolicy(threshold=1, exact_location_categories=frozenset({"club"}), group_by_entity=True)
        records = [
            SignalRecord(id="a", domain="licenses", category="club", occurred_at=NOW - timedelta(hours=3),
                         target_id="nyc-noho", address="301 BOWERY", entity_name="THE VELVET ROOM"),
            SignalRecord(id="b", domain="licenses", category="club", occurred_at=NOW - timedelta(hours=4),
                         target_id="nyc-noho", address="301 BOWERY", entity_name="BASEMENT"),
        ]
        clusters = cluster_records(records, policy, WINDOW_START, NOW)
        self.assertEqual(sorted(c.entity_name for c in clusters), ["BASEMENT", "THE VELVET ROOM"])


if __name__ == '__main__':
    unittest.main()
