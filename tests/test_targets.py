import unittest
from unittest.mock import MagicMock
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.services.targets import TargetRegistry, TargetResolver, alias_candidates


class FakeRegistry:
    def __init__(self, ids):
        self.ids = set(ids)
        self.calls = []

    def exists(self, canonical_id):
        self.calls.append(canonical_id)
        return canonical_id in self.ids


class TestTargetResolver(unittest.TestCase):

    def test_verbatim_match_wins(self):
        registry = FakeRegistry({"nyc-chelsea", "chelsea"})
        resolver = TargetResolver(registry, prefixes=("nyc-",))
        self.assertEqual(resolver.resolve("nyc-chelsea"), "nyc-chelsea")
        self.assertEqual(registry.calls, ["nyc-chelsea"])

    def test_strips_known_prefix(self):
        resolver = TargetResolver(FakeRegistry({"chelsea"}), prefixes=("nyc-",))
        self.assertEqual(resolver.resolve("nyc-chelsea"), "chelsea")

    def test_adds_known_prefix(self):
        resolver = TargetResolver(FakeRegistry({"nyc-tribeca"}), prefixes=("london-", "nyc-"))
        self.assertEqual(resolver.resolve("tribeca"), "nyc-tribeca")

    def test_bundle_prefixes_are_tried_first(self):
        registry = FakeRegistry({"milan-brera", "nyc-brera"})
        resolver = TargetResolver(registry, prefixes=("nyc-",))
        self.assertEqual(resolver.resolve("brera", extra_prefixes=("milan-",)), "milan-brera")

    def test_unknown_target_returns_none(self):
        resolver = TargetResolver(FakeRegistry(set()), prefixes=("nyc-",))
        self.assertIsNone(resolver.resolve("atlantis"))

    def test_answers_are_cached(self):
        registry = FakeRegistry({"chelsea"})
        resolver = TargetResolver(registry, prefixes=("nyc-",))
        resolver.resolve("nyc-chelsea")
        resolver.resolve("nyc-chelsea")
        self.assertEqual(registry.calls, ["nyc-chelsea", "chelsea"])

    def test_alias_candidates(self):
        self.assertEqual(alias_candidates("nyc-soho", ("nyc-", "la-")), ["nyc-soho", "soho", "la-nyc-soho"])


class TestTargetRegistry(unittest.TestCase):

    def test_exists_queries_by_id(self):
        collection = MagicMock()
        collection.count_documents.return_value = 1
        self.assertTrue(TargetRegistry(collection).exists("nyc-soho"))
        collection.count_documents.assert_called_once_with({"_id": "nyc-soho"}, limit=1)

    def test_missing_id(self):
        collection = MagicMock()
        collection.count_documents.return_value = 0
        self.assertFalse(TargetRegistry(collection).exists("nowhere"))


if __name__ == '__main__':
    unittest.main()
