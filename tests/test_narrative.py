import unittest
from unittest.mock import MagicMock
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.models import BundleKind, StoryBundle
from signal_story.services.narrative import NarrativeGenerator


def _bundle():
    return StoryBundle(
        domain="complaints",
        kind=BundleKind.STANDALONE,
        label="100 Block of Bleecker Street (Rodent)",
        targets=("nyc-greenwich-village",),
        identity_attrs=("Rodent", "100 Block of Bleecker Street"),
        context={"count": 6, "location": "100 Block of Bleecker Street"},
        fallback_headline="Nuisance Watch: 6 complaints near 100 Block of Bleecker Street",
        fallback_preview="6 rodent complaints near 100 Block of Bleecker Street in the last 7 days.",
        category_label="Block Watch",
    )


def _client_returning(content):
    client = MagicMock()
    client.chat.completions.create.return_value.choices = [MagicMock(message=MagicMock(content=content))]
    return client


class TestNarrativeGenerator(unittest.TestCase):

    def test_parses_structured_response(self):
        payload = {
            "headline": "Rats on **Bleecker** [1]",
            "preview_text": "Six sightings in a week.",
            "body": "First paragraph.\n\nSecond   paragraph.",
        }
        generator = NarrativeGenerator("role", "guidance", client=_client_returning(json.dumps(payload)))

        draft = generator.generate(_bundle())

        self.assertEqual(draft.headline, "Rats on Bleecker")
        self.assertEqual(draft.preview_text, "Six sightings in a week.")
        self.assertEqual(draft.body, "First paragraph.\n\nSecond paragraph.")

    def test_missing_headline_uses_fallback(self):
        content = json.dumps({"body": "Something happened."})
        draft = NarrativeGenerator("role", "guidance", client=_client_returning(content)).generate(_bundle())
        self.assertEqual(draft.headline, _bundle().fallback_headline)
        self.assertEqual(draft.preview_text, _bundle().fallback_preview)

    def test_missing_body_is_no_story(self):
        content = json.dumps({"headline": "Only a headline"})
        self.assertIsNone(NarrativeGenerator("role", "guidance", client=_client_returning(content)).generate(_bundle()))

    def test_unparsable_response_is_no_story(self):
        generator = NarrativeGenerator("role", "guidance", client=_client_returning("I cannot help with that."))
        self.assertIsNone(generator.generate(_bundle()))

    def test_fenced_json_is_accepted(self):
        content = "```json\n{\"headline\": \"H\", \"body\": \"B\"}\n```"
        draft = NarrativeGenerator("role", "guidance", client=_client_returning(content)).generate(_bundle())
        self.assertEqual(draft.body, "B")

    def test_api_errors_propagate(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        with self.assertRaises(RuntimeError):
            NarrativeGenerator("role", "guidance", client=client).generate(_bundle())

    def test_request_carries_context_and_json_mode(self):
        client = _client_returning(json.dumps({"headline": "H", "body": "B"}))
        NarrativeGenerator("You are an editor.", "Be brief.", client=client, model="test-model").generate(_bundle())

        kwargs = client.chat.completions.create.call_args[1]
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        system, user = kwargs["messages"]
        self.assertIn("You are an editor.", system["content"])
        self.assertIn("Be brief.", system["content"])
        context = json.loads(user["content"])
        self.assertEqual(context["count"], 6)
        self.assertEqual(context["story_type"], "standalone")


if __name__ == '__main__':
    unittest.main()
