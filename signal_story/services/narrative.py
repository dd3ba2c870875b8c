"""Narrative generation via the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from openai import OpenAI

from ..clients.openai_client import get_openai
from ..config import NARRATIVE_MODEL, NARRATIVE_TEMPERATURE
from ..models import NarrativeDraft, StoryBundle
from ..utils.llm_parsing import extract_structured_json
from ..utils.text_cleaning import sanitize_story_text

logger = logging.getLogger(__name__)

HEADLINE_MAX_CHARS = 90
PREVIEW_MAX_CHARS = 200

_OUTPUT_CONTRACT = (
    "Respond with a JSON object with exactly these keys: "
    '"headline" (at most 80 characters, no clickbait), '
    '"preview_text" (one or two sentences, at most 200 characters), '
    '"body" (three to five short paragraphs of plain text, no markdown).'
)


class NarrativeGenerator:
    """Turn a :class:`StoryBundle` into a headline, preview and body.

    ``generate`` returns ``None`` when the model answers with something that
    cannot be used as a story; API failures propagate to the caller.
    """

    def __init__(
        self,
        role: str,
        guidance: str,
        client: Optional[OpenAI] = None,
        model: str = NARRATIVE_MODEL,
        temperature: float = NARRATIVE_TEMPERATURE,
    ):
        self._role = role
        self._guidance = guidance
        self._client = client
        self._model = model
        self._temperature = temperature

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = get_openai()
        return self._client

    def _messages(self, bundle: StoryBundle) -> list[Dict[str, str]]:
        context: Dict[str, Any] = {
            "story_type": bundle.kind.value,
            "label": bundle.label,
            "category_label": bundle.category_label,
            "priority": bundle.priority.value,
            **bundle.context,
        }
        return [
            {"role": "system", "content": f"{self._role}\n\n{self._guidance}\n\n{_OUTPUT_CONTRACT}"},
            {"role": "user", "content": json.dumps(context, default=str, ensure_ascii=False, indent=2)},
        ]

    def generate(self, bundle: StoryBundle) -> Optional[NarrativeDraft]:
        logger.info("Generating narrative for %s", bundle.label)
        resp = self.client.chat.completions.create(
            model=self._model,
            messages=self._messages(bundle),
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )
        raw = resp.choices[0].message.content or ""
        logger.debug("Raw narrative response for %s: %s", bundle.label, raw)

        try:
            data = extract_structured_json(raw)
        except ValueError:
            logger.warning("Narrative for %s was not valid JSON", bundle.label)
            return None

        # sanitise per paragraph so the breaks survive whitespace collapsing
        paragraphs = re.split(r"\n\s*\n", str(data.get("body") or ""))
        body = "\n\n".join(p for p in (sanitize_story_text(p) for p in paragraphs) if p)
        if not body:
            logger.warning("Narrative for %s had no body", bundle.label)
            return None

        headline = sanitize_story_text(
            str(data.get("headline") or ""), max_length=HEADLINE_MAX_CHARS
        ) or bundle.fallback_headline
        preview = sanitize_story_text(
            str(data.get("preview_text") or ""), max_length=PREVIEW_MAX_CHARS
        ) or bundle.fallback_preview

        return NarrativeDraft(headline=headline, preview_text=preview, body=body)


__all__ = ["NarrativeGenerator"]
