"""Text helpers shared by ingestion, clustering and narrative parsing."""

from __future__ import annotations

import re
from typing import Final

# ---------------------------------------------------------------------------
# LLM output
# ---------------------------------------------------------------------------

def strip_think_blocks(text: str) -> str:
    """Return the content after a closing </think> tag, minus JSON fences."""
    if not text:
        return text.strip()

    marker: Final[str] = "</think>"
    idx: int = text.rfind(marker)
    cleaned: str = (text if idx == -1 else text[idx + len(marker) :]).strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json") :].strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:].strip()
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3].strip()

    return cleaned


def sanitize_story_text(text: str, *, max_length: int | None = None) -> str:
    """Normalise a generated headline/body for publication.

    Removes numeric (``[1]``) citations and markdown emphasis, collapses
    whitespace and, when *max_length* is given, trims at a word boundary.
    """
    if not text:
        return ""
    cleaned = re.sub(r"\[\d+\]", "", text)
    cleaned = re.sub(r"(\*\*|__)", "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    if max_length is not None and len(cleaned) > max_length:
        cut = cleaned[:max_length].rsplit(" ", 1)[0]
        cleaned = cut.rstrip(",;:") if cut else cleaned[:max_length]
    return cleaned

# ---------------------------------------------------------------------------
# Locations and keys
# ---------------------------------------------------------------------------

def title_case(text: str) -> str:
    """``"BLEECKER STREET"`` -> ``"Bleecker Street"``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text.lower())


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def slugify(text: str, max_length: int | None = None) -> str:
    """Lower-case, hyphen-separated ASCII slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    if max_length is not None:
        slug = slug[:max_length].rstrip("-")
    return slug

__all__ = [
    "strip_think_blocks",
    "sanitize_story_text",
    "title_case",
    "collapse_whitespace",
    "slugify",
]
