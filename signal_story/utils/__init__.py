"""Utility functions for the signal_story project.

Re-exports the text, parsing and datetime helpers so that imports like
`from ..utils import slugify` work as expected.
"""

from .text_cleaning import (  # noqa: F401
    collapse_whitespace,
    sanitize_story_text,
    slugify,
    strip_think_blocks,
    title_case,
)
from .datetime_utils import date_key, ensure_utc, get_current_timestamp, parse_timestamp  # noqa: F401
from .llm_parsing import extract_structured_json  # noqa: F401

__all__ = [
    "collapse_whitespace",
    "sanitize_story_text",
    "slugify",
    "strip_think_blocks",
    "title_case",
    "date_key",
    "ensure_utc",
    "get_current_timestamp",
    "parse_timestamp",
    "extract_structured_json",
]
