"""Shared HTTP session for the Socrata open-data endpoints."""

from __future__ import annotations

import requests

from ..config import SOCRATA_APP_TOKEN

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a singleton :class:`requests.Session` for open-data pulls.

    The app token is optional; with it the portals grant higher rate limits.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"Accept": "application/json"})
        if SOCRATA_APP_TOKEN:
            _session.headers["X-App-Token"] = SOCRATA_APP_TOKEN
    return _session

__all__ = ["get_session"]
