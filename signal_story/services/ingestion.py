"""Signal ingestion from Socrata open-data endpoints.

Every domain is described by a :class:`SourceSpec`; the ingestor turns
``fetch(domain, since, limit)`` into paged SODA queries and maps rows into
:class:`SignalRecord` objects. Failures never raise: the caller gets
whatever was retrieved plus the reason in :attr:`IngestionResult.error`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from ..catalog.coverage import CoverageTable
from ..clients.opendata_client import get_session
from ..config import INGEST_TIMEOUT_SECONDS
from ..models import IngestionResult, SignalRecord
from ..utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

# SODA caps a single response at 1000 rows without an explicit $limit; keep
# pages at that size so large caps become several modest requests.
PAGE_SIZE: int = 1000

RowParser = Callable[[Dict[str, Any], CoverageTable], Optional[SignalRecord]]


@dataclass(frozen=True)
class SourceSpec:
    """How to query one open-data dataset and map its rows."""

    domain: str
    url: str
    date_field: str
    zip_field: str
    parse_row: RowParser
    extra_where: str = ""


def build_where_clause(spec: SourceSpec, since: datetime, zips: List[str]) -> str:
    """SoQL ``$where`` restricting rows to the window and the covered zips."""
    since_str = ensure_utc(since).strftime("%Y-%m-%dT%H:%M:%S")
    clauses = [f"{spec.date_field} >= '{since_str}'"]
    if zips:
        zip_list = ",".join(f"'{z}'" for z in zips)
        clauses.append(f"{spec.zip_field} IN ({zip_list})")
    if spec.extra_where:
        clauses.append(spec.extra_where)
    return " AND ".join(clauses)


class SignalIngestor:
    """Fetch typed records for a domain from its configured source."""

    def __init__(
        self,
        sources: Mapping[str, SourceSpec],
        coverage: CoverageTable,
        session: Optional[requests.Session] = None,
        timeout: float = INGEST_TIMEOUT_SECONDS,
    ):
        self._sources = dict(sources)
        self._coverage = coverage
        self._session = session
        self._timeout = timeout

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = get_session()
        return self._session

    def fetch(self, domain: str, since: datetime, limit: int) -> IngestionResult:
        """Return up to *limit* records for *domain* dated on/after *since*."""
        spec = self._sources.get(domain)
        if spec is None:
            return IngestionResult(error=f"no source configured for domain '{domain}'")

        logger.info("Fetching %s records since %s (cap %d)", domain, since.isoformat(), limit)
        where = build_where_clause(spec, since, self._coverage.zips)

        records: List[SignalRecord] = []
        rows_seen = 0
        dropped = 0
        while rows_seen < limit:
            page_limit = min(PAGE_SIZE, limit - rows_seen)
            params = {
                "$where": where,
                "$order": f"{spec.date_field} DESC",
                "$limit": str(page_limit),
                "$offset": str(rows_seen),
            }
            try:
                rows = self._get_page(spec.url, params)
            except (requests.RequestException, ValueError) as exc:
                logger.warning(
                    "Ingestion for %s stopped after %d rows: %s", domain, rows_seen, exc
                )
                return IngestionResult(records=records, error=str(exc))

            for row in rows:
                try:
                    record = spec.parse_row(row, self._coverage)
                except (KeyError, TypeError, ValueError) as exc:
                    logger.debug("Malformed %s row skipped: %s", domain, exc)
                    record = None
                if record is None:
                    dropped += 1
                    continue
                records.append(record)

            rows_seen += len(rows)
            if len(rows) < page_limit:
                break

        logger.info(
            "Fetched %d %s rows -> %d records (%d dropped)", rows_seen, domain, len(records), dropped
        )
        return IngestionResult(records=records)

    def _get_page(self, url: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        response = self.session.get(url, params=params, timeout=self._timeout)
        if response.status_code != 200:
            logger.error("Open-data API error: %s - %s", response.status_code, response.text[:200])
            raise requests.HTTPError(f"open-data API returned {response.status_code}")
        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError("open-data API returned a non-list payload")
        return payload


__all__ = ["SourceSpec", "SignalIngestor", "build_where_clause", "PAGE_SIZE"]
