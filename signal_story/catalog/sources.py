"""Open-data sources for the cluster-driven domains.

Each domain contributes a row parser that maps a raw Socrata row onto a
:class:`SignalRecord` (or ``None`` when the row is out of scope) and a
small set of synthetic rows used by dry runs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import SignalRecord
from ..services.ingestion import SourceSpec
from ..utils.datetime_utils import parse_timestamp
from .coverage import CoverageTable

COMPLAINTS = "complaints"
PERMITS = "permits"
LICENSES = "licenses"

# ---------------------------------------------------------------------------
# Complaints (NYC 311)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComplaintCategory:
    name: str
    source_types: Tuple[str, ...]
    signal: str
    exact_location: bool = False


COMPLAINT_CATEGORIES: Tuple[ComplaintCategory, ...] = (
    ComplaintCategory(
        "Noise - Commercial",
        ("Noise - Commercial", "Noise - Helicopter", "Noise - Vehicle"),
        "Nightlife friction",
        exact_location=True,
    ),
    ComplaintCategory(
        "Noise - Residential",
        ("Noise - Residential", "Noise - Street/Sidewalk", "Noise"),
        "Neighbor friction",
    ),
    ComplaintCategory("Rodent", ("Rodent", "Rat Sighting", "Mouse Sighting"), "Sanitation decline"),
    ComplaintCategory("Pest", ("Harboring Bees/Wasps", "Mosquitoes", "Bed Bugs"), "Building condition"),
    ComplaintCategory(
        "Homeless Encampment",
        ("Homeless Encampment", "Homeless Person Assistance"),
        "Safety concern",
    ),
    ComplaintCategory(
        "Sidewalk Condition",
        ("Sidewalk Condition", "Damaged Tree", "Overgrown Tree/Branches"),
        "Infrastructure neglect",
    ),
    ComplaintCategory(
        "Trash",
        ("Dirty Conditions", "Sanitation Condition", "Missed Collection"),
        "Sanitation service",
    ),
    ComplaintCategory("Graffiti", ("Graffiti", "Illegal Posting"), "Vandalism"),
    ComplaintCategory(
        "Illegal Dumping",
        ("Illegal Dumping", "Derelict Vehicles", "Derelict Bicycle"),
        "Dumping activity",
    ),
)

COMPLAINT_SIGNALS: Dict[str, str] = {c.name: c.signal for c in COMPLAINT_CATEGORIES}
EXACT_LOCATION_COMPLAINTS = frozenset(c.name for c in COMPLAINT_CATEGORIES if c.exact_location)


def map_complaint_type(raw_type: str) -> Optional[str]:
    """Map a raw 311 ``complaint_type`` onto one of the tracked categories.

    Matching is a case-insensitive substring test in declaration order, so a
    generic ``"Noise"`` lands on the residential bucket.
    """
    lowered = (raw_type or "").lower()
    if not lowered:
        return None
    for category in COMPLAINT_CATEGORIES:
        if any(source.lower() in lowered for source in category.source_types):
            return category.name
    return None


def _cross_streets(row: Dict[str, Any]) -> str:
    first = (row.get("cross_street_1") or "").strip()
    second = (row.get("cross_street_2") or "").strip()
    if first and second:
        return f"{first} and {second}"
    return first or second


def parse_complaint_row(row: Dict[str, Any], coverage: CoverageTable) -> Optional[SignalRecord]:
    category = map_complaint_type(row.get("complaint_type", ""))
    occurred_at = parse_timestamp(row.get("created_date"))
    target_id = coverage.target_for_zip(row.get("incident_zip", ""))
    if category is None or occurred_at is None or target_id is None:
        return None

    return SignalRecord(
        id=str(row["unique_key"]),
        domain=COMPLAINTS,
        category=category,
        occurred_at=occurred_at,
        target_id=target_id,
        address=(row.get("incident_address") or "").strip(),
        street=(row.get("street_name") or "").strip(),
        cross_streets=_cross_streets(row),
        descriptor=(row.get("descriptor") or "").strip(),
        payload={"complaint_type": row.get("complaint_type"), "zip": row.get("incident_zip")},
    )


# ---------------------------------------------------------------------------
# Permits (NYC DOB job filings)
# ---------------------------------------------------------------------------

PERMIT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("restaurant", ("restaurant", "food", "kitchen", "cafe", "bar", "dining")),
    ("retail", ("retail", "store", "shop", "boutique")),
    ("new_construction", ("new building", "construct new")),
    ("residential", ("residential", "apartment", "dwelling")),
    ("commercial", ("office", "commercial", "business")),
    ("rooftop", ("rooftop", "roof deck", "outdoor", "terrace")),
)
NOTABLE_PERMIT_CATEGORIES = frozenset({"restaurant", "retail", "new_construction", "rooftop"})


def categorize_permit(description: str, permit_type: str = "") -> str:
    """Keyword classification of a filing; first matching bucket wins."""
    desc = (description or "").lower()
    kind = (permit_type or "").lower()
    for category, keywords in PERMIT_KEYWORDS:
        haystack = f"{kind} {desc}" if category == "new_construction" else desc
        if any(word in haystack for word in keywords):
            return category
    return "general"


def parse_permit_row(row: Dict[str, Any], coverage: CoverageTable) -> Optional[SignalRecord]:
    description = (row.get("job_desc") or "").strip()
    permit_type = row.get("job_type") or row.get("doc_type") or ""
    category = categorize_permit(description, permit_type)
    if category not in NOTABLE_PERMIT_CATEGORIES:
        return None

    occurred_at = parse_timestamp(row.get("filing_date"))
    target_id = coverage.target_for_zip(row.get("zip_code", ""))
    if occurred_at is None or target_id is None:
        return None

    street = (row.get("street_name") or "").strip()
    address = f"{(row.get('house__') or '').strip()} {street}".strip()
    return SignalRecord(
        id=str(row["job__"]),
        domain=PERMITS,
        category=category,
        occurred_at=occurred_at,
        target_id=target_id,
        address=address,
        street=street,
        descriptor=description[:160],
        payload={"permit_type": permit_type, "borough": row.get("borough", "")},
    )


# ---------------------------------------------------------------------------
# Liquor licenses (NY State pending applications)
# ---------------------------------------------------------------------------

NEWSWORTHY_LICENSES: Tuple[str, ...] = (
    "restaurant",
    "hotel",
    "club",
    "tavern",
    "bar",
    "food & beverage",
    "catering",
    "on-premises",
    "on premises",
)
SKIPPED_LICENSES: Tuple[str, ...] = (
    "grocery",
    "drug store",
    "manufacturer",
    "wholesaler",
    "farm",
    "importer",
    "warehouse",
    "rectifier",
    "cider",
    "winery",
    "distiller",
    "brewer",
    "bottler",
)
NYC_COUNTIES = frozenset({"new york", "kings", "queens", "bronx", "richmond"})
LICENSE_CATEGORIES: Tuple[str, ...] = ("restaurant_bar", "club", "hotel", "retail", "other")


def is_newsworthy_license(description: str) -> bool:
    lowered = (description or "").lower()
    if any(word in lowered for word in SKIPPED_LICENSES):
        return False
    if any(word in lowered for word in NEWSWORTHY_LICENSES):
        return True
    return "liquor store" in lowered


def categorize_license(description: str) -> str:
    lowered = (description or "").lower()
    if "club" in lowered:
        return "club"
    if "hotel" in lowered:
        return "hotel"
    if "liquor store" in lowered:
        return "retail"
    if any(word in lowered for word in ("restaurant", "on-premises", "on premises", "tavern", "bar")):
        return "restaurant_bar"
    return "other"


def parse_license_row(row: Dict[str, Any], coverage: CoverageTable) -> Optional[SignalRecord]:
    description = (row.get("description") or "").strip()
    if not is_newsworthy_license(description):
        return None
    county = (row.get("premises_county") or "").strip().lower()
    if county and county not in NYC_COUNTIES:
        return None

    occurred_at = parse_timestamp(row.get("received_date"))
    target_id = coverage.target_for_zip(row.get("zip_code", ""))
    if occurred_at is None or target_id is None:
        return None

    address = (row.get("actual_address_of_premises") or "").strip()
    return SignalRecord(
        id=str(row["application_id"]),
        domain=LICENSES,
        category=categorize_license(description),
        occurred_at=occurred_at,
        target_id=target_id,
        address=address,
        street=re.sub(r"^\d+[-\s]*", "", address),
        entity_name=(row.get("dba") or row.get("legalname") or "").strip(),
        descriptor=description,
        payload={"legal_name": row.get("legalname", ""), "status": "pending"},
    )


# ---------------------------------------------------------------------------
# Source table
# ---------------------------------------------------------------------------

SOURCES: Dict[str, SourceSpec] = {
    COMPLAINTS: SourceSpec(
        domain=COMPLAINTS,
        url="https://data.cityofnewyork.us/resource/erm2-nwe9.json",
        date_field="created_date",
        zip_field="incident_zip",
        parse_row=parse_complaint_row,
    ),
    PERMITS: SourceSpec(
        domain=PERMITS,
        url="https://data.cityofnewyork.us/resource/ipu4-2q9a.json",
        date_field="filing_date",
        zip_field="zip_code",
        parse_row=parse_permit_row,
    ),
    LICENSES: SourceSpec(
        domain=LICENSES,
        url="https://data.ny.gov/resource/f8i8-k2gm.json",
        date_field="received_date",
        zip_field="zip_code",
        parse_row=parse_license_row,
    ),
}

# ---------------------------------------------------------------------------
# Synthetic rows for dry runs
# ---------------------------------------------------------------------------


def _stamp(now: datetime, hours_ago: float) -> str:
    return (now - timedelta(hours=hours_ago)).strftime("%Y-%m-%dT%H:%M:%S.000")


def _sample_complaint_rows(now: datetime) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    bursts: Sequence[Tuple[str, str, str, str, int]] = (
        ("Noise - Commercial", "Loud Music/Party", "145 BLEECKER STREET", "10012", 7),
        ("Rodent", "Rat Sighting", "240 WEST 10 STREET", "10014", 6),
        ("Dirty Conditions", "Trash", "212 WEST 10 STREET", "10014", 5),
        ("Graffiti", "Graffiti", "88 BEDFORD AVENUE", "11211", 3),
    )
    for kind, descriptor, address, zip_code, count in bursts:
        street = re.sub(r"^\d+\s+", "", address)
        for idx in range(count):
            rows.append(
                {
                    "unique_key": f"sample-{zip_code}-{kind}-{idx}",
                    "created_date": _stamp(now, 2 + idx * 3),
                    "complaint_type": kind,
                    "descriptor": descriptor,
                    "incident_address": address,
                    "street_name": street,
                    "incident_zip": zip_code,
                }
            )
    return rows


def _sample_permit_rows(now: datetime) -> List[Dict[str, Any]]:
    filings = (
        ("A1", "450", "WEST 14 STREET", "10014", "A2", "Convert ground floor to restaurant with new kitchen"),
        ("A2", "462", "WEST 14 STREET", "10014", "A2", "Interior fit-out for cafe and dining room"),
        ("A3", "401", "WEST 14 STREET", "10014", "A1", "Kitchen exhaust for new restaurant"),
        ("A4", "120", "WYTHE AVENUE", "11249", "NB", "Construct new 8 story mixed-use building"),
        ("A5", "33", "GREENE STREET", "10013", "A2", "Boutique retail store fit-out"),
    )
    return [
        {
            "job__": f"sample-{job}",
            "job_type": job_type,
            "job_desc": desc,
            "filing_date": _stamp(now, 12 + i * 6),
            "house__": house,
            "street_name": street,
            "zip_code": zip_code,
            "borough": "MANHATTAN" if zip_code.startswith("10") else "BROOKLYN",
        }
        for i, (job, house, street, zip_code, job_type, desc) in enumerate(filings)
    ]


def _sample_license_rows(now: datetime) -> List[Dict[str, Any]]:
    applications = (
        ("L1", "LA MAISON BISTRO", "Maison Hospitality LLC", "ON-PREMISES RESTAURANT", "78 PERRY STREET", "10014"),
        ("L2", "THE VELVET ROOM", "Velvet Nights Inc", "CLUB", "301 BOWERY", "10003"),
        ("L3", "", "Corner Grocery Corp", "GROCERY STORE", "12 GREENWICH AVENUE", "10014"),
    )
    return [
        {
            "application_id": f"sample-{app_id}",
            "dba": dba,
            "legalname": legal,
            "description": description,
            "actual_address_of_premises": address,
            "zip_code": zip_code,
            "received_date": _stamp(now, 24 + i * 10),
            "premises_county": "New York",
        }
        for i, (app_id, dba, legal, description, address, zip_code) in enumerate(applications)
    ]


_SAMPLE_BUILDERS = {
    COMPLAINTS: _sample_complaint_rows,
    PERMITS: _sample_permit_rows,
    LICENSES: _sample_license_rows,
}


def sample_records(domain: str, now: datetime, coverage: CoverageTable) -> List[SignalRecord]:
    """Synthetic records for *domain*, parsed exactly like live rows."""
    spec = SOURCES[domain]
    rows = _SAMPLE_BUILDERS[domain](now)
    records = (spec.parse_row(row, coverage) for row in rows)
    return [record for record in records if record is not None]


__all__ = [
    "COMPLAINTS",
    "PERMITS",
    "LICENSES",
    "COMPLAINT_CATEGORIES",
    "COMPLAINT_SIGNALS",
    "EXACT_LOCATION_COMPLAINTS",
    "LICENSE_CATEGORIES",
    "NOTABLE_PERMIT_CATEGORIES",
    "SOURCES",
    "map_complaint_type",
    "categorize_permit",
    "categorize_license",
    "is_newsworthy_license",
    "parse_complaint_row",
    "parse_permit_row",
    "parse_license_row",
    "sample_records",
]
