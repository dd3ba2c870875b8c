"""Coverage tables: which zip codes belong to which logical target.

Tables are plain data handed to the ingestor at construction so tests can
swap in synthetic coverage and a new neighborhood needs no code change.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


class CoverageTable:
    """Ordered mapping of logical target id -> zip codes.

    A zip shared by several targets belongs to the first one listed, so the
    order of *entries* is significant.
    """

    def __init__(self, entries: Iterable[Tuple[str, Sequence[str]]]):
        self._targets: Dict[str, Tuple[str, ...]] = {}
        self._by_zip: Dict[str, str] = {}
        for target_id, zips in entries:
            self._targets[target_id] = tuple(zips)
            for zip_code in zips:
                self._by_zip.setdefault(zip_code, target_id)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Sequence[str]]) -> "CoverageTable":
        return cls(mapping.items())

    def target_for_zip(self, zip_code: str) -> Optional[str]:
        return self._by_zip.get((zip_code or "").strip()[:5])

    @property
    def zips(self) -> List[str]:
        return sorted(self._by_zip)

    @property
    def targets(self) -> List[str]:
        return list(self._targets)

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._targets

    def __len__(self) -> int:
        return len(self._targets)


NYC_COVERAGE = CoverageTable(
    [
        ("nyc-chelsea", ("10001", "10011")),
        ("nyc-greenwich-village", ("10003", "10012", "10014")),
        ("nyc-west-village", ("10014",)),
        ("nyc-hudson-yards", ("10001", "10018")),
        ("nyc-meatpacking-district", ("10014",)),
        ("nyc-fidi", ("10004", "10005", "10006", "10007", "10038")),
        ("nyc-upper-east-side", ("10021", "10028", "10065", "10075", "10128")),
        ("nyc-upper-west-side", ("10023", "10024", "10025")),
        ("nyc-williamsburg", ("11211", "11249")),
        ("nyc-dumbo", ("11201",)),
        ("nyc-cobble-hill", ("11201", "11231")),
        ("nyc-park-slope", ("11215", "11217")),
        ("nyc-tribeca", ("10007", "10013")),
        ("nyc-soho", ("10012", "10013")),
        ("nyc-noho", ("10003", "10012")),
        ("nyc-nolita", ("10012", "10013")),
    ]
)

__all__ = ["CoverageTable", "NYC_COVERAGE"]
