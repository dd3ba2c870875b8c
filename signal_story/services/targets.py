"""Target registry and resolver.

Domain configuration refers to targets by a logical id (``"chelsea"``,
``"nyc-chelsea"``); the registry holds the canonical ids. The resolver
bridges the two through an ordered list of alias transforms.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from pymongo.collection import Collection

logger = logging.getLogger(__name__)


class TargetRegistry:
    """``exists(canonical_id)`` backed by the neighborhoods collection."""

    def __init__(self, collection: Collection):
        self._collection = collection

    def exists(self, canonical_id: str) -> bool:
        return self._collection.count_documents({"_id": canonical_id}, limit=1) > 0


def alias_candidates(logical_id: str, prefixes: Sequence[str]) -> List[str]:
    """Spellings to try for *logical_id*, verbatim first.

    For every known prefix the id is tried with the prefix stripped (when it
    carries it) or added (when it does not).
    """
    candidates = [logical_id]
    for prefix in prefixes:
        if logical_id.startswith(prefix):
            alias = logical_id[len(prefix) :]
        else:
            alias = f"{prefix}{logical_id}"
        if alias and alias not in candidates:
            candidates.append(alias)
    return candidates


class TargetResolver:
    """Resolve logical ids to canonical ids, caching answers for the run."""

    def __init__(self, registry: TargetRegistry, prefixes: Sequence[str] = ()):
        self._registry = registry
        self._prefixes = tuple(prefixes)
        self._cache: Dict[str, Optional[str]] = {}

    def resolve(self, logical_id: str, extra_prefixes: Sequence[str] = ()) -> Optional[str]:
        prefixes = tuple(extra_prefixes) + tuple(p for p in self._prefixes if p not in extra_prefixes)
        cache_key = f"{logical_id}|{','.join(prefixes)}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        resolved: Optional[str] = None
        for candidate in alias_candidates(logical_id, prefixes):
            if self._registry.exists(candidate):
                resolved = candidate
                break

        if resolved is None:
            logger.warning("Target %s not found in registry", logical_id)
        elif resolved != logical_id:
            logger.info("Resolved target %s -> %s", logical_id, resolved)
        self._cache[cache_key] = resolved
        return resolved


__all__ = ["TargetRegistry", "TargetResolver", "alias_candidates"]
