"""Region tag closure (country -> continent -> world)."""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable

from .normalizer import normalize_name

WORLD = "weltweit"

# child tag -> parent tag, canonical spelling as stored in the reference data
REGION_PARENTS: Dict[str, str] = {
    "deutschland": "europa",
    "österreich": "europa",
    "schweiz": "europa",
    "niederlande": "europa",
    "dänemark": "europa",
    "skandinavien": "europa",
    "nordsee": "europa",
    "ostsee": "europa",
    "mittelmeer": "europa",
    "europa": WORLD,
    "nordamerika": WORLD,
    "südamerika": WORLD,
    "asien": WORLD,
    "afrika": WORLD,
    "ozeanien": WORLD,
    "atlantik": WORLD,
}

_CANONICAL: Dict[str, str] = {normalize_name(tag): tag for tag in (*REGION_PARENTS, WORLD)}


def canonical_region(tag: str) -> str:
    """Known tags in their canonical spelling; unknown tags stripped but kept."""
    return _CANONICAL.get(normalize_name(tag), str(tag).strip())


def expand_regions(tags: Iterable[str]) -> FrozenSet[str]:
    """Add every implied parent region to ``tags``.

    The result always contains the given tags (stripped). A known tag in a
    non-canonical spelling also adds its canonical form, which is what the
    parent rules are applied to until nothing changes.
    """
    given = {str(t).strip() for t in tags if t and str(t).strip()}
    expanded = given | {canonical_region(t) for t in given}
    while True:
        parents = {REGION_PARENTS[t] for t in expanded if t in REGION_PARENTS}
        if parents <= expanded:
            return frozenset(expanded)
        expanded |= parents
