"""
Species Reference Table for the fishdex core.

Loads the canonical species dataset (scientific name -> German display name,
habitat, rarity, baits, best time of day, region tags) exactly once and exposes
it as an immutable, indexed handle that is passed to the resolver, matcher,
statistics and sync code.

Dataset shape (``config/species_info.json``)::

    {
        "Esox lucius": {
            "name_de": "Hecht",
            "wasser": ["süßwasser"],
            "typ": "raubfisch",
            "schwierigkeit": 3,
            "köder": ["Gummifisch", "Köderfisch"],
            "tageszeit": ["morgens", "abends"],
            "region": ["deutschland"]
        }
    }

Entries without ``name_de`` or a numeric ``schwierigkeit`` are left out of the
resolvable set; they never make the load fail.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple, Union

from loguru import logger

from core.exceptions import SpeciesDataError
from .normalizer import normalize_name
from .regions import WORLD, canonical_region, expand_regions

DEFAULT_SPECIES_INFO = Path(__file__).resolve().parent.parent / "config" / "species_info.json"

FRESHWATER_TAG = "süßwasser"
SALTWATER_TAG = "salzwasser"


class Habitat(str, Enum):
    FRESHWATER = "freshwater"
    SALTWATER = "saltwater"
    BRACKISH = "brackish"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SpeciesEntry:
    """One canonical species; ``scientific_name`` is the stable identity."""
    scientific_name: str
    display_name: str
    habitat: Habitat = Habitat.UNKNOWN
    rarity: int = 1
    baits: Tuple[str, ...] = ()
    best_time_of_day: Optional[str] = None
    regions: FrozenSet[str] = frozenset({WORLD})
    water_type: Optional[str] = None
    fish_type: Optional[str] = None

    @property
    def expanded_regions(self) -> FrozenSet[str]:
        return expand_regions(self.regions)


def clamp_rarity(value: Any) -> Optional[int]:
    """Clamp ``schwierigkeit`` into 1..5; ``None`` when it is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return int(max(1, min(5, round(value))))


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return []


def habitat_from_waters(wasser: Any) -> Habitat:
    waters = {w.lower() for w in _string_list(wasser)}
    fresh = FRESHWATER_TAG in waters
    salt = SALTWATER_TAG in waters
    if fresh and salt:
        return Habitat.BRACKISH
    if fresh:
        return Habitat.FRESHWATER
    if salt:
        return Habitat.SALTWATER
    return Habitat.UNKNOWN


def water_type_from_waters(wasser: Any) -> Optional[str]:
    habitat = habitat_from_waters(wasser)
    return {
        Habitat.BRACKISH: "both",
        Habitat.FRESHWATER: "fresh",
        Habitat.SALTWATER: "salt",
    }.get(habitat)


def fish_type_from_typ(typ: Any) -> Optional[str]:
    if typ == "raubfisch":
        return "predator"
    if typ == "friedfisch":
        return "peace"
    return None


def _regions(value: Any) -> FrozenSet[str]:
    tags = [canonical_region(t) for t in _string_list(value)]
    return frozenset(tags) if tags else frozenset({WORLD})


def build_entry(scientific_name: str, info: Any) -> Optional[SpeciesEntry]:
    """Build an entry from one raw dataset record, or ``None`` if it is unusable."""
    if not isinstance(info, Mapping) or not str(scientific_name).strip():
        return None
    display_name = str(info.get("name_de") or "").strip()
    rarity = clamp_rarity(info.get("schwierigkeit"))
    if not display_name or rarity is None:
        return None
    best_times = _string_list(info.get("tageszeit"))
    return SpeciesEntry(
        scientific_name=str(scientific_name).strip(),
        display_name=display_name,
        habitat=habitat_from_waters(info.get("wasser")),
        rarity=rarity,
        baits=tuple(_string_list(info.get("köder", info.get("koeder")))),
        best_time_of_day=", ".join(best_times) if best_times else None,
        regions=_regions(info.get("region")),
        water_type=water_type_from_waters(info.get("wasser")),
        fish_type=fish_type_from_typ(info.get("typ")),
    )


class SpeciesReference:
    """Immutable, indexed view of the species dataset.

    Build it through :func:`load_reference`; instances are shared read-only for
    the life of the process.
    """

    def __init__(self, entries: List[SpeciesEntry]) -> None:
        by_scientific: Dict[str, SpeciesEntry] = {}
        by_display: Dict[str, SpeciesEntry] = {}
        kept: List[SpeciesEntry] = []

        for entry in entries:
            sci_key = normalize_name(entry.scientific_name)
            if sci_key in by_scientific:
                logger.warning(f"Duplicate scientific name '{entry.scientific_name}' ignored")
                continue
            by_scientific[sci_key] = entry
            kept.append(entry)

            display_key = normalize_name(entry.display_name)
            first = by_display.get(display_key)
            if first is None:
                by_display[display_key] = entry
            else:
                # first loaded entry keeps the display name
                logger.warning(
                    f"Display name collision '{entry.display_name}': "
                    f"{first.scientific_name} kept, {entry.scientific_name} not reachable by name"
                )

        self._entries: Tuple[SpeciesEntry, ...] = tuple(kept)
        self._by_scientific = by_scientific
        self._by_display = by_display

    @property
    def entries(self) -> Tuple[SpeciesEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SpeciesEntry]:
        return iter(self._entries)

    def by_scientific(self, name: Optional[str]) -> Optional[SpeciesEntry]:
        return self._by_scientific.get(normalize_name(name))

    def by_display(self, name: Optional[str]) -> Optional[SpeciesEntry]:
        return self._by_display.get(normalize_name(name))

    def display_names(self) -> List[str]:
        """Unique display names in folded alphabetical order."""
        return sorted({e.display_name for e in self._by_display.values()}, key=normalize_name)

    def species_in_region(self, region: str) -> List[SpeciesEntry]:
        """Entries whose expanded region tags include ``region``."""
        target = canonical_region(region)
        return [e for e in self._entries if target in e.expanded_regions]


def _read_dataset(source: Union[str, Path, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if isinstance(source, Mapping):
        return source
    path = Path(source) if source else DEFAULT_SPECIES_INFO
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SpeciesDataError(f"Failed to load species dataset {path}: {e}") from e
    if not isinstance(data, Mapping):
        raise SpeciesDataError(f"Species dataset {path} must be a JSON object")
    return data


def load_reference(source: Union[str, Path, Mapping[str, Any], None] = None) -> SpeciesReference:
    """Load the species dataset once and return the shared reference handle.

    Args:
        source: JSON file path, an already parsed mapping, or None for the
            bundled dataset

    Raises:
        SpeciesDataError: If the dataset file is missing or not a JSON object
    """
    data = _read_dataset(source)
    entries: List[SpeciesEntry] = []
    for scientific_name, info in data.items():
        entry = build_entry(scientific_name, info)
        if entry is None:
            logger.debug(f"Species '{scientific_name}' excluded: missing name_de or schwierigkeit")
            continue
        entries.append(entry)
    reference = SpeciesReference(entries)
    logger.info(f"Species reference loaded: {len(reference)} of {len(data)} entries resolvable")
    return reference


@dataclass(frozen=True)
class SpeciesTags:
    water: Optional[str] = None
    type: Optional[str] = None


def species_tags(reference: SpeciesReference, name: str) -> Optional[SpeciesTags]:
    """Water and feeding-type tags for a display name, used by catalog filters."""
    entry = reference.by_display(name)
    if entry is None:
        return None
    return SpeciesTags(water=entry.water_type, type=entry.fish_type)
