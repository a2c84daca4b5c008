"""
Species Resolver.

Maps a raw species label (scientific binomial, English common name, German
display name in any casing/spelling) to one canonical reference entry. The
resolution order is an explicit list of strategies, tried in sequence, first
hit wins:

    1. scientific_hint   - the caller supplied scientific name
    2. scientific_label  - the label itself, when it looks like a binomial
    3. common_name       - small English -> German table for AI common names
    4. display_name      - the label already is a (German) display name
    5. fallback          - title-cased label, flagged ``matched=False``

Resolution never raises; unknown labels come back as a readable best-effort
name so callers can warn the user instead of dropping the detection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from .normalizer import looks_like_scientific, normalize_name, title_case
from .reference import SpeciesEntry, SpeciesReference

OTHER_SPECIES = "Other"

# Only for common-name outputs of the detection service.
COMMON_TO_DISPLAY: Dict[str, str] = {
    "pike": "Hecht",
    "perch": "Barsch",
    "zander": "Zander",
    "carp": "Karpfen",
    "catfish": "Wels",
    "trout": "Forelle",
    "eel": "Aal",
    "roach": "Rotauge",
    "bream": "Brassen",
    "tench": "Schleie",
    "dace": "Döbel",
}


@dataclass(frozen=True)
class ResolvedSpecies:
    display_name: str
    scientific_name: Optional[str] = None
    matched: bool = False
    strategy: str = "fallback"


@dataclass(frozen=True)
class _Match:
    display_name: str
    entry: Optional[SpeciesEntry] = None


Strategy = Callable[[str, Optional[str]], Optional[_Match]]


class SpeciesResolver:
    """Resolves raw labels against a loaded :class:`SpeciesReference`.

    Args:
        reference: Reference handle from ``load_reference``
        common_names: Extra English -> display name pairs merged over
            ``COMMON_TO_DISPLAY``
    """

    def __init__(self, reference: SpeciesReference, common_names: Optional[Mapping[str, str]] = None) -> None:
        self.reference = reference
        table = dict(COMMON_TO_DISPLAY)
        table.update(common_names or {})
        self._common_names = {normalize_name(k): v for k, v in table.items() if normalize_name(k) and v}

        self.strategies: List[Tuple[str, Strategy]] = [
            ("scientific_hint", self._by_scientific_hint),
            ("scientific_label", self._by_scientific_label),
            ("common_name", self._by_common_name),
            ("display_name", self._by_display_name),
        ]

    def _by_scientific_hint(self, label: str, hint: Optional[str]) -> Optional[_Match]:
        entry = self.reference.by_scientific(hint) if hint else None
        return _Match(entry.display_name, entry) if entry else None

    def _by_scientific_label(self, label: str, hint: Optional[str]) -> Optional[_Match]:
        if not looks_like_scientific(label):
            return None
        entry = self.reference.by_scientific(label)
        return _Match(entry.display_name, entry) if entry else None

    def _by_common_name(self, label: str, hint: Optional[str]) -> Optional[_Match]:
        display = self._common_names.get(normalize_name(label))
        if display is None:
            return None
        return _Match(display, self.reference.by_display(display))

    def _by_display_name(self, label: str, hint: Optional[str]) -> Optional[_Match]:
        entry = self.reference.by_display(label)
        return _Match(entry.display_name, entry) if entry else None

    def resolve(self, raw_label: Optional[str], scientific_name_hint: Optional[str] = None) -> ResolvedSpecies:
        label = str(raw_label or "").strip()
        hint = str(scientific_name_hint or "").strip() or None

        for name, strategy in self.strategies:
            match = strategy(label, hint)
            if match is None:
                continue
            if name in ("scientific_hint", "scientific_label") or (match.entry is not None and hint is None):
                scientific = match.entry.scientific_name if match.entry else None
            else:
                # a hint that failed on its own is kept over a name match
                scientific = hint or (match.entry.scientific_name if match.entry else None)
            return ResolvedSpecies(match.display_name, scientific, True, name)

        fallback = title_case(label) or title_case(hint) or OTHER_SPECIES
        logger.debug(f"Unresolved species label '{label}' (hint={hint}) -> '{fallback}'")
        scientific = hint or (label if looks_like_scientific(label) else None)
        return ResolvedSpecies(fallback, scientific, False, "fallback")

    def map_to_database(self, name: str) -> str:
        """Canonical display name for storing on a catch, or the input unchanged."""
        resolved = self.resolve(name)
        return resolved.display_name if resolved.matched else name
