"""
Species suggestions for manual entry.

When the detection service returns nothing usable the user types the species
name by hand; this module ranks reference display names against the partial
input with rapidfuzz. Suggestions are only a UI aid: equality between names is
still decided by ``normalize_name`` alone.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from loguru import logger
from rapidfuzz import fuzz, process

from .normalizer import normalize_name
from .reference import SpeciesReference


class SpeciesMatcher:
    """Fuzzy ranking of display names for autocomplete.

    Usage:
        matcher = SpeciesMatcher(reference)
        matcher.suggest("hech")  # [("Hecht", 1.0), ...]
    """

    def __init__(self, reference: SpeciesReference, score_cutoff: float = 50.0) -> None:
        self.reference = reference
        self.score_cutoff = score_cutoff
        # normalized key -> display name, in folded alphabetical order
        self._choices: Dict[str, str] = {normalize_name(n): n for n in reference.display_names()}
        logger.debug(f"SpeciesMatcher initialized with {len(self._choices)} species")

    def all_species(self) -> List[str]:
        """Every resolvable display name, sorted for pick lists."""
        return list(self._choices.values())

    def suggest(self, partial_text: str, limit: int = 5) -> List[Tuple[str, float]]:
        """Rank display names for ``partial_text``.

        Args:
            partial_text: What the user typed so far
            limit: Maximum number of suggestions

        Returns:
            (display name, confidence 0..1) pairs, best first; exact prefix
            matches always rank first
        """
        query = normalize_name(partial_text)
        if not query or limit <= 0:
            return []

        prefix_hits = [(name, 1.0) for key, name in self._choices.items() if key.startswith(query)]
        if len(prefix_hits) >= limit:
            return prefix_hits[:limit]

        seen = {name for name, _ in prefix_hits}
        matches = process.extract(
            query,
            list(self._choices.keys()),
            scorer=fuzz.WRatio,
            limit=limit + len(prefix_hits),
            score_cutoff=self.score_cutoff,
        )
        suggestions = list(prefix_hits)
        for key, score, _ in matches:
            name = self._choices[key]
            if name in seen:
                continue
            seen.add(name)
            suggestions.append((name, round(score / 100.0, 3)))
            if len(suggestions) >= limit:
                break
        return suggestions
