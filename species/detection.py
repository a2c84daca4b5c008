"""
Detection Response Normalizer.

Turns raw responses of the fish image-recognition service into a ranked list
of :class:`DetectionCandidate`. The service is inconsistent about its item
shape, e.g.::

    {"name": "Esox lucius", "distance": 0.21, "species_id": "123"}
    {"species": "pike", "accuracy": 0.92, "scientific_name": "Esox lucius"}

Every optional field is declared on :class:`RawDetection`. A bad field decodes
to its default and a bad item to an empty candidate with confidence 0. A
response without a ``results`` list yields no candidates.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from .resolver import SpeciesResolver


def clamp01(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except (OverflowError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class RawDetection:
    """One decoded item of the service's ``results`` array."""
    species: Optional[str] = None
    name: Optional[str] = None
    scientific_name: Optional[str] = None
    accuracy: Optional[float] = None
    distance: Optional[float] = None
    species_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def decode(cls, item: Any) -> "RawDetection":
        if not isinstance(item, Mapping):
            return cls()
        species_id = item.get("species_id")
        if species_id is None:
            species_id = item.get("speciesId", item.get("id"))
        return cls(
            species=_text(item.get("species")),
            name=_text(item.get("name")),
            scientific_name=_text(item.get("scientific_name")),
            accuracy=_number(item.get("accuracy")),
            distance=_number(item.get("distance")),
            species_id=_text(species_id),
            raw=dict(item),
        )

    @property
    def label(self) -> str:
        return self.species or self.name or self.scientific_name or ""

    @property
    def confidence(self) -> float:
        """``accuracy`` when given, else ``1 - distance``, else 0; always in [0, 1]."""
        if self.accuracy is not None:
            return clamp01(self.accuracy)
        if self.distance is not None:
            return clamp01(1.0 - self.distance)
        return 0.0


@dataclass(frozen=True)
class DetectionCandidate:
    raw_label: str
    confidence: float
    resolved_species: str
    scientific_name: Optional[str] = None
    external_id: Optional[str] = None
    matched: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class DetectionResponse:
    detections: int
    results: List[DetectionCandidate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.results


def build_candidate(raw: RawDetection, resolver: SpeciesResolver) -> DetectionCandidate:
    resolved = resolver.resolve(raw.label, raw.scientific_name)
    return DetectionCandidate(
        raw_label=raw.label,
        confidence=raw.confidence,
        resolved_species=resolved.display_name,
        scientific_name=resolved.scientific_name,
        external_id=raw.species_id,
        matched=resolved.matched,
        raw=raw.raw,
    )


def _raw_results(raw_response: Any) -> List[Any]:
    if not isinstance(raw_response, Mapping):
        return []
    results = raw_response.get("results")
    return results if isinstance(results, list) else []


def normalize_detections(raw_response: Any, top_k: int, resolver: SpeciesResolver) -> List[DetectionCandidate]:
    """Resolve, rank by descending confidence and keep the best ``top_k``."""
    if top_k <= 0:
        return []
    candidates = [build_candidate(RawDetection.decode(item), resolver) for item in _raw_results(raw_response)]
    # sorted() is stable: equal confidences keep the service's order
    candidates = sorted(candidates, key=lambda c: c.confidence, reverse=True)
    return candidates[:top_k]


def parse_detection_response(raw_response: Any, top_k: int, resolver: SpeciesResolver) -> DetectionResponse:
    """Normalize a full response, keeping the service's reported detection count."""
    items = _raw_results(raw_response)
    results = normalize_detections(raw_response, top_k, resolver)
    reported = _number(raw_response.get("detections")) if isinstance(raw_response, Mapping) else None
    detections = int(reported) if reported and reported > 0 else len(items)
    if not results:
        logger.info("Detection response contained no usable candidates")
    return DetectionResponse(detections=detections, results=results)
