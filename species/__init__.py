"""
Species identification and normalization.

Reconciles species names coming from the fish detection service, from user
input and from the canonical reference dataset into one taxonomy.

Main Components:
    normalize_name: The only equality test for species names
    SpeciesReference / load_reference: Immutable reference table, loaded once
    SpeciesResolver: Ordered resolution strategies, label -> display name
    normalize_detections: Ranked candidates from raw detection responses
    expand_regions: Country -> continent -> world tag closure
    SpeciesMatcher: Fuzzy suggestions for manual entry
"""
from __future__ import annotations

from .normalizer import normalize_name, title_case, looks_like_scientific
from .regions import expand_regions
from .reference import (
    Habitat,
    SpeciesEntry,
    SpeciesReference,
    SpeciesTags,
    load_reference,
    species_tags,
)
from .resolver import OTHER_SPECIES, ResolvedSpecies, SpeciesResolver
from .detection import (
    DetectionCandidate,
    DetectionResponse,
    RawDetection,
    normalize_detections,
    parse_detection_response,
)
from .matcher import SpeciesMatcher

__all__ = [
    "normalize_name",
    "title_case",
    "looks_like_scientific",
    "expand_regions",
    "Habitat",
    "SpeciesEntry",
    "SpeciesReference",
    "SpeciesTags",
    "load_reference",
    "species_tags",
    "OTHER_SPECIES",
    "ResolvedSpecies",
    "SpeciesResolver",
    "DetectionCandidate",
    "DetectionResponse",
    "RawDetection",
    "normalize_detections",
    "parse_detection_response",
    "SpeciesMatcher",
]
