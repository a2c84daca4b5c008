"""
Catch statistics for the fishdex core.

Modules:
    models: Catch records, weather snapshots and aggregate views
    catch_statistics: Overview and per-species aggregation
    export: DataFrame conversion and Excel export of aggregate views
"""
from __future__ import annotations

from .models import (
    NO_DATA,
    AggregateView,
    CatchRecord,
    NoData,
    SpeciesAggregateView,
    WeatherSnapshot,
    load_catches,
)
from .catch_statistics import compute_overview, compute_species_detail, species_options
from .export import StatisticsExporter

__all__ = [
    "NO_DATA",
    "AggregateView",
    "CatchRecord",
    "NoData",
    "SpeciesAggregateView",
    "WeatherSnapshot",
    "load_catches",
    "compute_overview",
    "compute_species_detail",
    "species_options",
    "StatisticsExporter",
]
