"""
Catch statistics aggregation.

Derives the overview and per-species analytics of a user's catch history. All
groupings are single-pass frequency counts keyed by a bucket label; ordering
only happens when the final view is assembled.

Rules worth knowing before changing anything here:
    - Months are keyed by the first day of the stored local date; the trend
      keeps the 12 most recent buckets, every other figure uses all records.
    - Average length divides by all records, average weight only by the
      records that carry a weight.
    - Records without a weather snapshot are left out of every weather figure.
    - Top-N lists sort by descending count; ties keep first-encountered order.
    - An empty history yields ``NO_DATA``, an unknown species ``None``.
"""
from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from species.normalizer import normalize_name
from .models import (
    NO_DATA,
    AggregateView,
    CatchRecord,
    HourBucket,
    LabelCount,
    MonthBucket,
    NoData,
    SpeciesAggregateView,
    WeatherAverages,
    WeatherSourceShare,
    WeatherSnapshot,
)

TREND_MONTHS = 12
TOP_SPECIES = 10
TOP_BAITS = 8
TOP_WEATHER_TYPES = 8
TOP_SPECIES_WEATHER_TYPES = 6

UNKNOWN_WEATHER = "Unbekannt"
UNKNOWN_SOURCE = "unknown"

WEATHER_SOURCE_LABELS = {
    "historical": "Archiv",
    "current": "Aktuell",
    "forecast": "Prognose",
}

# date-fns "MMM" for the German locale
GERMAN_MONTHS = ("Jan.", "Feb.", "März", "Apr.", "Mai", "Juni",
                 "Juli", "Aug.", "Sep.", "Okt.", "Nov.", "Dez.")

LENGTH_BUCKETS = ("<20cm", "20-39cm", "40-59cm", "60-79cm", "80cm+")


def month_key(record: CatchRecord) -> date:
    return date(record.date.year, record.date.month, 1)


def month_label(month: date) -> str:
    """German short label, e.g. ``Mai 24``."""
    return f"{GERMAN_MONTHS[month.month - 1]} {month.year % 100:02d}"


def temperature_band(temperature: float) -> str:
    if temperature < 10:
        return "<10°C"
    if temperature < 15:
        return "10-15°C"
    if temperature < 20:
        return "15-20°C"
    if temperature < 25:
        return "20-25°C"
    return "25°C+"


def length_bucket(length: float) -> str:
    if length < 20:
        return LENGTH_BUCKETS[0]
    if length < 40:
        return LENGTH_BUCKETS[1]
    if length < 60:
        return LENGTH_BUCKETS[2]
    if length < 80:
        return LENGTH_BUCKETS[3]
    return LENGTH_BUCKETS[4]


def weather_source_label(source: Optional[str]) -> str:
    return WEATHER_SOURCE_LABELS.get(source or "", "Unbekannt")


def _increment(counts: Dict, key) -> None:
    counts[key] = counts.get(key, 0) + 1


def _top(counts: Dict[str, int], limit: int) -> List[LabelCount]:
    # sorted() is stable, so equal counts stay in first-encountered order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [LabelCount(label, count) for label, count in ranked[:limit]]


def _mean(values: Sequence[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _monthly_trend(counts: Dict[date, int]) -> List[MonthBucket]:
    recent = sorted(counts.items())[-TREND_MONTHS:]
    return [MonthBucket(month, month_label(month), count) for month, count in recent]


def _hourly(counts: Dict[int, int]) -> List[HourBucket]:
    return [HourBucket(hour, f"{hour}:00", counts.get(hour, 0)) for hour in range(24)]


def _weather_sources(counts: Dict[str, int], total: int) -> List[WeatherSourceShare]:
    return [
        WeatherSourceShare(
            source=source,
            label=weather_source_label(source),
            count=count,
            percent=round(count / total * 100) if total else 0,
        )
        for source, count in counts.items()
    ]


def _weather_averages(snapshots: List[WeatherSnapshot]) -> Optional[WeatherAverages]:
    if not snapshots:
        return None

    def average(getter: Callable[[WeatherSnapshot], Optional[float]]) -> Optional[float]:
        return _mean([v for v in (getter(s) for s in snapshots) if v is not None])

    return WeatherAverages(
        temperature=average(lambda s: s.temperature),
        wind_speed=average(lambda s: s.wind_speed),
        pressure=average(lambda s: s.pressure),
        humidity=average(lambda s: s.humidity),
    )


def average_length(catches: Sequence[CatchRecord]) -> Optional[float]:
    """Mean length over every record."""
    return _mean([c.length for c in catches])


def average_weight(catches: Sequence[CatchRecord]) -> Optional[float]:
    """Mean weight over the records that have one; ``None`` if none do."""
    return _mean([c.weight for c in catches if c.has_weight])


def compute_overview(catches: Iterable[CatchRecord]) -> Union[AggregateView, NoData]:
    """Aggregate a whole catch history.

    Returns:
        The overview, or ``NO_DATA`` when there are no catches
    """
    catches = list(catches)
    if not catches:
        return NO_DATA

    months: Dict[date, int] = {}
    species: Dict[str, int] = {}
    baits: Dict[str, int] = {}
    hours: Dict[int, int] = {}
    bands: Dict[str, int] = {}
    weather_types: Dict[str, int] = {}
    sources: Dict[str, int] = {}
    snapshots: List[WeatherSnapshot] = []

    for record in catches:
        _increment(months, month_key(record))
        _increment(species, record.species)
        _increment(hours, record.date.hour)
        if record.bait:
            _increment(baits, record.bait)

        weather = record.weather
        if weather is None:
            continue
        snapshots.append(weather)
        if weather.temperature is not None:
            _increment(bands, temperature_band(weather.temperature))
        _increment(weather_types, weather.description or UNKNOWN_WEATHER)
        _increment(sources, weather.source or UNKNOWN_SOURCE)

    return AggregateView(
        total=len(catches),
        avg_length=average_length(catches),
        avg_weight=average_weight(catches),
        catches_per_month=_monthly_trend(months),
        species_distribution=_top(species, TOP_SPECIES),
        bait_distribution=_top(baits, TOP_BAITS),
        hourly=_hourly(hours),
        temperature_bands=[LabelCount(label, count) for label, count in bands.items()],
        weather_types=_top(weather_types, TOP_WEATHER_TYPES),
        weather_sources=_weather_sources(sources, len(snapshots)),
        weather_averages=_weather_averages(snapshots),
        weather_count=len(snapshots),
    )


def compute_species_detail(catches: Iterable[CatchRecord], species: str) -> Optional[SpeciesAggregateView]:
    """Aggregate the catches of one species (matched by normalized name).

    Returns:
        The detail view, or ``None`` when the species has no catches
    """
    key = normalize_name(species)
    selected = [c for c in catches if key and normalize_name(c.species) == key]
    if not selected:
        return None

    months: Dict[date, int] = {}
    hours: Dict[int, int] = {}
    lengths: Dict[str, int] = {label: 0 for label in LENGTH_BUCKETS}
    weather_types: Dict[str, int] = {}
    sources: Dict[str, int] = {}

    for record in selected:
        _increment(months, month_key(record))
        _increment(hours, record.date.hour)
        _increment(lengths, length_bucket(record.length))
        if record.weather is not None:
            _increment(weather_types, record.weather.description or UNKNOWN_WEATHER)
            _increment(sources, record.weather.source or UNKNOWN_SOURCE)

    return SpeciesAggregateView(
        species=selected[0].species,
        total=len(selected),
        avg_length=average_length(selected),
        avg_weight=average_weight(selected),
        biggest=max(c.length for c in selected),
        monthly=_monthly_trend(months),
        hourly=_hourly(hours),
        length_buckets=[LabelCount(label, count) for label, count in lengths.items()],
        weather_types=_top(weather_types, TOP_SPECIES_WEATHER_TYPES),
        weather_sources=_weather_sources(sources, sum(sources.values())),
    )


def species_options(catches: Iterable[CatchRecord]) -> List[str]:
    """Distinct species names of a history, for the detail selector."""
    unique: Dict[str, str] = {}
    for record in catches:
        if record.species:
            unique.setdefault(normalize_name(record.species), record.species)
    return [unique[key] for key in sorted(unique)]
