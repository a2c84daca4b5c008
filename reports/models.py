"""Catch records and the aggregate views derived from them."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd
from loguru import logger


def _float_or_none(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_record_date(value: Any) -> datetime:
    """Parse the stored catch date without any timezone conversion.

    Raises:
        ValueError: If the value is not a date
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value is None or value == "":
        raise ValueError("catch date is missing")
    try:
        parsed = pd.Timestamp(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid catch date {value!r}") from e
    if pd.isna(parsed):
        raise ValueError(f"invalid catch date {value!r}")
    return parsed.to_pydatetime()


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: Optional[float] = None
    wind_speed: Optional[float] = None
    pressure: Optional[float] = None
    humidity: Optional[float] = None
    description: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeatherSnapshot":
        wind = data.get("windSpeed", data.get("wind_speed", data.get("wind")))
        return cls(
            temperature=_float_or_none(data.get("temperature")),
            wind_speed=_float_or_none(wind),
            pressure=_float_or_none(data.get("pressure")),
            humidity=_float_or_none(data.get("humidity")),
            description=_text_or_none(data.get("description")),
            source=_text_or_none(data.get("source")),
        )


@dataclass(frozen=True)
class CatchRecord:
    """A logged catch as read from the backend.

    ``weight`` is in grams, ``length`` in centimeters; ``date`` is the stored
    local time.
    """
    date: datetime
    species: str
    length: float
    weight: Optional[float] = None
    location: Optional[str] = None
    bait: Optional[str] = None
    weather: Optional[WeatherSnapshot] = None

    @property
    def has_weight(self) -> bool:
        return self.weight is not None and self.weight > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatchRecord":
        """Build a record from a backend row; unknown keys are ignored.

        Raises:
            ValueError: If the date is missing or invalid
        """
        weather = data.get("weather")
        location = data.get("location")
        if isinstance(location, Mapping):
            location = location.get("name") or location.get("label")
        return cls(
            date=parse_record_date(data.get("date")),
            species=str(data.get("species") or "").strip(),
            length=_float_or_none(data.get("length")) or 0.0,
            weight=_float_or_none(data.get("weight")),
            location=_text_or_none(location),
            bait=_text_or_none(data.get("bait")),
            weather=WeatherSnapshot.from_dict(weather) if isinstance(weather, Mapping) else None,
        )


def load_catches(rows: Iterable[Union[CatchRecord, Mapping[str, Any]]]) -> List[CatchRecord]:
    """Convert backend rows in order, skipping (and logging) rows with an unusable date.

    Items that already are :class:`CatchRecord` are kept as they are.
    """
    records: List[CatchRecord] = []
    for row in rows:
        if isinstance(row, CatchRecord):
            records.append(row)
            continue
        try:
            records.append(CatchRecord.from_dict(row))
        except ValueError as e:
            logger.warning(f"Skipping catch row {row.get('id', '?')}: {e}")
    return records


class NoData:
    """Result of aggregating an empty catch history.

    Falsy, and never equal to a zero-filled view.
    """
    _instance: Optional["NoData"] = None

    def __new__(cls) -> "NoData":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = NoData()


@dataclass(frozen=True)
class LabelCount:
    label: str
    count: int


@dataclass(frozen=True)
class MonthBucket:
    month: date
    label: str
    count: int


@dataclass(frozen=True)
class HourBucket:
    hour: int
    label: str
    count: int


@dataclass(frozen=True)
class WeatherSourceShare:
    source: str
    label: str
    count: int
    percent: int


@dataclass(frozen=True)
class WeatherAverages:
    temperature: Optional[float]
    wind_speed: Optional[float]
    pressure: Optional[float]
    humidity: Optional[float]


@dataclass(frozen=True)
class AggregateView:
    """Cross-species statistics over a whole catch history."""
    total: int
    avg_length: float
    avg_weight: Optional[float]
    catches_per_month: List[MonthBucket] = field(default_factory=list)
    species_distribution: List[LabelCount] = field(default_factory=list)
    bait_distribution: List[LabelCount] = field(default_factory=list)
    hourly: List[HourBucket] = field(default_factory=list)
    temperature_bands: List[LabelCount] = field(default_factory=list)
    weather_types: List[LabelCount] = field(default_factory=list)
    weather_sources: List[WeatherSourceShare] = field(default_factory=list)
    weather_averages: Optional[WeatherAverages] = None
    weather_count: int = 0

    @property
    def avg_weight_kg(self) -> Optional[float]:
        return None if self.avg_weight is None else self.avg_weight / 1000.0

    @property
    def top_species(self) -> Optional[LabelCount]:
        return self.species_distribution[0] if self.species_distribution else None

    @property
    def top_bait(self) -> Optional[LabelCount]:
        return self.bait_distribution[0] if self.bait_distribution else None


@dataclass(frozen=True)
class SpeciesAggregateView:
    """Statistics for the catches of one species."""
    species: str
    total: int
    avg_length: float
    avg_weight: Optional[float]
    biggest: float
    monthly: List[MonthBucket] = field(default_factory=list)
    hourly: List[HourBucket] = field(default_factory=list)
    length_buckets: List[LabelCount] = field(default_factory=list)
    weather_types: List[LabelCount] = field(default_factory=list)
    weather_sources: List[WeatherSourceShare] = field(default_factory=list)

    @property
    def avg_weight_kg(self) -> Optional[float]:
        return None if self.avg_weight is None else self.avg_weight / 1000.0
