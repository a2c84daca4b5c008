"""Unit tests for catch statistics aggregation."""
from datetime import date, datetime

import pytest

from reports.catch_statistics import (
    TOP_BAITS,
    TOP_SPECIES,
    compute_overview,
    compute_species_detail,
    month_label,
    species_options,
    temperature_band,
)
from reports.models import NO_DATA, CatchRecord, NoData, WeatherSnapshot, load_catches, parse_record_date


def make_catch(day="2024-05-10T07:30:00", species="Hecht", length=50.0, weight=None, bait=None, weather=None):
    return CatchRecord(
        date=parse_record_date(day),
        species=species,
        length=length,
        weight=weight,
        bait=bait,
        weather=weather,
    )


class TestCatchRecord:
    """Tests for backend row conversion."""

    def test_from_dict(self):
        # Act
        record = CatchRecord.from_dict({
            "id": 1,
            "date": "2024-05-10T18:45:00",
            "species": " Hecht ",
            "length": "72.5",
            "weight": 3100,
            "location": {"name": "Rhein"},
            "bait": "Gummifisch",
            "weather": {"temperature": 14.2, "windSpeed": 3.1, "description": "bewölkt", "source": "current"},
            "photo_url": "ignored",
        })

        # Assert
        assert record.date == datetime(2024, 5, 10, 18, 45)
        assert record.species == "Hecht"
        assert record.length == 72.5
        assert record.has_weight
        assert record.location == "Rhein"
        assert record.weather.wind_speed == 3.1
        assert record.weather.source == "current"

    def test_zero_weight_counts_as_missing(self):
        # Assert
        assert not make_catch(weight=0).has_weight
        assert not make_catch(weight=None).has_weight

    def test_invalid_date_raises(self):
        # Assert
        with pytest.raises(ValueError):
            CatchRecord.from_dict({"date": "not a date", "species": "Hecht", "length": 40})
        with pytest.raises(ValueError):
            CatchRecord.from_dict({"species": "Hecht", "length": 40})

    def test_load_catches_skips_bad_rows(self, log_messages):
        # Act
        records = load_catches([
            {"id": 1, "date": "2024-05-10", "species": "Hecht", "length": 40},
            {"id": 2, "date": None, "species": "Barsch", "length": 20},
        ])

        # Assert
        assert len(records) == 1
        assert any("Skipping catch row 2" in m for m in log_messages)

    def test_load_catches_keeps_records_in_order(self):
        # Arrange
        first = make_catch(species="Zander")
        last = make_catch(species="Aal")

        # Act
        records = load_catches([first, {"id": 2, "date": "2024-05-10", "species": "Hecht", "length": 40}, last])

        # Assert
        assert [r.species for r in records] == ["Zander", "Hecht", "Aal"]
        assert records[0] is first


class TestNoData:
    """Tests for the empty-history sentinel."""

    def test_singleton_and_falsy(self):
        # Assert
        assert NoData() is NO_DATA
        assert not NO_DATA
        assert repr(NO_DATA) == "NO_DATA"


class TestComputeOverview:
    """Tests for compute_overview."""

    def test_empty_history_is_no_data(self):
        # Assert
        assert compute_overview([]) is NO_DATA

    def test_average_weight_ignores_missing_weights(self):
        # Arrange
        catches = [
            make_catch(length=40, weight=1000),
            make_catch(length=60, weight=2000),
            make_catch(length=50, weight=None),
        ]

        # Act
        view = compute_overview(catches)

        # Assert
        assert view.total == 3
        assert view.avg_length == 50.0
        assert view.avg_weight == 1500.0
        assert view.avg_weight_kg == 1.5

    def test_no_weights_at_all(self):
        # Act
        view = compute_overview([make_catch(weight=None)])

        # Assert
        assert view.avg_weight is None
        assert view.avg_weight_kg is None

    def test_species_distribution_top_ten_stable(self):
        # Arrange: 15 species, one catch each, so every count ties
        catches = [make_catch(species=f"Art {i:02d}") for i in range(15)]

        # Act
        view = compute_overview(catches)

        # Assert
        assert len(view.species_distribution) == TOP_SPECIES
        assert [e.label for e in view.species_distribution] == [f"Art {i:02d}" for i in range(10)]

    def test_species_distribution_by_count(self):
        # Arrange
        catches = [make_catch(species="Barsch")] + [make_catch(species="Hecht")] * 3

        # Act
        view = compute_overview(catches)

        # Assert
        assert view.top_species.label == "Hecht"
        assert view.top_species.count == 3

    def test_monthly_trend_keeps_last_twelve_months(self):
        # Arrange: 20 distinct months, Jan 2023 .. Aug 2024
        catches = []
        for i in range(20):
            year, month = 2023 + i // 12, i % 12 + 1
            catches.append(make_catch(day=f"{year}-{month:02d}-15T10:00:00", length=10.0 + i))

        # Act
        view = compute_overview(catches)

        # Assert
        assert len(view.catches_per_month) == 12
        assert view.catches_per_month[0].month == date(2023, 9, 1)
        assert view.catches_per_month[-1].month == date(2024, 8, 1)
        assert view.catches_per_month[-1].label == "Aug. 24"
        assert view.total == 20
        assert view.avg_length == pytest.approx(19.5)

    def test_hourly_has_all_hours(self):
        # Arrange
        catches = [make_catch(day="2024-05-10T06:15:00"), make_catch(day="2024-05-11T06:50:00")]

        # Act
        view = compute_overview(catches)

        # Assert
        assert len(view.hourly) == 24
        assert view.hourly[6].count == 2
        assert view.hourly[6].label == "6:00"
        assert sum(b.count for b in view.hourly) == 2

    def test_baits_skip_empty(self):
        # Arrange
        catches = [make_catch(bait="Wurm"), make_catch(bait=None), make_catch(bait="Wurm"), make_catch(bait="Mais")]

        # Act
        view = compute_overview(catches)

        # Assert
        assert [(e.label, e.count) for e in view.bait_distribution] == [("Wurm", 2), ("Mais", 1)]

    def test_bait_distribution_top_eight_keeps_first_encountered_ties(self):
        # Arrange
        catches = [make_catch(bait=f"Koeder {i:02d}") for i in range(10)]
        catches.append(make_catch(bait="Koeder 07"))

        # Act
        view = compute_overview(catches)

        # Assert
        assert len(view.bait_distribution) == TOP_BAITS
        assert [e.label for e in view.bait_distribution] == ["Koeder 07"] + [f"Koeder {i:02d}" for i in range(7)]
        assert view.top_bait.count == 2

    def test_weather_figures(self):
        # Arrange
        catches = [
            make_catch(weather=WeatherSnapshot(temperature=8.0, wind_speed=2.0, description="klar", source="current")),
            make_catch(weather=WeatherSnapshot(temperature=17.5, description="klar", source="historical")),
            make_catch(weather=WeatherSnapshot(description=None, source="current")),
            make_catch(weather=None),
        ]

        # Act
        view = compute_overview(catches)

        # Assert
        assert view.weather_count == 3
        assert [(e.label, e.count) for e in view.temperature_bands] == [("<10°C", 1), ("15-20°C", 1)]
        assert [(e.label, e.count) for e in view.weather_types] == [("klar", 2), ("Unbekannt", 1)]
        assert [(s.source, s.label, s.count, s.percent) for s in view.weather_sources] == [
            ("current", "Aktuell", 2, 67),
            ("historical", "Archiv", 1, 33),
        ]
        assert view.weather_averages.temperature == pytest.approx(12.75)
        assert view.weather_averages.wind_speed == 2.0
        assert view.weather_averages.pressure is None

    def test_no_weather(self):
        # Act
        view = compute_overview([make_catch()])

        # Assert
        assert view.weather_count == 0
        assert view.weather_averages is None
        assert view.weather_sources == []


class TestComputeSpeciesDetail:
    """Tests for compute_species_detail."""

    def test_unknown_species_is_none(self):
        # Assert
        assert compute_species_detail([make_catch(species="Hecht")], "Zander") is None
        assert compute_species_detail([], "Hecht") is None

    def test_matches_by_normalized_name(self):
        # Arrange
        catches = [
            make_catch(species="Döbel", length=35),
            make_catch(species="doebel", length=45, weight=900),
            make_catch(species="Hecht", length=80),
        ]

        # Act
        view = compute_species_detail(catches, "DÖBEL")

        # Assert
        assert view.total == 2
        assert view.species == "Döbel"
        assert view.avg_length == 40.0
        assert view.avg_weight == 900.0
        assert view.biggest == 45

    def test_length_buckets_zero_filled(self):
        # Arrange
        catches = [make_catch(length=length) for length in (15, 19.9, 20, 65, 80, 120)]

        # Act
        view = compute_species_detail(catches, "Hecht")

        # Assert
        assert [(e.label, e.count) for e in view.length_buckets] == [
            ("<20cm", 2), ("20-39cm", 1), ("40-59cm", 0), ("60-79cm", 1), ("80cm+", 2),
        ]

    def test_weather_sources_share(self):
        # Arrange
        catches = [
            make_catch(weather=WeatherSnapshot(source="forecast", description="Regen")),
            make_catch(weather=WeatherSnapshot(source="forecast", description="Regen")),
            make_catch(weather=WeatherSnapshot(source="current", description="klar")),
            make_catch(weather=WeatherSnapshot(source="current", description="klar")),
        ]

        # Act
        view = compute_species_detail(catches, "Hecht")

        # Assert
        assert [(s.label, s.percent) for s in view.weather_sources] == [("Prognose", 50), ("Aktuell", 50)]
        assert [(e.label, e.count) for e in view.weather_types] == [("Regen", 2), ("klar", 2)]


class TestHelpers:
    """Tests for labels and selector options."""

    def test_month_label(self):
        # Assert
        assert month_label(date(2024, 5, 1)) == "Mai 24"
        assert month_label(date(2025, 3, 1)) == "März 25"

    def test_species_options(self):
        # Arrange
        catches = [make_catch(species="Hecht"), make_catch(species="barsch"), make_catch(species="hecht")]

        # Assert
        assert species_options(catches) == ["barsch", "Hecht"]

    @pytest.mark.parametrize("temperature,band", [
        (9.9, "<10°C"),
        (10.0, "10-15°C"),
        (15.0, "15-20°C"),
        (20.0, "20-25°C"),
        (25.0, "25°C+"),
        (-3.0, "<10°C"),
    ])
    def test_temperature_band_boundaries(self, temperature, band):
        # Assert
        assert temperature_band(temperature) == band
