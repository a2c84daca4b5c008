"""
Statistics export.

Converts aggregate views into pandas DataFrames and writes them as a
multi-sheet Excel workbook (one sheet per chart of the statistics screen).
"""
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd
from loguru import logger

from core.error_handler import log_execution_time
from .models import AggregateView, NoData, SpeciesAggregateView


def overview_frames(view: AggregateView) -> Dict[str, pd.DataFrame]:
    """One DataFrame per overview section, keyed by sheet name."""
    averages = asdict(view.weather_averages) if view.weather_averages else {}
    summary = pd.DataFrame(
        [
            {"Metric": "Total catches", "Value": view.total},
            {"Metric": "Average length (cm)", "Value": round(view.avg_length, 1)},
            {"Metric": "Average weight (kg)", "Value": None if view.avg_weight_kg is None else round(view.avg_weight_kg, 2)},
            {"Metric": "Top species", "Value": view.top_species.label if view.top_species else None},
            {"Metric": "Top bait", "Value": view.top_bait.label if view.top_bait else None},
            {"Metric": "Catches with weather", "Value": view.weather_count},
            *({"Metric": f"Average {name}", "Value": value} for name, value in averages.items()),
        ]
    )
    return {
        "Summary": summary,
        "Months": pd.DataFrame([{"Month": b.label, "Catches": b.count} for b in view.catches_per_month]),
        "Species": pd.DataFrame([{"Species": e.label, "Catches": e.count} for e in view.species_distribution]),
        "Baits": pd.DataFrame([{"Bait": e.label, "Catches": e.count} for e in view.bait_distribution]),
        "Hours": pd.DataFrame([{"Hour": b.label, "Catches": b.count} for b in view.hourly]),
        "Temperature": pd.DataFrame([{"Band": e.label, "Catches": e.count} for e in view.temperature_bands]),
        "Weather": pd.DataFrame([{"Weather": e.label, "Catches": e.count} for e in view.weather_types]),
        "Sources": pd.DataFrame(
            [{"Source": s.label, "Catches": s.count, "Percent": s.percent} for s in view.weather_sources]
        ),
    }


def species_frames(view: SpeciesAggregateView) -> Dict[str, pd.DataFrame]:
    summary = pd.DataFrame(
        [
            {"Metric": "Species", "Value": view.species},
            {"Metric": "Total catches", "Value": view.total},
            {"Metric": "Average length (cm)", "Value": round(view.avg_length, 1)},
            {"Metric": "Average weight (kg)", "Value": None if view.avg_weight_kg is None else round(view.avg_weight_kg, 2)},
            {"Metric": "Biggest (cm)", "Value": view.biggest},
        ]
    )
    return {
        "Summary": summary,
        "Months": pd.DataFrame([{"Month": b.label, "Catches": b.count} for b in view.monthly]),
        "Hours": pd.DataFrame([{"Hour": b.label, "Catches": b.count} for b in view.hourly]),
        "Lengths": pd.DataFrame([{"Length": e.label, "Catches": e.count} for e in view.length_buckets]),
        "Weather": pd.DataFrame([{"Weather": e.label, "Catches": e.count} for e in view.weather_types]),
    }


class StatisticsExporter:
    """Writes aggregate views to ``.xlsx`` workbooks in ``output_dir``."""

    def __init__(self, output_dir: Union[str, Path] = "reports/out") -> None:
        self.output_dir = Path(output_dir)

    @log_execution_time()
    def export(
        self,
        view: Union[AggregateView, SpeciesAggregateView, NoData, None],
        filename: Optional[str] = None,
    ) -> Optional[Path]:
        """Export a view; returns the workbook path, or None when there is nothing to write."""
        if isinstance(view, AggregateView):
            frames = overview_frames(view)
            stem = "catch_overview"
        elif isinstance(view, SpeciesAggregateView):
            frames = species_frames(view)
            stem = f"species_{view.species.replace(' ', '_').lower()}"
        else:
            logger.info("No catch data to export")
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_path = self.output_dir / (filename or f"{stem}_{stamp}.xlsx")
        with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
            for sheet, frame in frames.items():
                frame.to_excel(writer, sheet_name=sheet, index=False)
        logger.info(f"Statistics exported to {out_path}")
        return out_path
