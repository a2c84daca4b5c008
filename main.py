"""Main entry point for the fishdex core.

Commands:
    detect <image path or URL>   classify a photo and print ranked candidates
    stats <catches.json>         overview (or ``--species NAME``) statistics,
                                 optionally exported with ``--export``
    species [PARTIAL]            list reference species or suggest matches

Shared options (``--topk``, ``--table``, ``--debug``, ``--log-level``) are
handled by the configuration loader and may appear anywhere.
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from app.startup import FishdexContext, initialize
from app.use_cases import ComputeOverviewUseCase, ComputeSpeciesDetailUseCase, DetectSpeciesUseCase
from config.service import ConfigurationServiceFactory
from reports.export import StatisticsExporter
from reports.models import NO_DATA


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fishdex", description="Fishdex core tools")
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Detect the species on a photo")
    detect.add_argument("image", help="Local image path or http(s) URL")

    stats = sub.add_parser("stats", help="Catch statistics from a JSON file of catch records")
    stats.add_argument("catches", help="JSON file holding a list of catch records")
    stats.add_argument("--species", help="Per-species detail instead of the overview")
    stats.add_argument("--export", action="store_true", help="Write an Excel workbook")

    species = sub.add_parser("species", help="List species or suggest matches")
    species.add_argument("partial", nargs="?", default="", help="Partial species name")
    return parser


def _run_detect(ctx: FishdexContext, image: str) -> int:
    result = DetectSpeciesUseCase(ctx.api_client).execute(image, ctx.config.top_k)
    if result.is_failure():
        print(f"Detection failed: {result.error}", file=sys.stderr)
        return 1

    response = result.value
    if response.is_empty:
        print("No fish detected. Pick the species manually:")
        for name in ctx.matcher.all_species():
            print(f"  {name}")
        return 0

    for rank, candidate in enumerate(response.results, start=1):
        marker = "" if candidate.matched else " (not in reference)"
        scientific = f" [{candidate.scientific_name}]" if candidate.scientific_name else ""
        print(f"{rank}. {candidate.resolved_species}{scientific} {candidate.confidence:.0%}{marker}")
    return 0


def _run_stats(ctx: FishdexContext, path: str, species: Optional[str], export: bool) -> int:
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)

    if species:
        result = ComputeSpeciesDetailUseCase().execute(rows, species)
    else:
        result = ComputeOverviewUseCase().execute(rows)
    if result.is_failure():
        print(f"Statistics failed: {result.error}", file=sys.stderr)
        return 1

    view = result.value
    if view is NO_DATA or view is None:
        print("No catches recorded" if not species else f"No catches of {species}")
        return 0

    print(f"Catches: {view.total}")
    print(f"Average length: {view.avg_length:.1f} cm")
    weight = view.avg_weight_kg
    print(f"Average weight: {weight:.2f} kg" if weight is not None else "Average weight: -")
    if not species:
        top = view.top_species
        print(f"Top species: {top.label} ({top.count})" if top else "Top species: -")
        bait = view.top_bait
        print(f"Top bait: {bait.label} ({bait.count})" if bait else "Top bait: -")

    if export:
        out_path = StatisticsExporter(ctx.config.export_dir).export(view)
        print(f"Exported to {out_path}")
    return 0


def _run_species(ctx: FishdexContext, partial: str) -> int:
    if not partial:
        for name in ctx.matcher.all_species():
            print(name)
        return 0
    for name, score in ctx.matcher.suggest(partial):
        print(f"{name} ({score:.2f})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    load_dotenv()
    config_service, remaining = ConfigurationServiceFactory.create_from_args(
        sys.argv[1:] if argv is None else argv
    )
    args = _build_parser().parse_args(remaining)
    ctx = initialize(config_service)

    if args.command == "detect":
        return _run_detect(ctx, args.image)
    if args.command == "stats":
        return _run_stats(ctx, args.catches, args.species, args.export)
    return _run_species(ctx, args.partial)


if __name__ == "__main__":
    sys.exit(main())
