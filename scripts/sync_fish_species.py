#!/usr/bin/env python3
"""
Species catalog sync script.

Reconciles the bundled species reference dataset with the backend species
table. Existing rows are matched by scientific name, then by display name;
missing species are inserted and rows whose rarity, habitat, baits, best time
or regions differ are updated. Regions are written expanded, so a species
tagged ``nordsee`` also carries ``europa`` and ``weltweit``.

Without ``--confirm`` the script only prints what it would do.

Usage:
    ```bash
    # Dry run against the default table
    python scripts/sync_fish_species.py

    # Apply to another table
    python scripts/sync_fish_species.py --table fish_species_staging --confirm
    ```

Environment:
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY (required), SPECIES_TABLE,
    SPECIES_INFO_PATH
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from app.startup import initialize
from app.use_cases import SyncSpeciesUseCase
from config.service import ConfigurationServiceFactory
from core.exceptions import BackendError
from services.species_store import SupabaseSpeciesStore

SAMPLE_SIZE = 5


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    config_service, remaining = ConfigurationServiceFactory.create_from_args(
        sys.argv[1:] if argv is None else argv
    )
    parser = argparse.ArgumentParser(description="Sync the species reference into the backend table")
    parser.add_argument("--confirm", action="store_true", help="Apply the changes instead of a dry run")
    args = parser.parse_args(remaining)

    if not config_service.backend_configured:
        print("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY", file=sys.stderr)
        return 1

    ctx = initialize(config_service)
    backend = config_service.raw_config.backend
    try:
        store = SupabaseSpeciesStore(backend)
    except BackendError as e:
        logger.error(str(e))
        return 1

    try:
        result = SyncSpeciesUseCase(
            ctx.reference,
            store,
            chunk_size=backend.insert_chunk_size,
        ).execute(confirm=args.confirm)
    finally:
        store.close()

    if result.is_failure():
        print(f"Sync failed: {result.error}", file=sys.stderr)
        return 1

    outcome = result.value
    print(f"Reference species: {len(ctx.reference)}")
    print(outcome.plan.summary())
    if not args.confirm:
        for row in outcome.plan.inserts[:SAMPLE_SIZE]:
            print(f"  + {row['name']} ({row['scientific_name']})")
        for update in outcome.plan.updates[:SAMPLE_SIZE]:
            print(f"  ~ id={update.id} {update.changes}")
        print("Dry run. Re-run with --confirm to apply.")
        return 0

    print(f"Inserted {outcome.counts['inserted']}, updated {outcome.counts['updated']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
