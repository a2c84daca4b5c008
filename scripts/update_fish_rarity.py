#!/usr/bin/env python3
"""
Rarity refresh script.

Rewrites only the ``rarity`` column of the backend species table from the
reference dataset (``schwierigkeit``, clamped to 1..5). Rows that match no
reference species are left alone. Dry run unless ``--confirm`` is given.

Usage:
    ```bash
    python scripts/update_fish_rarity.py
    python scripts/update_fish_rarity.py --confirm
    ```
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from app.startup import initialize
from config.service import ConfigurationServiceFactory
from core.exceptions import FishdexException
from services.species_store import SupabaseSpeciesStore
from services.species_sync import SyncPlan, apply_plan, plan_rarity_updates

SAMPLE_SIZE = 10


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    config_service, remaining = ConfigurationServiceFactory.create_from_args(
        sys.argv[1:] if argv is None else argv
    )
    parser = argparse.ArgumentParser(description="Refresh species rarity in the backend table")
    parser.add_argument("--confirm", action="store_true", help="Apply the updates instead of a dry run")
    args = parser.parse_args(remaining)

    if not config_service.backend_configured:
        print("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY", file=sys.stderr)
        return 1

    ctx = initialize(config_service)
    backend = config_service.raw_config.backend
    try:
        store = SupabaseSpeciesStore(backend)
        try:
            updates = plan_rarity_updates(ctx.reference, store.fetch_rows())
            print(f"Rows to update: {len(updates)}")
            if not args.confirm:
                for update in updates[:SAMPLE_SIZE]:
                    print(f"  id={update.id} rarity -> {update.changes['rarity']}")
                print("Dry run. Re-run with --confirm to apply.")
                return 0
            counts = apply_plan(store, SyncPlan(updates=updates), backend.insert_chunk_size)
        finally:
            store.close()
    except FishdexException as e:
        logger.error(f"Rarity update failed: {e}")
        return 1

    print(f"Updated {counts['updated']} rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
