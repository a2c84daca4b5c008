"""External collaborators: the fish detection API and the backend species table."""
from __future__ import annotations

from .fish_api_client import FishApiClient
from .species_store import SpeciesStore, SupabaseSpeciesStore
from .species_sync import SyncPlan, RowUpdate, apply_plan, plan_rarity_updates, plan_species_sync

__all__ = [
    "FishApiClient",
    "SpeciesStore",
    "SupabaseSpeciesStore",
    "SyncPlan",
    "RowUpdate",
    "apply_plan",
    "plan_rarity_updates",
    "plan_species_sync",
]
