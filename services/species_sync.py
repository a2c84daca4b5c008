"""
Reconciles the species reference dataset with the backend catalog table.

Planning is pure: existing rows are matched to reference entries by lowercase
scientific name first, then by normalized display name; unmatched entries
become inserts, matched rows with differing fields become updates. Applying a
plan is a separate step so scripts can show a dry run first.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from core.error_handler import log_execution_time
from core.exceptions import BackendError, SyncError
from species.normalizer import normalize_name
from species.reference import Habitat, SpeciesEntry, SpeciesReference
from species.regions import expand_regions
from .species_store import SpeciesStore


@dataclass(frozen=True)
class RowUpdate:
    id: Any
    changes: Dict[str, Any]


@dataclass
class SyncPlan:
    inserts: List[Dict[str, Any]] = field(default_factory=list)
    updates: List[RowUpdate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.inserts and not self.updates

    def summary(self) -> str:
        return f"To insert: {len(self.inserts)}, to update: {len(self.updates)}"


def source_row(entry: SpeciesEntry) -> Dict[str, Any]:
    """Backend row for a reference entry, regions expanded."""
    return {
        "name": entry.display_name,
        "scientific_name": entry.scientific_name,
        "region": sorted(expand_regions(entry.regions)),
        "rarity": entry.rarity,
        "habitat": None if entry.habitat is Habitat.UNKNOWN else entry.habitat.value,
        "baits": list(entry.baits) or None,
        "best_time": entry.best_time_of_day,
    }


def lists_equal(a: Any, b: Any) -> bool:
    """Order-insensitive comparison; two non-lists count as equal."""
    a_list = isinstance(a, list)
    b_list = isinstance(b, list)
    if not a_list and not b_list:
        return True
    if not a_list or not b_list:
        return False
    return sorted(map(str, a)) == sorted(map(str, b))


def _row_index(rows: Iterable[Dict[str, Any]]):
    by_scientific: Dict[str, Dict[str, Any]] = {}
    by_display: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        if row.get("scientific_name"):
            by_scientific[str(row["scientific_name"]).lower()] = row
        if row.get("name"):
            by_display[normalize_name(str(row["name"]))] = row
    return by_scientific, by_display


def _find_existing(entry: SpeciesEntry, by_scientific, by_display) -> Optional[Dict[str, Any]]:
    return by_scientific.get(entry.scientific_name.lower()) or by_display.get(normalize_name(entry.display_name))


def _changes(existing: Dict[str, Any], desired: Dict[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if existing.get("rarity") != desired["rarity"]:
        changes["rarity"] = desired["rarity"]
    for key in ("habitat", "best_time"):
        if (existing.get(key) or None) != (desired[key] or None):
            changes[key] = desired[key]
    for key in ("baits", "region"):
        if not lists_equal(existing.get(key), desired[key]):
            changes[key] = desired[key]
    return changes


@log_execution_time()
def plan_species_sync(
    reference: SpeciesReference,
    existing_rows: Iterable[Dict[str, Any]],
) -> SyncPlan:
    """Diff the reference against the current table rows."""
    by_scientific, by_display = _row_index(existing_rows)
    plan = SyncPlan()
    for entry in reference:
        desired = source_row(entry)
        existing = _find_existing(entry, by_scientific, by_display)
        if existing is None:
            plan.inserts.append(desired)
            continue
        changes = _changes(existing, desired)
        if changes:
            plan.updates.append(RowUpdate(existing.get("id"), changes))
    logger.info(plan.summary())
    return plan


def plan_rarity_updates(reference: SpeciesReference, existing_rows: Iterable[Dict[str, Any]]) -> List[RowUpdate]:
    """Rows whose rarity differs from the reference, matched by scientific then display name."""
    updates: List[RowUpdate] = []
    for row in existing_rows:
        entry = None
        if row.get("scientific_name"):
            entry = reference.by_scientific(str(row["scientific_name"]))
        if entry is None and row.get("name"):
            entry = reference.by_display(str(row["name"]))
        if entry is None:
            continue
        if row.get("rarity") != entry.rarity:
            updates.append(RowUpdate(row.get("id"), {"rarity": entry.rarity}))
    logger.info(f"Found {len(updates)} rows with outdated rarity")
    return updates


def apply_plan(store: SpeciesStore, plan: SyncPlan, chunk_size: int = 200) -> Dict[str, int]:
    """Write a plan to the store: inserts in chunks, then one request per update.

    Raises:
        SyncError: On the first backend failure; earlier writes stay applied
    """
    inserted = 0
    updated = 0
    try:
        for start in range(0, len(plan.inserts), chunk_size):
            chunk = plan.inserts[start:start + chunk_size]
            store.insert_rows(chunk)
            inserted += len(chunk)
            logger.info(f"Inserted {inserted}/{len(plan.inserts)}")

        for update in plan.updates:
            store.update_row(update.id, update.changes)
            updated += 1
            if updated % 50 == 0 or updated == len(plan.updates):
                logger.info(f"Updated {updated}/{len(plan.updates)}")
    except BackendError as e:
        raise SyncError(f"Sync aborted after {inserted} inserts and {updated} updates: {e}") from e
    return {"inserted": inserted, "updated": updated}
