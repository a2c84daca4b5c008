"""Use cases for the fishdex core.

Each use case wraps one operation the UI or a script triggers and reports the
outcome as a Result instead of raising, mirroring how the screens branch on
success, "no data" and failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from loguru import logger

from core.error_handler import as_result
from core.exceptions import DetectionError, SyncError
from core.result import Success, Failure, Result
from reports.catch_statistics import compute_overview, compute_species_detail
from reports.models import AggregateView, CatchRecord, NoData, SpeciesAggregateView, load_catches
from services.fish_api_client import FishApiClient
from services.species_store import SpeciesStore
from services.species_sync import SyncPlan, apply_plan, plan_species_sync
from species.detection import DetectionResponse
from species.reference import SpeciesReference


class DetectSpeciesUseCase:
    """Classify a photo (local file or uploaded URL) into ranked species candidates."""

    def __init__(self, client: FishApiClient):
        self.client = client

    def execute(self, image: str, top_k: Optional[int] = None) -> Result[DetectionResponse, DetectionError]:
        """Run detection.

        Args:
            image: Local file path, or an http(s) URL of an uploaded image
            top_k: Number of candidates, defaults to the configured value

        Returns:
            Result with the (possibly empty) response, or DetectionError
        """
        try:
            if image.startswith(("http://", "https://")):
                response = self.client.detect_url(image, top_k)
            else:
                response = self.client.detect_file(image, top_k)
        except DetectionError as e:
            logger.error(f"Detection failed for '{image}': {e}")
            return Failure(e)

        if response.is_empty:
            logger.info(f"[detect] no candidates for '{image}', manual entry needed")
        else:
            best = response.results[0]
            logger.info(f"[detect] best={best.resolved_species} conf={best.confidence:.2f} matched={best.matched}")
        return Success(response)


class ComputeOverviewUseCase:
    """Overview statistics from backend rows or already built records."""

    @as_result
    def execute(self, catches: Iterable[Union[CatchRecord, Mapping[str, Any]]]) -> Union[AggregateView, NoData]:
        return compute_overview(load_catches(catches))


class ComputeSpeciesDetailUseCase:
    """Per-species statistics; the Success value is None when the species has no catches."""

    @as_result
    def execute(
        self,
        catches: Iterable[Union[CatchRecord, Mapping[str, Any]]],
        species: str,
    ) -> Optional[SpeciesAggregateView]:
        return compute_species_detail(load_catches(catches), species)


@dataclass(frozen=True)
class SyncOutcome:
    plan: SyncPlan
    applied: bool
    counts: Dict[str, int]


class SyncSpeciesUseCase:
    """Reconcile the reference dataset into the backend species table."""

    def __init__(self, reference: SpeciesReference, store: SpeciesStore, chunk_size: int = 200):
        self.reference = reference
        self.store = store
        self.chunk_size = chunk_size

    def execute(self, confirm: bool = False) -> Result[SyncOutcome, SyncError]:
        """Plan the sync and, when ``confirm`` is set, apply it.

        Returns:
            Result with the plan and applied counts, or SyncError
        """
        try:
            plan = plan_species_sync(self.reference, self.store.fetch_rows())
            if not confirm:
                return Success(SyncOutcome(plan, False, {"inserted": 0, "updated": 0}))
            counts = apply_plan(self.store, plan, self.chunk_size)
            logger.info(f"[sync] inserted={counts['inserted']} updated={counts['updated']}")
            return Success(SyncOutcome(plan, True, counts))
        except SyncError as e:
            logger.error(f"Species sync failed: {e}")
            return Failure(e)
        except Exception as e:
            logger.error(f"Species sync failed: {e}")
            return Failure(SyncError(f"Failed to sync: {e}"))
