"""Backend access for the species catalog table.

``SpeciesStore`` is the narrow interface the sync planner needs; the
production implementation talks to the backend's PostgREST endpoint
(``{url}/rest/v1/{table}``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import httpx
from loguru import logger

from config.config import BackendConfig
from core.exceptions import BackendError

SPECIES_COLUMNS = "id,name,scientific_name,region,rarity,habitat,baits,best_time"


class SpeciesStore(Protocol):
    def fetch_rows(self) -> List[Dict[str, Any]]:
        ...

    def insert_rows(self, rows: List[Dict[str, Any]]) -> None:
        ...

    def update_row(self, row_id: Any, changes: Dict[str, Any]) -> None:
        ...


class SupabaseSpeciesStore:
    """PostgREST-backed species table.

    Args:
        config: Backend settings; ``url`` and ``service_key`` are required
        table: Table name, defaults to ``config.species_table``
        transport: Optional httpx transport for tests
    """

    def __init__(
        self,
        config: BackendConfig,
        table: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not config.is_configured:
            raise BackendError("Backend url and service key are required")
        self.table = table or config.species_table
        self._client = httpx.Client(
            base_url=f"{config.url.rstrip('/')}/rest/v1",
            headers={
                "apikey": config.service_key,
                "Authorization": f"Bearer {config.service_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(30.0),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, f"/{self.table}", **kwargs)
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {self.table} failed: {e}") from e
        if response.is_error:
            raise BackendError(f"{method} {self.table} failed ({response.status_code}): {response.text}")
        return response

    def fetch_rows(self) -> List[Dict[str, Any]]:
        rows = self._send("GET", params={"select": SPECIES_COLUMNS}).json()
        logger.debug(f"Fetched {len(rows)} rows from {self.table}")
        return rows

    def insert_rows(self, rows: List[Dict[str, Any]]) -> None:
        self._send("POST", json=rows, headers={"Prefer": "return=minimal"})

    def update_row(self, row_id: Any, changes: Dict[str, Any]) -> None:
        self._send("PATCH", params={"id": f"eq.{row_id}"}, json=changes, headers={"Prefer": "return=minimal"})
