"""
HTTP client for the attendance backend.

Talks to the PostgREST endpoint of the surrounding application to look up
staff by RUT, insert attendance records and write the command audit log.
The pipeline only reads people; it never creates or updates them.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from .models import CommandLogEntry, ResolvedPerson
from .rut import format_rut

logger = logging.getLogger("asis-command.directory")

PERSON_COLUMNS = "id,rut,nombre,cargo,terminal_code,horario,status"
LOG_TABLE = "asis_command_logs"


class BackendError(RuntimeError):
    """The attendance backend could not be reached or rejected a request."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def _get_config() -> Dict[str, Any]:
    return {
        "url": os.getenv("ASIS_BACKEND_URL", "http://localhost:54321").rstrip("/"),
        "key": os.getenv("ASIS_BACKEND_KEY", ""),
        "timeout": float(os.getenv("ASIS_BACKEND_TIMEOUT", "10")),
    }


def _rut_variants(rut: str) -> List[str]:
    """Spellings tried in order: as given, with dots, digits only."""
    variants = [rut, format_rut(rut), rut.replace(".", "").replace("-", "")]
    return list(dict.fromkeys(v for v in variants if v))


class BackendClient:
    """Async client for staff lookup, attendance inserts and the audit log."""

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None, timeout: Optional[float] = None) -> None:
        cfg = _get_config()
        self.url = (url or cfg["url"]).rstrip("/")
        self.key = cfg["key"] if key is None else key
        self.timeout = cfg["timeout"] if timeout is None else timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.key:
            headers["apikey"] = self.key
            headers["Authorization"] = f"Bearer {self.key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.url}/rest/v1",
            headers=self._headers(),
            timeout=self.timeout,
        )

    async def _request(self, client: httpx.AsyncClient, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise BackendError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise BackendError(f"{method} {path} returned HTTP {resp.status_code}: {resp.text}")
        return resp

    async def find_person(self, rut: str) -> Optional[ResolvedPerson]:
        """Look up a staff member by normalized RUT. None when nobody matches."""
        if not rut:
            return None

        async with self._client() as client:
            for variant in _rut_variants(rut):
                resp = await self._request(
                    client,
                    "GET",
                    "/staff",
                    params={"select": PERSON_COLUMNS, "rut": f"eq.{variant}", "limit": "1"},
                )
                rows = resp.json()
                if rows:
                    logger.debug(f"Resolved RUT {rut} as {variant}")
                    return ResolvedPerson.model_validate(rows[0])

        logger.info(f"No staff record for RUT {rut}")
        return None

    async def insert(self, table: str, row: Dict[str, Any]) -> None:
        async with self._client() as client:
            await self._request(
                client,
                "POST",
                f"/{table}",
                json=row,
                headers={"Prefer": "return=minimal"},
            )
        logger.debug(f"Inserted row into {table}")

    async def write_log(self, entry: CommandLogEntry) -> None:
        """Persist one audit record."""
        await self.insert(LOG_TABLE, entry.model_dump(mode="json", exclude_none=True))

    async def fetch_logs(self, limit: int = 20, executed_by: Optional[str] = None) -> List[Dict[str, Any]]:
        """Most recent audit records first, optionally for one operator."""
        params = {"select": "*", "order": "created_at.desc", "limit": str(limit)}
        if executed_by:
            params["executed_by"] = f"eq.{executed_by}"

        async with self._client() as client:
            resp = await self._request(client, "GET", f"/{LOG_TABLE}", params=params)
        return resp.json()
