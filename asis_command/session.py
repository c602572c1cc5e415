"""
Interactive command session.

Re-parses on every text change and looks up the person behind the RUT
asynchronously. Lookups can finish out of order while the operator keeps
typing, so the result of an update that has been overtaken by a newer one
is discarded instead of replacing the newer preview.
"""

import logging
from datetime import date, datetime
from typing import Dict, Optional

from .directory import BackendClient, BackendError
from .models import CommandPreview, IntentTable, ResolvedPerson
from .parser import parse
from .preview import build_preview

logger = logging.getLogger("asis-command.session")


class CommandSession:
    """Keeps the latest preview for a command being typed."""

    def __init__(self, directory: BackendClient, table: Optional[IntentTable] = None) -> None:
        self.directory = directory
        self.table = table
        self.preview: Optional[CommandPreview] = None
        self._generation = 0
        self._people: Dict[str, Optional[ResolvedPerson]] = {}

    async def _lookup(self, rut: str) -> Optional[ResolvedPerson]:
        if rut in self._people:
            return self._people[rut]
        # Failures raise before caching, so the next update retries
        person = await self.directory.find_person(rut)
        self._people[rut] = person
        return person

    async def update(self, text: str, now: Optional[date] = None) -> Optional[CommandPreview]:
        """
        Parse text and refresh the preview.

        Returns None, leaving the current preview untouched, when a newer
        update started while this one was waiting on the directory.
        """
        self._generation += 1
        generation = self._generation

        parsed = parse(text, now or datetime.now(), self.table)
        rut = parsed.normalized_identifier

        person = None
        unavailable = False
        if rut:
            try:
                person = await self._lookup(rut)
            except BackendError as e:
                logger.warning(f"Person lookup failed for {rut}: {e}")
                unavailable = True
            if generation != self._generation:
                logger.debug(f"Discarding stale lookup for {rut}")
                return None

        self.preview = build_preview(parsed, person, directory_unavailable=unavailable)
        return self.preview

    def clear(self) -> None:
        self._generation += 1
        self.preview = None
