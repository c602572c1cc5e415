"""
Asis Command: natural-language HR attendance commands.

Turns a free-form Spanish sentence ("vacaciones para 18866264-1 desde el
lunes por 5 días") into a validated, executable command.

Usage:
    from asis_command import AsisCommand

    asis = AsisCommand()
    parsed = asis.parse("vacaciones para 18866264-1 desde el lunes por 5 días")
    result = await asis.process(text, executed_by="supervisor@example.com")
    print(result.output)
"""

from datetime import date, datetime
from typing import Optional

from .classifier import DEFAULT_INTENT_TABLE, build_intent_table, classify
from .directory import BackendClient, BackendError
from .models import (
    CommandCategory,
    CommandPreview,
    ExecutionResult,
    IntentPattern,
    ParsedCommand,
    ResolvedPerson,
    ValidationResult,
)
from .parser import parse
from .preview import build_preview, format_preview
from .router import execute
from .session import CommandSession
from .validator import validate


class AsisCommand:
    """High-level interface for parsing, previewing and executing commands.

    This is the boundary where "now" defaults to the wall clock; everything
    below it takes the reference day as an argument.
    """

    def __init__(self, backend: Optional[BackendClient] = None, table=None) -> None:
        """Initialize the pipeline and register all action handlers."""
        from .handlers import register_all_handlers
        register_all_handlers()
        self.backend = backend or BackendClient()
        self.table = table if table is not None else DEFAULT_INTENT_TABLE

    def parse(self, text: str, now: Optional[date] = None) -> ParsedCommand:
        """Parse text without looking anyone up (useful for testing)."""
        return parse(text, now or datetime.now(), self.table)

    def validate(self, parsed: ParsedCommand) -> ValidationResult:
        return validate(parsed)

    def preview(
        self,
        text: str,
        person: Optional[ResolvedPerson],
        now: Optional[date] = None,
        directory_unavailable: bool = False,
    ) -> CommandPreview:
        return build_preview(self.parse(text, now), person, directory_unavailable=directory_unavailable)

    def session(self) -> CommandSession:
        return CommandSession(self.backend, self.table)

    async def resolve(self, text: str, now: Optional[date] = None) -> CommandPreview:
        """Parse text and look up its person in the directory."""
        parsed = self.parse(text, now)
        person = None
        if parsed.normalized_identifier:
            person = await self.backend.find_person(parsed.normalized_identifier)
        return build_preview(parsed, person)

    async def process(
        self,
        text: str,
        executed_by: str,
        terminal_code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ExecutionResult:
        """Parse, look up, preview and execute a command in one call."""
        now = now or datetime.now()
        try:
            preview = await self.resolve(text, now)
        except BackendError as e:
            return ExecutionResult(
                success=False,
                output="No se pudo consultar el directorio de personal.",
                error=str(e),
            )
        return await execute(preview, executed_by, self.backend, terminal_code=terminal_code, now=now)


__all__ = [
    "AsisCommand",
    "BackendClient",
    "BackendError",
    "CommandCategory",
    "CommandPreview",
    "CommandSession",
    "ExecutionResult",
    "IntentPattern",
    "ParsedCommand",
    "ResolvedPerson",
    "ValidationResult",
    "build_intent_table",
    "build_preview",
    "classify",
    "execute",
    "format_preview",
    "parse",
    "validate",
]
