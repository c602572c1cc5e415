"""
Execution router that maps CommandCategory to action handlers and dispatches.

Only previews with can_execute=True are dispatched. Every dispatched command
leaves an audit record, whether the action succeeded or not.
"""

import logging
import os
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from .directory import BackendClient
from .models import (
    QUICK_SUGGESTIONS,
    ActionRequest,
    CommandCategory,
    CommandLogEntry,
    CommandPreview,
    ExecutionResult,
    LogStatus,
)

logger = logging.getLogger("asis-command.router")

# Type for handler functions
HandlerFunc = Callable[[ActionRequest, BackendClient], Awaitable[str]]

# Registry of category -> handler
_handlers: Dict[CommandCategory, HandlerFunc] = {}


def register(category: CommandCategory, handler: HandlerFunc) -> None:
    """Register a handler function for a command category."""
    if category == CommandCategory.UNKNOWN:
        raise ValueError("UNKNOWN commands cannot have a handler")
    _handlers[category] = handler
    logger.debug(f"Registered handler for {category.value}")


def get_handler(category: CommandCategory) -> Optional[HandlerFunc]:
    """Get the registered handler for a category."""
    return _handlers.get(category)


def _is_read_only() -> bool:
    """Check if command execution is blocked."""
    return os.getenv("ASIS_COMMAND_READ_ONLY", "false").lower() == "true"


def _build_request(preview: CommandPreview, executed_by: str, now: datetime) -> ActionRequest:
    parsed = preview.parsed_command
    return ActionRequest(
        category=parsed.category,
        person=preview.person,
        start_date=parsed.start_date,
        end_date=parsed.end_date,
        start_time=parsed.start_time,
        end_time=parsed.end_time,
        reason=parsed.reason,
        executed_by=executed_by,
        requested_at=now,
    )


def _build_log(preview: CommandPreview, request: ActionRequest, terminal_code: Optional[str], error: Optional[str]) -> CommandLogEntry:
    parsed = preview.parsed_command
    person = request.person
    return CommandLogEntry(
        command_text=parsed.raw_text,
        parsed_intent=parsed.category,
        payload_json={
            "person": {"id": person.id, "rut": person.identifier, "nombre": person.full_name},
            "startDate": request.start_date.isoformat(),
            "endDate": request.end_date.isoformat(),
            "startTime": request.start_time,
            "endTime": request.end_time,
            "reason": request.reason,
        },
        executed_by=request.executed_by,
        terminal_code=terminal_code or person.terminal_code,
        status=LogStatus.ERROR if error else LogStatus.OK,
        error_message=error,
    )


async def execute(
    preview: CommandPreview,
    executed_by: str,
    backend: BackendClient,
    terminal_code: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ExecutionResult:
    """
    Dispatch a previewed command to its handler and write the audit log.

    This is the main entry point for running a command once the operator
    has confirmed the preview.
    """
    category = preview.parsed_command.category

    # Step 1: Refuse anything the preview did not clear
    if not preview.can_execute:
        suggestions = list(preview.errors) + list(preview.warnings)
        if category == CommandCategory.UNKNOWN:
            suggestions += QUICK_SUGGESTIONS
        return ExecutionResult(
            success=False,
            output=f"'{preview.action_description}' no se puede ejecutar.",
            error="Command is not executable",
            suggestions=suggestions,
        )

    # Step 2: Check read-only mode
    if _is_read_only():
        return ExecutionResult(
            success=False,
            output=f"No se puede ejecutar '{category.value}' en modo solo lectura.",
            error="Read-only mode is enabled (ASIS_COMMAND_READ_ONLY=true)",
            suggestions=["Set ASIS_COMMAND_READ_ONLY=false to enable execution"],
        )

    # Step 3: Find handler
    handler = get_handler(category)
    if handler is None:
        return ExecutionResult(
            success=False,
            output=f"No handler registered for command '{category.value}'.",
            error="Handler not found",
            suggestions=["Call register_all_handlers() before executing commands."],
        )

    # Step 4: Execute handler
    request = _build_request(preview, executed_by, now or datetime.now())
    error: Optional[str] = None
    try:
        output = await handler(request, backend)
    except Exception as e:
        logger.error(f"Handler error for {category.value}: {e}", exc_info=True)
        error = str(e)
        output = f"Error ejecutando '{preview.action_description}': {error}"

    # Step 5: Audit log; a failed write does not undo the action
    audit_logged = True
    try:
        await backend.write_log(_build_log(preview, request, terminal_code, error))
    except Exception as e:
        audit_logged = False
        logger.error(f"Audit log write failed for {category.value}: {e}", exc_info=True)

    return ExecutionResult(
        success=error is None,
        output=output,
        error=error,
        audit_logged=audit_logged,
    )
