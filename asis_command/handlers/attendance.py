"""
Attendance action handlers.

Each handler maps an ActionRequest onto the row shape of its attendance
table and inserts it through the backend client.
"""

import logging
from typing import Any, Dict

from ..directory import BackendClient
from ..models import CATEGORY_COLLECTIONS, CATEGORY_LABELS, ActionRequest, CommandCategory
from ..router import register

logger = logging.getLogger("asis-command.handlers.attendance")

DEFAULT_REASONS = {
    CommandCategory.VACATION: "Registrado via Asis Command",
    CommandCategory.MEDICAL_LEAVE: "Registrado via Asis Command",
    CommandCategory.PERMISSION: "Registrado via Asis Command",
    CommandCategory.LATE_ARRIVAL_AUTH: "Llegada Tarde",
    CommandCategory.EARLY_DEPARTURE_AUTH: "Salida Anticipada",
    CommandCategory.DAY_SWAP: "Cambio solicitado",
    CommandCategory.NO_CLOCK_IN: "No marcó asistencia",
    CommandCategory.NO_CREDENTIAL: "Sin credencial física",
}


def _reason(request: ActionRequest) -> str:
    return request.reason or DEFAULT_REASONS[request.category]


def _shift(request: ActionRequest) -> str:
    schedule = (request.person.schedule or "").split()
    return schedule[0] if schedule else "DIA"


async def _insert(request: ActionRequest, backend: BackendClient, row: Dict[str, Any]) -> str:
    table = CATEGORY_COLLECTIONS[request.category]
    await backend.insert(table, row)
    logger.info(f"{request.category.value} registered for {request.person.identifier} by {request.executed_by}")
    return f"{CATEGORY_LABELS[request.category]} registrado para {request.person.full_name}."


async def handle_vacation(request: ActionRequest, backend: BackendClient) -> str:
    person = request.person
    return await _insert(request, backend, {
        "staff_id": person.id,
        "rut": person.identifier,
        "nombre": person.full_name,
        "cargo": person.role,
        "terminal_code": person.terminal_code,
        "turno": _shift(request),
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "return_date": request.end_date.isoformat(),
        "calendar_days": (request.end_date - request.start_date).days + 1,
        "note": _reason(request),
        "created_by_supervisor": request.executed_by,
        "auth_status": "AUTORIZADO",
    })


async def handle_medical_leave(request: ActionRequest, backend: BackendClient) -> str:
    return await _insert(request, backend, {
        "staff_id": request.person.id,
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "note": _reason(request),
        "created_by": request.executed_by,
    })


async def handle_permission(request: ActionRequest, backend: BackendClient) -> str:
    row = {
        "staff_id": request.person.id,
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "permission_type": "PERSONAL",
        "note": _reason(request),
        "created_by": request.executed_by,
    }
    if request.start_time:
        row["start_time"] = request.start_time
    if request.end_time:
        row["end_time"] = request.end_time
    return await _insert(request, backend, row)


async def _handle_authorization(request: ActionRequest, backend: BackendClient, entry_or_exit: str) -> str:
    person = request.person
    return await _insert(request, backend, {
        "rut": person.identifier,
        "nombre": person.full_name,
        "cargo": person.role,
        "terminal_code": person.terminal_code,
        "turno": _shift(request),
        "horario": person.schedule,
        "authorization_date": request.start_date.isoformat(),
        "authorization_time": request.start_time,
        "entry_or_exit": entry_or_exit,
        "motivo": _reason(request),
        "created_by_supervisor": request.executed_by,
        "auth_status": "AUTORIZADO",
        "authorized_by": request.executed_by,
        "authorized_at": request.requested_at.isoformat(),
    })


async def handle_late_arrival(request: ActionRequest, backend: BackendClient) -> str:
    return await _handle_authorization(request, backend, "ENTRADA")


async def handle_early_departure(request: ActionRequest, backend: BackendClient) -> str:
    return await _handle_authorization(request, backend, "SALIDA")


async def handle_day_swap(request: ActionRequest, backend: BackendClient) -> str:
    """The first date is the day off, the second (if different) the day worked."""
    person = request.person
    return await _insert(request, backend, {
        "rut": person.identifier,
        "nombre": person.full_name,
        "terminal_code": person.terminal_code,
        "date": request.requested_at.date().isoformat(),
        "day_off_date": request.start_date.isoformat(),
        "day_on_date": request.end_date.isoformat(),
        "document_path": f"Motivo: {request.reason}" if request.reason else None,
        "created_by_supervisor": request.executed_by,
        "auth_status": "PENDIENTE",
    })


async def handle_no_clock_in(request: ActionRequest, backend: BackendClient) -> str:
    person = request.person
    return await _insert(request, backend, {
        "rut": person.identifier,
        "nombre": person.full_name,
        "terminal_code": person.terminal_code,
        "date": request.start_date.isoformat(),
        "observations": _reason(request),
        "incident_state": "INFORMADA",
        "created_by_supervisor": request.executed_by,
        "auth_status": "PENDIENTE",
    })


async def handle_no_credential(request: ActionRequest, backend: BackendClient) -> str:
    person = request.person
    return await _insert(request, backend, {
        "rut": person.identifier,
        "nombre": person.full_name,
        "cargo": person.role,
        "terminal_code": person.terminal_code,
        "date": request.start_date.isoformat(),
        "observacion": _reason(request),
        "created_by_supervisor": request.executed_by,
        "auth_status": "PENDIENTE",
    })


HANDLERS = {
    CommandCategory.VACATION: handle_vacation,
    CommandCategory.MEDICAL_LEAVE: handle_medical_leave,
    CommandCategory.PERMISSION: handle_permission,
    CommandCategory.LATE_ARRIVAL_AUTH: handle_late_arrival,
    CommandCategory.EARLY_DEPARTURE_AUTH: handle_early_departure,
    CommandCategory.DAY_SWAP: handle_day_swap,
    CommandCategory.NO_CLOCK_IN: handle_no_clock_in,
    CommandCategory.NO_CREDENTIAL: handle_no_credential,
}


def register_handlers() -> None:
    for category, handler in HANDLERS.items():
        register(category, handler)
