"""
Pydantic models for the Asis command pipeline.

Defines command categories, the parsed command structure, validation and
preview results, and the records exchanged with the attendance backend.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CommandCategory(str, Enum):
    """Administrative actions a command can request.

    Values are the codes persisted in the audit log.
    """

    VACATION = "VACACIONES"
    MEDICAL_LEAVE = "LICENCIA"
    PERMISSION = "PERMISO"
    LATE_ARRIVAL_AUTH = "AUTORIZACION_LLEGADA"
    EARLY_DEPARTURE_AUTH = "AUTORIZACION_SALIDA"
    DAY_SWAP = "CAMBIO_DIA"
    NO_CLOCK_IN = "NO_MARCACION"
    NO_CREDENTIAL = "SIN_CREDENCIAL"
    UNKNOWN = "UNKNOWN"


CATEGORY_LABELS: Dict[CommandCategory, str] = {
    CommandCategory.VACATION: "Vacaciones",
    CommandCategory.MEDICAL_LEAVE: "Licencia Médica",
    CommandCategory.PERMISSION: "Permiso",
    CommandCategory.LATE_ARRIVAL_AUTH: "Autorización Llegada Tardía",
    CommandCategory.EARLY_DEPARTURE_AUTH: "Autorización Salida Anticipada",
    CommandCategory.DAY_SWAP: "Cambio de Día",
    CommandCategory.NO_CLOCK_IN: "No Marcación",
    CommandCategory.NO_CREDENTIAL: "Sin Credencial",
    CommandCategory.UNKNOWN: "Comando no reconocido",
}

CATEGORY_DESCRIPTIONS: Dict[CommandCategory, str] = {
    CommandCategory.VACATION: "Registrar período de vacaciones",
    CommandCategory.MEDICAL_LEAVE: "Registrar licencia médica",
    CommandCategory.PERMISSION: "Registrar permiso administrativo",
    CommandCategory.LATE_ARRIVAL_AUTH: "Autorizar llegada tardía",
    CommandCategory.EARLY_DEPARTURE_AUTH: "Autorizar salida anticipada",
    CommandCategory.DAY_SWAP: "Registrar cambio de día",
    CommandCategory.NO_CLOCK_IN: "Registrar incidencia de no marcación",
    CommandCategory.NO_CREDENTIAL: "Registrar incidencia sin credencial",
    CommandCategory.UNKNOWN: "Comando no reconocido",
}

# Backend table written by each category's action
CATEGORY_COLLECTIONS: Dict[CommandCategory, Optional[str]] = {
    CommandCategory.VACATION: "attendance_vacaciones",
    CommandCategory.MEDICAL_LEAVE: "attendance_licenses",
    CommandCategory.PERMISSION: "attendance_permissions",
    CommandCategory.LATE_ARRIVAL_AUTH: "attendance_autorizaciones",
    CommandCategory.EARLY_DEPARTURE_AUTH: "attendance_autorizaciones",
    CommandCategory.DAY_SWAP: "attendance_cambios_dia",
    CommandCategory.NO_CLOCK_IN: "attendance_no_marcaciones",
    CommandCategory.NO_CREDENTIAL: "attendance_sin_credenciales",
    CommandCategory.UNKNOWN: None,
}

# Categories that cover a period and need an end date or a duration
DATE_RANGE_CATEGORIES = frozenset(
    {
        CommandCategory.VACATION,
        CommandCategory.MEDICAL_LEAVE,
    }
)

# Categories that need a time of day
TIMED_CATEGORIES = frozenset(
    {
        CommandCategory.LATE_ARRIVAL_AUTH,
        CommandCategory.EARLY_DEPARTURE_AUTH,
    }
)

# Person statuses that block execution
INACTIVE_STATUSES = frozenset({"DESVINCULADO", "INACTIVO"})

QUICK_SUGGESTIONS: Tuple[str, ...] = (
    "vacaciones para [RUT] desde [fecha] por [días] días",
    "licencia para [RUT] desde [fecha] hasta [fecha]",
    "permiso para [RUT] el [fecha] de [hora] a [hora]",
    "llegada tardía [RUT] el [fecha] a las [hora]",
    "salida anticipada [RUT] el [fecha] a las [hora]",
    "cambio de día [RUT] del [día] al [día]",
)


@dataclass(frozen=True)
class IntentPattern:
    """One row of the intent table. Higher priority is checked first."""

    category: CommandCategory
    patterns: Tuple[re.Pattern, ...]
    priority: int


IntentTable = Tuple[IntentPattern, ...]


class IntentMatch(BaseModel):
    """Result of classifying a command text."""

    model_config = ConfigDict(frozen=True)

    category: CommandCategory
    confidence: float = Field(ge=0.0, le=1.0)


class ParsedCommand(BaseModel):
    """Structured form of a free-text command. Built fresh on every parse."""

    model_config = ConfigDict(frozen=True)

    category: CommandCategory = CommandCategory.UNKNOWN
    raw_identifier: Optional[str] = None
    normalized_identifier: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_days: Optional[int] = None
    reason: Optional[str] = None
    raw_text: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    errors: Tuple[str, ...] = ()


class ValidationResult(BaseModel):
    """Execution readiness of a ParsedCommand."""

    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class ResolvedPerson(BaseModel):
    """Staff record returned by the person directory.

    Accepts the backend column names (rut, nombre, cargo, horario).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    identifier: str = Field(alias="rut")
    full_name: str = Field(alias="nombre")
    role: Optional[str] = Field(default=None, alias="cargo")
    status: Optional[str] = None
    terminal_code: Optional[str] = None
    schedule: Optional[str] = Field(default=None, alias="horario")

    @property
    def is_inactive(self) -> bool:
        return (self.status or "").strip().upper() in INACTIVE_STATUSES


class CommandPreview(BaseModel):
    """Final decision artifact shown to the operator before execution."""

    model_config = ConfigDict(frozen=True)

    parsed_command: ParsedCommand
    person: Optional[ResolvedPerson] = None
    person_not_found: bool = False
    action_description: str
    target_collection: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    can_execute: bool = False


class ActionRequest(BaseModel):
    """Payload handed to a registered action handler."""

    category: CommandCategory
    person: ResolvedPerson
    start_date: date
    end_date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None
    executed_by: str
    requested_at: datetime


class LogStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


class CommandLogEntry(BaseModel):
    """Audit record written after every execution attempt."""

    command_text: str
    parsed_intent: Optional[CommandCategory] = None
    payload_json: Dict[str, Any] = Field(default_factory=dict)
    executed_by: str
    terminal_code: Optional[str] = None
    status: LogStatus
    error_message: Optional[str] = None


class ExecutionResult(BaseModel):
    """Result from dispatching a previewed command."""

    success: bool
    output: str
    error: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)
    audit_logged: bool = False
