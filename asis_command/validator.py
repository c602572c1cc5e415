"""
Per-category required-field rules deciding execution readiness.
"""

from typing import List

from .models import (
    DATE_RANGE_CATEGORIES,
    TIMED_CATEGORIES,
    CommandCategory,
    ParsedCommand,
    ValidationResult,
)
from .parser import MSG_UNKNOWN_CATEGORY

MSG_RUT_REQUIRED = "Se requiere un RUT válido"
MSG_START_DATE_REQUIRED = "Se requiere una fecha de inicio"
MSG_END_DATE_REQUIRED = 'Se requiere una fecha de término o duración (ej: "por 5 días")'
MSG_TIME_REQUIRED = 'Se requiere una hora (ej: "a las 09:30")'


def _add(errors: List[str], message: str) -> None:
    if message not in errors:
        errors.append(message)


def validate(parsed: ParsedCommand) -> ValidationResult:
    """Check a parsed command against the rules of its category."""
    errors = list(parsed.errors)

    if parsed.category == CommandCategory.UNKNOWN:
        _add(errors, MSG_UNKNOWN_CATEGORY)

    if not parsed.normalized_identifier:
        _add(errors, MSG_RUT_REQUIRED)

    if parsed.start_date is None:
        _add(errors, MSG_START_DATE_REQUIRED)

    if parsed.category in DATE_RANGE_CATEGORIES and parsed.end_date is None:
        _add(errors, MSG_END_DATE_REQUIRED)

    if parsed.category in TIMED_CATEGORIES and not parsed.start_time:
        _add(errors, MSG_TIME_REQUIRED)

    return ValidationResult(is_valid=not errors, errors=errors)
