"""
Command parser: turns one free-text command into a ParsedCommand.

Pure function of (text, today). Nothing here raises or reads the clock;
every unresolved field is reported as a human-readable error instead.
"""

from datetime import date, datetime
from typing import List, Optional

from . import rut
from .classifier import classify
from .dates import resolve_range, resolve_time_range
from .duration import compute_end_date, extract_days
from .models import (
    TIMED_CATEGORIES,
    CommandCategory,
    IntentTable,
    ParsedCommand,
)
from .reason import extract_reason

MSG_UNKNOWN_CATEGORY = (
    "No se reconoció el tipo de comando. Intenta con: vacaciones, licencia, "
    "permiso, llegada tardía, salida anticipada"
)
MSG_NO_RUT = "No se encontró un RUT válido en el comando"
MSG_NO_START_DATE = "No se pudo determinar la fecha de inicio"
MSG_END_BEFORE_START = "La fecha de término es anterior a la fecha de inicio"
MSG_NO_TIME = "No se pudo determinar la hora"


def _as_day(today: date) -> date:
    return today.date() if isinstance(today, datetime) else today


def parse(text: str, today: date, table: Optional[IntentTable] = None) -> ParsedCommand:
    """
    Parse a command string into structured data.

    `today` is the reference day for relative dates ("mañana", "el lunes");
    a datetime is accepted and its time part ignored.
    """
    text = text or ""
    today = _as_day(today)
    errors: List[str] = []

    intent = classify(text, table)
    known = intent.category != CommandCategory.UNKNOWN
    if not known:
        errors.append(MSG_UNKNOWN_CATEGORY)

    match = rut.extract_match(text)
    if match is None and known:
        errors.append(MSG_NO_RUT)

    start_date, end_date = resolve_range(text, today)
    if start_date is None and known:
        errors.append(MSG_NO_START_DATE)

    inverted = start_date is not None and end_date is not None and end_date < start_date
    if inverted:
        errors.append(MSG_END_BEFORE_START)
        end_date = None

    duration_days = extract_days(text)

    # "el lunes por 5 días": a stated duration replaces the single-day reading
    single_day = end_date is not None and end_date == start_date
    if (end_date is None or single_day) and start_date is not None and duration_days:
        end_date = compute_end_date(start_date, duration_days)

    # Single-day events
    if end_date is None and start_date is not None and not duration_days and not inverted:
        end_date = start_date

    start_time, end_time = resolve_time_range(text)
    if start_time is None and intent.category in TIMED_CATEGORIES:
        errors.append(MSG_NO_TIME)

    return ParsedCommand(
        category=intent.category,
        raw_identifier=match.raw if match else None,
        normalized_identifier=match.normalized if match else None,
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        end_time=end_time,
        duration_days=duration_days,
        reason=extract_reason(text),
        raw_text=text,
        confidence=intent.confidence,
        errors=tuple(errors),
    )
