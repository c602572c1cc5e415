"""
Spanish date and time resolution.

Every function takes the reference day explicitly; nothing here reads the
clock. Resolution follows a fixed precedence so the same text always yields
the same date for the same reference day:

    1. hoy / mañana / pasado mañana
    2. próximo <día>
    3. el / este <día>, or a bare weekday name
    4. ISO date (2026-01-19)
    5. "19 de enero [de 2026]"
    6. 19/01/2026, 19-01-26, 19.01.2026
    7. 19/01 (current year, next year if already past)
"""

import re
from datetime import date, timedelta
from typing import Iterable, NamedTuple, Optional

WEEKDAYS = {
    "lunes": 0,
    "martes": 1,
    "miércoles": 2,
    "miercoles": 2,
    "jueves": 3,
    "viernes": 4,
    "sábado": 5,
    "sabado": 5,
    "domingo": 6,
}

MONTHS = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "setiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
    "ene": 1,
    "feb": 2,
    "mar": 3,
    "abr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "ago": 8,
    "sep": 9,
    "sept": 9,
    "set": 9,
    "oct": 10,
    "nov": 11,
    "dic": 12,
}

_WEEKDAY_ALT = "|".join(sorted(WEEKDAYS, key=len, reverse=True))

_TODAY_RE = re.compile(r"\bhoy\b")
_DAY_AFTER_TOMORROW_RE = re.compile(r"\bpasado\s+ma[ñn]ana\b")
_TOMORROW_RE = re.compile(r"\bma[ñn]ana\b")
_NEXT_WEEKDAY_RE = re.compile(rf"\bpr[oó]xim[oa]\s+({_WEEKDAY_ALT})\b")
_WEEKDAY_RE = re.compile(rf"\b({_WEEKDAY_ALT})\b")
_ISO_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_SPANISH_RE = re.compile(r"\b(\d{1,2})\s+de\s+([a-zá-ú]+)\.?(?:\s+(?:de|del)\s+(\d{4}))?\b")
_NUMERIC_RE = re.compile(r"(?<![\d/.-])(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})\b")
_SHORT_NUMERIC_RE = re.compile(r"(?<![\d/.-])(\d{1,2})[/\-.](\d{1,2})(?![\d/-]|\.\d)")

# What ends a date segment inside a longer command
_STOP_ALT = (
    r"\s+(?:por|durante|a\s+las?|desde\s+las?|motivo|raz[oó]n|nota)\b"
    r"|\s+de\s+(?:las?\s+)?\d{1,2}(?::\d{2})?(?:\s*-|\s+(?:a|hasta)\s)"
    r"|\s*[,;]|\.(?:\s|$)|$"
)
_STOP = rf"(?={_STOP_ALT})"

_RANGE_PATTERNS = (
    # desde X hasta Y
    re.compile(rf"\bdesde\s+(.+?)\s+hasta\s+(.+?){_STOP}"),
    # del X al Y
    re.compile(rf"\bdel\s+(.+?)\s+al\s+(.+?){_STOP}"),
)
_FROM_RE = re.compile(rf"\bdesde\s+(.+?){_STOP}")
_SINGLE_RE = re.compile(rf"\bel\s+(.+?){_STOP}")
_BARE_DAY_RE = re.compile(r"^(?:el\s+)?(\d{1,2})$")

_CLOCK_RE = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_AT_HOUR_RE = re.compile(r"\ba\s+las?\s+(\d{1,2})(?:\s*(?:hrs?|horas?)\b)?")
_TIME = r"(\d{1,2}(?::\d{2})?)"
_TIME_RANGE_PATTERNS = (
    re.compile(rf"\bdesde\s+las?\s+{_TIME}\s*(?:hrs?\s+)?hasta\s+las?\s+{_TIME}"),
    re.compile(r"\b(\d{1,2}:\d{2})\s*(?:-|a)\s*(\d{1,2}:\d{2})\b"),
    re.compile(rf"\bde\s+(?:las?\s+)?{_TIME}\s+a\s+(?:las?\s+)?{_TIME}\b"),
)


class DateRange(NamedTuple):
    start: Optional[date]
    end: Optional[date]


class TimeRange(NamedTuple):
    start: Optional[str]
    end: Optional[str]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _next_weekday(today: date, weekday: int) -> date:
    """Nearest date with the given weekday, 0-6 days from today."""
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def _roll_forward(today: date, month: int, day: int) -> Optional[date]:
    candidate = _safe_date(today.year, month, day)
    if candidate is not None and candidate < today:
        candidate = _safe_date(today.year + 1, month, day)
    return candidate


def _first_valid(candidates: Iterable[Optional[date]]) -> Optional[date]:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _relative_day(lower: str, today: date) -> Optional[date]:
    if _TODAY_RE.search(lower):
        return today
    if _DAY_AFTER_TOMORROW_RE.search(lower):
        return today + timedelta(days=2)
    if _TOMORROW_RE.search(lower):
        return today + timedelta(days=1)
    return None


def resolve_date(text: str, today: date) -> Optional[date]:
    """Resolve the first Spanish date expression in text against today."""
    if not text:
        return None

    lower = text.lower().strip()

    found = _relative_day(lower, today)
    if found:
        return found

    m = _NEXT_WEEKDAY_RE.search(lower)
    if m:
        candidate = _next_weekday(today, WEEKDAYS[m.group(1)])
        # "próximo lunes" said on a Monday means next week's
        if (candidate - today).days < 1:
            candidate += timedelta(days=7)
        return candidate

    m = _WEEKDAY_RE.search(lower)
    if m:
        return _next_weekday(today, WEEKDAYS[m.group(1)])

    found = _first_valid(_safe_date(*map(int, m.groups())) for m in _ISO_RE.finditer(lower))
    if found:
        return found

    for m in _SPANISH_RE.finditer(lower):
        month = MONTHS.get(m.group(2))
        if month is None:
            continue
        day = int(m.group(1))
        if m.group(3):
            found = _safe_date(int(m.group(3)), month, day)
        else:
            found = _roll_forward(today, month, day)
        if found:
            return found

    for m in _NUMERIC_RE.finditer(lower):
        year = int(m.group(3))
        if year < 100:
            year += 2000
        found = _safe_date(year, int(m.group(2)), int(m.group(1)))
        if found:
            return found

    return _first_valid(
        _roll_forward(today, int(m.group(2)), int(m.group(1)))
        for m in _SHORT_NUMERIC_RE.finditer(lower)
    )


def _resolve_end(segment: str, start: date, today: date) -> Optional[date]:
    """Resolve a range end.

    hoy / mañana count from today. Weekdays and year-less dates roll forward
    from the start, so "del viernes al lunes" crosses the weekend.
    """
    found = _relative_day(segment.lower(), today)
    if found:
        return found
    return resolve_date(segment, start)


def _resolve_start(segment: str, end_segment: str, today: date) -> Optional[date]:
    start = resolve_date(segment, today)
    if start is not None:
        return start

    # "del 19 al 23 de enero": the bare day takes month and year from the end
    m = _BARE_DAY_RE.match(segment.strip())
    end = resolve_date(end_segment, today)
    if not m or end is None:
        return None
    start = _safe_date(end.year, end.month, int(m.group(1)))
    if start is not None and start > end:
        previous = end.replace(day=1) - timedelta(days=1)
        start = _safe_date(previous.year, previous.month, int(m.group(1)))
    return start


def resolve_range(text: str, today: date) -> DateRange:
    """Resolve a start/end pair from text.

    Tries "desde X hasta Y", "del X al Y", "desde X", "el X" and finally any
    date in the whole text. A strategy whose start does not resolve falls
    through to the next one.
    """
    if not text:
        return DateRange(None, None)

    lower = text.lower()

    for pattern in _RANGE_PATTERNS:
        m = pattern.search(lower)
        if not m:
            continue
        start = _resolve_start(m.group(1), m.group(2), today)
        if start is None:
            continue
        return DateRange(start, _resolve_end(m.group(2), start, today))

    m = _FROM_RE.search(lower)
    if m:
        start = resolve_date(m.group(1), today)
        if start is not None:
            return DateRange(start, None)

    m = _SINGLE_RE.search(lower)
    if m:
        single = resolve_date(m.group(1), today)
        if single is not None:
            return DateRange(single, single)

    return DateRange(resolve_date(lower, today), None)


def _format_time(hour: int, minute: int = 0) -> Optional[str]:
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return f"{hour:02d}:{minute:02d}"
    return None


def _parse_time_token(token: str) -> Optional[str]:
    hour, _, minute = token.partition(":")
    return _format_time(int(hour), int(minute or 0))


def resolve_time(text: str) -> Optional[str]:
    """Return the first time of day in text as HH:MM."""
    if not text:
        return None

    lower = text.lower()

    for m in _CLOCK_RE.finditer(lower):
        found = _format_time(int(m.group(1)), int(m.group(2)))
        if found:
            return found

    m = _AT_HOUR_RE.search(lower)
    if m:
        return _format_time(int(m.group(1)))

    return None


def resolve_time_range(text: str) -> TimeRange:
    """Resolve a start/end time pair, or a single start time."""
    if not text:
        return TimeRange(None, None)

    lower = text.lower()

    for pattern in _TIME_RANGE_PATTERNS:
        m = pattern.search(lower)
        if not m:
            continue
        start = _parse_time_token(m.group(1))
        end = _parse_time_token(m.group(2))
        if start and end:
            return TimeRange(start, end)

    return TimeRange(resolve_time(lower), None)
