"""
Duration phrases: "por 5 días", "durante una semana", "por 2 meses".
"""

import re
from datetime import date, timedelta
from typing import Optional

_DAYS_RE = re.compile(r"\b(?:(?:por|durante)\s+)?(\d+)\s*d[ií]as?\b")
_WEEKS_RE = re.compile(r"\b(?:(?:por|durante)\s+)?(?:una|(\d+))\s*semanas?\b")
# A month is approximated as 30 days
_MONTHS_RE = re.compile(r"\b(?:(?:por|durante)\s+)?(?:un|(\d+))\s*mes(?:es)?\b")


def extract_days(text: str) -> Optional[int]:
    """Number of days described by a duration phrase, or None."""
    if not text:
        return None

    lower = text.lower()

    m = _DAYS_RE.search(lower)
    if m:
        return int(m.group(1))

    m = _WEEKS_RE.search(lower)
    if m:
        return int(m.group(1) or 1) * 7

    m = _MONTHS_RE.search(lower)
    if m:
        return int(m.group(1) or 1) * 30

    return None


def compute_end_date(start: date, days: int) -> date:
    """Last day of a period that includes its start day."""
    return start + timedelta(days=days - 1)


def format_duration(days: int) -> str:
    if days == 1:
        return "1 día"
    if days < 7:
        return f"{days} días"
    if days == 7:
        return "1 semana"
    if days % 7 == 0:
        return f"{days // 7} semanas"
    if 28 <= days <= 31:
        return "1 mes"
    return f"{days} días"
