"""
Deterministic keyword/regex intent classifier.

No scoring across categories: the intent table is walked in descending
priority and the first pattern that matches anywhere in the lower-cased
text decides the category. Priority is the tie-break for overlapping
vocabulary, e.g. "vacaciones" beats "permiso" in the same sentence.
"""

import re
from typing import Optional

from .models import CommandCategory, IntentMatch, IntentPattern, IntentTable


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def build_intent_table() -> IntentTable:
    """Build the default intent table.

    Within a category, longer phrases are declared first so the
    confidence reflects the most specific match.
    """
    return (
        IntentPattern(
            category=CommandCategory.VACATION,
            patterns=(
                _rx(r"\bferiado\s+legal\b"),
                _rx(r"\bvacaciones\b"),
                _rx(r"\bvacaci[oó]n\b"),
            ),
            priority=10,
        ),
        IntentPattern(
            category=CommandCategory.MEDICAL_LEAVE,
            patterns=(
                _rx(r"\blicencia\s+m[eé]dica\b"),
                _rx(r"\blic\.\s*m[eé]dica\b"),
                _rx(r"\blicencia\b"),
            ),
            priority=10,
        ),
        IntentPattern(
            category=CommandCategory.PERMISSION,
            patterns=(
                _rx(r"\bpermiso\s+administrativo\b"),
                _rx(r"\bpermiso\s+personal\b"),
                _rx(r"\bpermiso\b"),
            ),
            priority=9,
        ),
        IntentPattern(
            category=CommandCategory.LATE_ARRIVAL_AUTH,
            patterns=(
                _rx(r"\bautorizaci[oó]n\s+(?:de\s+)?llegada\b"),
                _rx(r"\bllegada\s+tard[ií]a\b"),
                _rx(r"\bentrada\s+tard[ií]a\b"),
                _rx(r"\blleg[oó]\s+tarde\b"),
                _rx(r"\batraso\b"),
            ),
            priority=8,
        ),
        IntentPattern(
            category=CommandCategory.EARLY_DEPARTURE_AUTH,
            patterns=(
                _rx(r"\bautorizaci[oó]n\s+(?:de\s+)?salida\b"),
                _rx(r"\bsalida\s+anticipada\b"),
                _rx(r"\bretiro\s+anticipado\b"),
                _rx(r"\bsalir\s+temprano\b"),
                _rx(r"\bsalir\s+antes\b"),
            ),
            priority=8,
        ),
        IntentPattern(
            category=CommandCategory.DAY_SWAP,
            patterns=(
                _rx(r"\bintercambio\s+de\s+d[ií]a\b"),
                _rx(r"\bcambio\s+de\s+d[ií]a\b"),
                _rx(r"\bcambiar\s+(?:el\s+)?d[ií]a\b"),
                _rx(r"\bmover\s+(?:el\s+)?turno\b"),
            ),
            priority=7,
        ),
        IntentPattern(
            category=CommandCategory.NO_CLOCK_IN,
            patterns=(
                _rx(r"\bno\s+marcaci[oó]n\b"),
                _rx(r"\bsin\s+marcaci[oó]n\b"),
                _rx(r"\bolvid[oó]\s+marcar\b"),
                _rx(r"\bfalt[oó]\s+marca\b"),
                _rx(r"\bno\s+marc[oó]\b"),
            ),
            priority=6,
        ),
        IntentPattern(
            category=CommandCategory.NO_CREDENTIAL,
            patterns=(
                _rx(r"\bolvid[oó]\s+(?:la\s+)?credencial\b"),
                _rx(r"\bno\s+tiene\s+credencial\b"),
                _rx(r"\bcredencial\s+olvidada\b"),
                _rx(r"\bsin\s+credencial\b"),
            ),
            priority=5,
        ),
    )


DEFAULT_INTENT_TABLE: IntentTable = build_intent_table()


def classify(text: str, table: Optional[IntentTable] = None) -> IntentMatch:
    """
    Classify command text into a CommandCategory.

    Confidence is informational only: 0.9 plus up to 0.1 for the share
    of the text covered by the winning match.
    """
    if not text or not text.strip():
        return IntentMatch(category=CommandCategory.UNKNOWN, confidence=0.0)

    lower = text.lower()
    rows = sorted(table if table is not None else DEFAULT_INTENT_TABLE, key=lambda row: -row.priority)

    for row in rows:
        for pattern in row.patterns:
            m = pattern.search(lower)
            if m:
                confidence = min(0.9 + (len(m.group(0)) / len(text)) * 0.1, 1.0)
                return IntentMatch(category=row.category, confidence=confidence)

    return IntentMatch(category=CommandCategory.UNKNOWN, confidence=0.0)
