"""
Free-text justification after an explicit label: motivo, razón or nota.

Unlabeled text is never taken as a reason.
"""

import re
from typing import Optional

_END = r"(.+?)\s*(?:[.!?](?:\s|$)|$)"

_REASON_PATTERNS = (
    re.compile(rf"\b(?:por\s+)?motivo\b\s*:?\s*(?:de\s+)?{_END}", re.I),
    re.compile(rf"\braz[oó]n\b\s*:?\s*{_END}", re.I),
    re.compile(rf"\bnota\b\s*:?\s*{_END}", re.I),
)


def extract_reason(text: str) -> Optional[str]:
    if not text:
        return None

    for pattern in _REASON_PATTERNS:
        m = pattern.search(text)
        if m:
            reason = m.group(1).strip(" :.,;")
            if reason:
                return reason
    return None
