"""
Chilean RUT extraction, normalization and modulus-11 validation.

A RUT is a 7-8 digit body followed by a check character (0-9 or K),
written with or without thousands dots and a dash: 18.866.264-1,
18866264-1 or 188662641.
"""

import re
from typing import Iterator, NamedTuple, Optional

_NORMALIZED_RE = re.compile(r"^(\d{7,8})-([\dK])$")
_SHAPE_RE = re.compile(r"^(\d+)-([\dK])$")

_RUT_BODY = r"\d{1,2}\.?\d{3}\.?\d{3}\s?-?\s?[\dkK]"

# Candidate patterns, most trustworthy first
_CANDIDATE_PATTERNS = (
    # "rut: 18.866.264-1", "id 18866264-1", "para 18866264-1"
    re.compile(rf"\b(?:rut|id|para)\s*:?\s*({_RUT_BODY})\b", re.I),
    # "18.866.264-1", "18866264-1"
    re.compile(r"\b(\d{1,2}\.\d{3}\.\d{3}-?[\dkK]|\d{7,8}-[\dkK])\b", re.I),
)
_LENIENT_RE = re.compile(r"\b(\d{7,8})[\s-]?([\dkK])\b", re.I)


class RutMatch(NamedTuple):
    raw: str
    normalized: str


def normalize(raw: str) -> str:
    """Remove dots and whitespace, upper-case K and make sure there is a dash."""
    if not raw:
        return ""

    normalized = re.sub(r"[.\s]", "", raw).upper()
    if "-" not in normalized and len(normalized) > 1:
        normalized = f"{normalized[:-1]}-{normalized[-1]}"
    return normalized


def compute_check_digit(body: str) -> str:
    """Modulus-11 check character for a RUT body."""
    total = 0
    weight = 2
    for digit in reversed(body):
        total += int(digit) * weight
        weight = 2 if weight == 7 else weight + 1

    remainder = total % 11
    if remainder == 0:
        return "0"
    if remainder == 1:
        return "K"
    return str(11 - remainder)


def validate(rut: str) -> bool:
    """True if the RUT has a 7-8 digit body and a matching check character."""
    m = _NORMALIZED_RE.match(normalize(rut))
    if not m:
        return False
    body, check = m.groups()
    return compute_check_digit(body) == check


def _candidates(text: str) -> Iterator[str]:
    for pattern in _CANDIDATE_PATTERNS:
        for m in pattern.finditer(text):
            yield m.group(1)

    for m in _LENIENT_RE.finditer(text):
        yield m.group(0)


def extract_match(text: str) -> Optional[RutMatch]:
    """Find the first valid RUT in text, keeping the text as written."""
    if not text:
        return None

    for candidate in _candidates(text):
        normalized = normalize(candidate)
        if validate(normalized):
            return RutMatch(raw=candidate.strip(), normalized=normalized)
    return None


def extract(text: str) -> Optional[str]:
    """Return the first valid RUT in text, normalized, or None."""
    m = extract_match(text)
    return m.normalized if m else None


def format_rut(rut: str) -> str:
    """Format for display: 18866264-1 -> 18.866.264-1."""
    normalized = normalize(rut)
    m = _SHAPE_RE.match(normalized)
    if not m:
        return rut

    body, check = m.groups()
    body = re.sub(r"\B(?=(\d{3})+(?!\d))", ".", body)
    return f"{body}-{check}"
