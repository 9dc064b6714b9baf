from __future__ import annotations

import re
from typing import Any

import pandas as pd

from AINAY.server.utils.constants import DOSAGE_UNITS, SALT_FORMS

DOSAGE_SUFFIX_RE = re.compile(
    rf"\s*\d+(?:\.\d+)?\s*(?:{'|'.join(DOSAGE_UNITS)})\s*$", re.IGNORECASE
)
PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)\s*")
WHITESPACE_RE = re.compile(r"\s+")
SALT_CLAUSE_RE = re.compile(r"\s+as\s+\w+", re.IGNORECASE)
SALT_SUFFIX_RES = tuple(
    re.compile(rf"\s+{salt}\s*$", re.IGNORECASE) for salt in SALT_FORMS
)


# -----------------------------------------------------------------------------
def coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        return text or None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    return text or None


# -----------------------------------------------------------------------------
def normalize_whitespace(value: str) -> str:
    if not value:
        return ""
    return WHITESPACE_RE.sub(" ", value).strip()


# -----------------------------------------------------------------------------
def _normalize_once(value: str) -> str:
    normalized = value.lower().strip()
    normalized = DOSAGE_SUFFIX_RE.sub("", normalized)
    normalized = PARENTHETICAL_RE.sub(" ", normalized)
    return normalize_whitespace(normalized)


# -----------------------------------------------------------------------------
def normalize_drug_name(value: Any) -> str:
    """
    Map a raw medication name to the key used for every corpus lookup.

    The name is lower-cased and trimmed, a trailing dosage clause such as
    "500 mg" or "2 tablets" is dropped, parenthetical notes become a single
    space and whitespace is collapsed. Passes repeat until the value is
    stable, so stacked suffixes ("10 mg (x) 5 ml") are removed completely and
    normalizing twice gives the same key. Non-string input maps to "".

    """
    if not isinstance(value, str) or not value:
        return ""
    current = value
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            return normalized
        current = normalized


# -----------------------------------------------------------------------------
def normalize_interaction_name(value: Any) -> str:
    normalized = normalize_drug_name(value)
    if not normalized:
        return ""
    # "(as sodium)" is already gone, this handles the bare "as sodium" form
    normalized = normalize_whitespace(SALT_CLAUSE_RE.sub("", normalized))
    for pattern in SALT_SUFFIX_RES:
        normalized = pattern.sub("", normalized)
    return normalized.strip()


# -----------------------------------------------------------------------------
def first_word(normalized: str) -> str:
    if not normalized:
        return ""
    return normalized.split(" ", 1)[0]


__all__ = [
    "coerce_text",
    "first_word",
    "normalize_drug_name",
    "normalize_interaction_name",
    "normalize_whitespace",
]
