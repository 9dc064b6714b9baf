from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from AINAY.server.utils.constants import SEVERITY_ORDER, SIGNIFICANT_WORD_MIN_LENGTH
from AINAY.server.utils.services.interactions.corpus import DrugInteraction
from AINAY.server.utils.services.text.normalization import (
    first_word,
    normalize_interaction_name,
)


###############################################################################
@dataclass(frozen=True, slots=True)
class DetectedInteraction:
    current_medication: str
    severity: str
    mechanism: str
    clinical_effect: str
    safer_alternative: str


###############################################################################
@dataclass(slots=True)
class InteractionCheckResult:
    has_interactions: bool
    interactions: list[DetectedInteraction] = field(default_factory=list)


# -----------------------------------------------------------------------------
def drug_names_match(drug_a: str, drug_b: str) -> bool:
    normalized_a = normalize_interaction_name(drug_a)
    normalized_b = normalize_interaction_name(drug_b)
    if not normalized_a or not normalized_b:
        return False
    if normalized_a == normalized_b:
        return True
    if normalized_a in normalized_b or normalized_b in normalized_a:
        return True
    primary_a = first_word(normalized_a)
    primary_b = first_word(normalized_b)
    if primary_a == primary_b and len(primary_a) >= SIGNIFICANT_WORD_MIN_LENGTH:
        return True
    if primary_a == normalized_b or primary_b == normalized_a:
        return True
    words_a = {
        word for word in normalized_a.split(" ")
        if len(word) >= SIGNIFICANT_WORD_MIN_LENGTH
    }
    words_b = {
        word for word in normalized_b.split(" ")
        if len(word) >= SIGNIFICANT_WORD_MIN_LENGTH
    }
    return bool(words_a & words_b)


# -----------------------------------------------------------------------------
def check_drug_interactions(
    new_medication: str,
    current_medications: Iterable[str],
    interactions: Iterable[DrugInteraction],
) -> InteractionCheckResult:
    """
    Check a newly added medication against the ones already being taken.

    Each current medication contributes at most one detection, taken from
    the first table row whose pair matches in either order. A current
    medication with the same normalized name as the new one is skipped.
    Detections are ordered Major, Moderate, Minor.

    """
    table = tuple(interactions)
    normalized_new = normalize_interaction_name(new_medication)
    detected: list[DetectedInteraction] = []
    reported: set[str] = set()
    for current in current_medications:
        normalized_current = normalize_interaction_name(current)
        if not normalized_current or normalized_current == normalized_new:
            continue
        if normalized_current in reported:
            continue
        for row in table:
            forward = drug_names_match(new_medication, row.drug_a) and drug_names_match(
                current, row.drug_b
            )
            backward = drug_names_match(new_medication, row.drug_b) and drug_names_match(
                current, row.drug_a
            )
            if not (forward or backward):
                continue
            reported.add(normalized_current)
            detected.append(
                DetectedInteraction(
                    current_medication=current,
                    severity=row.severity,
                    mechanism=row.mechanism,
                    clinical_effect=row.clinical_effect,
                    safer_alternative=row.safer_alternative,
                )
            )
            break
    detected.sort(key=lambda item: SEVERITY_ORDER.get(item.severity, len(SEVERITY_ORDER)))
    return InteractionCheckResult(has_interactions=bool(detected), interactions=detected)


__all__ = [
    "DetectedInteraction",
    "InteractionCheckResult",
    "check_drug_interactions",
    "drug_names_match",
]
