from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from AINAY.server.utils.constants import FRAGMENT_MIN_LENGTH, SECONDARY_WORD_MIN_LENGTH
from AINAY.server.utils.logger import logger
from AINAY.server.utils.services.text.normalization import normalize_drug_name


###############################################################################
@dataclass(frozen=True, slots=True)
class InteractionRecord:
    name: str
    reference: str = ""
    interactions: tuple[str, ...] = ()


###############################################################################
@dataclass(frozen=True, slots=True)
class DrugInteraction:
    interaction_id: int
    drug_a: str
    drug_b: str
    severity: str
    mechanism: str = ""
    clinical_effect: str = ""
    safer_alternative: str = ""


ExactIndex = Mapping[str, InteractionRecord]
TokenIndex = Mapping[str, tuple[InteractionRecord, ...]]


# -----------------------------------------------------------------------------
def name_fragments(normalized: str) -> list[str]:
    """
    List the token-index keys for a normalized record name: the first word,
    each of its prefixes from three characters up, and every later word of at
    least four characters. Keys are unique, so a record lands in each bucket
    once.

    """
    if not normalized:
        return []
    words = normalized.split(" ")
    fragments: dict[str, None] = {}
    head = words[0]
    if len(head) >= FRAGMENT_MIN_LENGTH:
        fragments[head] = None
        for length in range(FRAGMENT_MIN_LENGTH, len(head)):
            fragments.setdefault(head[:length], None)
    for word in words[1:]:
        if len(word) >= SECONDARY_WORD_MIN_LENGTH:
            fragments.setdefault(word, None)
    return list(fragments)


# -----------------------------------------------------------------------------
def build_indexes(
    records: Iterable[InteractionRecord],
) -> tuple[dict[str, InteractionRecord], dict[str, tuple[InteractionRecord, ...]]]:
    exact_index: dict[str, InteractionRecord] = {}
    buckets: dict[str, dict[int, InteractionRecord]] = {}
    for record in records:
        normalized = normalize_drug_name(record.name)
        if not normalized:
            continue
        previous = exact_index.get(normalized)
        if previous is not None and previous is not record:
            # last writer wins, the earlier entry stays reachable by token
            logger.debug(
                "Duplicate normalized name '%s': '%s' replaces '%s'",
                normalized,
                record.name,
                previous.name,
            )
        exact_index[normalized] = record
        for fragment in name_fragments(normalized):
            buckets.setdefault(fragment, {}).setdefault(id(record), record)
    token_index = {
        fragment: tuple(bucket.values()) for fragment, bucket in buckets.items()
    }
    return exact_index, token_index


###############################################################################
class ReferenceCorpus:
    """Immutable food-interaction corpus with its exact and token indexes."""

    __slots__ = ("records", "exact_index", "token_index", "normalized_names")

    def __init__(self, records: Iterable[InteractionRecord]) -> None:
        self.records: tuple[InteractionRecord, ...] = tuple(records)
        exact_index, token_index = build_indexes(self.records)
        self.exact_index: ExactIndex = MappingProxyType(exact_index)
        self.token_index: TokenIndex = MappingProxyType(token_index)
        self.normalized_names: Mapping[int, str] = MappingProxyType(
            {id(record): normalize_drug_name(record.name) for record in self.records}
        )

    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.records)

    # -------------------------------------------------------------------------
    def normalized_name(self, record: InteractionRecord) -> str:
        cached = self.normalized_names.get(id(record))
        if cached is not None:
            return cached
        return normalize_drug_name(record.name)

    # -------------------------------------------------------------------------
    def lookup_exact(self, key: str) -> InteractionRecord | None:
        if not key:
            return None
        return self.exact_index.get(key)

    # -------------------------------------------------------------------------
    def lookup_fragment(self, fragment: str) -> tuple[InteractionRecord, ...]:
        return self.token_index.get(fragment, ())

    # -------------------------------------------------------------------------
    def head(self, limit: int) -> tuple[InteractionRecord, ...]:
        return self.records[: max(limit, 0)]


__all__ = [
    "DrugInteraction",
    "ExactIndex",
    "InteractionRecord",
    "ReferenceCorpus",
    "TokenIndex",
    "build_indexes",
    "name_fragments",
]
