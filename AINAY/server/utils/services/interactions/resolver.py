from __future__ import annotations

from collections.abc import Iterable

from AINAY.server.utils.constants import (
    FOOD_CONTEXT_CLOSING,
    FOOD_CONTEXT_HEADING,
    FOOD_CONTEXT_PREAMBLE,
    FRAGMENT_MIN_LENGTH,
    SECONDARY_WORD_MIN_LENGTH,
    SIGNIFICANT_WORD_MIN_LENGTH,
)
from AINAY.server.utils.logger import logger
from AINAY.server.utils.services.interactions.corpus import (
    InteractionRecord,
    ReferenceCorpus,
)
from AINAY.server.utils.services.text.aliases import expand_aliases
from AINAY.server.utils.services.text.normalization import (
    first_word,
    normalize_drug_name,
)

DEFAULT_EXACT_SCAN_LIMIT = 100
DEFAULT_FUZZY_SCAN_LIMIT = 500


# -----------------------------------------------------------------------------
def prefix_range(word: str) -> Iterable[str]:
    for length in range(FRAGMENT_MIN_LENGTH, len(word)):
        yield word[:length]


# -----------------------------------------------------------------------------
def names_overlap(candidate: str, key: str) -> bool:
    if not candidate or not key:
        return False
    return key in candidate or candidate in key


# -----------------------------------------------------------------------------
def is_plausible_match(candidate: str, key: str) -> bool:
    if names_overlap(candidate, key):
        return True
    head = first_word(candidate)
    return len(head) >= SIGNIFICANT_WORD_MIN_LENGTH and head == first_word(key)


###############################################################################
class InteractionResolver:
    """
    Answers name lookups against a loaded `ReferenceCorpus`.

    Every method is a pure in-memory read, so one resolver can be shared by
    any number of concurrent callers once the corpus is built. Unmatched
    names come back as `None` or empty collections, never as exceptions.

    """

    def __init__(
        self,
        corpus: ReferenceCorpus,
        *,
        exact_scan_limit: int = DEFAULT_EXACT_SCAN_LIMIT,
        fuzzy_scan_limit: int = DEFAULT_FUZZY_SCAN_LIMIT,
    ) -> None:
        self.corpus = corpus
        self.exact_scan_limit = max(int(exact_scan_limit), 0)
        self.fuzzy_scan_limit = max(int(fuzzy_scan_limit), 0)

    # -------------------------------------------------------------------------
    @classmethod
    def from_records(
        cls,
        records: Iterable[InteractionRecord],
        **limits: int,
    ) -> InteractionResolver:
        return cls(ReferenceCorpus(records), **limits)

    # -------------------------------------------------------------------------
    def search_keys(self, drug_name: str) -> list[str]:
        normalized = normalize_drug_name(drug_name)
        return [key for key in expand_aliases(normalized) if key]

    # -------------------------------------------------------------------------
    def resolve_exact(self, drug_name: str) -> InteractionRecord | None:
        keys = self.search_keys(drug_name)
        if not keys:
            return None
        for key in keys:
            record = self.corpus.lookup_exact(key)
            if record is not None:
                logger.debug("Exact match for '%s' via key '%s'", drug_name, key)
                return record

        candidates = self.collect_candidates(keys)
        if candidates:
            for record in candidates:
                normalized = self.corpus.normalized_name(record)
                if any(is_plausible_match(normalized, key) for key in keys):
                    logger.debug(
                        "Candidate match for '%s': '%s' (%d candidates)",
                        drug_name,
                        record.name,
                        len(candidates),
                    )
                    return record
            return None

        # bounded scan for names the token index cannot reach
        for record in self.corpus.head(self.exact_scan_limit):
            normalized = self.corpus.normalized_name(record)
            if any(names_overlap(normalized, key) for key in keys):
                logger.debug(
                    "Fallback scan matched '%s' to '%s'", drug_name, record.name
                )
                return record
        return None

    # -------------------------------------------------------------------------
    def collect_candidates(self, keys: Iterable[str]) -> list[InteractionRecord]:
        candidates: dict[int, InteractionRecord] = {}
        for key in keys:
            head = first_word(key)
            probes: list[str] = []
            if len(head) >= FRAGMENT_MIN_LENGTH:
                probes.append(head)
                probes.extend(prefix_range(head))
            probes.extend(
                word for word in key.split(" ") if len(word) >= SECONDARY_WORD_MIN_LENGTH
            )
            for probe in probes:
                for record in self.corpus.lookup_fragment(probe):
                    candidates.setdefault(id(record), record)
        return list(candidates.values())

    # -------------------------------------------------------------------------
    def search_fuzzy(self, query: str, limit: int) -> list[InteractionRecord]:
        if limit <= 0:
            return []
        normalized_query = normalize_drug_name(query)
        if not normalized_query:
            return []
        results: list[InteractionRecord] = []
        seen: set[str] = set()

        def collect(records: Iterable[InteractionRecord]) -> None:
            for record in records:
                if len(results) >= limit:
                    return
                if record.name in seen:
                    continue
                seen.add(record.name)
                results.append(record)

        primary = first_word(normalized_query)
        if len(primary) >= FRAGMENT_MIN_LENGTH:
            collect(self.corpus.lookup_fragment(primary))
            for prefix in prefix_range(primary):
                if len(results) >= limit:
                    break
                collect(self.corpus.lookup_fragment(prefix))

        if len(results) < limit:
            for record in self.corpus.head(self.fuzzy_scan_limit):
                if len(results) >= limit:
                    break
                if record.name in seen:
                    continue
                normalized = self.corpus.normalized_name(record)
                mentions_query = any(
                    normalized_query in warning.lower()
                    for warning in record.interactions
                )
                if names_overlap(normalized, normalized_query) or mentions_query:
                    seen.add(record.name)
                    results.append(record)
        return results

    # -------------------------------------------------------------------------
    def batch_resolve(self, names: Iterable[str]) -> dict[str, list[str]]:
        resolved: dict[str, list[str]] = {}
        total = 0
        for name in names:
            total += 1
            record = self.resolve_exact(name)
            if record is not None and record.interactions:
                resolved[name] = list(record.interactions)
        logger.info(
            "Resolved interaction warnings for %d of %d medications",
            len(resolved),
            total,
        )
        return resolved

    # -------------------------------------------------------------------------
    def build_context_block(self, names: Iterable[str]) -> str:
        return format_context_block(self.batch_resolve(names))


# -----------------------------------------------------------------------------
def format_context_block(warnings_by_drug: dict[str, list[str]]) -> str:
    if not warnings_by_drug:
        return ""
    lines = [FOOD_CONTEXT_HEADING, "", FOOD_CONTEXT_PREAMBLE, ""]
    for drug_name, warnings in warnings_by_drug.items():
        lines.append(f"### {drug_name}")
        lines.extend(f"- {warning}" for warning in warnings)
        lines.append("")
    lines.append(FOOD_CONTEXT_CLOSING)
    return "\n".join(lines)


__all__ = [
    "DEFAULT_EXACT_SCAN_LIMIT",
    "DEFAULT_FUZZY_SCAN_LIMIT",
    "InteractionResolver",
    "format_context_block",
    "is_plausible_match",
    "names_overlap",
]
