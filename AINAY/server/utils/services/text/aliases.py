from __future__ import annotations

from collections.abc import Mapping

from AINAY.server.utils.constants import DRUG_ALIASES, SIGNIFICANT_WORD_MIN_LENGTH
from AINAY.server.utils.services.text.normalization import first_word


# -----------------------------------------------------------------------------
def expand_aliases(
    normalized: str,
    aliases: Mapping[str, tuple[str, ...]] = DRUG_ALIASES,
) -> list[str]:
    """
    Return the search keys for an already normalized name.

    The input always comes first. Brand names found inside the input add
    their generics, generic names found inside the input add their brand,
    and a first word longer than three characters is appended last so that
    labelled strings such as "metformin extended release" still reach the
    plain "metformin" entry. Keys are unique and keep insertion order.

    """
    keys: dict[str, None] = {normalized: None}
    if normalized:
        for brand, generics in aliases.items():
            if brand in normalized:
                keys.update(dict.fromkeys(generics))
            for generic in generics:
                if generic in normalized:
                    keys[brand] = None
        head = first_word(normalized)
        if len(head) >= SIGNIFICANT_WORD_MIN_LENGTH:
            keys.setdefault(head, None)
    return list(keys)


# -----------------------------------------------------------------------------
def alias_pairs(
    aliases: Mapping[str, tuple[str, ...]] = DRUG_ALIASES,
) -> list[tuple[str, str]]:
    return [(brand, generic) for brand, generics in aliases.items() for generic in generics]


__all__ = ["alias_pairs", "expand_aliases"]
