from __future__ import annotations

from typing import Any, cast

import pandas as pd
from pydantic import ValidationError

from AINAY.server.schemas.interactions import DrugInteractionEntry, FoodInteractionEntry
from AINAY.server.utils.constants import (
    DRUG_INTERACTION_COLUMNS,
    FOOD_INTERACTION_COLUMNS,
)
from AINAY.server.utils.logger import logger
from AINAY.server.utils.services.interactions.corpus import (
    DrugInteraction,
    InteractionRecord,
)
from AINAY.server.utils.services.text.normalization import coerce_text


###############################################################################
class DataSerializer:
    def __init__(self) -> None:
        pass

    # -------------------------------------------------------------------------
    def prepare_frame(
        self, records: list[dict[str, Any]], columns: list[str], key: str
    ) -> pd.DataFrame:
        frame = pd.DataFrame(records)
        if frame.empty:
            return pd.DataFrame(columns=columns)
        frame = frame.reindex(columns=columns)
        frame = frame.astype(object).where(pd.notnull(frame), cast(Any, None))
        frame[key] = frame[key].apply(coerce_text)
        dropped = int(frame[key].isna().sum())
        if dropped:
            logger.warning("Skipping %d dataset rows without '%s'", dropped, key)
        return frame[frame[key].notna()].reset_index(drop=True)

    # -------------------------------------------------------------------------
    def sanitize_food_interactions(
        self, records: list[dict[str, Any]]
    ) -> list[InteractionRecord]:
        frame = self.prepare_frame(records, FOOD_INTERACTION_COLUMNS, "name")
        sanitized: list[InteractionRecord] = []
        for row in frame.to_dict(orient="records"):
            try:
                entry = FoodInteractionEntry.model_validate(row)
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid food interaction row '%s': %s",
                    row.get("name"),
                    exc.errors()[0].get("msg", "validation error"),
                )
                continue
            sanitized.append(
                InteractionRecord(
                    name=entry.name,
                    reference=entry.reference,
                    interactions=tuple(entry.food_interactions),
                )
            )
        return sanitized

    # -------------------------------------------------------------------------
    def sanitize_drug_interactions(
        self, records: list[dict[str, Any]]
    ) -> list[DrugInteraction]:
        frame = self.prepare_frame(records, DRUG_INTERACTION_COLUMNS, "drug_a")
        sanitized: list[DrugInteraction] = []
        for row in frame.to_dict(orient="records"):
            try:
                entry = DrugInteractionEntry.model_validate(row)
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid drug interaction row %s: %s",
                    row.get("interaction_id"),
                    exc.errors()[0].get("msg", "validation error"),
                )
                continue
            sanitized.append(DrugInteraction(**entry.model_dump()))
        return sanitized
