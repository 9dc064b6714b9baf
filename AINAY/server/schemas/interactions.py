from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Severity = Literal["Major", "Moderate", "Minor"]


# -----------------------------------------------------------------------------
def _strip_optional(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


###############################################################################
class FoodInteractionEntry(BaseModel):
    """
    One row of the drug-to-food interactions dataset.
    - `name` must be non-empty after stripping.
    - `food_interactions` drops blank warnings and tolerates a bare string.
    """

    name: str = Field(..., min_length=1, description="Drug name as published.")
    reference: str = Field("", description="Citation for the entry.")
    food_interactions: list[str] = Field(
        default_factory=list,
        description="Human readable food and diet warnings.",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("reference", mode="before")
    @classmethod
    def _strip_reference(cls, value: Any) -> str:
        return _strip_optional(value)

    @field_validator("food_interactions", mode="before")
    @classmethod
    def _clean_warnings(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("food_interactions must be a list of strings")
        cleaned: list[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise ValueError("food_interactions must be a list of strings")
            stripped = entry.strip()
            if stripped:
                cleaned.append(stripped)
        return cleaned


###############################################################################
class DrugInteractionEntry(BaseModel):
    interaction_id: int
    drug_a: str = Field(..., min_length=1)
    drug_b: str = Field(..., min_length=1)
    severity: Severity
    mechanism: str = ""
    clinical_effect: str = ""
    safer_alternative: str = ""

    @field_validator("drug_a", "drug_b", mode="before")
    @classmethod
    def _strip_drugs(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("severity", mode="before")
    @classmethod
    def _capitalize_severity(cls, value: Any) -> Any:
        return value.strip().capitalize() if isinstance(value, str) else value

    @field_validator(
        "mechanism", "clinical_effect", "safer_alternative", mode="before"
    )
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return _strip_optional(value)
