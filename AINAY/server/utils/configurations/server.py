from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from AINAY.server.utils.configurations.base import (
    ensure_mapping,
    load_configuration_data,
)
from AINAY.server.utils.constants import (
    DRUG_INTERACTIONS_FILENAME,
    FOOD_INTERACTIONS_FILENAME,
    SERVER_CONFIGURATION_FILE,
    SOURCES_PATH,
)
from AINAY.server.utils.types import coerce_float, coerce_positive_int, coerce_str


# [SERVER SETTINGS]
###############################################################################
@dataclass(frozen=True)
class InteractionsSettings:
    food_interactions_source: str
    drug_interactions_source: str
    exact_scan_limit: int
    fuzzy_scan_limit: int
    default_search_limit: int
    request_timeout: float
    max_retries: int

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ServerSettings:
    interactions: InteractionsSettings


# [BUILDER FUNCTIONS]
###############################################################################
def resolve_source(value: Any, default_filename: str) -> str:
    source = coerce_str(value, default_filename)
    if source.startswith(("http://", "https://")) or os.path.isabs(source):
        return source
    return os.path.join(SOURCES_PATH, source)

# -----------------------------------------------------------------------------
def build_interactions_settings(data: dict[str, Any]) -> InteractionsSettings:
    return InteractionsSettings(
        food_interactions_source=resolve_source(
            data.get("food_interactions_source"), FOOD_INTERACTIONS_FILENAME
        ),
        drug_interactions_source=resolve_source(
            data.get("drug_interactions_source"), DRUG_INTERACTIONS_FILENAME
        ),
        exact_scan_limit=coerce_positive_int(data.get("exact_scan_limit"), 100),
        fuzzy_scan_limit=coerce_positive_int(data.get("fuzzy_scan_limit"), 500),
        default_search_limit=coerce_positive_int(
            data.get("default_search_limit"), 10
        ),
        request_timeout=coerce_float(data.get("request_timeout"), 15.0, minimum=1.0),
        max_retries=coerce_positive_int(data.get("max_retries"), 3),
    )

# -----------------------------------------------------------------------------
def build_server_settings(data: dict[str, Any] | Any) -> ServerSettings:
    payload = ensure_mapping(data)
    interactions_payload = ensure_mapping(payload.get("interactions"))
    return ServerSettings(
        interactions=build_interactions_settings(interactions_payload),
    )


# [SERVER CONFIGURATION LOADER]
###############################################################################
def get_server_settings(config_path: str | None = None) -> ServerSettings:
    path = config_path or SERVER_CONFIGURATION_FILE
    payload = load_configuration_data(path)
    return build_server_settings(payload)


server_settings = get_server_settings()
