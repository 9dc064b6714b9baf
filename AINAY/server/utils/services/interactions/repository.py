from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from typing import Any, Protocol

from AINAY.server.utils.configurations import InteractionsSettings, server_settings
from AINAY.server.utils.logger import logger
from AINAY.server.utils.repository.serializer import DataSerializer
from AINAY.server.utils.services.interactions.checker import (
    InteractionCheckResult,
    check_drug_interactions,
)
from AINAY.server.utils.services.interactions.corpus import (
    DrugInteraction,
    InteractionRecord,
)
from AINAY.server.utils.services.interactions.loader import OnceLoader
from AINAY.server.utils.services.interactions.resolver import InteractionResolver
from AINAY.server.utils.updater.datasets import InteractionsDatasetClient


###############################################################################
class DatasetSource(Protocol):
    def fetch_food_interactions(self) -> list[dict[str, Any]]: ...

    def fetch_drug_interactions(self) -> list[dict[str, Any]]: ...


###############################################################################
class InteractionsRepository:
    """
    Async entry point used by the assistant and the search box.

    Datasets are fetched and indexed on first use, once per repository,
    with blocking work pushed to worker threads. Subsequent calls only read
    immutable structures.

    """

    def __init__(
        self,
        source: DatasetSource | None = None,
        *,
        settings: InteractionsSettings | None = None,
        serializer: DataSerializer | None = None,
    ) -> None:
        self.settings = settings or server_settings.interactions
        self.source = source or InteractionsDatasetClient(self.settings)
        self.serializer = serializer or DataSerializer()
        self.food_loader: OnceLoader[InteractionResolver] = OnceLoader(
            "drug-food interactions", self.load_food_resolver
        )
        self.drug_loader: OnceLoader[tuple[DrugInteraction, ...]] = OnceLoader(
            "drug-drug interactions", self.load_drug_interactions
        )

    # -------------------------------------------------------------------------
    async def load_food_resolver(self) -> InteractionResolver:
        start = time.perf_counter()
        payload = await asyncio.to_thread(self.source.fetch_food_interactions)
        records = await asyncio.to_thread(
            self.serializer.sanitize_food_interactions, payload
        )
        resolver = await asyncio.to_thread(
            InteractionResolver.from_records,
            records,
            exact_scan_limit=self.settings.exact_scan_limit,
            fuzzy_scan_limit=self.settings.fuzzy_scan_limit,
        )
        logger.info(
            "Drug-food interactions indexed: %d entries, %d fragments in %.3f s",
            len(resolver.corpus),
            len(resolver.corpus.token_index),
            time.perf_counter() - start,
        )
        return resolver

    # -------------------------------------------------------------------------
    async def load_drug_interactions(self) -> tuple[DrugInteraction, ...]:
        payload = await asyncio.to_thread(self.source.fetch_drug_interactions)
        interactions = await asyncio.to_thread(
            self.serializer.sanitize_drug_interactions, payload
        )
        logger.info("Drug-drug interactions loaded: %d entries", len(interactions))
        return tuple(interactions)

    # -------------------------------------------------------------------------
    async def get_resolver(self) -> InteractionResolver:
        return await self.food_loader.get()

    # -------------------------------------------------------------------------
    async def preload(self) -> None:
        await self.food_loader.get()

    # -------------------------------------------------------------------------
    async def resolve_exact(self, drug_name: str) -> InteractionRecord | None:
        resolver = await self.food_loader.get()
        return resolver.resolve_exact(drug_name)

    # -------------------------------------------------------------------------
    async def search_fuzzy(
        self, query: str, limit: int | None = None
    ) -> list[InteractionRecord]:
        resolver = await self.food_loader.get()
        if limit is None:
            limit = self.settings.default_search_limit
        return resolver.search_fuzzy(query, limit)

    # -------------------------------------------------------------------------
    async def batch_resolve(self, names: Iterable[str]) -> dict[str, list[str]]:
        resolver = await self.food_loader.get()
        return resolver.batch_resolve(names)

    # -------------------------------------------------------------------------
    async def build_context_block(self, names: Iterable[str]) -> str:
        resolver = await self.food_loader.get()
        return resolver.build_context_block(names)

    # -------------------------------------------------------------------------
    async def check_drug_interactions(
        self, new_medication: str, current_medications: Iterable[str]
    ) -> InteractionCheckResult:
        interactions = await self.drug_loader.get()
        return check_drug_interactions(
            new_medication, list(current_medications), interactions
        )


__all__ = ["DatasetSource", "InteractionsRepository"]
