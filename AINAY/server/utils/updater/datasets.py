from __future__ import annotations

import json
import os
import time
from typing import Any

import httpx

from AINAY.server.utils.configurations import InteractionsSettings, server_settings
from AINAY.server.utils.constants import BACKOFF_TIME, RETRY_STATUS
from AINAY.server.utils.logger import logger
from AINAY.server.utils.services.interactions.loader import InteractionsLoadError


###############################################################################
class InteractionsDatasetClient:
    """
    Fetches the static interaction datasets as lists of raw JSON objects.

    Sources are either http(s) URLs or local file paths. Transient HTTP
    failures (connection errors, 429 and 5xx answers) are retried with a
    short backoff; anything still failing becomes `InteractionsLoadError`.

    """

    def __init__(
        self,
        settings: InteractionsSettings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or server_settings.interactions
        self.client = client

    # -------------------------------------------------------------------------
    def fetch_food_interactions(self) -> list[dict[str, Any]]:
        return self.fetch_records(self.settings.food_interactions_source)

    # -------------------------------------------------------------------------
    def fetch_drug_interactions(self) -> list[dict[str, Any]]:
        return self.fetch_records(self.settings.drug_interactions_source)

    # -------------------------------------------------------------------------
    def fetch_records(self, source: str) -> list[dict[str, Any]]:
        if source.startswith(("http://", "https://")):
            payload = self.download(source)
        else:
            payload = self.read_file(source)
        if not isinstance(payload, list):
            raise InteractionsLoadError(
                f"Dataset at {source} must be a JSON list of objects"
            )
        records = [entry for entry in payload if isinstance(entry, dict)]
        skipped = len(payload) - len(records)
        if skipped:
            logger.warning("Ignoring %d non-object entries in %s", skipped, source)
        return records

    # -------------------------------------------------------------------------
    def read_file(self, path: str) -> Any:
        if not os.path.exists(path):
            raise InteractionsLoadError(f"Dataset file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InteractionsLoadError(f"Unable to read dataset from {path}") from exc

    # -------------------------------------------------------------------------
    def download(self, url: str) -> Any:
        retries = self.settings.max_retries
        for attempt in range(retries):
            try:
                response = self.get(url)
            except httpx.RequestError as exc:
                if attempt + 1 == retries:
                    raise InteractionsLoadError(
                        f"Dataset request to {url} failed: {exc}"
                    ) from exc
                self.backoff(attempt)
                continue
            if response.status_code in RETRY_STATUS and attempt + 1 < retries:
                logger.debug(
                    "Dataset server returned %s for %s, retrying",
                    response.status_code,
                    url,
                )
                self.backoff(attempt)
                continue
            if response.status_code >= 400:
                raise InteractionsLoadError(
                    f"Dataset server returned {response.status_code} for {url}"
                )
            try:
                return response.json()
            except json.JSONDecodeError as exc:
                raise InteractionsLoadError(
                    f"Dataset at {url} is not valid JSON"
                ) from exc
        raise InteractionsLoadError(f"Dataset request to {url} was not attempted")

    # -------------------------------------------------------------------------
    def get(self, url: str) -> httpx.Response:
        if self.client is not None:
            return self.client.get(url, timeout=self.settings.request_timeout)
        return httpx.get(
            url, timeout=self.settings.request_timeout, follow_redirects=True
        )

    # -------------------------------------------------------------------------
    def backoff(self, attempt: int) -> None:
        time.sleep(BACKOFF_TIME[min(attempt, len(BACKOFF_TIME) - 1)])
