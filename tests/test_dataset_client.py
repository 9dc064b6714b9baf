from __future__ import annotations

import json
import os
import sys
import tempfile
import unittest
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from unittest.mock import patch

import httpx

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from AINAY.server.utils.configurations import InteractionsSettings
from AINAY.server.utils.services.interactions.loader import InteractionsLoadError
from AINAY.server.utils.updater.datasets import InteractionsDatasetClient

FOOD_URL = "https://datasets.example.org/drug_food_interactions.json"
DRUG_URL = "https://datasets.example.org/drug_drug_interactions.json"

SETTINGS = InteractionsSettings(
    food_interactions_source=FOOD_URL,
    drug_interactions_source=DRUG_URL,
    exact_scan_limit=100,
    fuzzy_scan_limit=500,
    default_search_limit=10,
    request_timeout=5.0,
    max_retries=3,
)

PAYLOAD = [
    {
        "name": "Warfarin",
        "reference": "DB00682",
        "food_interactions": ["Avoid vitamin K-rich leafy greens"],
    }
]


###############################################################################
class DatasetDownloadTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def build_client(
        self, responses: list[Callable[[], httpx.Response] | Exception]
    ) -> tuple[InteractionsDatasetClient, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            outcome = responses[min(len(requests), len(responses)) - 1]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome()

        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        self.addCleanup(http_client.close)
        return InteractionsDatasetClient(SETTINGS, client=http_client), requests

    # ------------------------------------------------------------------
    def test_downloads_food_dataset(self) -> None:
        client, requests = self.build_client([partial(httpx.Response, 200, json=PAYLOAD)])
        self.assertEqual(client.fetch_food_interactions(), PAYLOAD)
        self.assertEqual(len(requests), 1)
        self.assertEqual(str(requests[0].url), FOOD_URL)

    # ------------------------------------------------------------------
    def test_drug_dataset_uses_its_own_source(self) -> None:
        client, requests = self.build_client([partial(httpx.Response, 200, json=[])])
        self.assertEqual(client.fetch_drug_interactions(), [])
        self.assertEqual(str(requests[0].url), DRUG_URL)

    # ------------------------------------------------------------------
    def test_retries_transient_status(self) -> None:
        client, requests = self.build_client(
            [partial(httpx.Response, 503), partial(httpx.Response, 200, json=PAYLOAD)]
        )
        with patch.object(InteractionsDatasetClient, "backoff") as backoff:
            records = client.fetch_food_interactions()
        self.assertEqual(records, PAYLOAD)
        self.assertEqual(len(requests), 2)
        backoff.assert_called_once_with(0)

    # ------------------------------------------------------------------
    def test_gives_up_after_max_retries(self) -> None:
        client, requests = self.build_client([partial(httpx.Response, 500)])
        with patch.object(InteractionsDatasetClient, "backoff"):
            with self.assertRaises(InteractionsLoadError):
                client.fetch_food_interactions()
        self.assertEqual(len(requests), SETTINGS.max_retries)

    # ------------------------------------------------------------------
    def test_connection_errors_are_retried_then_raised(self) -> None:
        client, requests = self.build_client([httpx.ConnectError("refused")])
        with patch.object(InteractionsDatasetClient, "backoff"):
            with self.assertRaises(InteractionsLoadError):
                client.fetch_food_interactions()
        self.assertEqual(len(requests), SETTINGS.max_retries)

    # ------------------------------------------------------------------
    def test_client_errors_are_not_retried(self) -> None:
        client, requests = self.build_client([partial(httpx.Response, 404)])
        with patch.object(InteractionsDatasetClient, "backoff") as backoff:
            with self.assertRaises(InteractionsLoadError):
                client.fetch_food_interactions()
        self.assertEqual(len(requests), 1)
        backoff.assert_not_called()

    # ------------------------------------------------------------------
    def test_invalid_json_raises_load_error(self) -> None:
        client, _ = self.build_client([partial(httpx.Response, 200, content=b"<html>")])
        with self.assertRaises(InteractionsLoadError):
            client.fetch_food_interactions()

    # ------------------------------------------------------------------
    def test_payload_must_be_a_list(self) -> None:
        client, _ = self.build_client([partial(httpx.Response, 200, json={"name": "x"})])
        with self.assertRaises(InteractionsLoadError):
            client.fetch_food_interactions()


###############################################################################
class DatasetFileTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def setUp(self) -> None:
        self.tempdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tempdir.cleanup)
        self.path = os.path.join(self.tempdir.name, "food.json")

    # ------------------------------------------------------------------
    def write(self, content: str) -> InteractionsDatasetClient:
        with open(self.path, "w", encoding="utf-8") as handle:
            handle.write(content)
        return InteractionsDatasetClient(
            replace(SETTINGS, food_interactions_source=self.path)
        )

    # ------------------------------------------------------------------
    def test_reads_local_file_and_drops_non_objects(self) -> None:
        client = self.write(json.dumps(PAYLOAD + ["stray", 3]))
        self.assertEqual(client.fetch_food_interactions(), PAYLOAD)

    # ------------------------------------------------------------------
    def test_missing_file_raises_load_error(self) -> None:
        client = InteractionsDatasetClient(
            replace(SETTINGS, food_interactions_source=self.path)
        )
        with self.assertRaises(InteractionsLoadError):
            client.fetch_food_interactions()

    # ------------------------------------------------------------------
    def test_malformed_file_raises_load_error(self) -> None:
        client = self.write("[{\"name\": ")
        with self.assertRaises(InteractionsLoadError):
            client.fetch_food_interactions()


if __name__ == "__main__":
    unittest.main()
