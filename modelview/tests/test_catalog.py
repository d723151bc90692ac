import asyncio
import logging

import pytest
from box import Box

from common.errors import PerItemIndexError, TransportError
from connectors.catalog_interface import CatalogEntry
from modelview.catalog import build_catalog, gather_settled


class FakeConnector:
    """In-memory connector. ``delays`` lets documents resolve out of listing order."""

    def __init__(self, documents, failing=(), delays=None, listing_error=None):
        self.documents = documents
        self.failing = set(failing)
        self.delays = delays or {}
        self.listing_error = listing_error
        self.fetched = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def info(self):
        return Box(type="fake")

    async def list_catalog(self):
        if self.listing_error:
            raise self.listing_error
        return [CatalogEntry(name=name, path=name, download_url=None) for name in self.documents]

    async def fetch_document(self, name):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(name, 0))
            self.fetched.append(name)
            if name in self.failing:
                raise TransportError(f"Failed to load model: {name}", kind=TransportError.NETWORK)
            return self.documents[name]
        finally:
            self.in_flight -= 1

    async def aclose(self):
        pass


def _documents(*pairs):
    return {name: {"id": model_id, "group": {"name": name, "label": f"label {name}"}} for name, model_id in pairs}


def test_catalog_is_sorted_by_id(catalog_documents):
    descriptors = asyncio.run(build_catalog(FakeConnector(catalog_documents)))
    assert [d.id for d in descriptors] == [1, 103, 201, 802]
    assert descriptors[1].label == "Inverter (Three Phase)"
    assert descriptors[2].label == "Meter (Single Phase)"
    assert descriptors[0].source_name == "model_1.json"


def test_sort_is_stable_over_listing_order():
    documents = _documents(("a.json", 50), ("b.json", 2), ("c.json", 2), ("d.json", 10))
    # b resolves last, it must still come before c
    connector = FakeConnector(documents, delays={"b.json": 0.05, "a.json": 0.01})
    descriptors = asyncio.run(build_catalog(connector))
    assert [d.id for d in descriptors] == [2, 2, 10, 50]
    assert [d.name for d in descriptors[:2]] == ["b", "c"]
    assert connector.fetched[-1] == "b.json"


def test_one_failed_fetch_is_excluded(caplog):
    documents = _documents(*((f"model_{i}.json", i) for i in (5, 4, 3, 2, 1)))
    connector = FakeConnector(documents, failing={"model_3.json"})
    with caplog.at_level(logging.WARNING, logger="modelview.catalog"):
        descriptors = asyncio.run(build_catalog(connector))
    assert [d.id for d in descriptors] == [1, 2, 4, 5]
    assert sorted(connector.fetched) == sorted(documents)
    assert "model_3.json" in caplog.text


def test_malformed_document_is_excluded():
    documents = _documents(("model_1.json", 1), ("model_2.json", 2))
    documents["model_2.json"] = {"id": 2}
    documents["model_3.json"] = ["not", "a", "record"]
    descriptors = asyncio.run(build_catalog(FakeConnector(documents)))
    assert [d.id for d in descriptors] == [1]


def test_listing_failure_propagates():
    connector = FakeConnector({}, listing_error=TransportError("Failed to fetch model list"))
    with pytest.raises(TransportError):
        asyncio.run(build_catalog(connector))


def test_empty_catalog():
    assert asyncio.run(build_catalog(FakeConnector({}))) == []


def test_fetches_run_concurrently_and_respect_the_limit():
    documents = _documents(*((f"model_{i}.json", i) for i in range(8)))
    delays = {name: 0.01 for name in documents}

    unlimited = FakeConnector(documents, delays=delays)
    asyncio.run(build_catalog(unlimited))
    assert unlimited.max_in_flight == 8

    limited = FakeConnector(documents, delays=delays)
    descriptors = asyncio.run(build_catalog(limited, max_concurrency=3))
    assert limited.max_in_flight <= 3
    assert len(descriptors) == 8


def test_gather_settled_partitions_in_input_order():
    async def ok(value, delay):
        await asyncio.sleep(delay)
        return value

    async def fail(message):
        raise ValueError(message)

    settled = asyncio.run(gather_settled([ok(1, 0.02), fail("x"), ok(2, 0), fail("y")]))
    assert settled.results == [1, 2]
    assert [str(e) for e in settled.errors] == ["x", "y"]


def test_per_item_error_names_the_entry():
    connector = FakeConnector(_documents(("model_9.json", 9)), failing={"model_9.json"})

    async def run():
        from modelview.catalog import index_entry
        return await index_entry(connector, CatalogEntry(name="model_9.json"))

    with pytest.raises(PerItemIndexError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.source_name == "model_9.json"
    assert isinstance(excinfo.value.cause, TransportError)
