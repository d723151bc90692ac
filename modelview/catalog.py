"""Catalog assembly: concurrent document fetches joined into a sorted index."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Generic, Iterable, Optional, TypeVar

from common.errors import PerItemIndexError
from connectors.catalog_interface import CatalogConnector, CatalogEntry

from .index import extract_descriptor
from .models import ModelDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Settled(Generic[T]):
    """Outcome of a batch of awaitables, partitioned by success.

    ``results`` and ``errors`` keep the order in which the awaitables were
    given, whatever order they completed in.
    """

    results: list[T] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)


async def gather_settled(aws: Iterable[Awaitable[T]]) -> Settled[T]:
    """Run every awaitable to completion and partition results from errors.

    A failing awaitable never cancels its siblings. Cancellation and other
    BaseExceptions still propagate.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    settled: Settled[T] = Settled()
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            settled.errors.append(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            settled.results.append(outcome)
    return settled


async def index_entry(connector: CatalogConnector, entry: CatalogEntry,
                      limiter: Optional[asyncio.Semaphore] = None) -> ModelDescriptor:
    """Fetch one catalog document and extract its descriptor.

    Any failure is wrapped in PerItemIndexError naming the entry.
    """
    try:
        if limiter is None:
            raw = await connector.fetch_document(entry.name)
        else:
            async with limiter:
                raw = await connector.fetch_document(entry.name)
        return extract_descriptor(entry.name, raw)
    except Exception as exc:
        raise PerItemIndexError(entry.name, exc) from exc


async def build_catalog(connector: CatalogConnector, max_concurrency: Optional[int] = None) -> list[ModelDescriptor]:
    """List the catalog and index every entry, sorted by ascending id.

    A failure to list the catalog propagates. Entries that fail to fetch or
    index are logged and left out. The sort is stable over listing order.
    """
    entries = await connector.list_catalog()
    limiter = asyncio.Semaphore(max_concurrency) if max_concurrency else None
    settled = await gather_settled(index_entry(connector, entry, limiter) for entry in entries)
    for error in settled.errors:
        logger.warning("%s", error)
    descriptors = sorted(settled.results, key=lambda d: d.id)
    logger.info("Indexed %d of %d catalog entries", len(descriptors), len(entries))
    return descriptors


__all__ = ["Settled", "build_catalog", "gather_settled", "index_entry"]
