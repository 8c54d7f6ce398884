"""Bounded least-recently-used cache of yearly datasets."""

import logging
from typing import Callable

from service.tempchart.base import constants as bc
from service.tempchart.base.errors import EmptyDatasetError, RetrievalError
from service.tempchart.models import CacheKey, Dataset

logger = logging.getLogger("cache")

FetchFunc = Callable[[str, int], Dataset]


class RecencyCache:
    """Fetch-or-retrieve store for station-year datasets.

    At most `capacity` datasets are kept. Recency is tracked as an explicit
    list of keys, least recently used first. Every hit and every insert moves
    the key to the end; an insert that grows the cache beyond its capacity
    evicts the head of the list.

    The cache is not thread-safe and does not de-duplicate requests:
    two overlapping get() calls for the same key both fetch, and the second
    insert overwrites the first. Callers must serialize their requests.
    """

    def __init__(
        self,
        fetch: FetchFunc,
        capacity: int = bc.DEFAULT_CACHE_SIZE,
        fallback: FetchFunc | None = None,
    ):
        """Creates a new cache.

        Args:
            fetch: retrieves a Dataset for (station_id, year); raises
                RetrievalError on failure.
            capacity: maximum number of cached datasets.
            fallback: optional substitute used when fetch raises a
                RetrievalError (offline/local mode). Its results are
                cached exactly like fetched data.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._fetch = fetch
        self._fallback = fallback
        self.capacity = capacity
        self._data: dict[CacheKey, Dataset] = {}
        self._recency: list[CacheKey] = []

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._data

    def keys(self) -> list[CacheKey]:
        """Returns the cached keys, least recently used first."""
        return list(self._recency)

    def clear(self):
        self._data.clear()
        self._recency.clear()

    def get(self, station_id: str, year: int) -> Dataset:
        """Returns the dataset for (station_id, year), fetching it on a miss.

        Raises:
            RetrievalError: if fetching failed and no fallback is configured.
            EmptyDatasetError: if the retrieved dataset has no days.
        """
        key = CacheKey(station_id=station_id, year=year)

        if key in self._data:
            logger.debug("Cache hit for %s", key)
            self._touch(key)
            return self._data[key]

        logger.info("Fetching %s...", key)
        try:
            data = self._fetch(station_id, year)
        except RetrievalError as e:
            if self._fallback is None:
                raise
            logger.warning("Fetch failed (%s), using fallback data for %s", e, key)
            data = self._fallback(station_id, year)

        if len(data.days) == 0:
            raise EmptyDatasetError(station_id, year)

        self._insert(key, data)
        return data

    def _touch(self, key: CacheKey):
        self._recency = [k for k in self._recency if k != key]
        self._recency.append(key)

    def _insert(self, key: CacheKey, data: Dataset):
        self._data[key] = data
        self._touch(key)

        if len(self._data) > self.capacity:
            oldest = self._recency.pop(0)
            del self._data[oldest]
            logger.info("Evicted %s from cache", oldest)
