from __future__ import annotations

from cachetools import TTLCache

from studydeck.schemas import SummarizationResult


class DeckStore:
    """Last generated deck per page URL, expiring after ``ttl_seconds``."""

    def __init__(self, *, maxsize: int = 1_000, ttl_seconds: int = 60 * 60) -> None:
        self._cache: TTLCache[str, SummarizationResult] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)

    def get(self, url: str) -> SummarizationResult | None:
        return self._cache.get(url)

    def put(self, url: str, result: SummarizationResult) -> SummarizationResult:
        self._cache[url] = result
        return result

    def remove(self, url: str) -> None:
        self._cache.pop(url, None)

    def __contains__(self, url: object) -> bool:
        return url in self._cache

    def __len__(self) -> int:
        return len(self._cache)
