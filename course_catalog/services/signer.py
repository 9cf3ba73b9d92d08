import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Presigner(Protocol):
    async def presign_get(self, key: str, expires_in: int) -> str: ...


class SignedUrlIssuer:
    """Memoizes signed GET URLs by ``(key, expires_in)``.

    Entries live until ``clear()``.  The issuer does not track when a URL
    actually expires, so callers pick ``expires_in`` well above the catalog
    TTL.
    """

    def __init__(self, store: Presigner) -> None:
        self._store = store
        self._cache: dict[tuple[str, int], str] = {}

    def __len__(self) -> int:
        return len(self._cache)

    async def sign(self, key: str, expires_in: int) -> str:
        """Return a signed URL for *key*. Raises SigningError on failure."""
        cache_key = (key, expires_in)
        url = self._cache.get(cache_key)
        if url is not None:
            return url
        url = await self._store.presign_get(key, expires_in)
        self._cache[cache_key] = url
        return url

    def clear(self) -> None:
        logger.info("Dropping %d cached signed URLs", len(self._cache))
        self._cache.clear()
