import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Protocol

from course_catalog.models import CacheEntry, Course
from course_catalog.services.signer import SignedUrlIssuer
from course_catalog.services.snapshot import SnapshotStorage

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    VALID = "valid"
    STALE = "stale"


class CatalogSource(Protocol):
    async def build_all(self) -> list[Course]: ...


class CatalogCache:
    """Time-boxed cache of the full catalog with single-flight rebuilds.

    State is derived, never stored:

    - ``BUILDING`` while a rebuild task is in flight
    - ``EMPTY`` when nothing has been built (or after ``clear()``)
    - ``STALE`` once the entry is ``ttl_seconds`` old
    - ``VALID`` otherwise

    Concurrent callers that find the cache unusable all await the same
    rebuild task.  Waiters go through ``asyncio.shield`` so a disconnected
    client never cancels a rebuild other callers depend on.
    """

    def __init__(
        self,
        builder: CatalogSource,
        signer: SignedUrlIssuer,
        *,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        snapshot_path: str | None = None,
    ) -> None:
        self._builder = builder
        self._signer = signer
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.snapshot_path = snapshot_path

        self._entry: CacheEntry | None = None
        self._inflight: asyncio.Task | None = None
        # Bumped by clear(); a rebuild started under an older generation
        # still answers its own waiters but is not installed.
        self._generation = 0
        self.rebuild_count = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> CacheState:
        if self._inflight is not None:
            return CacheState.BUILDING
        if self._entry is None:
            return CacheState.EMPTY
        return CacheState.VALID if self._is_fresh() else CacheState.STALE

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def _is_fresh(self) -> bool:
        return (
            self._entry is not None
            and self._clock() - self._entry.generated_at < self.ttl_seconds
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_courses(self) -> list[Course]:
        """Return the cached catalog, rebuilding it first if empty or stale."""
        if self._is_fresh():
            return self._entry.courses
        return await self._join_or_start()

    async def refresh(self) -> list[Course]:
        """Force a rebuild, or join the one already running."""
        return await self._join_or_start()

    def start_background_refresh(self) -> asyncio.Task:
        """Kick off a rebuild without waiting for it. Failures are logged."""
        return self._ensure_task()

    async def _join_or_start(self) -> list[Course]:
        return await asyncio.shield(self._ensure_task())

    def _ensure_task(self) -> asyncio.Task:
        if self._inflight is None:
            self._inflight = asyncio.create_task(self._rebuild(self._generation))
            self._inflight.add_done_callback(_log_failure)
        return self._inflight

    async def _rebuild(self, generation: int) -> list[Course]:
        self.rebuild_count += 1
        started = self._clock()
        logger.info("Rebuilding course catalog")
        try:
            courses = await self._builder.build_all()
        finally:
            if self._inflight is asyncio.current_task():
                self._inflight = None

        if generation == self._generation:
            self._entry = CacheEntry(courses=courses, generated_at=self._clock())
        else:
            logger.info("Discarding rebuild result: cache was cleared while building")
        logger.info(
            "Catalog rebuilt: %d courses, %d videos in %.2fs",
            len(courses),
            sum(len(c.videos) for c in courses),
            self._clock() - started,
        )
        return courses

    # ------------------------------------------------------------------
    # Bootstrap / admin
    # ------------------------------------------------------------------
    async def load_snapshot(self) -> bool:
        """Seed the cache from the pre-generated snapshot, if there is one."""
        if not self.snapshot_path:
            return False
        snapshot = await SnapshotStorage.read(self.snapshot_path)
        if snapshot is None:
            return False
        self._entry = CacheEntry(
            courses=snapshot.courses, generated_at=self._clock(), from_snapshot=True
        )
        logger.info(
            "Loaded %d courses with %d videos from %s (generated %s)",
            len(snapshot.courses),
            sum(len(c.videos) for c in snapshot.courses),
            self.snapshot_path,
            snapshot.generated_at.isoformat(),
        )
        return True

    def clear(self) -> None:
        """Drop the catalog and every cached signed URL."""
        self._generation += 1
        self._entry = None
        self._inflight = None
        self._signer.clear()
        logger.info("Catalog cache cleared")

    def status(self) -> dict:
        entry = self._entry
        return {
            "cacheStatus": "Valid" if self._is_fresh() else "Invalid/Empty",
            "state": self.state.value,
            "urlCacheSize": len(self._signer),
            "isBuilding": self._inflight is not None,
            "fromSnapshot": bool(entry and entry.from_snapshot),
            "courseCount": len(entry.courses) if entry else 0,
            "ageSeconds": round(self._clock() - entry.generated_at, 1) if entry else None,
            "rebuildCount": self.rebuild_count,
        }


def _log_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Catalog rebuild failed: %s", exc)
