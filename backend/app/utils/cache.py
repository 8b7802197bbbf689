"""In-process query cache for AgriDesk reads.

Keys are scoped by organization and entity:

    t:{organization_id}:{entity}:{md5 of the read parameters}

Read contract (stale-while-revalidate):
  - fresh entry          → returned as-is
  - entry older than
    `stale_after`        → returned as-is, background reload started
  - missing / invalidated → caller awaits a load

Concurrent reads of one key share a single in-flight load.  A read never
joins a load that started before the most recent invalidation of its
entity, so a refetch after a mutation is never skipped (invalidation is
at-least-once; extra refetches are fine).

Cancelling a waiting reader never cancels the load itself.  When the load
finishes, its result is kept only if the key is still observed (a
waiter, an `observe()` block, or an existing entry); otherwise it is
discarded.
"""

import asyncio
import hashlib
import json
import logging
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]


def cache_key(*args, **kwargs) -> str:
    """Generate a cache key from read parameters.

    Creates a deterministic hash from the arguments; dates and other
    non-JSON values are stringified.
    """
    if not args and not kwargs:
        return "default"

    key_data = json.dumps({"args": args, "kwargs": kwargs}, sort_keys=True, default=str)
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return key_hash


@dataclass
class _Entry:
    value: Any
    organization_id: str
    entity: str
    seq: int  # sequence number at which the producing load started
    fetched_at: float
    last_access: float


@dataclass
class _Inflight:
    task: asyncio.Future
    seq: int


class QueryCache:
    """Organization-scoped read cache with invalidation watermarks.

    Args:
        stale_after: seconds after which a hit triggers a background reload
        gc_after: seconds an unobserved, unread entry is retained
        clock: monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        stale_after: float = 30.0,
        gc_after: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_after = stale_after
        self.gc_after = gc_after
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._inflight: dict[str, _Inflight] = {}
        self._observers: Counter = Counter()
        self._seq = 0
        # (organization_id | None, entity) -> seq of the latest invalidation
        self._invalidated: dict[tuple[Optional[str], str], int] = {}
        self._cleared = 0
        self.hits = 0
        self.misses = 0

    # ── Keys ─────────────────────────────────────────────────

    @staticmethod
    def key(organization_id: str, entity: str, params: dict | None = None) -> str:
        return f"t:{organization_id}:{entity}:{cache_key(**(params or {}))}"

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _watermark(self, organization_id: str, entity: str) -> int:
        return max(
            self._invalidated.get((organization_id, entity), 0),
            self._invalidated.get((None, entity), 0),
            self._cleared,
        )

    def _is_valid(self, entry: _Entry) -> bool:
        return entry.seq > self._watermark(entry.organization_id, entry.entity)

    # ── Reads ────────────────────────────────────────────────

    async def fetch(
        self,
        organization_id: str,
        entity: str,
        params: dict | None,
        loader: Loader,
    ) -> Any:
        """Return the cached value for the key, loading it if needed."""
        key = self.key(organization_id, entity, params)
        now = self._clock()
        self._collect(now)

        entry = self._entries.get(key)
        if entry is not None and self._is_valid(entry):
            self.hits += 1
            entry.last_access = now
            if now - entry.fetched_at >= self.stale_after:
                logger.debug(f"Cache STALE: {key}")
                self._load(key, organization_id, entity, loader)
            else:
                logger.debug(f"Cache HIT: {key}")
            return entry.value

        self.misses += 1
        logger.debug(f"Cache MISS: {key}")
        task = self._load(key, organization_id, entity, loader)
        self._observers[key] += 1
        try:
            return await asyncio.shield(task)
        finally:
            self._release(key)

    def peek(self, organization_id: str, entity: str, params: dict | None = None) -> Any:
        """Valid cached value or None, without loading."""
        entry = self._entries.get(self.key(organization_id, entity, params))
        if entry is None or not self._is_valid(entry):
            return None
        return entry.value

    @contextmanager
    def observe(self, organization_id: str, entity: str, params: dict | None = None):
        """Keep a key observed for the duration of the block."""
        key = self.key(organization_id, entity, params)
        self._observers[key] += 1
        try:
            yield key
        finally:
            self._release(key)

    def _release(self, key: str) -> None:
        self._observers[key] -= 1
        if self._observers[key] <= 0:
            del self._observers[key]

    # ── Loading ──────────────────────────────────────────────

    def _load(self, key: str, organization_id: str, entity: str, loader: Loader) -> asyncio.Future:
        inflight = self._inflight.get(key)
        if inflight is not None and inflight.seq > self._watermark(organization_id, entity):
            return inflight.task

        seq = self._next_seq()
        task = asyncio.ensure_future(self._run(key, organization_id, entity, loader, seq))
        task.add_done_callback(self._report_failure)
        self._inflight[key] = _Inflight(task=task, seq=seq)
        return task

    async def _run(self, key: str, organization_id: str, entity: str, loader: Loader, seq: int) -> Any:
        try:
            value = await loader()
        finally:
            current = self._inflight.get(key)
            if current is not None and current.seq == seq:
                del self._inflight[key]

        if key not in self._observers and key not in self._entries:
            logger.debug(f"Cache DISCARD (unobserved): {key}")
            return value

        existing = self._entries.get(key)
        if existing is None or existing.seq <= seq:
            now = self._clock()
            self._entries[key] = _Entry(
                value=value,
                organization_id=organization_id,
                entity=entity,
                seq=seq,
                fetched_at=now,
                last_access=now,
            )
        return value

    @staticmethod
    def _report_failure(task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Cache load failed: {exc!r}")

    # ── Invalidation ─────────────────────────────────────────

    def invalidate(self, entity: str, organization_id: str | None = None) -> int:
        """Invalidate every entry of `entity` (for one organization, or all).

        Returns the number of entries dropped.
        """
        self._invalidated[(organization_id, entity)] = self._next_seq()
        prefix = f"t:{organization_id}:{entity}:" if organization_id else None
        doomed = [
            key for key, entry in self._entries.items()
            if entry.entity == entity and (prefix is None or key.startswith(prefix))
        ]
        for key in doomed:
            del self._entries[key]

        scope = organization_id or "*"
        logger.info(f"Invalidated {len(doomed)} cache entries for {entity} (org={scope})")
        return len(doomed)

    def clear(self) -> None:
        """Drop everything (use with caution)."""
        self._cleared = self._next_seq()
        self._entries.clear()
        logger.info("Cleared query cache")

    def _collect(self, now: float) -> None:
        expired = [
            key for key, entry in self._entries.items()
            if now - entry.last_access > self.gc_after and key not in self._observers
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    async def close(self) -> None:
        """Cancel any in-flight loads and drop all entries."""
        tasks = [inflight.task for inflight in self._inflight.values()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()
        self._entries.clear()
