"""Tests for the organization-scoped query cache."""

import asyncio

import pytest

from app.utils.cache import QueryCache, cache_key

ORG_A = "org-a"
ORG_B = "org-b"


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    """Loader returning its call count; optionally blocks until released."""

    def __init__(self, gate: asyncio.Event | None = None):
        self.calls = 0
        self.finished = 0
        self.gate = gate

    async def __call__(self):
        self.calls += 1
        call = self.calls
        if self.gate is not None:
            await self.gate.wait()
        self.finished += 1
        return call


async def _drain(times: int = 5):
    for _ in range(times):
        await asyncio.sleep(0)


@pytest.mark.cache
@pytest.mark.asyncio
class TestCacheKeys:
    async def test_cache_key_generation(self):
        key1 = cache_key(page=1, page_size=10)
        key2 = cache_key(page_size=10, page=1)
        key3 = cache_key(page=2, page_size=10)

        assert key1 == key2
        assert key1 != key3

    async def test_keys_are_scoped_by_organization_and_entity(self):
        key = QueryCache.key(ORG_A, "farmers", {"op": "list"})

        assert key.startswith(f"t:{ORG_A}:farmers:")
        assert key != QueryCache.key(ORG_B, "farmers", {"op": "list"})
        assert key != QueryCache.key(ORG_A, "crops", {"op": "list"})


@pytest.mark.cache
@pytest.mark.asyncio
class TestCacheReads:
    async def test_second_read_is_a_hit(self):
        cache = QueryCache()
        loader = CountingLoader()

        assert await cache.fetch(ORG_A, "farmers", {"page": 1}, loader) == 1
        assert await cache.fetch(ORG_A, "farmers", {"page": 1}, loader) == 1

        assert loader.calls == 1
        assert cache.hits == 1
        assert cache.misses == 1

    async def test_same_params_different_organizations_load_separately(self):
        cache = QueryCache()
        loader = CountingLoader()

        await cache.fetch(ORG_A, "farmers", {"page": 1}, loader)
        await cache.fetch(ORG_B, "farmers", {"page": 1}, loader)

        assert loader.calls == 2

    async def test_concurrent_reads_share_one_load(self):
        cache = QueryCache()
        gate = asyncio.Event()
        loader = CountingLoader(gate)

        first = asyncio.create_task(cache.fetch(ORG_A, "farmers", None, loader))
        second = asyncio.create_task(cache.fetch(ORG_A, "farmers", None, loader))
        await _drain()
        gate.set()

        assert await asyncio.gather(first, second) == [1, 1]
        assert loader.calls == 1

    async def test_read_after_invalidation_does_not_join_older_load(self):
        cache = QueryCache()
        gate = asyncio.Event()
        loader = CountingLoader(gate)

        before = asyncio.create_task(cache.fetch(ORG_A, "farmers", None, loader))
        await _drain()
        cache.invalidate("farmers", ORG_A)
        after = asyncio.create_task(cache.fetch(ORG_A, "farmers", None, loader))
        await _drain()
        gate.set()

        assert await before == 1
        assert await after == 2
        assert loader.calls == 2
        assert cache.peek(ORG_A, "farmers") == 2

    async def test_stale_entry_is_served_and_revalidated(self):
        clock = Clock()
        cache = QueryCache(stale_after=10, clock=clock)
        loader = CountingLoader()

        assert await cache.fetch(ORG_A, "crops", None, loader) == 1
        clock.now = 15
        assert await cache.fetch(ORG_A, "crops", None, loader) == 1
        await _drain()

        assert loader.calls == 2
        assert cache.peek(ORG_A, "crops") == 2

    async def test_failed_load_propagates_and_is_not_cached(self):
        cache = QueryCache()
        calls = 0

        async def broken():
            nonlocal calls
            calls += 1
            raise RuntimeError("store unavailable")

        with pytest.raises(RuntimeError):
            await cache.fetch(ORG_A, "farmers", None, broken)
        with pytest.raises(RuntimeError):
            await cache.fetch(ORG_A, "farmers", None, broken)

        assert calls == 2
        assert len(cache) == 0


@pytest.mark.cache
@pytest.mark.asyncio
class TestCancellation:
    async def test_cancelled_reader_does_not_cancel_load_and_result_is_discarded(self):
        cache = QueryCache()
        gate = asyncio.Event()
        loader = CountingLoader(gate)

        reader = asyncio.create_task(cache.fetch(ORG_A, "livestock", None, loader))
        await _drain()
        reader.cancel()
        with pytest.raises(asyncio.CancelledError):
            await reader

        gate.set()
        await _drain()

        assert loader.finished == 1
        assert cache.peek(ORG_A, "livestock") is None
        assert len(cache) == 0

    async def test_observed_key_keeps_result_after_reader_cancelled(self):
        cache = QueryCache()
        gate = asyncio.Event()
        loader = CountingLoader(gate)

        with cache.observe(ORG_A, "livestock"):
            reader = asyncio.create_task(cache.fetch(ORG_A, "livestock", None, loader))
            await _drain()
            reader.cancel()
            with pytest.raises(asyncio.CancelledError):
                await reader
            gate.set()
            await _drain()

            assert cache.peek(ORG_A, "livestock") == 1


@pytest.mark.cache
@pytest.mark.asyncio
class TestInvalidation:
    async def test_invalidate_single_organization(self):
        cache = QueryCache()
        loader = CountingLoader()
        await cache.fetch(ORG_A, "farmers", None, loader)
        await cache.fetch(ORG_B, "farmers", None, loader)

        assert cache.invalidate("farmers", ORG_A) == 1

        assert cache.peek(ORG_A, "farmers") is None
        assert cache.peek(ORG_B, "farmers") == 2

    async def test_invalidate_all_organizations(self):
        cache = QueryCache()
        loader = CountingLoader()
        await cache.fetch(ORG_A, "farmers", None, loader)
        await cache.fetch(ORG_B, "farmers", None, loader)
        await cache.fetch(ORG_A, "crops", None, loader)

        assert cache.invalidate("farmers") == 2

        assert cache.peek(ORG_A, "farmers") is None
        assert cache.peek(ORG_B, "farmers") is None
        assert cache.peek(ORG_A, "crops") == 3

    async def test_next_read_after_invalidation_refetches(self):
        cache = QueryCache()
        loader = CountingLoader()
        await cache.fetch(ORG_A, "farmers", None, loader)

        cache.invalidate("farmers", ORG_A)

        assert await cache.fetch(ORG_A, "farmers", None, loader) == 2

    async def test_clear(self):
        cache = QueryCache()
        loader = CountingLoader()
        await cache.fetch(ORG_A, "farmers", None, loader)

        cache.clear()

        assert len(cache) == 0
        assert await cache.fetch(ORG_A, "farmers", None, loader) == 2

    async def test_unused_entries_are_collected(self):
        clock = Clock()
        cache = QueryCache(stale_after=1000, gc_after=300, clock=clock)
        loader = CountingLoader()
        await cache.fetch(ORG_A, "farmers", None, loader)

        clock.now = 301
        await cache.fetch(ORG_A, "crops", None, loader)

        assert cache.peek(ORG_A, "farmers") is None
        assert len(cache) == 1
