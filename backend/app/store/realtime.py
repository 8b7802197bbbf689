"""Per-table change notifications.

Every committed insert / update / delete made through the StoreClient is
published as a ChangeEvent on channel `realtime:{schema}:{table}`:

    {
        "eventType": "INSERT" | "UPDATE" | "DELETE",
        "schema": "public",
        "table": "farmers",
        "new": {...} | {},
        "old": {...} | {},
        "commit_timestamp": "2024-05-01T10:00:00Z"
    }

Delivery is best-effort: no replay, no ordering guarantee across
channels.  Consumers use events only to invalidate cached reads.

Two brokers:
  - LocalChangeBroker → in-process fan-out (single worker, tests)
  - RedisChangeBroker → Redis pub/sub (multiple workers / instances)
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

EVENT_TYPES = ("INSERT", "UPDATE", "DELETE")


@dataclass(frozen=True)
class ChangeEvent:
    event_type: str
    table: str
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)
    schema: str = "public"
    commit_timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def __post_init__(self):
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.event_type!r}")

    @property
    def channel(self) -> str:
        return channel_name(self.table, self.schema)

    def organization_id(self) -> str | None:
        """Organization the changed row belongs to, if the payload says.

        DELETE payloads usually carry only the primary key, so this is
        frequently None.  Non-string values count as unknown.
        """
        for row in (self.new, self.old):
            value = row.get("organization_id") if isinstance(row, dict) else None
            if isinstance(value, str) and value:
                return value
        return None

    def to_payload(self) -> dict:
        return {
            "eventType": self.event_type,
            "schema": self.schema,
            "table": self.table,
            "new": self.new,
            "old": self.old,
            "commit_timestamp": self.commit_timestamp,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "ChangeEvent":
        return cls(
            event_type=payload["eventType"],
            table=payload["table"],
            new=payload.get("new") or {},
            old=payload.get("old") or {},
            schema=payload.get("schema", "public"),
            commit_timestamp=payload.get("commit_timestamp") or "",
        )


ChangeCallback = Callable[[ChangeEvent], Awaitable[None]]


def channel_name(table: str, schema: str = "public") -> str:
    return f"realtime:{schema}:{table}"


class Subscription:
    """Handle returned by `subscribe()`; call `unsubscribe()` to stop delivery."""

    def __init__(self, table: str, on_close: Callable[[], Awaitable[None]]):
        self.table = table
        self._on_close = on_close
        self.active = True

    async def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        await self._on_close()


class ChangeBroker(ABC):
    """Publish / subscribe for ChangeEvents, one channel per table."""

    @abstractmethod
    async def publish(self, event: ChangeEvent) -> None:
        ...

    @abstractmethod
    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        ...

    async def close(self) -> None:
        pass


async def _deliver(callback: ChangeCallback, event: ChangeEvent) -> None:
    try:
        await callback(event)
    except Exception:
        logger.exception(
            "Change subscriber failed for %s %s", event.event_type, event.channel
        )


# ── In-process broker ───────────────────────────────────────

class LocalChangeBroker(ChangeBroker):
    """Fan events out to subscribers in the publishing process.

    Callbacks run inline, so by the time `publish()` returns every
    subscriber has seen the event.
    """

    def __init__(self):
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)

    async def publish(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers.get(event.channel, ())):
            await _deliver(callback, event)

    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        channel = channel_name(table)
        self._subscribers[channel].append(callback)
        logger.info("Subscribed to %s", channel)

        async def _remove():
            callbacks = self._subscribers.get(channel, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return Subscription(table, _remove)

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers.get(channel_name(table), ()))


# ── Redis broker ────────────────────────────────────────────

class RedisChangeBroker(ChangeBroker):
    """Redis pub/sub transport; one listener task per subscription."""

    def __init__(self, url: str, client: Optional[redis.Redis] = None):
        self._client = client or redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
        )
        self._tasks: set[asyncio.Task] = set()

    async def publish(self, event: ChangeEvent) -> None:
        try:
            await self._client.publish(event.channel, json.dumps(event.to_payload()))
        except redis.RedisError as e:
            # The write is already committed; local invalidation still happens
            logger.warning(f"Failed to publish change on {event.channel}: {e}")

    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        channel = channel_name(table)
        pubsub = self._client.pubsub()
        await pubsub.subscribe(channel)
        task = asyncio.create_task(self._listen(pubsub, callback))
        self._tasks.add(task)
        logger.info("Subscribed to %s (redis)", channel)

        async def _stop():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            self._tasks.discard(task)
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()

        return Subscription(table, _stop)

    async def _listen(self, pubsub, callback: ChangeCallback) -> None:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                event = ChangeEvent.from_payload(json.loads(message["data"]))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Dropping malformed change payload: {e}")
                continue
            await _deliver(callback, event)

    async def ping(self) -> bool:
        return await self._client.ping()

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        await self._client.aclose()
