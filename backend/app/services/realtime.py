"""Cross-client cache invalidation driven by table change events.

One subscription per table.  Each event invalidates the cached reads of
the entity the table backs:

  - the event names its organization → only that organization's entries
  - it does not (DELETE payloads carry only the primary key)
                                       → the entity for every organization

Invalidation is at-least-once; an extra refetch is harmless.
"""

import logging

from app.store.realtime import ChangeBroker, ChangeEvent, Subscription
from app.utils.cache import QueryCache

logger = logging.getLogger(__name__)

# table -> cached entity it belongs to
TABLE_ENTITIES: dict[str, str] = {
    "organizations": "organizations",
    "farmers": "farmers",
    "livestock": "livestock",
    "health_records": "livestock",
    "breeding_records": "livestock",
    "feeding_records": "livestock",
    "crops": "crops",
    "financial_services": "financial_services",
    "extension_services": "extension_services",
    "applications": "applications",
    "growth_records": "growth_records",
}


class CacheInvalidator:
    def __init__(self, broker: ChangeBroker, cache: QueryCache, tables: dict[str, str] | None = None):
        self.broker = broker
        self.cache = cache
        self.tables = dict(TABLE_ENTITIES if tables is None else tables)
        self._subscriptions: list[Subscription] = []

    @property
    def running(self) -> bool:
        return bool(self._subscriptions)

    async def start(self) -> None:
        if self._subscriptions:
            return
        for table in self.tables:
            self._subscriptions.append(await self.broker.subscribe(table, self.handle))
        logger.info("Cache invalidation listening on %d tables", len(self._subscriptions))

    async def stop(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            await subscription.unsubscribe()
        if subscriptions:
            logger.info("Cache invalidation stopped")

    async def handle(self, event: ChangeEvent) -> None:
        entity = self.tables.get(event.table)
        if entity is None:
            return
        organization_id = event.organization_id()
        logger.debug(
            "Change %s on %s (org=%s)", event.event_type, event.table, organization_id or "*"
        )
        self.cache.invalidate(entity, organization_id)
