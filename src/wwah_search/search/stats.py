"""
Domain Statistics

Point-in-time document counts per domain, for observability. A count is at
least as fresh as the last write visible to the shared connection.

A domain whose count cannot be read reports zero documents with
``available=False``; it never fails the aggregate.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Union

from ..domains import Domain, all_domains, get_domain_descriptor
from .accessor import VectorStoreAccessor
from .models import AggregateStats, DomainStats

logger = logging.getLogger("wwah.stats")


class StatsService:

    def __init__(self, accessor: VectorStoreAccessor) -> None:
        self._accessor = accessor

    async def get_domain_stats(self, domain: Union[Domain, str]) -> DomainStats:
        descriptor = get_domain_descriptor(domain)

        try:
            handle = await self._accessor.get_domain_handle(descriptor.domain)
            total = await handle.count_documents()
            available = True
        except Exception:
            logger.exception("Failed to count documents for %s", descriptor.domain.value)
            total, available = 0, False

        return DomainStats(
            total_documents=total,
            domain=descriptor.domain,
            collection_name=descriptor.collection_name,
            searchable_fields=list(descriptor.searchable_fields),
            available=available,
        )

    async def get_all_domain_stats(self) -> AggregateStats:
        """
        Count every registered domain concurrently and sum the totals.
        """
        stats = await asyncio.gather(
            *(self.get_domain_stats(domain) for domain in all_domains())
        )
        return AggregateStats(
            total_documents=sum(s.total_documents for s in stats),
            domain_stats=list(stats),
            last_updated=datetime.now(timezone.utc),
        )
