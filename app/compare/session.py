# app/compare/session.py
from __future__ import annotations
import asyncio
from typing import List

from app.compare.models import CompareStub, LaptopRecord
from app.compare.record_cache import LaptopRecordCache
from app.compare.store import AddResult, CompareStore
from app.compare.view import ComparisonTable, build_comparison
from app.utils.logger import logger


class ComparisonSession:
    """
    Keeps the resolved laptop list in step with the compare store.

    After every membership change the members are resolved concurrently and the
    successful ones are published in stub order. Members that fail to resolve
    stay in the store but are left out of the published list.
    """

    def __init__(self, store: CompareStore, cache: LaptopRecordCache) -> None:
        self.store = store
        self.cache = cache
        self._laptops: List[LaptopRecord] = store.warm_records()
        self._generation = 0
        self._loading = 0

    @property
    def laptops(self) -> List[LaptopRecord]:
        return list(self._laptops)

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    async def refresh(self) -> List[LaptopRecord]:
        stubs = self.store.stubs
        # any batch still in flight is stale from here on
        self._generation += 1
        generation = self._generation
        if not stubs:
            self._publish([])
            return []

        published = {lap.id: lap for lap in self._laptops}
        if all(s.id in published for s in stubs):
            # membership only shrank or reordered, nothing to fetch
            laptops = [published[s.id] for s in stubs]
            if [lap.id for lap in laptops] != [lap.id for lap in self._laptops]:
                self._publish(laptops)
            return laptops

        self._loading += 1
        logger.info(f"Resolving {len(stubs)} laptop(s) for comparison")
        try:
            results = await asyncio.gather(*(self.cache.resolve(s.id) for s in stubs))
        finally:
            self._loading -= 1

        laptops = [r for r in results if r is not None]
        if len(laptops) < len(stubs):
            logger.warning(f"{len(stubs) - len(laptops)} laptop(s) could not be resolved")
        if generation != self._generation:
            logger.info("Discarding stale comparison batch")
            return self.laptops
        self._publish(laptops)
        return laptops

    def _publish(self, laptops: List[LaptopRecord]) -> None:
        self._laptops = list(laptops)
        self.store.save_records(self._laptops)

    # ---------- Membership ----------

    async def add(self, stub: CompareStub) -> AddResult:
        result = self.store.add(stub)
        if result:
            await self.refresh()
        return result

    async def remove(self, laptop_id: str) -> None:
        self.store.remove(laptop_id)
        await self.refresh()

    async def clear(self) -> None:
        self.store.clear()
        await self.refresh()

    def view(self) -> ComparisonTable:
        return build_comparison(self._laptops, max_items=self.store.capacity)
