# app/compare/record_cache.py
from __future__ import annotations
import asyncio
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from pydantic import ValidationError

from app.compare.models import LaptopRecord
from app.utils.logger import logger

Fetcher = Callable[[str], Awaitable[Dict[str, Any]]]


class LaptopRecordCache:
    """
    Memoizing loader from laptop id to full LaptopRecord.

    - Hits never touch the network.
    - Misses call ``fetcher(id)`` (normally LaptopServiceClient.fetch_laptop).
      Concurrent misses for the same id share one in-flight fetch.
    - Failures (transport error, bad JSON, ``success: false``, invalid record)
      resolve to None and are not remembered, so the next call tries again.
    - Evicting an id while its fetch is in flight keeps the result out of the
      cache; waiters still receive it.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher
        self._records: Dict[str, LaptopRecord] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self._stats = {"hits": 0, "misses": 0, "fetches": 0, "failures": 0}

    async def resolve(self, laptop_id: str) -> Optional[LaptopRecord]:
        cached = self._records.get(laptop_id)
        if cached is not None:
            self._stats["hits"] += 1
            return cached

        self._stats["misses"] += 1
        task = self._inflight.get(laptop_id)
        if task is None:
            task = asyncio.ensure_future(self._load(laptop_id))
            self._inflight[laptop_id] = task
        # one waiter giving up must not cancel the fetch for the others
        return await asyncio.shield(task)

    async def _load(self, laptop_id: str) -> Optional[LaptopRecord]:
        record = None
        try:
            record = await self._fetch(laptop_id)
        finally:
            # only the fetch that still owns the slot may fill the cache
            if self._inflight.get(laptop_id) is asyncio.current_task():
                del self._inflight[laptop_id]
                if record is not None:
                    self._records[laptop_id] = record
        return record

    async def _fetch(self, laptop_id: str) -> Optional[LaptopRecord]:
        self._stats["fetches"] += 1
        try:
            body = await self._fetcher(laptop_id)
        except Exception as e:
            self._stats["failures"] += 1
            logger.warning(f"Fetching laptop {laptop_id} failed: {e!r}")
            return None

        if not isinstance(body, dict) or not body.get("success") or not body.get("laptop"):
            self._stats["failures"] += 1
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning(f"Laptop {laptop_id} unavailable: {message or 'unexpected response'}")
            return None

        try:
            record = LaptopRecord.model_validate(body["laptop"])
        except ValidationError as e:
            self._stats["failures"] += 1
            logger.warning(f"Laptop {laptop_id} has a malformed record: {e.error_count()} error(s)")
            return None
        except Exception:
            self._stats["failures"] += 1
            logger.exception(f"Laptop {laptop_id} could not be parsed")
            return None

        logger.info(f"Resolved laptop {laptop_id}: {record.title}")
        return record

    # ---------- Cache maintenance ----------

    def seed(self, records: Iterable[LaptopRecord]) -> None:
        """Prime the cache with records known from a previous run."""
        for record in records:
            self._records.setdefault(record.id, record)

    def evict(self, laptop_id: str) -> None:
        self._records.pop(laptop_id, None)
        self._inflight.pop(laptop_id, None)

    def evict_all(self) -> None:
        self._records.clear()
        self._inflight.clear()

    def get(self, laptop_id: str) -> Optional[LaptopRecord]:
        return self._records.get(laptop_id)

    def __contains__(self, laptop_id: str) -> bool:
        return laptop_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def stats(self) -> Dict[str, int]:
        return {**self._stats, "entries": len(self._records), "inflight": len(self._inflight)}
