# app/compare/store.py
from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional

from pydantic import ValidationError

from app.compare.models import CompareStub, LaptopRecord
from app.compare.record_cache import LaptopRecordCache
from app.utils.logger import logger

MAX_COMPARE_ITEMS = 3

ITEMS_KEY = "compareItems"
RECORDS_KEY = "comparedLaptops"


class AddResult(str, Enum):
    """Outcome of CompareStore.add. Truthy only when the stub was added."""
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    CAPACITY_EXCEEDED = "capacity_exceeded"

    def __bool__(self) -> bool:
        return self is AddResult.ADDED


class CompareStore:
    """
    The laptops a user has picked for comparison.

    Ordered by insertion, unique by id, at most MAX_COMPARE_ITEMS long, and
    flushed to the blob store after every change. The blob store is any
    object with ``get(key)``, ``set(key, value)`` and ``delete(key)``
    (JsonBlobStore, MemoryBlobStore).

    Persistence is best-effort: a missing or corrupt blob means an empty
    store, and write failures are logged, never raised.
    """

    def __init__(self, blob_store: Any, cache: LaptopRecordCache, capacity: int = MAX_COMPARE_ITEMS) -> None:
        self.blob_store = blob_store
        self.cache = cache
        self.capacity = capacity
        self._stubs: List[CompareStub] = []
        self._warm_records: List[LaptopRecord] = []
        self._load()

    # ---------- Membership ----------

    def add(self, stub: CompareStub) -> AddResult:
        result = self._append(stub)
        if result:
            logger.info(f"Added {stub.id} to compare ({len(self._stubs)}/{self.capacity})")
            self._flush()
        else:
            logger.info(f"Not adding {stub.id} to compare: {result.value}")
        return result

    def _append(self, stub: CompareStub) -> AddResult:
        if len(self._stubs) >= self.capacity:
            return AddResult.CAPACITY_EXCEEDED
        if self.contains(stub.id):
            return AddResult.ALREADY_PRESENT
        self._stubs.append(stub)
        return AddResult.ADDED

    def remove(self, laptop_id: str) -> None:
        kept = [s for s in self._stubs if s.id != laptop_id]
        self.cache.evict(laptop_id)
        if len(kept) == len(self._stubs):
            return
        self._stubs = kept
        logger.info(f"Removed {laptop_id} from compare ({len(self._stubs)}/{self.capacity})")
        self._flush()

    def clear(self) -> None:
        self._stubs = []
        self._warm_records = []
        self.cache.evict_all()
        logger.info("Cleared compare list")
        for key in (ITEMS_KEY, RECORDS_KEY):
            try:
                self.blob_store.delete(key)
            except Exception:
                logger.exception(f"Failed to delete {key}")

    def contains(self, laptop_id: str) -> bool:
        return any(s.id == laptop_id for s in self._stubs)

    def capacity_remaining(self) -> bool:
        return len(self._stubs) < self.capacity

    @property
    def stubs(self) -> List[CompareStub]:
        return list(self._stubs)

    @property
    def ids(self) -> List[str]:
        return [s.id for s in self._stubs]

    def __len__(self) -> int:
        return len(self._stubs)

    # ---------- Persistence ----------

    def _flush(self) -> None:
        try:
            self.blob_store.set(ITEMS_KEY, [s.to_blob() for s in self._stubs])
        except Exception:
            logger.exception(f"Failed to persist {ITEMS_KEY}")

    def _read(self, key: str) -> Optional[Any]:
        try:
            return self.blob_store.get(key)
        except Exception:
            logger.exception(f"Failed to read {key}")
            return None

    def _load(self) -> None:
        raw = self._read(ITEMS_KEY)
        if raw is None:
            return
        try:
            if not isinstance(raw, list):
                raise ValueError(f"expected a list, got {type(raw).__name__}")
            stubs = [CompareStub.model_validate(item) for item in raw]
        except (ValueError, ValidationError) as e:
            logger.warning(f"Discarding saved compare list: {e}")
            return
        except Exception:
            logger.exception(f"Discarding unreadable {ITEMS_KEY}")
            return

        # replay through the add rules so a hand-edited blob can't break them
        for stub in stubs:
            self._append(stub)
        if len(self._stubs) != len(stubs):
            logger.warning(f"Dropped {len(stubs) - len(self._stubs)} duplicate or surplus saved item(s)")
        logger.info(f"Restored {len(self._stubs)} compare item(s)")
        self._load_warm_records()

    def _load_warm_records(self) -> None:
        raw = self._read(RECORDS_KEY)
        if not isinstance(raw, list):
            return
        by_id = {}
        for item in raw:
            try:
                record = LaptopRecord.model_validate(item)
            except ValidationError:
                logger.warning("Skipping malformed saved laptop record")
                continue
            except Exception:
                logger.exception(f"Skipping unreadable entry in {RECORDS_KEY}")
                continue
            if self.contains(record.id):
                by_id[record.id] = record
        self._warm_records = [by_id[i] for i in self.ids if i in by_id]
        self.cache.seed(self._warm_records)

    def warm_records(self) -> List[LaptopRecord]:
        """Records saved by the last run for current members, in stub order. Advisory only."""
        return [r for r in self._warm_records if self.contains(r.id)]

    def save_records(self, records: List[LaptopRecord]) -> None:
        """Remember the last resolved records; an empty list deletes the blob."""
        self._warm_records = list(records)
        try:
            if records:
                self.blob_store.set(RECORDS_KEY, [r.to_blob() for r in records])
            else:
                self.blob_store.delete(RECORDS_KEY)
        except Exception:
            logger.exception(f"Failed to persist {RECORDS_KEY}")
