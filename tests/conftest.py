import asyncio
import copy

import pytest

from app.compare.models import LaptopRecord
from app.compare.record_cache import LaptopRecordCache
from app.compare.store import CompareStore
from app.utils.blobstore import MemoryBlobStore


def backend_laptop(laptop_id, brand="HP", series="Victus", processor=None, ram=16, storage=512,
                   display=15.6, prices=(55990,), rating=4.2, all_time_low=52990, details=None):
    """Laptop document in the shape the laptop service returns it."""
    sites = []
    for source, price in zip(("amazon", "flipkart"), prices):
        sites.append({
            "source": source,
            "price": price,
            "link": f"https://{source}.example/{laptop_id}",
            "rating": rating,
            "ratingCount": "1,204",
            "basePrice": 79999,
        })
    return {
        "_id": laptop_id,
        "specs": {
            "head": f"{brand} {series} Gaming Laptop",
            "brand": brand,
            "series": series,
            "processor": processor if processor is not None else {"name": "Intel Core i5", "gen": "12", "variant": "12450H"},
            "ram": {"size": ram, "type": "ddr4"},
            "storage": {"size": storage, "type": "ssd"},
            "displayInch": display,
            "gpu": "NVIDIA GeForce RTX 3050",
            "gpuVersion": "4 GB GDDR6",
            "basePrice": 79999,
            "details": details if details is not None else {
                "imageLinks": [f"https://img.example/{laptop_id}.jpg"],
                "Features": [f"Feature {i}" for i in range(12)],
                "Operating System": "Windows 11 Home",
                "Item Weight": "2.3 kg",
                "Colour": "Mica Silver",
            },
        },
        "sites": sites,
        "allTimeLowPrice": all_time_low,
    }


SAMPLE_LAPTOPS = {
    "hp-victus": backend_laptop("hp-victus"),
    "asus-tuf": backend_laptop(
        "asus-tuf", brand="ASUS", series="TUF A15",
        processor={"name": "AMD Ryzen 7", "gen": "7", "variant": "7435HS"},
        ram=16, storage=1024, prices=(62990, 61990), rating=4.4, all_time_low=59990,
    ),
    "lenovo-ideapad": backend_laptop(
        "lenovo-ideapad", brand="Lenovo", series="IdeaPad Slim 3",
        processor={"name": "Intel Core i7", "gen": "13", "variant": "1355U"},
        ram=8, storage=512, display=14, prices=(49990,), rating=3.9, all_time_low=47990,
    ),
    "dell-inspiron": backend_laptop("dell-inspiron", brand="Dell", series="Inspiron 15"),
}


class FakeLaptopService:
    """Stands in for LaptopServiceClient.fetch_laptop."""

    def __init__(self, laptops=None, delays=None, failures=None):
        self.laptops = copy.deepcopy(laptops if laptops is not None else SAMPLE_LAPTOPS)
        self.delays = dict(delays or {})
        self.failures = set(failures or ())
        self.calls = []

    async def fetch_laptop(self, laptop_id):
        self.calls.append(laptop_id)
        await asyncio.sleep(self.delays.get(laptop_id, 0))
        if laptop_id in self.failures:
            raise ConnectionError(f"service down for {laptop_id}")
        doc = self.laptops.get(laptop_id)
        if doc is None:
            return {"success": False, "message": "Laptop not found"}
        return {"success": True, "laptop": copy.deepcopy(doc)}


class FailingBlobStore:
    """Every operation raises."""

    def get(self, key):
        raise OSError("disk on fire")

    def set(self, key, value):
        raise OSError("disk on fire")

    def delete(self, key):
        raise OSError("disk on fire")


def record(laptop_id):
    return LaptopRecord.model_validate(SAMPLE_LAPTOPS[laptop_id])


@pytest.fixture
def service():
    return FakeLaptopService()


@pytest.fixture
def blobs():
    return MemoryBlobStore()


@pytest.fixture
def cache(service):
    return LaptopRecordCache(service.fetch_laptop)


@pytest.fixture
def store(blobs, cache):
    return CompareStore(blobs, cache)
