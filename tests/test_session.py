import asyncio

from app.compare.models import CompareStub
from app.compare.record_cache import LaptopRecordCache
from app.compare.session import ComparisonSession
from app.compare.store import RECORDS_KEY, AddResult, CompareStore
from app.utils.blobstore import MemoryBlobStore
from conftest import FakeLaptopService


def make_session(service, blobs=None):
    cache = LaptopRecordCache(service.fetch_laptop)
    store = CompareStore(blobs if blobs is not None else MemoryBlobStore(), cache)
    return ComparisonSession(store, cache)


def test_publishes_in_stub_order_regardless_of_completion():
    service = FakeLaptopService(delays={"hp-victus": 0.03, "asus-tuf": 0.0, "lenovo-ideapad": 0.01})
    session = make_session(service)

    async def go():
        for i in ("hp-victus", "asus-tuf", "lenovo-ideapad"):
            session.store.add(CompareStub(id=i))
        return await session.refresh()

    laptops = asyncio.run(go())
    assert [lap.id for lap in laptops] == ["hp-victus", "asus-tuf", "lenovo-ideapad"]
    assert not session.is_loading


def test_unresolved_members_are_dropped_from_view():
    service = FakeLaptopService(failures={"asus-tuf"})
    session = make_session(service)

    async def go():
        await session.add(CompareStub(id="hp-victus"))
        await session.add(CompareStub(id="asus-tuf"))
        await session.add(CompareStub(id="ghost"))

    asyncio.run(go())
    assert session.store.ids == ["hp-victus", "asus-tuf", "ghost"]
    assert [lap.id for lap in session.laptops] == ["hp-victus"]
    assert session.view().slots_remaining == 2


def test_add_rejections_skip_refresh(service):
    session = make_session(service)

    async def go():
        assert await session.add(CompareStub(id="hp-victus")) is AddResult.ADDED
        return await session.add(CompareStub(id="hp-victus"))

    assert asyncio.run(go()) is AddResult.ALREADY_PRESENT
    assert service.calls == ["hp-victus"]


def test_remove_and_clear(service):
    blobs = MemoryBlobStore()
    session = make_session(service, blobs)

    async def go():
        await session.add(CompareStub(id="hp-victus"))
        await session.add(CompareStub(id="asus-tuf"))
        await session.remove("hp-victus")
        after_remove = [lap.id for lap in session.laptops]
        await session.clear()
        return after_remove

    assert asyncio.run(go()) == ["asus-tuf"]
    assert session.laptops == []
    assert session.view().is_empty
    assert RECORDS_KEY not in blobs


def test_warm_start_renders_without_network(service):
    blobs = MemoryBlobStore()
    first = make_session(service, blobs)

    async def fill():
        await first.add(CompareStub(id="hp-victus"))
        await first.add(CompareStub(id="lenovo-ideapad"))

    asyncio.run(fill())
    calls_before = list(service.calls)

    second = make_session(service, blobs)
    assert [lap.id for lap in second.laptops] == ["hp-victus", "lenovo-ideapad"]
    asyncio.run(second.refresh())
    assert service.calls == calls_before
    assert not second.view().is_empty


def test_stale_batch_does_not_publish():
    service = FakeLaptopService(delays={"hp-victus": 0.05})
    session = make_session(service)

    async def go():
        session.store.add(CompareStub(id="hp-victus"))
        slow = asyncio.ensure_future(session.refresh())
        await asyncio.sleep(0.01)
        assert session.is_loading
        await session.remove("hp-victus")
        await slow

    asyncio.run(go())
    assert session.laptops == []


def test_malformed_record_does_not_break_add():
    service = FakeLaptopService(laptops={
        "hp-victus": FakeLaptopService().laptops["hp-victus"],
        "broken": {"_id": "broken", "specs": {"details": {"Features": 5}}},
    })
    session = make_session(service)

    async def go():
        await session.add(CompareStub(id="hp-victus"))
        return await session.add(CompareStub(id="broken"))

    assert asyncio.run(go()) is AddResult.ADDED
    assert session.store.ids == ["hp-victus", "broken"]
    assert [lap.id for lap in session.laptops] == ["hp-victus"]
