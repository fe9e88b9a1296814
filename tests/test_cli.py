import asyncio

from app.compare.record_cache import LaptopRecordCache
from app.compare.session import ComparisonSession
from app.compare.store import CompareStore
from app.compare.view import build_comparison
from app.utils.blobstore import MemoryBlobStore
from cli import _add, build_parser, render_table
from conftest import FakeLaptopService, record


def make_session(service):
    cache = LaptopRecordCache(service.fetch_laptop)
    return ComparisonSession(CompareStore(MemoryBlobStore(), cache), cache)


def test_add_builds_stubs_from_records(service):
    session = make_session(service)
    asyncio.run(_add(session, ["hp-victus", "ghost"]))
    assert session.store.ids == ["hp-victus", "ghost"]
    assert session.store.stubs[0].headline == "HP Victus Gaming Laptop"
    assert session.store.stubs[1].brand == "Unknown"


def test_rejected_ids_are_not_cached(service):
    session = make_session(service)
    asyncio.run(_add(session, ["hp-victus", "asus-tuf", "lenovo-ideapad", "dell-inspiron", "hp-victus"]))
    assert session.store.ids == ["hp-victus", "asus-tuf", "lenovo-ideapad"]
    assert "dell-inspiron" not in session.cache
    assert "dell-inspiron" not in service.calls


def test_render_table():
    assert render_table(build_comparison([])) == "Nothing to compare yet."
    text = render_table(build_comparison([record("hp-victus"), record("lenovo-ideapad")]))
    assert "== Basic Information ==" in text
    assert "RAM Size: 16 GB ++ | 8 GB +" in text
    assert "1 slot(s) left" in text


def test_parser():
    args = build_parser().parse_args(["add", "a", "b"])
    assert args.command == "add" and args.ids == ["a", "b"]
    assert build_parser().parse_args(["show", "--json"]).json is True
