# cli.py
import argparse
import asyncio
import json

from app.compare.client import LaptopServiceClient
from app.compare.models import CompareStub
from app.compare.record_cache import LaptopRecordCache
from app.compare.session import ComparisonSession
from app.compare.store import CompareStore
from app.compare.view import ComparisonTable
from app.config.settings import LAPTOP_API_BASE_URL
from app.utils.blobstore import JsonBlobStore, resolve_state_dir
from app.utils.logger import logger

RANK_MARKS = {"best": "++", "second": "+", "worst": "-", "incomparable": "?"}


def render_table(table: ComparisonTable) -> str:
    if table.is_empty:
        return "Nothing to compare yet."
    lines = [" | ".join(s.title for s in table.laptops)]
    for section in table.sections:
        lines.append(f"\n== {section.title} ==")
        for row in section.rows:
            cells = []
            for c in row.cells:
                mark = RANK_MARKS.get(c.rank.value, "")
                cells.append(f"{c.display} {mark}".rstrip())
            lines.append(f"{row.label}: " + " | ".join(cells))
    lines.append(f"\n{table.slots_remaining} slot(s) left")
    return "\n".join(lines)


async def _add(session: ComparisonSession, ids):
    store = session.store
    for laptop_id in ids:
        # check first so a rejected id never lands in the record cache
        if store.contains(laptop_id):
            logger.warning(f"{laptop_id}: already_present")
            continue
        if not store.capacity_remaining():
            logger.warning(f"{laptop_id}: capacity_exceeded")
            continue
        record = await session.cache.resolve(laptop_id)
        if record is None:
            logger.warning(f"Could not load {laptop_id}; adding it without details")
            stub = CompareStub(id=laptop_id)
        else:
            stub = CompareStub.from_record(record)
        result = await session.add(stub)
        if not result:
            logger.warning(f"{laptop_id}: {result.value}")


async def run(args) -> None:
    state_dir = resolve_state_dir(args.state_dir)
    async with LaptopServiceClient(base_url=args.base_url) as client:
        cache = LaptopRecordCache(client.fetch_laptop)
        store = CompareStore(JsonBlobStore(state_dir), cache)
        session = ComparisonSession(store, cache)

        if args.command == "add":
            await _add(session, args.ids)
        elif args.command == "remove":
            await session.remove(args.id)
        elif args.command == "clear":
            await session.clear()
        elif args.command == "show":
            await session.refresh()
            table = session.view()
            if args.json:
                print(json.dumps(table.to_dict(), indent=2, ensure_ascii=False))
            else:
                logger.info(f"COMPARISON:\n{render_table(table)}\n")
            return

        items = [f"{s.id}  {s.headline or (s.brand + ' ' + s.series)}" for s in store.stubs]
        logger.info(f"COMPARE LIST ({len(store)}/{store.capacity}):\n " + "\n ".join(items or ["(empty)"]))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="laptop-compare", description="Compare up to three laptops side by side")
    parser.add_argument("--state-dir", help="Where the compare list is kept (optional)")
    parser.add_argument("--base-url", default=LAPTOP_API_BASE_URL, help="Laptop service URL")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add laptops by id")
    add.add_argument("ids", nargs="+")
    remove = sub.add_parser("remove", help="Remove a laptop by id")
    remove.add_argument("id")
    sub.add_parser("clear", help="Empty the compare list")
    sub.add_parser("list", help="Show the compare list")
    show = sub.add_parser("show", help="Show the comparison table")
    show.add_argument("--json", action="store_true", help="Print the table as JSON")
    return parser


def main():
    args = build_parser().parse_args()
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
