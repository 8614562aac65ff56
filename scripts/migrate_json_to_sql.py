"""One-off migration script: JSON data file -> SQL document table."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys

# make the cabin package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cabin.core.config import get_settings
from cabin.db.create_tables import create_all
from cabin.repositories.json_storage import JsonStore
from cabin.repositories.sql_repository import SQLStore


async def migrate(data_file: Path) -> dict[str, int]:
    if not data_file.exists():
        raise SystemExit(f"File not found: {data_file}")
    source = JsonStore(data_file)
    target = SQLStore()
    counts: dict[str, int] = {}
    for collection, records in source.dump().items():
        for record_id in records:
            record = await source.get(collection, record_id)
            await target.set(collection, record_id, record)
        counts[collection] = len(records)
    return counts


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy every collection of the JSON store into DATABASE_URL")
    ap.add_argument("--data-file", help="JSON data file (default: DATA_FILE setting)")
    args = ap.parse_args()

    data_file = Path(args.data_file) if args.data_file else get_settings().data_file
    create_all()
    counts = asyncio.run(migrate(data_file))
    for collection, total in sorted(counts.items()):
        print(f"  {collection}: {total}")
    print("JSON data migrated to SQL successfully.")


if __name__ == "__main__":
    main()
