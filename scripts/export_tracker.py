#!/usr/bin/env python3
"""
Export a team's minute-tracker entries to an .xlsx file.

Usage:
  python scripts/export_tracker.py --team "Cabin Crew" [--out tracker.xlsx] [--period month]
"""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cabin.container import build_container
from cabin.repositories import get_store
from cabin.services import export_service
from cabin.services.minute_tracker_service import filter_entries


async def export(team: str, period: str) -> tuple[bytes, int]:
    container = build_container(get_store())
    users = await container.store.get_all("users")
    owner = next((u for u in users if u["teamName"].casefold() == team.strip().casefold()), None)
    if not owner:
        raise SystemExit(f"Team '{team}' not found")
    names = await container.member_service.names(owner["id"])
    entries = filter_entries(
        await container.minute_tracker_service.list(owner["id"]),
        period=period,
        member_names=names,
    )
    return export_service.export_entries(entries, names), len(entries)


def main() -> None:
    ap = argparse.ArgumentParser(description="Export minute tracker entries")
    ap.add_argument("--team", required=True, help="Team name (case-insensitive)")
    ap.add_argument("--period", default="all", choices=["all", "today", "week", "month"])
    ap.add_argument("--out", help="Output path (default: minute-tracker-<today>.xlsx)")
    args = ap.parse_args()

    content, total = asyncio.run(export(args.team, args.period))
    out = Path(args.out or export_service.export_filename())
    out.write_bytes(content)
    print(f"OK: {total} entries written to {out}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
