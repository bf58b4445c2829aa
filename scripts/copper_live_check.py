#!/usr/bin/env python3
"""Quick live check of the Copper sync flow against a real account.

Run (needs COPPER_API_KEY and COPPER_EMAIL):
  poetry run python scripts/copper_live_check.py                 # first page of opportunities
  poetry run python scripts/copper_live_check.py people          # first page of people
"""

import asyncio
import sys

from copper_pack.client import CopperClient
from copper_pack.config import CopperSettings
from copper_pack.sync import sync_records

TABLES = {"opportunities": "opportunity", "companies": "company", "people": "person"}


async def _check(table: str) -> None:
    settings = CopperSettings.from_env(page_size=5)
    async with CopperClient(settings) as client:
        account = await client.reference.account()
        print(f"Connected to {account.name} (account {account.id})")
        page = await sync_records(client, TABLES[table])

    print(f"Got {len(page.result)} {table}")
    for i, record in enumerate(page.result, 1):
        name = record.get("opportunityName") or record.get("companyName") or record.get("fullName")
        print(f"  {i}. {name} -> {record.get('copperUrl', 'N/A')}")
    if page.continuation:
        print(f"\nContinuation: {page.continuation.to_dict()}")
    print("\n✅ Sync flow succeeded.")


def main() -> None:
    table = sys.argv[1] if len(sys.argv) > 1 else "opportunities"
    if table not in TABLES:
        raise SystemExit(f"Unknown table: {table}. Available: {sorted(TABLES)}")
    asyncio.run(_check(table))


if __name__ == "__main__":
    main()
