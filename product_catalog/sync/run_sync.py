"""Run one Contentful sync outside the HTTP API.

Usage:
    python -m product_catalog.sync.run_sync

Exits with status 1 when the Contentful fetch failed.
"""

import asyncio
import sys

from product_catalog.catalog_api.deps import default_services
from product_catalog.sync.sync_job import SyncResult
from product_catalog.utils.logger import set_app_context, AppLogger


async def run_sync() -> SyncResult:
    with set_app_context(AppLogger.CATALOG_SYNC):
        async with default_services() as services:
            return await services.sync_job.sync_from_external_source()


def main() -> int:
    result = asyncio.run(run_sync())
    print(result.to_dict())
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
