"""Assemble a diagnostics report and print it to stdout as JSON.

Usage:
    python -m scripts.run_report
    DB_PATH=/srv/gallery/data/app.sqlite3 python -m scripts.run_report
"""

import asyncio
import logging
import sys

from photostats.config import get_settings
from photostats.report.assembler import DiagnosticsReportAssembler
from photostats.store.records import RecordStore
from photostats.workers.pool import provider_from_settings

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)


async def main() -> None:
    """Assemble and print the report."""
    settings = get_settings()
    try:
        with RecordStore(settings.db_path) as store:
            assembler = DiagnosticsReportAssembler(store, provider_from_settings())
            report = await assembler.assemble()
        print(report.model_dump_json(by_alias=True, indent=2))
    except Exception as e:
        print(f"Failed to assemble report: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
