"""Reconcile a scope's standups for the next N days from the command line.

Usage: python scripts/generate_standups.py <scope_id> <owner_id>[,<owner_id>...] [days]
"""

from __future__ import annotations

import importlib
import logging
import sys
from datetime import timedelta

from dotenv import load_dotenv

from worktime_system.common.datetime_utils import resolve_zone, today_in_zone
from worktime_system.config import get_settings_module
from worktime_system.container import build_container
from worktime_system.recurrence.model import DateWindow

logger = logging.getLogger("generate_standups")


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s %(name)s: %(message)s")

    scope_id = int(argv[0])
    owners = [int(v) for v in argv[1].split(",") if v.strip()]
    days = int(argv[2]) if len(argv) > 2 else 30

    container = build_container(
        db_config=settings.DB_CONFIG,
        reference_tz=settings.REFERENCE_TIMEZONE,
        batch_interval=settings.BATCH_WRITE_INTERVAL_SECONDS,
    )
    start = today_in_zone(None, resolve_zone(settings.REFERENCE_TIMEZONE))
    result = container.schedule_service.reconcile_standups(
        scope_id=scope_id,
        window=DateWindow(start, start + timedelta(days=days - 1)),
        owners=owners,
    )
    logger.info("created=%d skipped=%d failed=%d", len(result.created), len(result.skipped), len(result.failures))
    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
