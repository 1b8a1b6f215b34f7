"""Run one automation sweep: resume waiting executions whose delay has elapsed.

Usage:
    python -m scripts.run_automation_sweep
Schedule from cron (e.g. every 5 minutes) as an alternative to calling
GET /api/v1/cron/automations. Requires DATABASE_URL.
"""

import asyncio
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

from donorcrm.core.config import get_settings
from donorcrm.infrastructure.persistence.database import dispose_engine, get_session_factory
from donorcrm.infrastructure.services.engine_factory import build_automation_engine
from donorcrm.shared.telemetry.logging import setup_logging
from donorcrm.shared.utils.datetime import utc_now


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)


async def main() -> int:
    """Sweep once and wait for the resumed runs.

    Exit code 1 when an execution failed before launch or runs outlived the drain.
    """
    _load_env()
    get_settings.cache_clear()
    settings = get_settings()
    setup_logging()
    session_factory = get_session_factory()
    if session_factory is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        return 1
    try:
        async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
            engine = build_automation_engine(settings, session_factory, http_client=client)
            now = utc_now()
            result = await engine.sweep(now)
            drained = await engine.drain(settings.automation_drain_timeout_seconds)
    finally:
        await dispose_engine()
    print(
        f"Sweep at {now.isoformat()}: due={result.due} resumed={len(result.resumed)} "
        f"skipped={len(result.skipped)} failed={len(result.failed)}"
    )
    return 1 if result.failed or not drained else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
