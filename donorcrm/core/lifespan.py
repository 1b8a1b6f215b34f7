"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (shared HTTP
client, automation engine, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from donorcrm.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, automation engine (only when
    DATABASE_URL is set). Shutdown order: drain in-flight automation runs,
    HTTP client close, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for channel providers (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds)

    from donorcrm.infrastructure.persistence.database import get_session_factory

    session_factory = get_session_factory()
    if session_factory is not None:
        from donorcrm.infrastructure.services.engine_factory import (
            build_automation_engine,
        )

        app.state.automation_engine = build_automation_engine(
            settings, session_factory, http_client=app.state.http_client
        )
        logger.info(
            "Automation engine ready (email=%s, sms=%s)",
            settings.email_provider,
            settings.sms_provider,
        )
    else:
        app.state.automation_engine = None
        logger.warning("DATABASE_URL not set; automation engine disabled")

    yield

    # ---- Shutdown ----
    engine = getattr(app.state, "automation_engine", None)
    if engine is not None:
        drained = await engine.drain(settings.automation_drain_timeout_seconds)
        if drained:
            logger.info("Automation runs drained")
        app.state.automation_engine = None

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")

    from donorcrm.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("Database engine disposed")
