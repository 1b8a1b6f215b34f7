"""Composition root for the automation engine.

Builds one AutomationEngine per process (FastAPI lifespan, sweep script)
from settings, a session factory and an optional shared httpx client.
"""

from __future__ import annotations

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from donorcrm.application.services import (
    ActionDispatcher,
    AutomationEngine,
    RunExecutor,
    SweepScheduler,
    TaskSupervisor,
    TriggerMatcher,
)
from donorcrm.core.config import Settings
from donorcrm.infrastructure.external.channels import ChannelProviderFactory
from donorcrm.infrastructure.services.automation_stores import (
    SqlAdminDirectory,
    SqlAuditLog,
    SqlAutomationDirectory,
    SqlDonorDirectory,
    SqlExecutionStore,
    SqlTagStore,
    SqlTenantDirectory,
)


def build_automation_engine(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    http_client: httpx.AsyncClient | None = None,
) -> AutomationEngine:
    """Wire SQL stores, channel providers and engine services."""
    store = SqlExecutionStore(session_factory)
    automations = SqlAutomationDirectory(session_factory)
    dispatcher = ActionDispatcher(
        email_provider=ChannelProviderFactory.create_email_provider(
            settings, http_client=http_client
        ),
        sms_provider=ChannelProviderFactory.create_sms_provider(
            settings, http_client=http_client
        ),
        tag_store=SqlTagStore(session_factory),
        admin_directory=SqlAdminDirectory(session_factory),
        audit_log=SqlAuditLog(session_factory),
        donors=SqlDonorDirectory(session_factory),
        tenants=SqlTenantDirectory(session_factory),
        app_url=settings.app_url,
        phone_country_code=settings.phone_default_country_code,
    )
    supervisor = TaskSupervisor()
    executor = RunExecutor(
        store,
        dispatcher,
        short_delay_minutes=settings.automation_short_delay_minutes,
        resume_honors_step_delays=settings.automation_resume_honors_step_delays,
    )
    return AutomationEngine(
        matcher=TriggerMatcher(automations),
        store=store,
        executor=executor,
        sweep_scheduler=SweepScheduler(
            store,
            automations,
            executor,
            supervisor,
            batch_size=settings.automation_sweep_batch_size,
        ),
        supervisor=supervisor,
    )
