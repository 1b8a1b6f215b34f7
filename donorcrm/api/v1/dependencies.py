"""API v1 dependencies (composition root for request-scoped objects).

Repositories get a read session (get_db) or a transactional one
(get_db_transactional). The automation engine is process-wide and lives on
app.state (built in the lifespan).
"""

from __future__ import annotations

import re
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.application.services import AutomationEngine
from donorcrm.core.config import get_settings
from donorcrm.domain.exceptions import (
    CronAuthenticationException,
    SqlNotConfiguredException,
    TenantNotFoundException,
)
from donorcrm.infrastructure.persistence.database import get_db, get_db_transactional
from donorcrm.infrastructure.persistence.repositories import (
    AuditLogRepository,
    AutomationRepository,
    ExecutionRepository,
    TenantRepository,
)

_TENANT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


async def get_tenant_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantRepository:
    """Tenant repository for read operations."""
    return TenantRepository(db)


async def get_tenant_id(
    request: Request,
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repo)],
) -> str:
    """Resolve tenant ID from header and validate it exists."""
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(status_code=400, detail=f"Missing required header: {name}")
    if not _TENANT_ID_RE.match(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
        )
    if await tenant_repo.get_by_id(value) is None:
        raise TenantNotFoundException(value)
    return value


async def get_automation_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AutomationRepository:
    """Automation repository for read operations (list, get by id)."""
    return AutomationRepository(db)


async def get_automation_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AutomationRepository:
    """Automation repository for create/update/toggle/delete (transactional, audited)."""
    return AutomationRepository(db, audit_log=AuditLogRepository(db))


async def get_execution_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ExecutionRepository:
    """Execution repository for read (history by automation, get by id)."""
    return ExecutionRepository(db)


def get_automation_engine(request: Request) -> AutomationEngine:
    """Process-wide automation engine; unavailable without a database."""
    engine = getattr(request.app.state, "automation_engine", None)
    if engine is None:
        raise SqlNotConfiguredException()
    return engine


def verify_cron_secret(
    request: Request,
    key: Annotated[str | None, Query()] = None,
) -> None:
    """Accept ?key=<secret> or Authorization: Bearer <secret>; open when CRON_SECRET is unset."""
    configured = get_settings().cron_secret
    if configured is None or not configured.get_secret_value():
        return
    supplied = key
    auth = request.headers.get("authorization", "")
    if supplied is None and auth.lower().startswith("bearer "):
        supplied = auth[7:].strip()
    if not supplied or not secrets.compare_digest(
        supplied.encode(), configured.get_secret_value().encode()
    ):
        raise CronAuthenticationException()
