"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from donorcrm.api.v1.dependencies.
"""

from fastapi import APIRouter

from donorcrm.api.v1.endpoints import automations, cron, executions, health, triggers

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(automations.router, prefix="/automations", tags=["automations"])
api_router.include_router(executions.router, prefix="/executions", tags=["executions"])
api_router.include_router(triggers.router, prefix="/triggers", tags=["triggers"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
