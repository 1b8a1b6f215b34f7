"""Cron (sweep) API schemas."""

from datetime import datetime

from pydantic import BaseModel


class SweepResponse(BaseModel):
    """Outcome of one sweep over due waiting executions."""

    ran_at: datetime
    due: int
    resumed: list[str]
    skipped: list[str]
    failed: list[str]
