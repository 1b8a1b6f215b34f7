"""Trigger API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from donorcrm.domain.enums import TriggerKind
from donorcrm.domain.value_objects import TriggerContext


class TriggerRequest(BaseModel):
    """Business event reported by a CRM component (donation, tag, campaign...)."""

    trigger: TriggerKind
    donor_id: str | None = Field(default=None, max_length=64)
    campaign_id: str | None = Field(default=None, max_length=64)
    tag_id: str | None = Field(default=None, max_length=64)
    tag_name: str | None = Field(default=None, max_length=255)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_context(self) -> TriggerContext:
        return TriggerContext(
            donor_id=self.donor_id,
            campaign_id=self.campaign_id,
            tag_id=self.tag_id,
            tag_name=self.tag_name,
            metadata=self.metadata,
        )


class TriggerAcceptedResponse(BaseModel):
    """Executions started for the trigger (runs continue in the background)."""

    trigger: TriggerKind
    execution_ids: list[str]
