"""Trigger matcher: select the definitions an incoming event should start."""

from __future__ import annotations

from typing import TYPE_CHECKING

from donorcrm.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from donorcrm.application.interfaces.repositories import IAutomationDirectory
    from donorcrm.domain.entities import AutomationDefinition
    from donorcrm.domain.enums import TriggerKind
    from donorcrm.domain.value_objects import TriggerContext

logger = get_logger(__name__)


class TriggerMatcher:
    """Filters a tenant's active automations by trigger kind and trigger config.

    Matching fails open: a config without a correlating id (or with keys the
    variant does not know) matches every event of that kind.
    """

    def __init__(self, automations: IAutomationDirectory) -> None:
        self._automations = automations

    async def match(
        self, tenant_id: str, trigger: TriggerKind, context: TriggerContext
    ) -> list[AutomationDefinition]:
        """Return definitions to start for this event, in load order."""
        candidates = await self._automations.list_active_by_trigger(tenant_id, trigger)
        matched: list[AutomationDefinition] = []
        for definition in candidates:
            if not definition.belongs_to_tenant(tenant_id):
                continue
            config = definition.parsed_trigger_config()
            if config is not None and config.unknown_keys:
                logger.debug(
                    "Automation %s trigger config has unrecognized keys %s; ignored",
                    definition.id,
                    list(config.unknown_keys),
                )
            if definition.matches(trigger, context):
                matched.append(definition)
        return matched
