"""Action dispatcher: perform exactly one step's side effect.

Expected unavailability (no donor, no address, no consent, no recipients,
no tag) is a skipped result. Provider rejections are failed results. Only
unexpected exceptions propagate; the run executor turns those into a failed
execution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from donorcrm.application.dtos.channel import AuditEntry, EmailMessage, SmsMessage
from donorcrm.application.dtos.execution import ActionResult
from donorcrm.domain.enums import ActionKind
from donorcrm.domain.value_objects.action_config import DEFAULT_EMAIL_HTML
from donorcrm.shared.telemetry.logging import get_logger
from donorcrm.shared.utils.contact import build_unsubscribe_url, normalize_phone_number

if TYPE_CHECKING:
    from donorcrm.application.dtos.execution import RunContext
    from donorcrm.application.interfaces.repositories import (
        IDonorDirectory,
        ITenantDirectory,
    )
    from donorcrm.application.interfaces.services import (
        IAdminDirectory,
        IAuditLog,
        IEmailProvider,
        ISmsProvider,
        ITagStore,
    )
    from donorcrm.domain.entities import AutomationStep, DonorContact, TenantProfile
    from donorcrm.domain.value_objects.action_config import (
        AiSuggestionConfig,
        NotifyAdminConfig,
        SendEmailConfig,
        SendSmsConfig,
        TagConfig,
    )

logger = get_logger(__name__)

AI_SUGGESTION_AUDIT_ACTION = "AI_SUGGESTION"
AUTOMATION_ENTITY_TYPE = "Automation"


class ActionDispatcher:
    """Runs one automation step against injected channel providers and stores."""

    def __init__(
        self,
        *,
        email_provider: IEmailProvider,
        sms_provider: ISmsProvider,
        tag_store: ITagStore,
        admin_directory: IAdminDirectory,
        audit_log: IAuditLog,
        donors: IDonorDirectory,
        tenants: ITenantDirectory,
        app_url: str,
        phone_country_code: str = "40",
    ) -> None:
        self._email = email_provider
        self._sms = sms_provider
        self._tags = tag_store
        self._admins = admin_directory
        self._audit = audit_log
        self._donors = donors
        self._tenants = tenants
        self._app_url = app_url
        self._phone_country_code = phone_country_code

    async def apply(self, step: AutomationStep, run: RunContext) -> ActionResult:
        """Perform step's action for run and return a uniform result."""
        config = step.parsed_config()
        action = step.action
        if action == ActionKind.SEND_EMAIL:
            return await self._send_email(config, run)
        if action == ActionKind.SEND_SMS:
            return await self._send_sms(config, run)
        if action == ActionKind.ADD_TAG:
            return await self._add_tag(config, run)
        if action == ActionKind.REMOVE_TAG:
            return await self._remove_tag(config, run)
        if action == ActionKind.NOTIFY_ADMIN:
            return await self._notify_admins(config, run)
        if action == ActionKind.AI_SUGGESTION:
            return await self._record_ai_suggestion(config, run)
        if action == ActionKind.CONDITION:
            # No evaluation rule exists for conditions; the step is inert.
            logger.debug(
                "CONDITION step %s of automation %s is inert", step.order, run.automation_id
            )
            return ActionResult.success()
        # WAIT: the delay policy already did the waiting.
        return ActionResult.success()

    async def _donor(self, run: RunContext) -> DonorContact | None:
        if not run.donor_id:
            return None
        return await self._donors.get_contact(run.tenant_id, run.donor_id)

    async def _tenant(self, run: RunContext) -> TenantProfile | None:
        return await self._tenants.get_profile(run.tenant_id)

    async def _send_email(self, config: SendEmailConfig, run: RunContext) -> ActionResult:
        donor = await self._donor(run)
        if donor is None:
            return ActionResult.skipped("no donor")
        if not donor.email:
            return ActionResult.skipped("donor has no email address")
        if not donor.email_consent:
            return ActionResult.skipped("donor has not consented to email")
        tenant = await self._tenant(run)
        tenant_name = tenant.name if tenant else ""
        message = EmailMessage(
            to=donor.email,
            subject=config.subject or f"Update from {tenant_name}".strip(),
            html=config.html or DEFAULT_EMAIL_HTML,
            from_address=tenant.sender_email if tenant else None,
            from_name=(tenant.sender_name or tenant.name) if tenant else None,
            unsubscribe_url=(
                build_unsubscribe_url(self._app_url, donor.id, tenant.slug) if tenant else None
            ),
        )
        result = await self._email.send(message)
        if not result.success:
            return ActionResult.failed(result.error or "email provider rejected message")
        return ActionResult.success(message_id=result.message_id)

    async def _send_sms(self, config: SendSmsConfig, run: RunContext) -> ActionResult:
        donor = await self._donor(run)
        if donor is None:
            return ActionResult.skipped("no donor")
        if not donor.phone:
            return ActionResult.skipped("donor has no phone number")
        if not donor.sms_consent:
            return ActionResult.skipped("donor has not consented to SMS")
        to = normalize_phone_number(donor.phone, self._phone_country_code)
        if not to:
            return ActionResult.skipped("donor phone number has no digits")
        tenant = await self._tenant(run)
        result = await self._sms.send(
            SmsMessage(
                to=to,
                body=config.body,
                sender_id=tenant.sms_sender_id if tenant else None,
            )
        )
        if not result.success:
            return ActionResult.failed(result.error or "SMS provider rejected message")
        return ActionResult.success(message_id=result.message_id)

    async def _resolve_tag_id(
        self, config: TagConfig, run: RunContext, *, create: bool
    ) -> str | None:
        if config.tag_id:
            return config.tag_id
        if config.tag_name:
            return await self._tags.resolve_tag(run.tenant_id, config.tag_name, create=create)
        return None

    async def _add_tag(self, config: TagConfig, run: RunContext) -> ActionResult:
        if not run.donor_id:
            return ActionResult.skipped("no donor")
        if config.is_empty:
            return ActionResult.skipped("no tag configured")
        tag_id = await self._resolve_tag_id(config, run, create=True)
        if tag_id is None:
            return ActionResult.skipped("tag not found")
        created = await self._tags.assign(run.tenant_id, run.donor_id, tag_id)
        return ActionResult.success(tag_id=tag_id, changed=created)

    async def _remove_tag(self, config: TagConfig, run: RunContext) -> ActionResult:
        if not run.donor_id:
            return ActionResult.skipped("no donor")
        if config.is_empty:
            return ActionResult.skipped("no tag configured")
        tag_id = await self._resolve_tag_id(config, run, create=False)
        if tag_id is None:
            # Unknown tag name: nothing can be assigned, so nothing to remove.
            return ActionResult.success(changed=False)
        removed = await self._tags.unassign(run.tenant_id, run.donor_id, tag_id)
        return ActionResult.success(tag_id=tag_id, changed=removed)

    async def _notify_admins(self, config: NotifyAdminConfig, run: RunContext) -> ActionResult:
        emails = [e for e in await self._admins.list_admin_emails(run.tenant_id) if e]
        if not emails:
            logger.warning(
                "NOTIFY_ADMIN skipped: no admin recipients (tenant_id=%s, automation_id=%s)",
                run.tenant_id,
                run.automation_id,
            )
            return ActionResult.skipped("no admin recipients")
        tenant = await self._tenant(run)
        html = config.html or f"<p>Automation triggered for {tenant.name if tenant else run.tenant_id}.</p>"
        sent = 0
        errors: list[str] = []
        for email in emails:
            try:
                result = await self._email.send(
                    EmailMessage(to=email, subject=config.subject, html=html)
                )
            except Exception as e:
                logger.warning(
                    "NOTIFY_ADMIN send to one recipient raised (automation_id=%s): %s",
                    run.automation_id,
                    e,
                )
                errors.append(str(e))
                continue
            if result.success:
                sent += 1
            else:
                errors.append(result.error or "email provider rejected message")
        if errors:
            return ActionResult.failed(
                f"{len(errors)} of {len(emails)} admin notifications failed",
                recipients_count=len(emails),
                sent=sent,
                errors=errors,
            )
        return ActionResult.success(recipients_count=len(emails), sent=sent)

    async def _record_ai_suggestion(
        self, config: AiSuggestionConfig, run: RunContext
    ) -> ActionResult:
        await self._audit.record(
            AuditEntry(
                tenant_id=run.tenant_id,
                action=AI_SUGGESTION_AUDIT_ACTION,
                entity_type=AUTOMATION_ENTITY_TYPE,
                entity_id=run.automation_id,
                details={
                    "suggestion": config.prompt,
                    "donor_id": run.donor_id,
                    "execution_id": run.execution_id,
                },
            )
        )
        return ActionResult.success()
