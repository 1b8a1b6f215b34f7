"""Domain enumerations for automations.

Closed sets: trigger kinds an automation can listen to, action kinds a
step can perform, and the execution lifecycle.
"""

from enum import Enum

from donorcrm.shared.enums import _ValuesMixin


class TriggerKind(_ValuesMixin, str, Enum):
    """Business event kinds that can start automation executions."""

    NEW_DONATION = "NEW_DONATION"
    DONOR_CREATED = "DONOR_CREATED"
    CAMPAIGN_GOAL_REACHED = "CAMPAIGN_GOAL_REACHED"
    NO_DONATION_PERIOD = "NO_DONATION_PERIOD"
    NEW_SUBSCRIBER = "NEW_SUBSCRIBER"
    TAG_ADDED = "TAG_ADDED"
    CAMPAIGN_ENDED = "CAMPAIGN_ENDED"
    MANUAL = "MANUAL"


class ActionKind(_ValuesMixin, str, Enum):
    """Side effect performed by one automation step."""

    SEND_EMAIL = "SEND_EMAIL"
    SEND_SMS = "SEND_SMS"
    WAIT = "WAIT"
    ADD_TAG = "ADD_TAG"
    REMOVE_TAG = "REMOVE_TAG"
    NOTIFY_ADMIN = "NOTIFY_ADMIN"
    AI_SUGGESTION = "AI_SUGGESTION"
    CONDITION = "CONDITION"


class ExecutionStatus(_ValuesMixin, str, Enum):
    """Automation execution lifecycle.

    running -> waiting -> running -> ... -> completed, or running -> failed.
    completed and failed are terminal.
    """

    RUNNING = "running"
    WAITING = "waiting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)

    @classmethod
    def terminal_values(cls) -> list[str]:
        """Return values of terminal statuses (used in conditional updates)."""
        return [s.value for s in cls if s.is_terminal]
