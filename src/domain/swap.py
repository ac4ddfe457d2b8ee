"""Swap request domain models and enums."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from src.domain.skill import SkillDescriptor, descriptor_from_fields


class SwapStatus(StrEnum):
    """Swap request lifecycle state."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = frozenset({SwapStatus.PENDING, SwapStatus.ACCEPTED})
TERMINAL_STATUSES = frozenset({SwapStatus.REJECTED, SwapStatus.CANCELLED, SwapStatus.COMPLETED})
DELETABLE_STATUSES = frozenset({SwapStatus.PENDING, SwapStatus.REJECTED})


class SwapAction(StrEnum):
    """Transitions a participant can request on an existing swap."""

    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    COMPLETE = "complete"


class SwapDirection(StrEnum):
    """Which side of a swap a listing covers."""

    SENT = "sent"
    RECEIVED = "received"
    BOTH = "both"


class SwapRequest(BaseModel):
    """Swap request data transfer object."""

    id: str = Field(..., description="Unique swap request ID")
    requester_id: str = Field(..., description="User who proposed the swap")
    requestee_id: str = Field(..., description="User the swap was proposed to")
    offered_skill: SkillDescriptor = Field(..., description="Skill the requester offers")
    wanted_skill: SkillDescriptor = Field(..., description="Skill the requester wants from the requestee")
    message: str | None = Field(default=None, description="Optional note from the requester")
    status: SwapStatus = Field(default=SwapStatus.PENDING, description="Current lifecycle state")
    response_message: str | None = Field(default=None, description="Note left by the requestee on accept/reject")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    responded_at: str | None = None
    accepted_at: str | None = None
    rejected_at: str | None = None
    completed_at: str | None = None
    cancelled_at: str | None = None
    is_requester: bool | None = Field(default=None, description="Whether the viewing user is the requester")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SwapRequest":
        """Build the DTO from a flat storage record."""
        data = {k: v for k, v in record.items() if not k.startswith(("offered_skill", "wanted_skill"))}
        return cls(
            **data,
            offered_skill=descriptor_from_fields(record, "offered_skill"),
            wanted_skill=descriptor_from_fields(record, "wanted_skill"),
        )

    def other_participant(self, user_id: str) -> str:
        """Return the participant that is not ``user_id``."""
        return self.requestee_id if user_id == self.requester_id else self.requester_id

