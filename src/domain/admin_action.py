"""Moderation log domain models."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class AdminActionType(StrEnum):
    """Kinds of moderation actions recorded in the log."""

    BAN = "ban"
    UNBAN = "unban"
    WARN = "warn"
    APPROVE_SKILL = "approve_skill"
    REJECT_SKILL = "reject_skill"


class AdminAction(BaseModel):
    """Append-only moderation log entry."""

    id: str
    admin_id: str
    target_user_id: str | None = None
    target_skill_id: str | None = None
    action_type: AdminActionType
    reason: str
    details: dict[str, Any] | None = Field(default=None, description="Action-specific data")
    created_at: str


class PlatformStats(BaseModel):
    """Counts shown on the admin dashboard."""

    active_users: int
    banned_users: int
    approved_skills: int
    pending_skills: int
    total_swaps: int
    pending_swaps: int
    completed_swaps: int
