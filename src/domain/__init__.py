"""Domain models and DTOs."""

from src.domain.admin_action import AdminAction, AdminActionType, PlatformStats
from src.domain.create_models import (
    AdminActionCreate,
    FeedbackCreate,
    SkillCreate,
    SwapRequestCreate,
    UserCreate,
    UserSkillAdd,
    UserSkillCreate,
)
from src.domain.feedback import Feedback, RatingSummary
from src.domain.skill import (
    FreeTextSkill,
    ProficiencyLevel,
    Skill,
    SkillCategory,
    SkillKind,
    SkillStatus,
    StructuredSkill,
    UserSkill,
    UserSkillType,
)
from src.domain.swap import SwapAction, SwapDirection, SwapRequest, SwapStatus
from src.domain.update_models import FeedbackUpdate, SwapTransitionUpdate
from src.domain.user import User, UserRole, UserStatusFilter


__all__ = [
    "AdminAction",
    "AdminActionCreate",
    "AdminActionType",
    "Feedback",
    "FeedbackCreate",
    "FeedbackUpdate",
    "FreeTextSkill",
    "PlatformStats",
    "ProficiencyLevel",
    "RatingSummary",
    "Skill",
    "SkillCategory",
    "SkillCreate",
    "SkillKind",
    "SkillStatus",
    "StructuredSkill",
    "SwapAction",
    "SwapDirection",
    "SwapRequest",
    "SwapRequestCreate",
    "SwapStatus",
    "SwapTransitionUpdate",
    "User",
    "UserCreate",
    "UserRole",
    "UserSkill",
    "UserSkillAdd",
    "UserSkillType",
    "UserStatusFilter",
]
