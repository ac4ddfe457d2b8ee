"""Admin moderation endpoints."""

import logging

from fastapi import APIRouter, Depends

from src.domain.admin_action import AdminAction, AdminActionType, PlatformStats
from src.domain.create_models import AdminActionCreate
from src.domain.feedback import Feedback
from src.domain.skill import Skill, SkillStatus
from src.domain.swap import SwapRequest, SwapStatus
from src.domain.user import User, UserStatusFilter
from src.interface.auth import require_admin
from src.services import moderation_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats")
async def get_stats(admin_id: str = Depends(require_admin)) -> PlatformStats:
    """Counts of users, skills and swaps."""
    return await moderation_service.get_platform_stats(admin_id=admin_id)


@router.post("/users/{user_id}/ban")
async def ban_user(user_id: str, body: AdminActionCreate, admin_id: str = Depends(require_admin)) -> User:
    record = await moderation_service.ban_user(admin_id=admin_id, user_id=user_id, reason=body.reason)
    logger.info("admin_ban_user", extra={"admin_id": admin_id, "user_id": user_id})
    return User(**record)


@router.post("/users/{user_id}/unban")
async def unban_user(user_id: str, body: AdminActionCreate, admin_id: str = Depends(require_admin)) -> User:
    record = await moderation_service.unban_user(admin_id=admin_id, user_id=user_id, reason=body.reason)
    logger.info("admin_unban_user", extra={"admin_id": admin_id, "user_id": user_id})
    return User(**record)


@router.post("/users/{user_id}/warn")
async def warn_user(user_id: str, body: AdminActionCreate, admin_id: str = Depends(require_admin)) -> AdminAction:
    record = await moderation_service.warn_user(admin_id=admin_id, user_id=user_id, reason=body.reason)
    return AdminAction(**record)


@router.post("/skills/{skill_id}/approve")
async def approve_skill(skill_id: str, body: AdminActionCreate, admin_id: str = Depends(require_admin)) -> Skill:
    record = await moderation_service.approve_skill(admin_id=admin_id, skill_id=skill_id, reason=body.reason)
    return Skill(**record)


@router.post("/skills/{skill_id}/reject")
async def reject_skill(skill_id: str, body: AdminActionCreate, admin_id: str = Depends(require_admin)) -> Skill:
    """Mark a skill as rejected. The skill record is kept."""
    record = await moderation_service.reject_skill(admin_id=admin_id, skill_id=skill_id, reason=body.reason)
    return Skill(**record)


@router.get("/actions")
async def list_actions(
    action_type: AdminActionType | None = None,
    target_user_id: str | None = None,
    admin_id: str = Depends(require_admin),
) -> list[AdminAction]:
    """Moderation log, newest first."""
    records = await moderation_service.list_admin_actions(
        admin_id=admin_id, action_type=action_type, target_user_id=target_user_id
    )
    return [AdminAction(**record) for record in records]


@router.get("/users")
async def list_users(status: UserStatusFilter | None = None, admin_id: str = Depends(require_admin)) -> list[User]:
    """All accounts, newest first."""
    records = await moderation_service.list_users(admin_id=admin_id, status=status)
    return [User(**record) for record in records]


@router.get("/skills")
async def list_skills(status: SkillStatus | None = None, admin_id: str = Depends(require_admin)) -> list[Skill]:
    """All catalogued skills, including pending and rejected ones."""
    records = await moderation_service.list_skills(admin_id=admin_id, status=status)
    return [Skill(**record) for record in records]


@router.get("/swaps")
async def list_swaps(status: SwapStatus | None = None, admin_id: str = Depends(require_admin)) -> list[SwapRequest]:
    records = await moderation_service.list_swaps(admin_id=admin_id, status=status)
    return [SwapRequest.from_record(record) for record in records]


@router.get("/feedback")
async def list_feedback(admin_id: str = Depends(require_admin)) -> list[Feedback]:
    """All feedback, private entries included."""
    records = await moderation_service.list_feedback(admin_id=admin_id)
    return [Feedback(**record) for record in records]
