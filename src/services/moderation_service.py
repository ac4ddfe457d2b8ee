"""Moderation service: bans, warnings, skill review and the admin action log."""

import logging
from typing import Any

from pydantic import ValidationError

from src.core import db_client
from src.core.errors import ForbiddenError, InvalidInputError, InvalidStateError
from src.core.logging import span
from src.domain.admin_action import AdminActionType, PlatformStats
from src.domain.create_models import AdminActionCreate
from src.domain.skill import SkillStatus
from src.domain.swap import SwapStatus
from src.domain.user import UserRole, UserStatusFilter
from src.services import identity_service, swap_service


logger = logging.getLogger(__name__)


async def _require_admin(admin_id: str) -> None:
    if not await identity_service.is_admin(user_id=admin_id):
        msg = "Admin privileges required"
        logger.warning("Moderation attempt by non-admin", extra={"actor_id": admin_id})
        raise ForbiddenError(msg)


def _validate_reason(reason: str) -> str:
    try:
        return AdminActionCreate(reason=reason).reason
    except ValidationError as e:
        raise InvalidInputError(f"Invalid reason: {e.errors()[0]['msg']}") from e


async def _record_action(
    *,
    admin_id: str,
    action_type: AdminActionType,
    reason: str,
    target_user_id: str | None = None,
    target_skill_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Append an entry to the moderation log."""
    record = await db_client.create_record(
        collection="admin_actions",
        data={
            "admin_id": admin_id,
            "target_user_id": target_user_id,
            "target_skill_id": target_skill_id,
            "action_type": action_type,
            "reason": reason,
            "details": details,
            "created_at": db_client.now_iso(),
        },
    )
    logger.info(
        "Recorded admin action",
        extra={
            "action_id": record["id"],
            "admin_id": admin_id,
            "action_type": action_type,
            "target_user_id": target_user_id,
            "target_skill_id": target_skill_id,
        },
    )
    return record


async def ban_user(*, admin_id: str, user_id: str, reason: str) -> dict[str, Any]:
    """Ban a user. Admins cannot be banned.

    Returns:
        Updated user record

    Raises:
        ForbiddenError: If the actor is not an admin or the target is an admin
        InvalidInputError: If the reason is missing or too long
        NotFoundError: If the user does not exist
        InvalidStateError: If the user is already banned
    """
    with span("moderation_service.ban_user"):
        await _require_admin(admin_id)
        reason = _validate_reason(reason)

        target = await identity_service.get_user(user_id=user_id)
        if target.get("role") == UserRole.ADMIN:
            msg = "Cannot ban admin users"
            raise ForbiddenError(msg)

        updated = await db_client.update_record_if(
            collection="users",
            record_id=user_id,
            expected={"is_banned": False},
            data={"is_banned": True, "ban_reason": reason},
        )
        if updated is None:
            msg = f"User {user_id} is already banned"
            raise InvalidStateError(msg)

        await _record_action(
            admin_id=admin_id,
            action_type=AdminActionType.BAN,
            reason=reason,
            target_user_id=user_id,
            details={"user_name": target["name"], "user_email": target["email"]},
        )
        return updated


async def unban_user(*, admin_id: str, user_id: str, reason: str) -> dict[str, Any]:
    """Lift a ban.

    Raises:
        ForbiddenError: If the actor is not an admin
        InvalidInputError: If the reason is missing or too long
        NotFoundError: If the user does not exist
        InvalidStateError: If the user is not banned
    """
    with span("moderation_service.unban_user"):
        await _require_admin(admin_id)
        reason = _validate_reason(reason)

        target = await identity_service.get_user(user_id=user_id)

        updated = await db_client.update_record_if(
            collection="users",
            record_id=user_id,
            expected={"is_banned": True},
            data={"is_banned": False, "ban_reason": None},
        )
        if updated is None:
            msg = f"User {user_id} is not banned"
            raise InvalidStateError(msg)

        await _record_action(
            admin_id=admin_id,
            action_type=AdminActionType.UNBAN,
            reason=reason,
            target_user_id=user_id,
            details={"user_name": target["name"], "previous_ban_reason": target.get("ban_reason")},
        )
        return updated


async def warn_user(*, admin_id: str, user_id: str, reason: str) -> dict[str, Any]:
    """Record a warning against a user. Returns the log entry."""
    with span("moderation_service.warn_user"):
        await _require_admin(admin_id)
        reason = _validate_reason(reason)

        target = await identity_service.get_user(user_id=user_id)

        return await _record_action(
            admin_id=admin_id,
            action_type=AdminActionType.WARN,
            reason=reason,
            target_user_id=user_id,
            details={"user_name": target["name"]},
        )


async def _set_skill_status(
    *, admin_id: str, skill_id: str, reason: str, status: SkillStatus, action_type: AdminActionType
) -> dict[str, Any]:
    await _require_admin(admin_id)
    reason = _validate_reason(reason)

    skill = await identity_service.get_skill(skill_id=skill_id)
    if skill["status"] == status:
        msg = f"Skill {skill_id} is already {status}"
        raise InvalidStateError(msg)

    updated = await db_client.update_record(collection="skills", record_id=skill_id, data={"status": status})

    await _record_action(
        admin_id=admin_id,
        action_type=action_type,
        reason=reason,
        target_user_id=skill.get("created_by"),
        target_skill_id=skill_id,
        details={"skill_name": skill["name"], "previous_status": skill["status"]},
    )
    return updated


async def approve_skill(*, admin_id: str, skill_id: str, reason: str) -> dict[str, Any]:
    """Approve a catalogued skill."""
    with span("moderation_service.approve_skill"):
        return await _set_skill_status(
            admin_id=admin_id,
            skill_id=skill_id,
            reason=reason,
            status=SkillStatus.APPROVED,
            action_type=AdminActionType.APPROVE_SKILL,
        )


async def reject_skill(*, admin_id: str, skill_id: str, reason: str) -> dict[str, Any]:
    """Mark a catalogued skill as rejected.

    The record is kept so that existing offers and swaps that reference it
    stay resolvable.
    """
    with span("moderation_service.reject_skill"):
        return await _set_skill_status(
            admin_id=admin_id,
            skill_id=skill_id,
            reason=reason,
            status=SkillStatus.REJECTED,
            action_type=AdminActionType.REJECT_SKILL,
        )


async def list_admin_actions(
    *,
    admin_id: str,
    action_type: AdminActionType | None = None,
    target_user_id: str | None = None,
) -> list[dict[str, Any]]:
    """List moderation log entries, newest first.

    Raises:
        ForbiddenError: If the actor is not an admin
        InvalidInputError: If ``target_user_id`` is not a user id
    """
    with span("moderation_service.list_admin_actions"):
        await _require_admin(admin_id)

        filters = []
        if action_type:
            filters.append(f'action_type = "{AdminActionType(action_type)}"')
        if target_user_id:
            if not target_user_id.isdigit():
                msg = f"Invalid user id: {target_user_id}"
                raise InvalidInputError(msg)
            filters.append(f'target_user_id = "{target_user_id}"')

        return await db_client.list_records(
            collection="admin_actions",
            filter_query=" && ".join(filters),
            sort="-created_at",
        )


_USER_STATUS_FILTERS = {
    UserStatusFilter.ACTIVE: 'is_active = "true" && is_banned = "false"',
    UserStatusFilter.BANNED: 'is_banned = "true"',
    UserStatusFilter.INACTIVE: 'is_active = "false"',
}


async def list_users(*, admin_id: str, status: UserStatusFilter | None = None) -> list[dict[str, Any]]:
    """List every account, newest first, optionally narrowed to one account state."""
    with span("moderation_service.list_users"):
        await _require_admin(admin_id)

        filter_query = _USER_STATUS_FILTERS[UserStatusFilter(status)] if status else ""
        return await db_client.list_records(collection="users", filter_query=filter_query, sort="-created")


async def list_skills(*, admin_id: str, status: SkillStatus | None = None) -> list[dict[str, Any]]:
    """List catalogued skills of any status, newest first."""
    with span("moderation_service.list_skills"):
        await _require_admin(admin_id)

        filter_query = f'status = "{SkillStatus(status)}"' if status else ""
        return await db_client.list_records(collection="skills", filter_query=filter_query, sort="-created")


async def list_swaps(*, admin_id: str, status: SwapStatus | None = None) -> list[dict[str, Any]]:
    """List swap requests between any users, newest first."""
    with span("moderation_service.list_swaps"):
        await _require_admin(admin_id)

        filter_query = f'status = "{SwapStatus(status)}"' if status else ""
        return await db_client.list_records(collection="swap_requests", filter_query=filter_query, sort="-created_at")


async def list_feedback(*, admin_id: str) -> list[dict[str, Any]]:
    """List all feedback, private entries included, newest first."""
    with span("moderation_service.list_feedback"):
        await _require_admin(admin_id)

        return await db_client.list_records(collection="feedback", sort="-created_at")


async def get_platform_stats(*, admin_id: str) -> PlatformStats:
    """Counts of users, skills and swaps for the admin dashboard."""
    with span("moderation_service.get_platform_stats"):
        await _require_admin(admin_id)

        swap_counts = await swap_service.count_swaps_by_status()

        return PlatformStats(
            active_users=await db_client.count_records(
                collection="users", filter_query=_USER_STATUS_FILTERS[UserStatusFilter.ACTIVE]
            ),
            banned_users=await db_client.count_records(
                collection="users", filter_query=_USER_STATUS_FILTERS[UserStatusFilter.BANNED]
            ),
            approved_skills=await db_client.count_records(
                collection="skills", filter_query=f'status = "{SkillStatus.APPROVED}"'
            ),
            pending_skills=await db_client.count_records(
                collection="skills", filter_query=f'status = "{SkillStatus.PENDING}"'
            ),
            total_swaps=swap_counts["total"],
            pending_swaps=swap_counts[SwapStatus.PENDING],
            completed_swaps=swap_counts[SwapStatus.COMPLETED],
        )
