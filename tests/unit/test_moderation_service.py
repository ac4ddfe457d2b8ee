"""Unit tests for moderation_service module."""

import pytest

from src.core.errors import ForbiddenError, InvalidInputError, InvalidStateError, NotFoundError
from src.domain.admin_action import AdminActionType
from src.domain.skill import SkillCategory, SkillStatus
from src.domain.swap import SwapAction, SwapStatus
from src.domain.user import UserStatusFilter
from src.services import feedback_service, identity_service, moderation_service, swap_service


@pytest.fixture
async def pending_skill(patched_db, requester):
    return await identity_service.create_skill(
        name="Pottery", category=SkillCategory.CRAFTS, created_by=requester["id"], status=SkillStatus.PENDING
    )


@pytest.mark.unit
class TestBanning:
    """Tests for ban_user and unban_user."""

    async def test_ban_user(self, admin, requester, patched_db):
        result = await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="Spam")

        assert result["is_banned"] is True
        assert result["ban_reason"] == "Spam"

        actions = await patched_db.list_records("admin_actions")
        assert len(actions) == 1
        assert actions[0]["action_type"] == AdminActionType.BAN
        assert actions[0]["target_user_id"] == requester["id"]
        assert actions[0]["details"]["user_email"] == "riley@example.com"

    async def test_banned_user_cannot_create_swaps(self, admin, requester, requestee):
        await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="Spam")

        with pytest.raises(ForbiddenError):
            await swap_service.create_swap_request(
                requester_id=requester["id"],
                requestee_id=requestee["id"],
                offered_skill={"kind": "free_text", "label": "Guitar"},
                wanted_skill={"kind": "free_text", "label": "Excel"},
            )

    async def test_cannot_ban_admin(self, admin, patched_db):
        other_admin = await identity_service.create_user(name="Jo", email="jo@example.com", role="admin")

        with pytest.raises(ForbiddenError, match="admin"):
            await moderation_service.ban_user(admin_id=admin["id"], user_id=other_admin["id"], reason="Oops")

    async def test_ban_twice(self, admin, requester):
        await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="Spam")

        with pytest.raises(InvalidStateError):
            await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="Again")

    async def test_non_admin_cannot_ban(self, requester, requestee):
        with pytest.raises(ForbiddenError):
            await moderation_service.ban_user(admin_id=requester["id"], user_id=requestee["id"], reason="Spam")

    async def test_ban_requires_reason(self, admin, requester):
        with pytest.raises(InvalidInputError):
            await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="   ")

    async def test_ban_unknown_user(self, admin):
        with pytest.raises(NotFoundError):
            await moderation_service.ban_user(admin_id=admin["id"], user_id="9999", reason="Spam")

    async def test_unban(self, admin, requester):
        await moderation_service.ban_user(admin_id=admin["id"], user_id=requester["id"], reason="Spam")

        result = await moderation_service.unban_user(admin_id=admin["id"], user_id=requester["id"], reason="Appeal")

        assert result["is_banned"] is False
        assert result["ban_reason"] is None
        assert await identity_service.is_active_and_not_banned(user_id=requester["id"]) is True

    async def test_unban_not_banned(self, admin, requester):
        with pytest.raises(InvalidStateError):
            await moderation_service.unban_user(admin_id=admin["id"], user_id=requester["id"], reason="Appeal")


@pytest.mark.unit
class TestSkillReview:
    """Tests for approve_skill and reject_skill."""

    async def test_approve(self, admin, pending_skill):
        result = await moderation_service.approve_skill(admin_id=admin["id"], skill_id=pending_skill["id"], reason="OK")

        assert result["status"] == SkillStatus.APPROVED

    async def test_reject_keeps_record(self, admin, pending_skill, patched_db):
        result = await moderation_service.reject_skill(
            admin_id=admin["id"], skill_id=pending_skill["id"], reason="Duplicate of Ceramics"
        )

        assert result["status"] == SkillStatus.REJECTED
        stored = await patched_db.get_record("skills", pending_skill["id"])
        assert stored["name"] == "Pottery"

        actions = await moderation_service.list_admin_actions(admin_id=admin["id"])
        assert actions[0]["action_type"] == AdminActionType.REJECT_SKILL
        assert actions[0]["target_skill_id"] == pending_skill["id"]
        assert actions[0]["details"]["previous_status"] == SkillStatus.PENDING

    async def test_approve_twice(self, admin, pending_skill):
        await moderation_service.approve_skill(admin_id=admin["id"], skill_id=pending_skill["id"], reason="OK")

        with pytest.raises(InvalidStateError):
            await moderation_service.approve_skill(admin_id=admin["id"], skill_id=pending_skill["id"], reason="OK")

    async def test_unknown_skill(self, admin):
        with pytest.raises(NotFoundError):
            await moderation_service.reject_skill(admin_id=admin["id"], skill_id="9999", reason="Spam")


@pytest.mark.unit
class TestModerationLog:
    """Tests for warn_user, list_admin_actions and get_platform_stats."""

    async def test_warn_and_filter(self, admin, requester, requestee):
        await moderation_service.warn_user(admin_id=admin["id"], user_id=requester["id"], reason="Be nice")
        await moderation_service.ban_user(admin_id=admin["id"], user_id=requestee["id"], reason="Spam")

        warnings = await moderation_service.list_admin_actions(admin_id=admin["id"], action_type=AdminActionType.WARN)
        about_requestee = await moderation_service.list_admin_actions(
            admin_id=admin["id"], target_user_id=requestee["id"]
        )
        everything = await moderation_service.list_admin_actions(admin_id=admin["id"])

        assert [a["target_user_id"] for a in warnings] == [requester["id"]]
        assert [a["action_type"] for a in about_requestee] == [AdminActionType.BAN]
        assert [a["action_type"] for a in everything] == [AdminActionType.BAN, AdminActionType.WARN]

    async def test_log_requires_admin(self, requester):
        with pytest.raises(ForbiddenError):
            await moderation_service.list_admin_actions(admin_id=requester["id"])

    async def test_platform_stats(self, admin, requester, requestee, outsider, pending_skill):
        swap = await swap_service.create_swap_request(
            requester_id=requester["id"],
            requestee_id=requestee["id"],
            offered_skill={"kind": "free_text", "label": "Guitar"},
            wanted_skill={"kind": "free_text", "label": "Excel"},
        )
        await swap_service.transition_swap_request(
            swap_id=swap["id"], actor_id=requestee["id"], action=SwapAction.ACCEPT
        )
        await swap_service.transition_swap_request(
            swap_id=swap["id"], actor_id=requester["id"], action=SwapAction.COMPLETE
        )
        await swap_service.create_swap_request(
            requester_id=outsider["id"],
            requestee_id=requestee["id"],
            offered_skill={"kind": "free_text", "label": "Chess"},
            wanted_skill={"kind": "free_text", "label": "Go"},
        )
        await moderation_service.ban_user(admin_id=admin["id"], user_id=outsider["id"], reason="Spam")

        stats = await moderation_service.get_platform_stats(admin_id=admin["id"])

        assert stats.active_users == 3
        assert stats.banned_users == 1
        assert stats.approved_skills == 0
        assert stats.pending_skills == 1
        assert stats.total_swaps == 2
        assert stats.pending_swaps == 1
        assert stats.completed_swaps == 1


@pytest.mark.unit
class TestOversightListings:
    """Tests for the admin listings of users, skills, swaps and feedback."""

    async def test_list_users_by_status(self, admin, requester, requestee, outsider, patched_db):
        await moderation_service.ban_user(admin_id=admin["id"], user_id=requestee["id"], reason="Spam")
        await patched_db.update_record("users", outsider["id"], {"is_active": False})

        everyone = await moderation_service.list_users(admin_id=admin["id"])
        active = await moderation_service.list_users(admin_id=admin["id"], status=UserStatusFilter.ACTIVE)
        banned = await moderation_service.list_users(admin_id=admin["id"], status=UserStatusFilter.BANNED)
        inactive = await moderation_service.list_users(admin_id=admin["id"], status=UserStatusFilter.INACTIVE)

        assert [u["id"] for u in everyone] == [outsider["id"], requestee["id"], requester["id"], admin["id"]]
        assert [u["id"] for u in active] == [requester["id"], admin["id"]]
        assert [u["id"] for u in banned] == [requestee["id"]]
        assert [u["id"] for u in inactive] == [outsider["id"]]

    async def test_list_skills_by_status(self, admin, guitar_skill, pending_skill):
        everything = await moderation_service.list_skills(admin_id=admin["id"])
        pending = await moderation_service.list_skills(admin_id=admin["id"], status=SkillStatus.PENDING)

        assert [s["id"] for s in everything] == [pending_skill["id"], guitar_skill["id"]]
        assert [s["id"] for s in pending] == [pending_skill["id"]]

    async def test_list_swaps_and_feedback(self, admin, requester, requestee, outsider):
        first = await swap_service.create_swap_request(
            requester_id=requester["id"],
            requestee_id=requestee["id"],
            offered_skill={"kind": "free_text", "label": "Guitar"},
            wanted_skill={"kind": "free_text", "label": "Excel"},
        )
        second = await swap_service.create_swap_request(
            requester_id=outsider["id"],
            requestee_id=requestee["id"],
            offered_skill={"kind": "free_text", "label": "Chess"},
            wanted_skill={"kind": "free_text", "label": "Go"},
        )
        await swap_service.transition_swap_request(
            swap_id=first["id"], actor_id=requestee["id"], action=SwapAction.ACCEPT
        )
        await swap_service.transition_swap_request(
            swap_id=first["id"], actor_id=requester["id"], action=SwapAction.COMPLETE
        )
        await feedback_service.submit_feedback(
            swap_id=first["id"], reviewer_id=requester["id"], rating=5, is_public=False
        )

        swaps = await moderation_service.list_swaps(admin_id=admin["id"])
        pending = await moderation_service.list_swaps(admin_id=admin["id"], status=SwapStatus.PENDING)
        feedback = await moderation_service.list_feedback(admin_id=admin["id"])

        assert [s["id"] for s in swaps] == [second["id"], first["id"]]
        assert [s["id"] for s in pending] == [second["id"]]
        assert [f["swap_request_id"] for f in feedback] == [first["id"]]
        assert feedback[0]["is_public"] is False

    @pytest.mark.parametrize("listing", ["list_users", "list_skills", "list_swaps", "list_feedback"])
    async def test_listings_require_admin(self, requester, listing):
        with pytest.raises(ForbiddenError):
            await getattr(moderation_service, listing)(admin_id=requester["id"])

    async def test_log_rejects_malformed_target(self, admin):
        with pytest.raises(InvalidInputError, match="Invalid user id"):
            await moderation_service.list_admin_actions(admin_id=admin["id"], target_user_id='1" || "1')
