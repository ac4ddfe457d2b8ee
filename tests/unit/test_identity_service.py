"""Unit tests for identity_service module."""

import pytest

from src.core.errors import InvalidInputError, NotFoundError
from src.domain.skill import SkillCategory, SkillStatus, UserSkillType
from src.domain.user import UserRole
from src.services import identity_service, swap_service


@pytest.mark.unit
class TestUsers:
    """Tests for user lookups and registration."""

    async def test_create_user_defaults(self, requester):
        assert requester["role"] == UserRole.USER
        assert requester["is_active"] is True
        assert requester["is_banned"] is False

    async def test_duplicate_email(self, requester):
        with pytest.raises(InvalidInputError, match="already registered"):
            await identity_service.create_user(name="Other", email="RILEY@example.com")

    async def test_invalid_email(self, patched_db):
        with pytest.raises(InvalidInputError):
            await identity_service.create_user(name="Other", email="riley")

    async def test_get_missing_user(self, patched_db):
        with pytest.raises(NotFoundError):
            await identity_service.get_user(user_id="9999")

    async def test_exists(self, requester):
        assert await identity_service.exists(user_id=requester["id"]) is True
        assert await identity_service.exists(user_id="9999") is False

    async def test_active_and_not_banned(self, requester, patched_db):
        assert await identity_service.is_active_and_not_banned(user_id=requester["id"]) is True

        await patched_db.update_record("users", requester["id"], {"is_banned": True})

        assert await identity_service.is_active_and_not_banned(user_id=requester["id"]) is False
        assert await identity_service.is_active_and_not_banned(user_id="9999") is False

    async def test_is_admin(self, admin, requester):
        assert await identity_service.is_admin(user_id=admin["id"]) is True
        assert await identity_service.is_admin(user_id=requester["id"]) is False


@pytest.mark.unit
class TestSkills:
    """Tests for the skill catalog and user skill assignments."""

    async def test_offered_skill_ids(self, requester, guitar_skill, patched_db):
        wanted = await identity_service.create_skill(
            name="Piano", category=SkillCategory.MUSIC, created_by=requester["id"]
        )
        await identity_service.add_user_skill(
            user_id=requester["id"], skill_id=wanted["id"], skill_type=UserSkillType.WANTED
        )

        assert await identity_service.offered_skill_ids(user_id=requester["id"]) == {guitar_skill["id"]}

    async def test_inactive_assignment_not_offered(self, requester, guitar_skill, patched_db):
        [assignment] = await identity_service.list_user_skills(user_id=requester["id"])
        await patched_db.update_record("user_skills", assignment["id"], {"is_active": False})

        assert await identity_service.offered_skill_ids(user_id=requester["id"]) == set()

    async def test_duplicate_assignment(self, requester, guitar_skill):
        with pytest.raises(InvalidInputError):
            await identity_service.add_user_skill(
                user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.OFFERED
            )

    async def test_assignment_unknown_skill(self, requester):
        with pytest.raises(NotFoundError):
            await identity_service.add_user_skill(
                user_id=requester["id"], skill_id="9999", skill_type=UserSkillType.OFFERED
            )

    async def test_skill_name_too_long(self, requester):
        with pytest.raises(InvalidInputError):
            await identity_service.create_skill(name="x" * 51, category=SkillCategory.OTHER, created_by=requester["id"])

    async def test_list_user_skills_by_type(self, requester, guitar_skill):
        offered = await identity_service.list_user_skills(user_id=requester["id"], skill_type=UserSkillType.OFFERED)
        wanted = await identity_service.list_user_skills(user_id=requester["id"], skill_type=UserSkillType.WANTED)

        assert [s["skill_id"] for s in offered] == [guitar_skill["id"]]
        assert wanted == []

    async def test_duplicate_skill_name(self, requester, guitar_skill):
        with pytest.raises(InvalidInputError, match="already exists"):
            await identity_service.create_skill(name="guitar", category=SkillCategory.MUSIC, created_by=requester["id"])

    async def test_list_skills_approved_only(self, requester, guitar_skill, excel_skill):
        await identity_service.create_skill(
            name="Pottery", category=SkillCategory.CRAFTS, created_by=requester["id"], status=SkillStatus.PENDING
        )
        await identity_service.create_skill(
            name="Bass", category=SkillCategory.MUSIC, description="Electric guitar's cousin", created_by=requester["id"]
        )

        everything = await identity_service.list_skills()
        music = await identity_service.list_skills(category=SkillCategory.MUSIC)
        searched = await identity_service.list_skills(search="GUITAR")

        assert [s["name"] for s in everything] == ["Bass", "Excel", "Guitar"]
        assert [s["name"] for s in music] == ["Bass", "Guitar"]
        assert [s["name"] for s in searched] == ["Bass", "Guitar"]

    async def test_unapproved_skill_cannot_be_listed_on_profile(self, requester):
        pottery = await identity_service.create_skill(
            name="Pottery", category=SkillCategory.CRAFTS, created_by=requester["id"], status=SkillStatus.PENDING
        )

        with pytest.raises(InvalidInputError, match="not approved"):
            await identity_service.add_user_skill(
                user_id=requester["id"], skill_id=pottery["id"], skill_type=UserSkillType.OFFERED
            )

    async def test_remove_and_add_again(self, requester, guitar_skill):
        removed = await identity_service.remove_user_skill(
            user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.OFFERED
        )

        assert removed["is_active"] is False
        assert await identity_service.offered_skill_ids(user_id=requester["id"]) == set()

        restored = await identity_service.add_user_skill(
            user_id=requester["id"],
            skill_id=guitar_skill["id"],
            skill_type=UserSkillType.OFFERED,
            proficiency_level="expert",
        )

        assert restored["id"] == removed["id"]
        assert restored["is_active"] is True
        assert restored["proficiency_level"] == "expert"
        assert await identity_service.offered_skill_ids(user_id=requester["id"]) == {guitar_skill["id"]}

    async def test_remove_skill_not_listed(self, requester, guitar_skill):
        with pytest.raises(NotFoundError):
            await identity_service.remove_user_skill(
                user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.WANTED
            )

        await identity_service.remove_user_skill(
            user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.OFFERED
        )
        with pytest.raises(NotFoundError):
            await identity_service.remove_user_skill(
                user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.OFFERED
            )

    async def test_removed_skill_blocks_structured_swap(self, requester, requestee, guitar_skill):
        await identity_service.remove_user_skill(
            user_id=requester["id"], skill_id=guitar_skill["id"], skill_type=UserSkillType.OFFERED
        )

        with pytest.raises(InvalidInputError, match="You do not offer skill"):
            await swap_service.create_swap_request(
                requester_id=requester["id"],
                requestee_id=requestee["id"],
                offered_skill={"kind": "structured", "skill_id": guitar_skill["id"]},
                wanted_skill={"kind": "free_text", "label": "Excel"},
            )
