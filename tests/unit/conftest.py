"""Pytest configuration and fixtures for unit tests."""

import pytest

from src.domain.skill import SkillCategory, UserSkillType
from src.domain.user import UserRole
from src.services import identity_service
from tests.unit.mocks import InMemoryDBClient


_PATCHED_FUNCTIONS = (
    "create_record",
    "get_record",
    "update_record",
    "update_record_if",
    "delete_record",
    "delete_record_if",
    "list_records",
    "get_first_record",
    "count_records",
)


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient."""
    for name in _PATCHED_FUNCTIONS:
        monkeypatch.setattr(f"src.core.db_client.{name}", getattr(in_memory_db, name))
    return in_memory_db


@pytest.fixture
async def requester(patched_db):
    """An active user who sends swap requests."""
    return await identity_service.create_user(name="Riley", email="riley@example.com")


@pytest.fixture
async def requestee(patched_db):
    """An active user who receives swap requests."""
    return await identity_service.create_user(name="Emery", email="emery@example.com")


@pytest.fixture
async def outsider(patched_db):
    """An active user who takes part in no swap."""
    return await identity_service.create_user(name="Sam", email="sam@example.com")


@pytest.fixture
async def admin(patched_db):
    """A user with the admin role."""
    return await identity_service.create_user(name="Alex", email="alex@example.com", role=UserRole.ADMIN)


@pytest.fixture
async def guitar_skill(patched_db, requester):
    """A catalogued skill the requester offers."""
    skill = await identity_service.create_skill(
        name="Guitar", category=SkillCategory.MUSIC, created_by=requester["id"]
    )
    await identity_service.add_user_skill(
        user_id=requester["id"], skill_id=skill["id"], skill_type=UserSkillType.OFFERED
    )
    return skill


@pytest.fixture
async def excel_skill(patched_db, requestee):
    """A catalogued skill the requestee offers."""
    skill = await identity_service.create_skill(
        name="Excel", category=SkillCategory.BUSINESS, created_by=requestee["id"]
    )
    await identity_service.add_user_skill(
        user_id=requestee["id"], skill_id=skill["id"], skill_type=UserSkillType.OFFERED
    )
    return skill


@pytest.fixture
def guitar_for_excel():
    """Free-text descriptors for the classic Guitar-for-Excel swap."""
    return {
        "offered_skill": {"kind": "free_text", "label": "Guitar"},
        "wanted_skill": {"kind": "free_text", "label": "Excel"},
    }
