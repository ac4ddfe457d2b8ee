"""Identity directory: users and their catalogued skills."""

import logging
from typing import Any

from pydantic import ValidationError

from src.core import db_client
from src.core.errors import InvalidInputError, NotFoundError
from src.core.logging import span
from src.domain.create_models import SkillCreate, UserCreate, UserSkillCreate
from src.domain.skill import SkillCategory, SkillStatus, UserSkillType
from src.domain.user import UserRole


logger = logging.getLogger(__name__)


async def get_user(*, user_id: str) -> dict[str, Any]:
    """Get a user by ID.

    Raises:
        NotFoundError: If the user does not exist
    """
    try:
        return await db_client.get_record(collection="users", record_id=user_id)
    except KeyError as e:
        msg = f"User not found: {user_id}"
        raise NotFoundError(msg) from e


async def get_user_or_none(*, user_id: str) -> dict[str, Any] | None:
    """Get a user by ID, or None if it does not exist."""
    try:
        return await db_client.get_record(collection="users", record_id=user_id)
    except KeyError:
        return None


async def exists(*, user_id: str) -> bool:
    """Return True if the user exists."""
    return await get_user_or_none(user_id=user_id) is not None


async def is_active_and_not_banned(*, user_id: str) -> bool:
    """Return True if the user exists, is active and is not banned."""
    user = await get_user_or_none(user_id=user_id)
    if user is None:
        return False
    return bool(user.get("is_active")) and not user.get("is_banned")


async def is_admin(*, user_id: str) -> bool:
    """Return True if the user exists and has the admin role."""
    user = await get_user_or_none(user_id=user_id)
    return user is not None and user.get("role") == UserRole.ADMIN


async def offered_skill_ids(*, user_id: str) -> set[str]:
    """Return the ids of catalogued skills the user actively offers."""
    with span("identity_service.offered_skill_ids"):
        records = await db_client.list_records(
            collection="user_skills",
            filter_query=(
                f'user_id = "{db_client.sanitize_param(user_id)}" && '
                f'type = "{UserSkillType.OFFERED}" && is_active = "true"'
            ),
        )
        return {record["skill_id"] for record in records}


async def create_user(*, name: str, email: str, role: UserRole = UserRole.USER) -> dict[str, Any]:
    """Register a user in the directory.

    Raises:
        InvalidInputError: If the name or email is malformed, or the email is taken
    """
    with span("identity_service.create_user"):
        try:
            payload = UserCreate(name=name, email=email, role=role)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid user: {e.errors()[0]['msg']}") from e

        user_data = {
            **payload.model_dump(mode="json"),
            "is_active": True,
            "is_banned": False,
        }

        try:
            record = await db_client.create_record(collection="users", data=user_data)
        except db_client.DuplicateRecordError as e:
            msg = f"Email already registered: {payload.email}"
            raise InvalidInputError(msg) from e

        logger.info("Created user", extra={"user_id": record["id"], "role": payload.role})
        return record


async def get_skill(*, skill_id: str) -> dict[str, Any]:
    """Get a catalogued skill by ID.

    Raises:
        NotFoundError: If the skill does not exist
    """
    try:
        return await db_client.get_record(collection="skills", record_id=skill_id)
    except KeyError as e:
        msg = f"Skill not found: {skill_id}"
        raise NotFoundError(msg) from e


async def list_skills(*, category: SkillCategory | None = None, search: str | None = None) -> list[dict[str, Any]]:
    """List approved catalog skills by name, optionally narrowed by category or a search term.

    The search term matches name or description, case-insensitively.
    """
    with span("identity_service.list_skills"):
        filter_query = f'status = "{SkillStatus.APPROVED}"'
        if category:
            filter_query += f' && category = "{SkillCategory(category)}"'

        records = await db_client.list_records(collection="skills", filter_query=filter_query, sort="name")

        term = (search or "").strip().casefold()
        if not term:
            return records
        return [
            record
            for record in records
            if term in record["name"].casefold() or term in (record.get("description") or "").casefold()
        ]


async def _find_skill_by_name(name: str) -> dict[str, Any] | None:
    # Free text stays out of filter queries
    wanted = name.strip().casefold()
    for record in await db_client.list_records(collection="skills"):
        if record["name"].casefold() == wanted:
            return record
    return None


async def create_skill(
    *,
    name: str,
    category: str,
    created_by: str,
    description: str | None = None,
    status: SkillStatus = SkillStatus.APPROVED,
) -> dict[str, Any]:
    """Add a skill to the catalog.

    Raises:
        InvalidInputError: If the input is malformed or a skill with this name exists
        NotFoundError: If the creator does not exist
    """
    with span("identity_service.create_skill"):
        try:
            payload = SkillCreate(name=name, category=category, description=description)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid skill: {e.errors()[0]['msg']}") from e

        await get_user(user_id=created_by)

        if await _find_skill_by_name(payload.name) is not None:
            msg = f"Skill already exists: {payload.name}"
            raise InvalidInputError(msg)

        record = await db_client.create_record(
            collection="skills",
            data={**payload.model_dump(mode="json"), "status": status, "created_by": created_by},
        )
        logger.info("Created skill", extra={"skill_id": record["id"], "skill_name": payload.name})
        return record


async def _find_user_skill(*, user_id: str, skill_id: str, skill_type: UserSkillType) -> dict[str, Any] | None:
    return await db_client.get_first_record(
        collection="user_skills",
        filter_query=(
            f'user_id = "{db_client.sanitize_param(user_id)}" && '
            f'skill_id = "{db_client.sanitize_param(skill_id)}" && '
            f'type = "{UserSkillType(skill_type)}"'
        ),
    )


async def add_user_skill(
    *,
    user_id: str,
    skill_id: str,
    skill_type: UserSkillType,
    proficiency_level: str = "intermediate",
    notes: str | None = None,
) -> dict[str, Any]:
    """Declare that a user offers or wants a catalogued skill.

    A previously removed assignment of the same skill and type is reactivated
    with the new details.

    Raises:
        NotFoundError: If the user or skill does not exist
        InvalidInputError: If the input is malformed, the skill is not approved
            or the user already lists it
    """
    with span("identity_service.add_user_skill"):
        try:
            payload = UserSkillCreate(
                skill_id=skill_id, type=skill_type, proficiency_level=proficiency_level, notes=notes
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid user skill: {e.errors()[0]['msg']}") from e

        await get_user(user_id=user_id)
        skill = await get_skill(skill_id=skill_id)
        if skill["status"] != SkillStatus.APPROVED:
            msg = f"Skill {skill_id} is not approved"
            raise InvalidInputError(msg)

        details = payload.model_dump(mode="json", include={"proficiency_level", "notes"})
        duplicate_msg = f"User {user_id} already lists skill {skill_id} as {payload.type}"

        existing = await _find_user_skill(user_id=user_id, skill_id=skill_id, skill_type=payload.type)
        if existing is not None:
            record = await db_client.update_record_if(
                collection="user_skills",
                record_id=existing["id"],
                expected={"is_active": False},
                data={**details, "is_active": True},
            )
            if record is None:
                raise InvalidInputError(duplicate_msg)
        else:
            try:
                record = await db_client.create_record(
                    collection="user_skills",
                    data={**payload.model_dump(mode="json"), "user_id": user_id, "is_active": True},
                )
            except db_client.DuplicateRecordError as e:
                raise InvalidInputError(duplicate_msg) from e

        logger.info(
            "Added user skill",
            extra={"user_id": user_id, "skill_id": skill_id, "type": payload.type},
        )
        return record


async def remove_user_skill(*, user_id: str, skill_id: str, skill_type: UserSkillType) -> dict[str, Any]:
    """Take a skill off the user's offered or wanted list.

    The assignment is deactivated rather than deleted, so the skill stops
    counting as offered for new structured swaps.

    Raises:
        NotFoundError: If the skill does not exist or the user does not currently
            list it with this type
    """
    with span("identity_service.remove_user_skill"):
        await get_skill(skill_id=skill_id)
        existing = await _find_user_skill(user_id=user_id, skill_id=skill_id, skill_type=skill_type)
        record = None
        if existing is not None:
            record = await db_client.update_record_if(
                collection="user_skills",
                record_id=existing["id"],
                expected={"is_active": True},
                data={"is_active": False},
            )
        if record is None:
            msg = f"Skill {skill_id} is not in your {UserSkillType(skill_type)} list"
            raise NotFoundError(msg)

        logger.info(
            "Removed user skill",
            extra={"user_id": user_id, "skill_id": skill_id, "type": skill_type},
        )
        return record


async def list_user_skills(*, user_id: str, skill_type: UserSkillType | None = None) -> list[dict[str, Any]]:
    """List the active skill assignments of a user."""
    filter_query = f'user_id = "{db_client.sanitize_param(user_id)}" && is_active = "true"'
    if skill_type:
        filter_query += f' && type = "{skill_type}"'

    return await db_client.list_records(collection="user_skills", filter_query=filter_query)
