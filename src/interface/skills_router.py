"""Skill catalog endpoints and the caller's offered and wanted lists."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from src.domain.create_models import SkillCreate, UserSkillAdd
from src.domain.skill import Skill, SkillCategory, UserSkill, UserSkillType
from src.interface.auth import require_actor
from src.services import identity_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/skills", tags=["skills"])


@router.get("")
async def list_skills(
    category: SkillCategory | None = None,
    search: str | None = None,
    _actor_id: str = Depends(require_actor),
) -> list[Skill]:
    """Approved catalog skills, alphabetically."""
    records = await identity_service.list_skills(category=category, search=search)
    return [Skill(**record) for record in records]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_skill(body: SkillCreate, actor_id: str = Depends(require_actor)) -> Skill:
    record = await identity_service.create_skill(
        name=body.name, category=body.category, description=body.description, created_by=actor_id
    )
    logger.info("skill_created", extra={"skill_id": record["id"], "actor_id": actor_id})
    return Skill(**record)


@router.get("/mine")
async def list_my_skills(
    skill_type: UserSkillType | None = Query(default=None, alias="type"),
    actor_id: str = Depends(require_actor),
) -> list[UserSkill]:
    """The caller's active offered and wanted skills."""
    records = await identity_service.list_user_skills(user_id=actor_id, skill_type=skill_type)
    return [UserSkill(**record) for record in records]


@router.post("/{skill_id}/add", status_code=status.HTTP_201_CREATED)
async def add_skill(skill_id: str, body: UserSkillAdd, actor_id: str = Depends(require_actor)) -> UserSkill:
    """List a catalogued skill as offered or wanted."""
    record = await identity_service.add_user_skill(
        user_id=actor_id,
        skill_id=skill_id,
        skill_type=body.type,
        proficiency_level=body.proficiency_level,
        notes=body.notes,
    )
    return UserSkill(**record)


@router.delete("/{skill_id}/remove", status_code=status.HTTP_204_NO_CONTENT)
async def remove_skill(
    skill_id: str,
    skill_type: UserSkillType = Query(alias="type"),
    actor_id: str = Depends(require_actor),
) -> Response:
    await identity_service.remove_user_skill(user_id=actor_id, skill_id=skill_id, skill_type=skill_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
