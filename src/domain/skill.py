"""Skill catalog models and skill descriptors used by swap requests."""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, StringConstraints, TypeAdapter

from src.core.config import constants


class SkillCategory(StrEnum):
    """Catalog categories for skills."""

    PROGRAMMING = "Programming"
    DESIGN = "Design"
    MARKETING = "Marketing"
    BUSINESS = "Business"
    WRITING = "Writing"
    LANGUAGES = "Languages"
    MUSIC = "Music"
    PHOTOGRAPHY = "Photography"
    COOKING = "Cooking"
    FITNESS = "Fitness"
    CRAFTS = "Crafts"
    TEACHING = "Teaching"
    OTHER = "Other"


class SkillStatus(StrEnum):
    """Moderation status of a catalogued skill."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class UserSkillType(StrEnum):
    """Whether a user offers or wants a skill."""

    OFFERED = "offered"
    WANTED = "wanted"


class ProficiencyLevel(StrEnum):
    """Self-declared proficiency for an offered skill."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Skill(BaseModel):
    """Catalogued skill."""

    id: str
    name: str = Field(..., min_length=1, max_length=constants.MAX_SKILL_NAME_LENGTH)
    category: SkillCategory
    description: str | None = Field(default=None, max_length=constants.MAX_SKILL_DESCRIPTION_LENGTH)
    status: SkillStatus = SkillStatus.APPROVED
    created_by: str


class UserSkill(BaseModel):
    """Join record assigning a catalogued skill to a user."""

    id: str
    user_id: str
    skill_id: str
    type: UserSkillType
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    notes: str | None = Field(default=None, max_length=constants.MAX_USER_SKILL_NOTES_LENGTH)
    is_active: bool = True


class SkillKind(StrEnum):
    """Tag of a skill descriptor."""

    STRUCTURED = "structured"
    FREE_TEXT = "free_text"


class StructuredSkill(BaseModel):
    """Reference to a catalogued skill, validated against the owner's offered skills."""

    kind: Literal["structured"] = "structured"
    skill_id: str = Field(..., min_length=1)

    @property
    def value(self) -> str:
        return self.skill_id


class FreeTextSkill(BaseModel):
    """Free-text skill label; never cross-checked against the catalog."""

    kind: Literal["free_text"] = "free_text"
    label: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=constants.MAX_SKILL_LABEL_LENGTH)
    ]

    @property
    def value(self) -> str:
        return self.label


SkillDescriptor = Annotated[StructuredSkill | FreeTextSkill, Field(discriminator="kind")]

_descriptor_adapter: TypeAdapter[StructuredSkill | FreeTextSkill] = TypeAdapter(SkillDescriptor)


def parse_skill_descriptor(data: Any) -> StructuredSkill | FreeTextSkill:
    """Validate raw input (dict or descriptor) into a skill descriptor."""
    return _descriptor_adapter.validate_python(data)


def descriptor_to_fields(prefix: str, descriptor: StructuredSkill | FreeTextSkill) -> dict[str, str]:
    """Flatten a descriptor into ``<prefix>_kind`` / ``<prefix>`` storage columns."""
    return {f"{prefix}_kind": descriptor.kind, prefix: descriptor.value}


def descriptor_from_fields(record: dict[str, Any], prefix: str) -> StructuredSkill | FreeTextSkill:
    """Rebuild a descriptor from its storage columns."""
    if record[f"{prefix}_kind"] == SkillKind.STRUCTURED:
        return StructuredSkill(skill_id=record[prefix])
    return FreeTextSkill(label=record[prefix])
