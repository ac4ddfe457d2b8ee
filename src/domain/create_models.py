"""Pydantic models for creating records in database."""

from pydantic import BaseModel, Field, field_validator

from src.core.config import constants
from src.domain.skill import ProficiencyLevel, SkillCategory, SkillDescriptor, UserSkillType
from src.domain.user import UserRole


def _strip_optional(v: str | None) -> str | None:
    """Trim text and collapse empty strings to None."""
    if v is None:
        return None
    v = v.strip()
    return v or None


class UserCreate(BaseModel):
    """Pydantic model for creating a user record."""

    name: str = Field(..., min_length=1, max_length=constants.MAX_USER_NAME_LENGTH)
    email: str = Field(..., description="Email address")
    role: UserRole = Field(default=UserRole.USER, description="User role on the platform")

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        """Validate the email has a local part and a domain."""
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            msg = "Email must look like name@example.com"
            raise ValueError(msg)
        return v


class SkillCreate(BaseModel):
    """Pydantic model for creating a catalogued skill."""

    name: str = Field(..., min_length=1, max_length=constants.MAX_SKILL_NAME_LENGTH)
    category: SkillCategory
    description: str | None = Field(default=None, max_length=constants.MAX_SKILL_DESCRIPTION_LENGTH)


class UserSkillAdd(BaseModel):
    """Pydantic model for listing a catalogued skill on one's own profile."""

    type: UserSkillType
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    notes: str | None = Field(default=None, max_length=constants.MAX_USER_SKILL_NOTES_LENGTH)

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        """Trim notes and collapse empty strings to None."""
        return _strip_optional(v)


class UserSkillCreate(UserSkillAdd):
    """Pydantic model for assigning a catalogued skill to a user."""

    skill_id: str


class SwapRequestCreate(BaseModel):
    """Pydantic model for proposing a swap."""

    requestee_id: str = Field(..., min_length=1)
    offered_skill: SkillDescriptor
    wanted_skill: SkillDescriptor
    message: str | None = Field(default=None, max_length=constants.MAX_MESSAGE_LENGTH)

    @field_validator("message")
    @classmethod
    def normalize_message(cls, v: str | None) -> str | None:
        """Trim the message and collapse empty strings to None."""
        return _strip_optional(v)


class FeedbackCreate(BaseModel):
    """Pydantic model for rating the other participant of a completed swap."""

    swap_request_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=constants.MIN_RATING, le=constants.MAX_RATING)
    comment: str | None = Field(default=None, max_length=constants.MAX_COMMENT_LENGTH)
    skill_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    communication_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    recommends_user: bool = True
    is_public: bool = True
    reviewee_id: str | None = Field(
        default=None, description="Optional; must equal the other participant when given"
    )

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        """Trim the comment and collapse empty strings to None."""
        return _strip_optional(v)


class AdminActionCreate(BaseModel):
    """Pydantic model for a moderation request body."""

    reason: str = Field(..., min_length=1, max_length=constants.MAX_REASON_LENGTH)

    @field_validator("reason")
    @classmethod
    def validate_reason_not_blank(cls, v: str) -> str:
        """Reject whitespace-only reasons."""
        v = v.strip()
        if not v:
            msg = "Reason cannot be empty"
            raise ValueError(msg)
        return v
