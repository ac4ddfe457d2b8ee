"""User domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.core.config import constants


class UserRole(StrEnum):
    """User role on the platform."""

    ADMIN = "admin"
    USER = "user"


class UserStatusFilter(StrEnum):
    """Account states an admin can filter the user directory by."""

    ACTIVE = "active"
    BANNED = "banned"
    INACTIVE = "inactive"


class User(BaseModel):
    """User data transfer object."""

    id: str = Field(..., description="Unique user ID")
    name: str = Field(..., description="Display name of the user")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(default=UserRole.USER, description="User role on the platform")
    is_active: bool = Field(default=True, description="Whether the account is active")
    is_banned: bool = Field(default=False, description="Whether the account is banned by moderation")
    ban_reason: str | None = Field(default=None, description="Reason given when the user was banned")

    @field_validator("name")
    @classmethod
    def validate_name_usable(cls, v: str) -> str:
        """Validate name is non-empty and not too long."""
        v = v.strip()

        if not v:
            raise ValueError("Name cannot be empty")

        if len(v) > constants.MAX_USER_NAME_LENGTH:
            raise ValueError(f"Name too long (max {constants.MAX_USER_NAME_LENGTH} characters)")

        return v
