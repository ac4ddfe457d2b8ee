"""Update models for database operations."""

from pydantic import BaseModel, Field, field_validator

from src.core.config import constants


class SwapTransitionUpdate(BaseModel):
    """Body of an accept/reject/cancel/complete call."""

    response_message: str | None = Field(default=None, max_length=constants.MAX_RESPONSE_MESSAGE_LENGTH)

    @field_validator("response_message")
    @classmethod
    def strip_response_message(cls, v: str | None) -> str | None:
        """Trim the response and collapse empty strings to None."""
        if v is None:
            return None
        return v.strip() or None


class FeedbackUpdate(BaseModel):
    """Partial update of a feedback record by its reviewer."""

    rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    comment: str | None = Field(default=None, max_length=constants.MAX_COMMENT_LENGTH)
    skill_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    communication_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    recommends_user: bool | None = None
    is_public: bool | None = None
