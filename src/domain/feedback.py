"""Feedback domain models."""

from pydantic import BaseModel, Field

from src.core.config import constants


class Feedback(BaseModel):
    """Feedback data transfer object."""

    id: str = Field(..., description="Unique feedback ID")
    swap_request_id: str = Field(..., description="Completed swap this feedback is about")
    reviewer_id: str = Field(..., description="Participant who wrote the feedback")
    reviewee_id: str = Field(..., description="The other participant of the swap")
    rating: int = Field(..., ge=constants.MIN_RATING, le=constants.MAX_RATING)
    skill_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    communication_rating: int | None = Field(default=None, ge=constants.MIN_RATING, le=constants.MAX_RATING)
    comment: str | None = Field(default=None, max_length=constants.MAX_COMMENT_LENGTH)
    recommends_user: bool = Field(default=True, description="Whether the reviewer recommends the reviewee")
    is_public: bool = Field(default=True, description="Visible to users other than reviewer and reviewee")
    is_recommended: bool | None = Field(default=None, description="Alias of recommends_user for API consumers")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")


class RatingSummary(BaseModel):
    """Aggregate of the public feedback addressed to one user."""

    average_rating: float = 0
    average_skill_rating: float = 0
    average_communication_rating: float = 0
    count: int = 0
