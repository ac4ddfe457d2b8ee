"""Feedback endpoints."""

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src.domain.create_models import FeedbackCreate
from src.domain.feedback import Feedback, RatingSummary
from src.domain.update_models import FeedbackUpdate
from src.interface.auth import require_actor
from src.services import feedback_service, identity_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


class UserFeedbackResponse(BaseModel):
    """Public feedback about a user together with its summary."""

    feedback: list[Feedback]
    summary: RatingSummary


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_feedback(body: FeedbackCreate, actor_id: str = Depends(require_actor)) -> Feedback:
    """Rate the other participant of a completed swap."""
    record = await feedback_service.submit_feedback(
        swap_id=body.swap_request_id,
        reviewer_id=actor_id,
        rating=body.rating,
        comment=body.comment,
        skill_rating=body.skill_rating,
        communication_rating=body.communication_rating,
        recommends_user=body.recommends_user,
        is_public=body.is_public,
        reviewee_id=body.reviewee_id,
    )
    return Feedback(**record)


@router.put("/{feedback_id}")
async def update_feedback(
    feedback_id: str, body: FeedbackUpdate, actor_id: str = Depends(require_actor)
) -> Feedback:
    record = await feedback_service.update_feedback(
        feedback_id=feedback_id, reviewer_id=actor_id, **body.model_dump(exclude_unset=True)
    )
    return Feedback(**record)


@router.delete("/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feedback(feedback_id: str, actor_id: str = Depends(require_actor)) -> Response:
    await feedback_service.delete_feedback(feedback_id=feedback_id, reviewer_id=actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/given")
async def list_given(actor_id: str = Depends(require_actor)) -> list[Feedback]:
    records = await feedback_service.list_feedback_given(user_id=actor_id)
    return [Feedback(**record) for record in records]


@router.get("/received")
async def list_received(actor_id: str = Depends(require_actor)) -> list[Feedback]:
    """All feedback about the caller, private entries included."""
    records = await feedback_service.list_feedback_received(user_id=actor_id)
    return [Feedback(**record) for record in records]


@router.get("/user/{user_id}")
async def list_for_user(user_id: str, _actor_id: str = Depends(require_actor)) -> UserFeedbackResponse:
    """Public feedback about any user, with rating averages."""
    await identity_service.get_user(user_id=user_id)
    records = await feedback_service.list_public_feedback(user_id=user_id)
    summary = await feedback_service.aggregate_rating(user_id=user_id)
    return UserFeedbackResponse(feedback=[Feedback(**record) for record in records], summary=summary)


@router.get("/swap/{swap_id}")
async def list_for_swap(swap_id: str, actor_id: str = Depends(require_actor)) -> list[Feedback]:
    records = await feedback_service.list_feedback_for_swap(swap_id=swap_id, actor_id=actor_id)
    return [Feedback(**record) for record in records]
