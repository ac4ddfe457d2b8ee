"""Feedback service for rating the other participant of a completed swap."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import ValidationError

from src.core import db_client
from src.core.config import constants
from src.core.errors import AlreadyReviewedError, ForbiddenError, InvalidInputError, InvalidStateError, NotFoundError
from src.core.logging import span
from src.domain.create_models import FeedbackCreate
from src.domain.feedback import RatingSummary
from src.domain.swap import SwapRequest, SwapStatus
from src.domain.update_models import FeedbackUpdate
from src.services import swap_service, swap_state_machine


logger = logging.getLogger(__name__)


def _present(record: dict[str, Any]) -> dict[str, Any]:
    return {**record, "is_recommended": bool(record.get("recommends_user"))}


def _round_average(values: list[int]) -> float:
    """Mean of ``values`` rounded half-up; 0 for an empty list."""
    if not values:
        return 0.0
    quantum = Decimal(1).scaleb(-constants.RATING_DECIMAL_PLACES)
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(quantum, rounding=ROUND_HALF_UP))


async def _get_feedback_record(*, feedback_id: str) -> dict[str, Any]:
    try:
        return await db_client.get_record(collection="feedback", record_id=feedback_id)
    except KeyError as e:
        msg = f"Feedback not found: {feedback_id}"
        raise NotFoundError(msg) from e


async def _get_own_feedback(*, feedback_id: str, reviewer_id: str) -> dict[str, Any]:
    record = await _get_feedback_record(feedback_id=feedback_id)
    if record["reviewer_id"] != reviewer_id:
        msg = f"Only the reviewer can modify feedback {feedback_id}"
        raise ForbiddenError(msg)
    return record


async def has_reviewed(*, swap_id: str, reviewer_id: str) -> bool:
    """Return True if the reviewer already left feedback on this swap."""
    existing = await db_client.get_first_record(
        collection="feedback",
        filter_query=(
            f'swap_request_id = "{db_client.sanitize_param(swap_id)}" && '
            f'reviewer_id = "{db_client.sanitize_param(reviewer_id)}"'
        ),
    )
    return existing is not None


async def submit_feedback(
    *,
    swap_id: str,
    reviewer_id: str,
    rating: int,
    comment: str | None = None,
    skill_rating: int | None = None,
    communication_rating: int | None = None,
    recommends_user: bool = True,
    is_public: bool = True,
    reviewee_id: str | None = None,
) -> dict[str, Any]:
    """Rate the other participant of a completed swap.

    The reviewee is always derived from the swap. An explicit ``reviewee_id``
    is only accepted when it names that same participant.

    Returns:
        Created feedback record

    Raises:
        InvalidInputError: If a rating is out of range or the comment is too long
        NotFoundError: If the swap does not exist
        InvalidStateError: If the swap is not completed
        ForbiddenError: If the reviewer is not a participant or targets anyone but the other participant
        AlreadyReviewedError: If the reviewer already rated this swap
    """
    with span("feedback_service.submit_feedback"):
        try:
            payload = FeedbackCreate(
                swap_request_id=swap_id,
                rating=rating,
                comment=comment,
                skill_rating=skill_rating,
                communication_rating=communication_rating,
                recommends_user=recommends_user,
                is_public=is_public,
                reviewee_id=reviewee_id,
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid feedback: {e.errors()[0]['msg']}") from e

        swap = await swap_state_machine.get_swap_record(swap_id=swap_id)

        if swap["status"] != SwapStatus.COMPLETED:
            msg = f"Feedback is only possible on completed swaps; swap request {swap_id} is {swap['status']}"
            raise InvalidStateError(msg)

        participants = (swap["requester_id"], swap["requestee_id"])
        if reviewer_id not in participants:
            msg = f"You are not a participant of swap request {swap_id}"
            raise ForbiddenError(msg)

        other_participant = SwapRequest.from_record(swap).other_participant(reviewer_id)
        if payload.reviewee_id is not None and payload.reviewee_id != other_participant:
            msg = "You can only review the other participant of the swap"
            raise ForbiddenError(msg)

        if await has_reviewed(swap_id=swap_id, reviewer_id=reviewer_id):
            msg = f"You already reviewed swap request {swap_id}"
            raise AlreadyReviewedError(msg)

        feedback_data = {
            **payload.model_dump(exclude={"reviewee_id"}),
            "reviewer_id": reviewer_id,
            "reviewee_id": other_participant,
            "created_at": db_client.now_iso(),
        }

        try:
            record = await db_client.create_record(collection="feedback", data=feedback_data)
        except db_client.DuplicateRecordError as e:
            msg = f"You already reviewed swap request {swap_id}"
            raise AlreadyReviewedError(msg) from e

        logger.info(
            "Submitted feedback",
            extra={
                "feedback_id": record["id"],
                "swap_id": swap_id,
                "reviewer_id": reviewer_id,
                "rating": payload.rating,
            },
        )
        return _present(record)


async def update_feedback(*, feedback_id: str, reviewer_id: str, **changes: Any) -> dict[str, Any]:
    """Change ratings, comment or flags of one's own feedback.

    Raises:
        InvalidInputError: If a changed field is out of range
        NotFoundError: If the feedback does not exist
        ForbiddenError: If the actor did not write this feedback
    """
    with span("feedback_service.update_feedback"):
        try:
            update = FeedbackUpdate(**changes)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid feedback update: {e.errors()[0]['msg']}") from e

        record = await _get_own_feedback(feedback_id=feedback_id, reviewer_id=reviewer_id)

        data = update.model_dump(exclude_unset=True)
        if "rating" in data and data["rating"] is None:
            msg = "Rating cannot be removed"
            raise InvalidInputError(msg)
        if "comment" in data and data["comment"] is not None:
            data["comment"] = data["comment"].strip() or None

        if not data:
            return _present(record)

        updated = await db_client.update_record(collection="feedback", record_id=feedback_id, data=data)
        logger.info("Updated feedback", extra={"feedback_id": feedback_id, "fields": sorted(data)})
        return _present(updated)


async def delete_feedback(*, feedback_id: str, reviewer_id: str) -> None:
    """Delete one's own feedback. The swap becomes reviewable again."""
    with span("feedback_service.delete_feedback"):
        await _get_own_feedback(feedback_id=feedback_id, reviewer_id=reviewer_id)
        await db_client.delete_record(collection="feedback", record_id=feedback_id)
        logger.info("Deleted feedback", extra={"feedback_id": feedback_id, "reviewer_id": reviewer_id})


async def list_pending_feedback(*, user_id: str) -> list[dict[str, Any]]:
    """Completed swaps of the user that the user has not reviewed yet."""
    with span("feedback_service.list_pending_feedback"):
        completed = await swap_service.list_completed_swaps(user_id=user_id)
        given = await db_client.list_records(
            collection="feedback",
            filter_query=f'reviewer_id = "{db_client.sanitize_param(user_id)}"',
        )
        reviewed = {record["swap_request_id"] for record in given}
        return [swap for swap in completed if swap["id"] not in reviewed]


async def list_feedback_given(*, user_id: str) -> list[dict[str, Any]]:
    """Feedback written by the user, newest first."""
    with span("feedback_service.list_feedback_given"):
        records = await db_client.list_records(
            collection="feedback",
            filter_query=f'reviewer_id = "{db_client.sanitize_param(user_id)}"',
            sort="-created_at",
        )
        return [_present(record) for record in records]


async def list_feedback_received(*, user_id: str) -> list[dict[str, Any]]:
    """All feedback addressed to the user, private entries included."""
    with span("feedback_service.list_feedback_received"):
        records = await db_client.list_records(
            collection="feedback",
            filter_query=f'reviewee_id = "{db_client.sanitize_param(user_id)}"',
            sort="-created_at",
        )
        return [_present(record) for record in records]


async def list_public_feedback(*, user_id: str) -> list[dict[str, Any]]:
    """Public feedback addressed to the user, as anyone else sees it."""
    with span("feedback_service.list_public_feedback"):
        records = await db_client.list_records(
            collection="feedback",
            filter_query=f'reviewee_id = "{db_client.sanitize_param(user_id)}" && is_public = "true"',
            sort="-created_at",
        )
        return [_present(record) for record in records]


async def list_feedback_for_swap(*, swap_id: str, actor_id: str) -> list[dict[str, Any]]:
    """Feedback on one swap, visible to its participants only.

    Raises:
        NotFoundError: If the swap does not exist
        ForbiddenError: If the actor is not a participant
    """
    with span("feedback_service.list_feedback_for_swap"):
        await swap_service.get_swap_request(swap_id=swap_id, actor_id=actor_id)
        records = await db_client.list_records(
            collection="feedback",
            filter_query=f'swap_request_id = "{db_client.sanitize_param(swap_id)}"',
            sort="created_at",
        )
        return [_present(record) for record in records]


async def aggregate_rating(*, user_id: str) -> RatingSummary:
    """Average the public ratings addressed to a user.

    Sub-rating averages only count feedback that carries that sub-rating.
    """
    with span("feedback_service.aggregate_rating"):
        records = await db_client.list_records(
            collection="feedback",
            filter_query=f'reviewee_id = "{db_client.sanitize_param(user_id)}" && is_public = "true"',
        )

        ratings = [record["rating"] for record in records]
        skill_ratings = [record["skill_rating"] for record in records if record.get("skill_rating") is not None]
        communication_ratings = [
            record["communication_rating"] for record in records if record.get("communication_rating") is not None
        ]

        return RatingSummary(
            average_rating=_round_average(ratings),
            average_skill_rating=_round_average(skill_ratings),
            average_communication_rating=_round_average(communication_ratings),
            count=len(ratings),
        )
