"""Swap request service for proposing, listing and moving swaps through their lifecycle."""

import logging
from typing import Any

from pydantic import ValidationError

from src.core import db_client
from src.core.errors import (
    DuplicateActiveError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    SelfRequestError,
)
from src.core.logging import span
from src.domain.create_models import SwapRequestCreate
from src.domain.skill import FreeTextSkill, StructuredSkill, descriptor_to_fields
from src.domain.swap import ACTIVE_STATUSES, DELETABLE_STATUSES, SwapAction, SwapDirection, SwapStatus
from src.domain.update_models import SwapTransitionUpdate
from src.services import identity_service, swap_state_machine


logger = logging.getLogger(__name__)

_ACTIVE_FILTER = "(" + " || ".join(f'status = "{status}"' for status in sorted(ACTIVE_STATUSES)) + ")"


def _with_viewer(record: dict[str, Any], viewer_id: str) -> dict[str, Any]:
    return {**record, "is_requester": record["requester_id"] == viewer_id}


def _descriptor_fields(
    offered_skill: StructuredSkill | FreeTextSkill, wanted_skill: StructuredSkill | FreeTextSkill
) -> dict[str, str]:
    return {
        **descriptor_to_fields("offered_skill", offered_skill),
        **descriptor_to_fields("wanted_skill", wanted_skill),
    }


async def _check_participant_eligible(*, user_id: str, role: str) -> None:
    user = await identity_service.get_user(user_id=user_id)
    if not user.get("is_active") or user.get("is_banned"):
        msg = f"The {role} account {user_id} cannot take part in swaps"
        raise ForbiddenError(msg)


async def _check_structured_skills(
    *,
    requester_id: str,
    requestee_id: str,
    offered_skill: StructuredSkill | FreeTextSkill,
    wanted_skill: StructuredSkill | FreeTextSkill,
) -> None:
    """Cross-check catalogued skills against what each side currently offers."""
    if isinstance(offered_skill, StructuredSkill):
        offered_by_requester = await identity_service.offered_skill_ids(user_id=requester_id)
        if offered_skill.skill_id not in offered_by_requester:
            msg = f"You do not offer skill {offered_skill.skill_id}"
            raise InvalidInputError(msg)

    # The requester asks to receive something the requestee offers
    if isinstance(wanted_skill, StructuredSkill):
        offered_by_requestee = await identity_service.offered_skill_ids(user_id=requestee_id)
        if wanted_skill.skill_id not in offered_by_requestee:
            msg = f"User {requestee_id} does not offer skill {wanted_skill.skill_id}"
            raise InvalidInputError(msg)


async def find_active_duplicate(
    *,
    requester_id: str,
    requestee_id: str,
    offered_skill: StructuredSkill | FreeTextSkill,
    wanted_skill: StructuredSkill | FreeTextSkill,
) -> dict[str, Any] | None:
    """Return the active swap with the same participants and skills, if any."""
    candidates = await db_client.list_records(
        collection="swap_requests",
        filter_query=(
            f'requester_id = "{db_client.sanitize_param(requester_id)}" && '
            f'requestee_id = "{db_client.sanitize_param(requestee_id)}" && '
            f"{_ACTIVE_FILTER}"
        ),
    )
    # Labels are compared here rather than in the filter since they are arbitrary text
    wanted = _descriptor_fields(offered_skill, wanted_skill)
    for candidate in candidates:
        if all(candidate.get(key) == value for key, value in wanted.items()):
            return candidate
    return None


async def create_swap_request(
    *,
    requester_id: str,
    requestee_id: str,
    offered_skill: StructuredSkill | FreeTextSkill | dict[str, Any],
    wanted_skill: StructuredSkill | FreeTextSkill | dict[str, Any],
    message: str | None = None,
) -> dict[str, Any]:
    """Propose a swap from requester to requestee.

    Guards run in order: input, self request, identities, catalogued skills,
    active duplicate.

    Returns:
        Created swap record, seen from the requester

    Raises:
        InvalidInputError: If the input is malformed or a catalogued skill is not offered
        SelfRequestError: If requester and requestee are the same user
        NotFoundError: If either user does not exist
        ForbiddenError: If either user is inactive or banned
        DuplicateActiveError: If an identical pending or accepted swap already exists
    """
    with span("swap_service.create_swap_request"):
        try:
            payload = SwapRequestCreate(
                requestee_id=requestee_id,
                offered_skill=offered_skill,
                wanted_skill=wanted_skill,
                message=message,
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid swap request: {e.errors()[0]['msg']}") from e

        if requester_id == payload.requestee_id:
            msg = "You cannot send a swap request to yourself"
            raise SelfRequestError(msg)

        await _check_participant_eligible(user_id=requester_id, role="requester")
        await _check_participant_eligible(user_id=payload.requestee_id, role="requestee")

        await _check_structured_skills(
            requester_id=requester_id,
            requestee_id=payload.requestee_id,
            offered_skill=payload.offered_skill,
            wanted_skill=payload.wanted_skill,
        )

        duplicate = await find_active_duplicate(
            requester_id=requester_id,
            requestee_id=payload.requestee_id,
            offered_skill=payload.offered_skill,
            wanted_skill=payload.wanted_skill,
        )
        if duplicate:
            msg = f"An active swap request already exists for these skills: {duplicate['id']}"
            raise DuplicateActiveError(msg)

        swap_data = {
            "requester_id": requester_id,
            "requestee_id": payload.requestee_id,
            **_descriptor_fields(payload.offered_skill, payload.wanted_skill),
            "message": payload.message,
            "status": SwapStatus.PENDING,
            "created_at": db_client.now_iso(),
        }

        try:
            record = await db_client.create_record(collection="swap_requests", data=swap_data)
        except db_client.DuplicateRecordError as e:
            logger.warning(
                "Duplicate swap request caught at insert",
                extra={"requester_id": requester_id, "requestee_id": payload.requestee_id},
            )
            msg = "An active swap request already exists for these skills"
            raise DuplicateActiveError(msg) from e

        logger.info(
            "Created swap request",
            extra={
                "swap_id": record["id"],
                "requester_id": requester_id,
                "requestee_id": payload.requestee_id,
            },
        )
        return _with_viewer(record, requester_id)


async def get_swap_request(*, swap_id: str, actor_id: str) -> dict[str, Any]:
    """Get a swap request as seen by one of its participants.

    Raises:
        NotFoundError: If the swap does not exist
        ForbiddenError: If the actor is not a participant
    """
    with span("swap_service.get_swap_request"):
        record = await swap_state_machine.get_swap_record(swap_id=swap_id)
        if actor_id not in (record["requester_id"], record["requestee_id"]):
            msg = f"You are not a participant of swap request {swap_id}"
            raise ForbiddenError(msg)
        return _with_viewer(record, actor_id)


async def list_swap_requests(
    *,
    user_id: str,
    direction: SwapDirection = SwapDirection.BOTH,
    status: SwapStatus | None = None,
) -> list[dict[str, Any]]:
    """List a user's swap requests, newest first."""
    with span("swap_service.list_swap_requests"):
        safe_user_id = db_client.sanitize_param(user_id)
        direction = SwapDirection(direction)
        if direction == SwapDirection.SENT:
            filter_query = f'requester_id = "{safe_user_id}"'
        elif direction == SwapDirection.RECEIVED:
            filter_query = f'requestee_id = "{safe_user_id}"'
        else:
            filter_query = f'(requester_id = "{safe_user_id}" || requestee_id = "{safe_user_id}")'

        if status:
            filter_query += f' && status = "{SwapStatus(status)}"'

        records = await db_client.list_records(
            collection="swap_requests",
            filter_query=filter_query,
            sort="-created_at",
        )
        return [_with_viewer(record, user_id) for record in records]


async def list_completed_swaps(*, user_id: str) -> list[dict[str, Any]]:
    """List completed swaps the user took part in, newest completion first."""
    safe_user_id = db_client.sanitize_param(user_id)
    records = await db_client.list_records(
        collection="swap_requests",
        filter_query=(
            f'(requester_id = "{safe_user_id}" || requestee_id = "{safe_user_id}") && '
            f'status = "{SwapStatus.COMPLETED}"'
        ),
        sort="-completed_at",
    )
    return [_with_viewer(record, user_id) for record in records]


async def transition_swap_request(
    *,
    swap_id: str,
    actor_id: str,
    action: SwapAction | str,
    response_message: str | None = None,
) -> dict[str, Any]:
    """Accept, reject, cancel or complete a swap request.

    Raises:
        InvalidInputError: If the action is unknown or the response is too long
        NotFoundError: If the swap does not exist
        ForbiddenError: If the actor may not perform this action
        InvalidStateError: If the action is not legal from the current status
    """
    with span("swap_service.transition_swap_request"):
        try:
            swap_action = SwapAction(action)
        except ValueError as e:
            msg = f"Unknown swap action: {action}"
            raise InvalidInputError(msg) from e

        try:
            update = SwapTransitionUpdate(response_message=response_message)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid response message: {e.errors()[0]['msg']}") from e

        if swap_action == SwapAction.ACCEPT:
            record = await swap_state_machine.transition_to_accepted(
                swap_id=swap_id, actor_id=actor_id, response_message=update.response_message
            )
        elif swap_action == SwapAction.REJECT:
            record = await swap_state_machine.transition_to_rejected(
                swap_id=swap_id, actor_id=actor_id, response_message=update.response_message
            )
        elif swap_action == SwapAction.CANCEL:
            record = await swap_state_machine.transition_to_cancelled(swap_id=swap_id, actor_id=actor_id)
        else:
            record = await swap_state_machine.transition_to_completed(swap_id=swap_id, actor_id=actor_id)
        return _with_viewer(record, actor_id)


async def delete_swap_request(*, swap_id: str, actor_id: str) -> None:
    """Delete a swap request that is still pending or was rejected.

    Raises:
        NotFoundError: If the swap does not exist
        ForbiddenError: If the actor is not the requester
        InvalidStateError: If the swap is accepted, cancelled or completed
    """
    with span("swap_service.delete_swap_request"):
        record = await swap_state_machine.get_swap_record(swap_id=swap_id)

        if record["requester_id"] != actor_id:
            msg = f"Only the requester can delete swap request {swap_id}"
            raise ForbiddenError(msg)

        if record["status"] not in DELETABLE_STATUSES:
            msg = f"Cannot delete: swap request {swap_id} is {record['status']}"
            raise InvalidStateError(msg)

        deleted = await db_client.delete_record_if(
            collection="swap_requests",
            record_id=swap_id,
            expected={"status": tuple(sorted(DELETABLE_STATUSES))},
        )
        if not deleted:
            msg = f"Cannot delete: swap request {swap_id} changed concurrently"
            raise InvalidStateError(msg)

        logger.info("Deleted swap request", extra={"swap_id": swap_id, "actor_id": actor_id})


async def count_swaps_by_status() -> dict[str, int]:
    """Count swaps per lifecycle status, plus a total."""
    with span("swap_service.count_swaps_by_status"):
        counts = {
            status.value: await db_client.count_records(
                collection="swap_requests", filter_query=f'status = "{status}"'
            )
            for status in SwapStatus
        }
        counts["total"] = sum(counts.values())
        return counts
