"""State transition functions for the swap request lifecycle.

    pending --accept--> accepted --complete--> completed
    pending --reject--> rejected
    pending --cancel--> cancelled

Every write is conditional on the status that was read, so two racing
transitions on the same request cannot both succeed.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from src.core import db_client
from src.core.errors import ForbiddenError, InvalidStateError, NotFoundError
from src.core.logging import span
from src.domain.swap import SwapAction, SwapStatus


logger = logging.getLogger(__name__)


class ActorRole(StrEnum):
    """Which participant may trigger a transition."""

    REQUESTER = "requester"
    REQUESTEE = "requestee"
    PARTICIPANT = "participant"


@dataclass(frozen=True)
class Transition:
    """One edge of the lifecycle graph."""

    action: SwapAction
    from_states: frozenset[SwapStatus]
    to_state: SwapStatus
    actor: ActorRole
    timestamp_fields: tuple[str, ...]
    stores_response: bool = False


TRANSITIONS: dict[SwapAction, Transition] = {
    SwapAction.ACCEPT: Transition(
        action=SwapAction.ACCEPT,
        from_states=frozenset({SwapStatus.PENDING}),
        to_state=SwapStatus.ACCEPTED,
        actor=ActorRole.REQUESTEE,
        timestamp_fields=("responded_at", "accepted_at"),
        stores_response=True,
    ),
    SwapAction.REJECT: Transition(
        action=SwapAction.REJECT,
        from_states=frozenset({SwapStatus.PENDING}),
        to_state=SwapStatus.REJECTED,
        actor=ActorRole.REQUESTEE,
        timestamp_fields=("responded_at", "rejected_at"),
        stores_response=True,
    ),
    SwapAction.CANCEL: Transition(
        action=SwapAction.CANCEL,
        from_states=frozenset({SwapStatus.PENDING}),
        to_state=SwapStatus.CANCELLED,
        actor=ActorRole.REQUESTER,
        timestamp_fields=("cancelled_at",),
    ),
    # Either side may confirm; first mover wins
    SwapAction.COMPLETE: Transition(
        action=SwapAction.COMPLETE,
        from_states=frozenset({SwapStatus.ACCEPTED}),
        to_state=SwapStatus.COMPLETED,
        actor=ActorRole.PARTICIPANT,
        timestamp_fields=("completed_at",),
    ),
}


def is_allowed_actor(*, swap: dict[str, Any], actor_id: str, role: ActorRole) -> bool:
    """Return True if ``actor_id`` plays ``role`` on this swap."""
    if role == ActorRole.REQUESTER:
        return swap["requester_id"] == actor_id
    if role == ActorRole.REQUESTEE:
        return swap["requestee_id"] == actor_id
    return actor_id in (swap["requester_id"], swap["requestee_id"])


async def get_swap_record(*, swap_id: str) -> dict[str, Any]:
    """Load a swap record.

    Raises:
        NotFoundError: If the swap does not exist
    """
    try:
        return await db_client.get_record(collection="swap_requests", record_id=swap_id)
    except KeyError as e:
        msg = f"Swap request not found: {swap_id}"
        raise NotFoundError(msg) from e


async def apply_transition(
    *,
    swap_id: str,
    actor_id: str,
    action: SwapAction,
    response_message: str | None = None,
) -> dict[str, Any]:
    """Move a swap along one edge of the lifecycle graph.

    Guards run in order: existence, actor, current status.

    Returns:
        Updated swap record

    Raises:
        NotFoundError: If the swap does not exist
        ForbiddenError: If the actor may not perform this transition
        InvalidStateError: If the transition is not legal from the current status,
            including when a concurrent transition won the race
    """
    transition = TRANSITIONS[SwapAction(action)]

    with span(f"swap_state_machine.{transition.action}"):
        swap = await get_swap_record(swap_id=swap_id)

        if not is_allowed_actor(swap=swap, actor_id=actor_id, role=transition.actor):
            msg = f"Only the {transition.actor} can {transition.action} swap request {swap_id}"
            logger.warning(
                "Swap transition forbidden",
                extra={"swap_id": swap_id, "actor_id": actor_id, "action": transition.action},
            )
            raise ForbiddenError(msg)

        current = swap["status"]
        if current not in transition.from_states:
            msg = f"Cannot {transition.action}: swap request {swap_id} is {current}"
            raise InvalidStateError(msg)

        now = db_client.now_iso()
        data: dict[str, Any] = {"status": transition.to_state, **dict.fromkeys(transition.timestamp_fields, now)}
        if transition.stores_response:
            data["response_message"] = response_message

        updated = await db_client.update_record_if(
            collection="swap_requests",
            record_id=swap_id,
            expected={"status": current},
            data=data,
        )
        if updated is None:
            msg = f"Cannot {transition.action}: swap request {swap_id} changed concurrently"
            logger.warning(
                "Swap transition lost race",
                extra={"swap_id": swap_id, "actor_id": actor_id, "action": transition.action},
            )
            raise InvalidStateError(msg)

        logger.info(
            "Transitioned swap request",
            extra={
                "swap_id": swap_id,
                "actor_id": actor_id,
                "from_status": current,
                "to_status": transition.to_state,
            },
        )
        return updated


async def transition_to_accepted(
    *, swap_id: str, actor_id: str, response_message: str | None = None
) -> dict[str, Any]:
    """Requestee accepts a pending swap."""
    return await apply_transition(
        swap_id=swap_id, actor_id=actor_id, action=SwapAction.ACCEPT, response_message=response_message
    )


async def transition_to_rejected(
    *, swap_id: str, actor_id: str, response_message: str | None = None
) -> dict[str, Any]:
    """Requestee rejects a pending swap."""
    return await apply_transition(
        swap_id=swap_id, actor_id=actor_id, action=SwapAction.REJECT, response_message=response_message
    )


async def transition_to_cancelled(*, swap_id: str, actor_id: str) -> dict[str, Any]:
    """Requester withdraws a pending swap."""
    return await apply_transition(swap_id=swap_id, actor_id=actor_id, action=SwapAction.CANCEL)


async def transition_to_completed(*, swap_id: str, actor_id: str) -> dict[str, Any]:
    """Either participant confirms an accepted swap took place."""
    return await apply_transition(swap_id=swap_id, actor_id=actor_id, action=SwapAction.COMPLETE)
