"""Swap request endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Query, Response, status

from src.domain.create_models import SwapRequestCreate
from src.domain.swap import SwapAction, SwapDirection, SwapRequest, SwapStatus
from src.domain.update_models import SwapTransitionUpdate
from src.interface.auth import require_actor
from src.services import feedback_service, swap_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/swaps", tags=["swaps"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_swap(body: SwapRequestCreate, actor_id: str = Depends(require_actor)) -> SwapRequest:
    """Propose a swap to another user."""
    record = await swap_service.create_swap_request(
        requester_id=actor_id,
        requestee_id=body.requestee_id,
        offered_skill=body.offered_skill,
        wanted_skill=body.wanted_skill,
        message=body.message,
    )
    return SwapRequest.from_record(record)


@router.get("")
async def list_swaps(
    direction: SwapDirection = SwapDirection.BOTH,
    status_filter: SwapStatus | None = Query(default=None, alias="status"),
    actor_id: str = Depends(require_actor),
) -> list[SwapRequest]:
    """List the caller's swaps, newest first."""
    records = await swap_service.list_swap_requests(user_id=actor_id, direction=direction, status=status_filter)
    return [SwapRequest.from_record(record) for record in records]


@router.get("/pending-feedback")
async def list_pending_feedback(actor_id: str = Depends(require_actor)) -> list[SwapRequest]:
    """Completed swaps the caller has not reviewed yet."""
    records = await feedback_service.list_pending_feedback(user_id=actor_id)
    return [SwapRequest.from_record(record) for record in records]


@router.get("/{swap_id}")
async def get_swap(swap_id: str, actor_id: str = Depends(require_actor)) -> SwapRequest:
    record = await swap_service.get_swap_request(swap_id=swap_id, actor_id=actor_id)
    return SwapRequest.from_record(record)


@router.post("/{swap_id}/{action}")
async def transition_swap(
    swap_id: str,
    action: SwapAction,
    body: SwapTransitionUpdate | None = Body(default=None),
    actor_id: str = Depends(require_actor),
) -> SwapRequest:
    """Accept, reject, cancel or complete a swap."""
    record = await swap_service.transition_swap_request(
        swap_id=swap_id,
        actor_id=actor_id,
        action=action,
        response_message=body.response_message if body else None,
    )
    return SwapRequest.from_record(record)


@router.delete("/{swap_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_swap(swap_id: str, actor_id: str = Depends(require_actor)) -> Response:
    await swap_service.delete_swap_request(swap_id=swap_id, actor_id=actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
