from src.services import (
    feedback_service,
    identity_service,
    moderation_service,
    swap_service,
    swap_state_machine,
)


__all__ = [
    "feedback_service",
    "identity_service",
    "moderation_service",
    "swap_service",
    "swap_state_machine",
]
