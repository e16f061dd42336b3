"""Registration - semester registration status state machine."""

from academia.registration.state_machine import (
    ALLOWED_TRANSITIONS,
    IN_FLIGHT_STATUSES,
    INITIAL_STATUS,
    TERMINAL_STATUS,
    ensure_none_in_flight,
    ensure_not_ended,
    ensure_registration_exists,
    ensure_semester_exists,
    ensure_semester_not_registered,
    ensure_transition,
    is_transition_allowed,
    validate_schedule,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "INITIAL_STATUS",
    "IN_FLIGHT_STATUSES",
    "TERMINAL_STATUS",
    "ensure_none_in_flight",
    "ensure_not_ended",
    "ensure_registration_exists",
    "ensure_semester_exists",
    "ensure_semester_not_registered",
    "ensure_transition",
    "is_transition_allowed",
    "validate_schedule",
]
