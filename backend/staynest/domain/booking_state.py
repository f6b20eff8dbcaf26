"""Booking status state machine.

PENDING is the only non-terminal status: an admin (or the guest, for
cancellation) moves it to CONFIRMED or CANCELLED exactly once.
"""

from staynest.core.errors import InvalidInputError, InvalidTransitionError
from staynest.db.models import BookingStatus

BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: set(),
    BookingStatus.CANCELLED: set(),
}

ACTION_TARGETS = {
    "confirm": BookingStatus.CONFIRMED,
    "cancel": BookingStatus.CANCELLED,
}

TARGET_ACTIONS = {status: action for action, status in ACTION_TARGETS.items()}

# past participle used in response messages
ACTION_VERBS = {
    "confirm": "confirmed",
    "cancel": "cancelled",
}


def target_status(action: str | None) -> BookingStatus:
    """
    Map an admin action onto the status it produces.
    """
    if not action or action not in ACTION_TARGETS:
        raise InvalidInputError("Invalid action")
    return ACTION_TARGETS[action]


def can_transition(current: str, target: str) -> bool:
    allowed = BOOKING_TRANSITIONS.get(BookingStatus(current), set())
    return BookingStatus(target) in allowed


def assert_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot {TARGET_ACTIONS.get(BookingStatus(target), 'move')} "
            f"a {BookingStatus(current).value.lower()} booking"
        )
