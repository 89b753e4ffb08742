"""Event Lifecycle — the status state machine and its notification side effect.

Invariants:
    - PENDING -> APPROVED | REJECTED (admin decision)
    - any non-cancelled state -> CANCELLED; CANCELLED is terminal
    - No other transition exists; re-submission is a new PENDING event
    - Each APPROVED/REJECTED transition yields exactly one creator notification
"""

from dataclasses import dataclass

from campus_portal.core.domain_types import EventStatus, NotificationType
from campus_portal.core.errors import ErrorContext, InvalidTransitionError


_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.PENDING: frozenset({
        EventStatus.APPROVED, EventStatus.REJECTED, EventStatus.CANCELLED,
    }),
    EventStatus.APPROVED: frozenset({EventStatus.CANCELLED}),
    EventStatus.REJECTED: frozenset({EventStatus.CANCELLED}),
    EventStatus.CANCELLED: frozenset(),
}

DECISION_STATUSES = frozenset({EventStatus.APPROVED, EventStatus.REJECTED})


@dataclass(frozen=True)
class DecisionNotice:
    """Notification payload sent to the event creator after an admin decision."""
    message: str
    type: NotificationType


def allowed_targets(current: EventStatus) -> frozenset[EventStatus]:
    return _TRANSITIONS[current]


def transition(
    current: EventStatus, target: EventStatus, context: ErrorContext | None = None,
) -> EventStatus:
    """Validate current -> target. Returns target or raises InvalidTransitionError."""
    if target not in _TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, target.value, context)
    return target


def decision_notice(title: str, status: EventStatus) -> DecisionNotice:
    """Build the creator notification for an approve/reject decision."""
    if status == EventStatus.APPROVED:
        return DecisionNotice(
            f'Your event "{title}" has been approved.', NotificationType.SUCCESS,
        )
    if status == EventStatus.REJECTED:
        return DecisionNotice(
            f'Your event "{title}" has been rejected.', NotificationType.ERROR,
        )
    raise ValueError(f"No decision notice for status {status.value}")
