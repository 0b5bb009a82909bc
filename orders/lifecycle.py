"""
Order status transitions.

One table decides which actor may move an order from which status to which.
Customers only create orders; the kitchen moves them along
confirmed -> preparing -> ready; staff can set any status from the orders
manager, including the terminal ones.
"""
import enum
from datetime import datetime

from django.utils import timezone
from rest_framework import status as http_status
from rest_framework.exceptions import APIException


class Status:
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    PREPARING = 'preparing'
    READY = 'ready'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    ALL = (PENDING, CONFIRMED, PREPARING, READY, COMPLETED, CANCELLED)
    TERMINAL = frozenset({COMPLETED, CANCELLED})
    KITCHEN_VISIBLE = (CONFIRMED, PREPARING)


class Actor(str, enum.Enum):
    CUSTOMER = 'customer'
    KITCHEN = 'kitchen'
    STAFF = 'staff'


KITCHEN_FLOW = {
    Status.CONFIRMED: Status.PREPARING,
    Status.PREPARING: Status.READY,
}


class InvalidTransition(APIException):
    status_code = http_status.HTTP_409_CONFLICT
    default_detail = 'This status change is not allowed.'
    default_code = 'invalid_transition'
    domain_error = True


def normalize(value):
    if value is None:
        return None
    value = str(value).strip().lower()
    if value not in Status.ALL:
        raise ValueError(f"Unknown order status: {value!r}")
    return value


def creation_status(initial=None):
    from django.conf import settings
    return normalize(initial or getattr(settings, 'ORDER_INITIAL_STATUS', Status.PENDING))


def allowed_transitions(actor, current):
    """Statuses ``actor`` may move an order in ``current`` to."""
    actor = Actor(actor)
    current = normalize(current)
    if actor is Actor.STAFF:
        return [s for s in Status.ALL if s != current]
    if actor is Actor.KITCHEN:
        nxt = KITCHEN_FLOW.get(current)
        return [nxt] if nxt else []
    if current is None:
        return [creation_status()]
    return []


def can_transition(actor, current, target):
    try:
        target = normalize(target)
    except ValueError:
        return False
    return target in allowed_transitions(actor, current)


def next_kitchen_status(current):
    """The single forward step the kitchen display offers, or None."""
    return KITCHEN_FLOW.get(normalize(current))


def is_terminal(status):
    return normalize(status) in Status.TERMINAL


def apply_transition(order, target, actor):
    """Set ``order.status`` if the move is allowed. Does not save."""
    previous = normalize(order.status)
    try:
        target = normalize(target)
    except ValueError:
        raise InvalidTransition(f"Unknown status '{target}'.")
    if target == previous:
        return order
    if not can_transition(actor, previous, target):
        raise InvalidTransition(
            f"{Actor(actor).value.capitalize()} cannot move an order from {previous} to {target}."
        )
    order.status = target
    return order


def _status_of(order):
    return str(order.status).lower()


def kitchen_queue(orders):
    """Orders the kitchen works on, oldest first."""
    queue = [o for o in orders if _status_of(o) in Status.KITCHEN_VISIBLE]
    return sorted(queue, key=lambda o: o.created_at)


def status_board(orders):
    """Customer-facing board: preparing oldest first, ready newest first."""
    preparing = sorted((o for o in orders if _status_of(o) == Status.PREPARING),
                       key=lambda o: o.created_at)
    ready = sorted((o for o in orders if _status_of(o) == Status.READY),
                   key=lambda o: o.created_at, reverse=True)
    return {'preparing': preparing, 'ready': ready}


def elapsed_minutes(created_at: datetime, now: datetime = None) -> int:
    now = now or timezone.now()
    return max(0, int((now - created_at).total_seconds() // 60))


def elapsed_label(created_at, now=None):
    minutes = elapsed_minutes(created_at, now)
    if minutes < 1:
        return 'Just now'
    if minutes < 60:
        return f'{minutes}m ago'
    return f'{minutes // 60}h {minutes % 60}m ago'


def urgency(created_at, now=None):
    minutes = elapsed_minutes(created_at, now)
    if minutes > 20:
        return 'overdue'
    if minutes > 10:
        return 'warning'
    return 'fresh'
