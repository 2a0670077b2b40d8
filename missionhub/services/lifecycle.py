# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Participation state machine: pure computation, no I/O.

    created ─► awaiting_approval ─► approved ─► completed
    created ─► approved
    any     ─► cancelled
"""

from typing import Optional

STATES = ("created", "awaiting_approval", "approved", "completed", "cancelled")
INITIAL_STATE = "created"
TERMINAL_STATES = frozenset({"completed", "cancelled"})
PUBLIC_STATES = ("approved", "completed")
PREPARING_STATES = frozenset({"created", "awaiting_approval"})

# event -> (states it may fire from, target state)
TRANSITIONS: dict[str, tuple[frozenset, str]] = {
    "await_approval": (frozenset({"created"}), "awaiting_approval"),
    "approve":        (PREPARING_STATES, "approved"),
    "cancel":         (frozenset(STATES), "cancelled"),
    "complete":       (frozenset({"approved"}), "completed"),
}

# (from states, to state) -> notification kind sent to the participant
AFTER_TRANSITION: tuple[tuple[frozenset, str, str], ...] = (
    (frozenset({"created"}), "awaiting_approval", "joined_mission"),
    (PREPARING_STATES, "approved", "mission_role_approved"),
)


def can_fire(state: str, event: str) -> bool:
    rule = TRANSITIONS.get(event)
    return rule is not None and state in rule[0]


def available_events(state: str) -> list[str]:
    return [event for event in TRANSITIONS if can_fire(state, event)]


def next_state(state: str, event: str) -> str:
    """Target state for ``event``; raises ValueError when it cannot fire."""
    if event not in TRANSITIONS:
        raise ValueError(f"Unknown event '{event}'. Known: {sorted(TRANSITIONS)}")
    allowed_from, target = TRANSITIONS[event]
    if state not in allowed_from:
        allowed = available_events(state)
        raise ValueError(
            f"Cannot {event} from '{state}'. "
            f"Allowed: {allowed if allowed else 'none'}"
        )
    return target


def notification_for(from_state: str, to_state: str) -> Optional[str]:
    for sources, target, kind in AFTER_TRANSITION:
        if to_state == target and from_state in sources:
            return kind
    return None


def fire(participation, event: str) -> str:
    """
    Move ``participation`` to the event's target state in memory.
    Any resulting notification is queued on the participation and sent
    once the change is persisted.
    """
    from_state = participation.state
    to_state = next_state(from_state, event)
    participation.state = to_state
    kind = notification_for(from_state, to_state)
    if kind:
        participation.queue_notification(kind)
    return to_state
