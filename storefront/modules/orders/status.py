"""Order status rules: badge colours, customer actions, admin transitions."""

from __future__ import annotations

from typing import Dict, List

BADGE_COLORS = {
    "delivered": "green",
    "shipped": "blue",
    "processing": "yellow",
    "pending": "orange",
    "cancelled": "red",
}
DEFAULT_BADGE = "slate"

TRANSITIONS = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

CANCELLABLE = {"pending", "processing"}


def badge_color(status: str) -> str:
    return BADGE_COLORS.get(status, DEFAULT_BADGE)


def status_label(status: str) -> str:
    return status[:1].upper() + status[1:]


def available_actions(status: str) -> Dict[str, bool]:
    return {
        "view": True,
        "track": status != "cancelled",
        "reorder": status == "delivered",
        "cancel": status in CANCELLABLE,
    }


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, set())


TRACKING_STEPS = ("pending", "processing", "shipped", "delivered")


def tracking_progress(status: str) -> List[str]:
    """Steps an order has reached so far; a cancelled order reached none."""
    if status not in TRACKING_STEPS:
        return []
    return list(TRACKING_STEPS[: TRACKING_STEPS.index(status) + 1])
