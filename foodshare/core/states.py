from datetime import datetime

from foodshare.core.config import settings

DONATION_STATES = [
    "pending", "matched", "accepted", "in_transit", "delivered", "cancelled"
]

TASK_STATES = [
    "assigned", "accepted", "picked_up", "in_transit", "delivered", "cancelled"
]

URGENCY_LEVELS = ["high", "medium", "low"]

# picked_up only ever shows up on tasks, the table still covers it
COMPLETION = {
    "pending":    0,
    "matched":    50,
    "accepted":   75,
    "picked_up":  80,
    "in_transit": 90,
    "delivered":  100,
    "cancelled":  0,
}

DONATION_TERMINAL = {"delivered", "cancelled"}
TASK_TERMINAL = {"delivered", "cancelled"}

DONATION_TRANSITIONS = {
    ("pending",  "matched"):    {"actors": ["ngo"]},
    ("matched",  "accepted"):   {"actors": ["volunteer"]},
    ("accepted", "delivered"):  {"actors": ["ngo", "volunteer"]},

    ("pending",  "cancelled"):  {"actors": ["donor", "admin"]},
    ("matched",  "cancelled"):  {"actors": ["donor", "ngo", "admin"]},
    ("accepted", "cancelled"):  {"actors": ["ngo", "admin"]},
}

TASK_TRANSITIONS = {
    ("assigned", "accepted"):   {"actors": ["volunteer"]},
    ("assigned", "assigned"):   {"actors": ["volunteer"]},
    ("accepted", "delivered"):  {"actors": ["volunteer"]},

    ("assigned", "cancelled"):  {"actors": ["ngo", "admin"]},
    ("accepted", "cancelled"):  {"actors": ["ngo", "admin"]},
}

_TABLES = {"donation": DONATION_TRANSITIONS, "task": TASK_TRANSITIONS}

def completion_for(status: str) -> int:
    return COMPLETION.get(status, 0)

def can_transition(kind: str, src: str, dst: str, actor_role: str | None = None) -> bool:
    rule = _TABLES[kind].get((src, dst))
    if not rule:
        return False
    if actor_role is None:
        return True
    return actor_role in rule["actors"]

def urgency_for(expiry: datetime, now: datetime) -> str:
    hours_left = (expiry - now).total_seconds() / 3600
    if hours_left < settings.urgency_high_hours:
        return "high"
    if hours_left < settings.urgency_medium_hours:
        return "medium"
    return "low"
