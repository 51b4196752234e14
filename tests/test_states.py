from datetime import timedelta

import pytest

from foodshare.core.config import settings
from foodshare.core.states import (
    COMPLETION, DONATION_STATES, can_transition, completion_for, urgency_for,
)
from foodshare.models.common import utcnow

@pytest.mark.parametrize("status,pct", [
    ("pending", 0), ("matched", 50), ("accepted", 75), ("picked_up", 80),
    ("in_transit", 90), ("delivered", 100), ("cancelled", 0),
])
def test_completion_table(status, pct):
    assert completion_for(status) == pct

def test_every_donation_state_has_a_percentage():
    assert set(DONATION_STATES) <= set(COMPLETION)

@pytest.mark.parametrize("hours,expected", [
    (1, "high"), (3.9, "high"), (4.1, "medium"), (11.5, "medium"), (12.5, "low"), (48, "low"),
])
def test_urgency_thresholds(hours, expected):
    now = utcnow()
    assert urgency_for(now + timedelta(hours=hours), now) == expected

def test_already_expired_food_is_high_urgency():
    now = utcnow()
    assert urgency_for(now - timedelta(hours=2), now) == "high"

def test_urgency_thresholds_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "urgency_high_hours", 1.0)
    now = utcnow()
    assert urgency_for(now + timedelta(hours=2), now) == "medium"

def test_donation_transitions():
    assert can_transition("donation", "pending", "matched")
    assert can_transition("donation", "matched", "accepted")
    assert can_transition("donation", "accepted", "delivered")
    assert not can_transition("donation", "pending", "delivered")
    assert not can_transition("donation", "matched", "delivered")
    assert not can_transition("donation", "delivered", "cancelled")

def test_task_transitions_and_actor_roles():
    assert can_transition("task", "assigned", "assigned")
    assert can_transition("task", "assigned", "accepted", "volunteer")
    assert not can_transition("task", "assigned", "accepted", "ngo")
    assert not can_transition("task", "delivered", "accepted")
