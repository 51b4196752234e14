import pytest

from foodshare.services.assignment import Assigned, Unassigned, candidates
from conftest import add_users, make_user

pytestmark = pytest.mark.anyio

def test_candidates_are_ordered_by_signup_then_id():
    users = [
        make_user("vol-c", "volunteer", minutes=3),
        make_user("vol-b", "volunteer", minutes=1),
        make_user("vol-a", "volunteer", minutes=1),
        make_user("ngo-1", "ngo", minutes=0),
    ]
    assert [u.id for u in candidates(users)] == ["vol-a", "vol-b", "vol-c"]

def test_candidates_skip_unverified_inactive_and_excluded():
    users = [
        make_user("vol-1", "volunteer", minutes=1, is_verified=False),
        make_user("vol-2", "volunteer", minutes=2, is_active=False),
        make_user("vol-3", "volunteer", minutes=3),
        make_user("vol-4", "volunteer", minutes=4),
    ]
    assert [u.id for u in candidates(users, exclude_id="vol-3")] == ["vol-4"]

async def test_choose_returns_first_candidate(services):
    await add_users(
        services,
        make_user("vol-late", "volunteer", minutes=10),
        make_user("vol-early", "volunteer", minutes=1),
    )
    choice = await services.engine.policy.choose()
    assert choice == Assigned(volunteer_id="vol-early")

async def test_choose_with_empty_pool_is_unassigned(services):
    await add_users(services, make_user("vol-1", "volunteer"))
    choice = await services.engine.policy.choose(exclude_id="vol-1")
    assert isinstance(choice, Unassigned)
    assert choice.reason

async def test_still_eligible_tracks_directory(services):
    await add_users(services, make_user("vol-1", "volunteer"))
    assert await services.engine.policy.still_eligible("vol-1")
    assert not await services.engine.policy.still_eligible("ghost")
