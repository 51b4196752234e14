import asyncio

import pytest

from foodshare.core.errors import ConflictError
from conftest import food, location

pytestmark = pytest.mark.anyio

async def test_commit_bumps_versions(people):
    d = await people.engine.create_donation("donor-1", food(), location())
    assert d.version == 1
    (d2,) = await people.repo.commit(d.model_copy(update={"cancellation_reason": "x"}))
    assert d2.version == 2

async def test_stale_batch_is_rejected_whole(people):
    d = await people.engine.create_donation("donor-1", food(), location())
    d = await people.engine.accept_donation(d.id, "ngo-1")
    d = await people.engine.accept_ride(d.id, "ngo-1")
    task = await people.repo.get_task(d.task_id)

    stale = d.model_copy(update={"version": d.version - 1})
    with pytest.raises(ConflictError):
        await people.repo.commit(task.model_copy(update={"status": "accepted"}), stale.with_status("accepted"))

    assert (await people.repo.get_task(task.id)).status == "assigned"
    assert (await people.repo.get_donation(d.id)).status == "matched"

async def test_locks_release_after_errors(services):
    with pytest.raises(RuntimeError):
        async with services.repo.locks.hold("a", "b"):
            raise RuntimeError("boom")
    async with services.repo.locks.hold("b", "a"):
        pass

async def test_idle_locks_are_dropped(services):
    locks = services.repo.locks
    async with locks.hold("a", "b"):
        assert len(locks) == 2
    assert len(locks) == 0

async def test_lock_outlives_holder_while_others_wait(services):
    locks = services.repo.locks
    order = []

    async def worker(name):
        async with locks.hold("shared"):
            order.append(name)
            await asyncio.sleep(0)
            assert len(locks) == 1

    await asyncio.gather(worker("a"), worker("b"), worker("c"))
    assert order == ["a", "b", "c"]
    assert len(locks) == 0

async def test_locks_do_not_pile_up_over_a_lifecycle(people):
    d = await people.engine.create_donation("donor-1", food(), location())
    d = await people.engine.accept_donation(d.id, "ngo-1")
    d = await people.engine.accept_ride(d.id, "ngo-1")
    await people.engine.accept_task(d.task_id, "vol-1")
    await people.engine.mark_task_delivered(d.task_id, "vol-1")
    assert len(people.repo.locks) == 0

async def test_sequential_task_ids(services):
    assert services.repo.next_task_id() == "TK-000001"
    assert services.repo.next_task_id() == "TK-000002"

async def test_demo_seed_is_idempotent(services):
    from foodshare.seed import seed_demo

    created = await seed_demo(services.repo)
    assert {u.role for u in created} == {"admin", "donor", "ngo", "volunteer"}
    assert await seed_demo(services.repo) == []
    choice = await services.engine.policy.choose()
    assert choice.volunteer_id == "vol-1"
