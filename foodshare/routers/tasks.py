from fastapi import APIRouter, Depends

from foodshare.core.security import get_current_user, require_role
from foodshare.deps import get_engine, get_repo
from foodshare.models.user import User
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.services.lifecycle import LifecycleEngine

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

@router.get("")
async def list_tasks(user: User = Depends(get_current_user), repo: InMemoryRepo = Depends(get_repo)):
    if user.role == "volunteer":
        return await repo.tasks_by_volunteer(user.id)
    if user.role == "admin":
        return await repo.list_tasks()
    return []

@router.post("/{task_id}/accept")
async def accept_task(
    task_id: str,
    user: User = Depends(require_role("volunteer")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.accept_task(task_id, user.id)

@router.post("/{task_id}/reject")
async def reject_task(
    task_id: str,
    user: User = Depends(require_role("volunteer")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.reject_task(task_id, user.id)

@router.post("/{task_id}/deliver")
async def deliver_task(
    task_id: str,
    user: User = Depends(require_role("volunteer")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.mark_task_delivered(task_id, user.id)
