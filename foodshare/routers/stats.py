from fastapi import APIRouter, Depends

from foodshare.deps import get_repo
from foodshare.repos.inmemory import InMemoryRepo

router = APIRouter(prefix="/api/stats", tags=["stats"])

@router.get("")
async def summary(repo: InMemoryRepo = Depends(get_repo)):
    return {
        "donations": await repo.count_donations(),
        "delivered": await repo.count_delivered(),
    }
