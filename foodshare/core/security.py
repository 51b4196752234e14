from fastapi import Depends, Header, HTTPException

from foodshare.deps import get_repo
from foodshare.models.user import User
from foodshare.repos.inmemory import InMemoryRepo

# Authentication lives in front of this service; callers pass the acting
# user's id and we only resolve it against the directory.
async def get_current_user(
    x_user_id: str | None = Header(default=None),
    repo: InMemoryRepo = Depends(get_repo),
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    user = await repo.get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")
    return user

def require_role(role: str):
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise HTTPException(status_code=403, detail=f"Only {role} users can do this")
        return user
    return checker
