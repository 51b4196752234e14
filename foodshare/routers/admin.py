from fastapi import APIRouter, Depends

from foodshare.core.security import require_role
from foodshare.deps import get_directory
from foodshare.models.user import User
from foodshare.services.directory import UserDirectory

router = APIRouter(prefix="/api/admin", tags=["admin"])

@router.get("/pending-users")
async def pending_users(
    user: User = Depends(require_role("admin")),
    directory: UserDirectory = Depends(get_directory),
):
    return await directory.pending_users(user.id)

@router.post("/users/{user_id}/verify")
async def verify_user(
    user_id: str,
    user: User = Depends(require_role("admin")),
    directory: UserDirectory = Depends(get_directory),
):
    verified = await directory.verify_user(user.id, user_id)
    return {"message": "User verified successfully", "user": verified}
