from fastapi import APIRouter, Depends

from foodshare.core.security import get_current_user
from foodshare.deps import get_notifier
from foodshare.models.user import User
from foodshare.services.notifications import NotificationCenter

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

@router.get("")
async def my_notifications(
    user: User = Depends(get_current_user),
    notifier: NotificationCenter = Depends(get_notifier),
):
    return await notifier.list_for_user(user.id)

@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    notifier: NotificationCenter = Depends(get_notifier),
):
    await notifier.mark_as_read(notification_id)
    return {"message": "Notification marked as read"}
