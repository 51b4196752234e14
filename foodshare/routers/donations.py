from fastapi import APIRouter, Depends

from foodshare.core.security import get_current_user, require_role
from foodshare.deps import get_engine, get_repo
from foodshare.models.donation import DonationCreate
from foodshare.models.user import User
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.services.lifecycle import LifecycleEngine

router = APIRouter(prefix="/api/donations", tags=["donations"])

@router.get("")
async def list_donations(user: User = Depends(get_current_user), repo: InMemoryRepo = Depends(get_repo)):
    if user.role == "donor":
        items = await repo.donations_by_donor(user.id)
    elif user.role == "ngo":
        items = await repo.donations_by_ngo(user.id)
    elif user.role == "admin":
        items = await repo.list_donations()
    else:
        items = []
    return sorted(items, key=lambda d: d.created_at, reverse=True)

@router.get("/available")
async def available_donations(user: User = Depends(get_current_user), repo: InMemoryRepo = Depends(get_repo)):
    return await repo.list_donations(status="pending")

@router.post("", status_code=201)
async def create_donation(
    body: DonationCreate,
    user: User = Depends(require_role("donor")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.create_donation(user.id, body.food_details, body.location)

@router.post("/{donation_id}/accept")
async def accept_donation(
    donation_id: str,
    user: User = Depends(require_role("ngo")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.accept_donation(donation_id, user.id)

@router.post("/{donation_id}/accept-ride")
async def accept_ride(
    donation_id: str,
    user: User = Depends(require_role("ngo")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.accept_ride(donation_id, user.id)

@router.patch("/{donation_id}/mark-delivered")
async def mark_delivered(
    donation_id: str,
    user: User = Depends(require_role("ngo")),
    engine: LifecycleEngine = Depends(get_engine),
):
    return await engine.mark_donation_delivered(donation_id, user.id)
