from fastapi import APIRouter, Depends

from foodshare.core.security import get_current_user, require_role
from foodshare.deps import get_ratings
from foodshare.models.rating import RatingCreate
from foodshare.models.user import User
from foodshare.services.ratings import RatingAggregator

router = APIRouter(prefix="/api/ratings", tags=["ratings"])

@router.post("", status_code=201)
async def submit_rating(
    body: RatingCreate,
    user: User = Depends(require_role("ngo")),
    ratings: RatingAggregator = Depends(get_ratings),
):
    return await ratings.submit_rating(
        body.donation_id, body.donor_id, user.id, body.rating, body.comment, body.breakdown,
    )

@router.get("/donation/{donation_id}")
async def donation_ratings(
    donation_id: str,
    user: User = Depends(get_current_user),
    ratings: RatingAggregator = Depends(get_ratings),
):
    return await ratings.ratings_for_donation(donation_id)
