# foodshare/services/ratings.py
import logging
from typing import Optional, Tuple, Union

from foodshare.core.errors import (
    ForbiddenError, InvalidStateError, NotFoundError, ValidationError,
)
from foodshare.core.guards import parse_or_reject
from foodshare.models.common import utcnow
from foodshare.models.rating import Rating, RatingBreakdown
from foodshare.models.user import BreakdownAverages, DonorProfile
from foodshare.repos.inmemory import InMemoryRepo, new_id
from foodshare.services.notifications import Event, NotificationCenter

logger = logging.getLogger(__name__)

MIN_RATING, MAX_RATING = 1, 5

def incremental_mean(old_avg: float, old_count: int, value: float) -> Tuple[float, int]:
    """Fold one value into a running mean. Full precision, no rounding."""
    count = old_count + 1
    return (old_avg * old_count + value) / count, count

def display_rating(value: float) -> float:
    # rounding is for presentation only; profiles keep the exact mean
    return round(value, 1)

def fold_breakdown(current: Optional[BreakdownAverages], b: RatingBreakdown) -> BreakdownAverages:
    cur = current or BreakdownAverages()
    fields = {}
    for name in ("food_quality", "packaging", "accuracy", "communication"):
        fields[name], _ = incremental_mean(getattr(cur, name), cur.count, getattr(b, name))
    return BreakdownAverages(**fields, count=cur.count + 1)

class RatingAggregator:
    def __init__(self, repo: InMemoryRepo, notifier: NotificationCenter):
        self.repo = repo
        self.notifier = notifier

    async def submit_rating(
        self,
        donation_id: str,
        donor_id: str,
        rater_id: str,
        value: int,
        comment: Optional[str] = None,
        breakdown: Union[RatingBreakdown, dict, None] = None,
    ) -> Rating:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
        if breakdown is not None:
            breakdown = parse_or_reject(RatingBreakdown, breakdown, "rating breakdown")

        async with self.repo.locks.hold(donation_id, donor_id):
            donation = await self.repo.get_donation(donation_id)
            if not donation:
                raise NotFoundError("Donation not found")
            if donation.donor_id != donor_id:
                raise ValidationError("Donor does not own this donation")
            if donation.matched_ngo_id != rater_id:
                raise ForbiddenError("Only the NGO that received the donation can rate it")
            if donation.status != "delivered":
                raise InvalidStateError("Only delivered donations can be rated")
            if await self.repo.ratings_by_donation(donation_id):
                raise InvalidStateError("Donation has already been rated")

            donor = await self.repo.require_user(donor_id)
            profile = donor.donor_profile or DonorProfile()
            avg, count = incremental_mean(profile.rating, profile.total_ratings, value)
            changes = {"rating": avg, "total_ratings": count}
            if breakdown is not None:
                changes["rating_breakdown"] = fold_breakdown(profile.rating_breakdown, breakdown)

            rating = Rating(
                id=new_id(),
                donation_id=donation_id,
                rated_by=rater_id,
                rated_to=donor_id,
                rated_type="donor",
                rating=value,
                comment=comment,
                breakdown=breakdown,
                created_at=utcnow(),
            )
            updated_donor = donor.model_copy(update={"donor_profile": profile.model_copy(update=changes)})
            rating, donor = await self.repo.commit(rating, updated_donor)

        logger.info("Donation %s rated %d by %s; donor %s now %.3f over %d",
                    donation.donation_id, value, rater_id, donor_id, avg, count)
        await self.notifier.publish([
            Event(type="DonationRated", recipient_id=donor_id, donation_id=donation_id,
                  actor_id=rater_id, data={"rating": value}),
        ])
        return rating

    async def ratings_for_donation(self, donation_id: str):
        return await self.repo.ratings_by_donation(donation_id)
