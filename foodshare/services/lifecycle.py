# foodshare/services/lifecycle.py
import logging
from typing import Callable, List, Optional, Union

from foodshare.core.config import settings
from foodshare.core.errors import (
    ConflictError, ForbiddenError, InvalidStateError, NoVolunteerAvailableError, NotFoundError,
)
from foodshare.core.guards import ensure_role, parse_or_reject
from foodshare.core.states import TASK_TERMINAL, can_transition, completion_for, urgency_for
from foodshare.models.common import Location, StatusEvent, TaskLocation, utcnow
from foodshare.models.donation import Donation, FoodDetails
from foodshare.models.task import VolunteerTask
from foodshare.models.user import User, VolunteerProfile
from foodshare.repos.inmemory import InMemoryRepo, new_id
from foodshare.services.assignment import Assigned, AssignmentPolicy
from foodshare.services.notifications import Event, NotificationCenter

logger = logging.getLogger(__name__)

class LifecycleEngine:
    """Donation and task state machines.

    Every operation reads its records under the repo's per-record locks,
    builds the changed copies, and commits them in a single ``repo.commit``
    call so a donation and its task never disagree. Events are published
    only after the commit succeeded.
    """

    def __init__(
        self,
        repo: InMemoryRepo,
        notifier: NotificationCenter,
        policy: Optional[AssignmentPolicy] = None,
        clock: Callable = utcnow,
    ):
        self.repo = repo
        self.notifier = notifier
        self.policy = policy or AssignmentPolicy(repo)
        self.clock = clock

    # ---------- lookups ----------
    async def _donation(self, donation_id: str) -> Donation:
        donation = await self.repo.get_donation(donation_id)
        if not donation:
            raise NotFoundError("Donation not found")
        return donation

    async def _task(self, task_id: str) -> VolunteerTask:
        task = await self.repo.get_task(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    async def _live_task(self, donation_id: str) -> Optional[VolunteerTask]:
        for t in await self.repo.tasks_by_donation(donation_id):
            if t.status not in TASK_TERMINAL:
                return t
        return None

    def _move(self, donation: Donation, dst: str, by_user: str, note: str = None, **changes) -> Donation:
        if not can_transition("donation", donation.status, dst):
            raise InvalidStateError(f"Donation cannot move from {donation.status} to {dst}")
        return donation.with_status(dst, by_user=by_user, note=note, **changes)

    # ---------- donations ----------
    async def create_donation(
        self,
        donor_id: str,
        food_details: Union[FoodDetails, dict],
        location: Union[Location, dict],
    ) -> Donation:
        food = parse_or_reject(FoodDetails, food_details, "food details")
        loc = parse_or_reject(Location, location, "location")
        donor = await self.repo.require_user(donor_id)
        ensure_role(donor, "donor")

        now = self.clock()
        donation = Donation(
            id=new_id(),
            donation_id=self.repo.next_donation_id(),
            donor_id=donor_id,
            food_details=food,
            location=loc,
            status="pending",
            urgency_category=urgency_for(food.expiry_time, now),
            timeline=[StatusEvent(status="pending", timestamp=now, updated_by=donor_id,
                                  note="Donation created")],
            created_at=now,
            updated_at=now,
        )
        (donation,) = await self.repo.commit(donation)
        logger.info("Donation %s created by %s (urgency=%s)",
                    donation.donation_id, donor_id, donation.urgency_category)

        ngos = [u for u in await self.repo.list_users("ngo") if u.is_verified and u.is_active]
        await self.notifier.publish(
            Event(type="NewDonationAvailable", recipient_id=ngo.id, donation_id=donation.id,
                  actor_id=donor_id, data={"category": food.category})
            for ngo in ngos
        )
        return donation

    async def accept_donation(self, donation_id: str, ngo_id: str) -> Donation:
        ngo = await self.repo.require_user(ngo_id)
        ensure_role(ngo, "ngo")

        async with self.repo.locks.hold(donation_id):
            donation = await self._donation(donation_id)
            if donation.status != "pending":
                raise InvalidStateError("Donation is no longer available")
            updated = self._move(donation, "matched", ngo_id,
                                 note="Accepted by NGO", matched_ngo_id=ngo_id)
            (donation,) = await self.repo.commit(updated)

        logger.info("Donation %s accepted by NGO %s", donation.donation_id, ngo_id)
        await self.notifier.publish([
            Event(type="DonationAccepted", recipient_id=donation.donor_id,
                  donation_id=donation.id, actor_id=ngo_id),
        ])

        if settings.auto_assign_on_accept:
            try:
                donation = await self.accept_ride(donation.id, ngo_id)
            except (NoVolunteerAvailableError, InvalidStateError, ConflictError) as exc:
                # the acceptance is already committed; a ride arranged meanwhile wins
                logger.warning("Donation %s accepted without auto-assignment: %s",
                               donation.donation_id, exc.detail)
                donation = await self._donation(donation.id)
        return donation

    def create_task(self, donation: Donation, volunteer_id: str, ngo: Optional[User] = None) -> VolunteerTask:
        """Build the delivery task for ``donation``; the caller commits it."""
        addr = donation.location.address
        delivery = TaskLocation(address=settings.default_delivery_address)
        if ngo and ngo.ngo_profile and ngo.ngo_profile.address:
            na = ngo.ngo_profile.address
            delivery = TaskLocation(address=f"{na.street}, {na.city}")
        now = self.clock()
        return VolunteerTask(
            id=new_id(),
            task_id=self.repo.next_task_id(),
            donation_id=donation.id,
            volunteer_id=volunteer_id,
            donor_id=donation.donor_id,
            ngo_id=donation.matched_ngo_id,
            pickup_location=TaskLocation(
                address=f"{addr.street}, {addr.city}",
                coordinates=list(donation.location.coordinates),
            ),
            delivery_location=delivery,
            distance=settings.task_distance_km,
            estimated_time=settings.task_estimated_minutes,
            status="assigned",
            created_at=now,
            updated_at=now,
        )

    async def accept_ride(self, donation_id: str, ngo_id: str) -> Donation:
        async with self.repo.locks.hold(donation_id):
            donation = await self._donation(donation_id)
            if donation.status != "matched" or donation.completion_percentage != completion_for("matched"):
                raise InvalidStateError(f"Ride cannot be accepted while donation is {donation.status}")
            if donation.matched_ngo_id != ngo_id:
                raise ForbiddenError("Only the matching NGO can arrange pickup")
            if await self._live_task(donation.id):
                raise InvalidStateError("Donation already has an open task")

            choice = await self.policy.choose()
            if not isinstance(choice, Assigned):
                raise NoVolunteerAvailableError(choice.reason)

            # serializes assignments to one volunteer; profile writes use the plain user id
            async with self.repo.locks.hold(f"volunteer:{choice.volunteer_id}"):
                if not await self.policy.still_eligible(choice.volunteer_id):
                    raise NoVolunteerAvailableError("selected volunteer is no longer available")
                task = self.create_task(donation, choice.volunteer_id, await self.repo.get_user(ngo_id))
                updated = donation.model_copy(update={
                    "assigned_volunteer_id": choice.volunteer_id,
                    "task_id": task.id,
                    "updated_at": self.clock(),
                })
                task, donation = await self.repo.commit(task, updated)

        logger.info("Task %s assigned to volunteer %s for donation %s",
                    task.task_id, task.volunteer_id, donation.donation_id)
        await self.notifier.publish([
            Event(type="TaskAssigned", recipient_id=task.volunteer_id,
                  donation_id=donation.id, task_id=task.id, actor_id=ngo_id),
        ])
        return donation

    async def mark_donation_delivered(self, donation_id: str, ngo_id: str) -> Donation:
        donation = await self._donation(donation_id)
        async with self.repo.locks.hold(donation_id, donation.assigned_volunteer_id):
            donation = await self._donation(donation_id)
            if donation.status != "accepted" or donation.completion_percentage != completion_for("accepted"):
                raise InvalidStateError(f"Donation cannot be delivered while {donation.status}")
            if donation.matched_ngo_id != ngo_id:
                raise ForbiddenError("Only the matching NGO can confirm delivery")

            changes: List = [self._move(donation, "delivered", ngo_id, note="Delivery confirmed by NGO")]
            task = await self._live_task(donation.id)
            if task:
                now = self.clock()
                changes.append(task.model_copy(update={
                    "status": "delivered",
                    "delivery_time": task.delivery_time or now,
                    "updated_at": now,
                }))
                volunteer = await self.repo.get_user(task.volunteer_id)
                if volunteer:
                    profile = volunteer.volunteer_profile or VolunteerProfile()
                    changes.append(volunteer.model_copy(update={
                        "volunteer_profile": profile.model_copy(update={
                            "completed_tasks": profile.completed_tasks + 1,
                        }),
                    }))
            donation = (await self.repo.commit(*changes))[0]

        logger.info("Donation %s marked delivered by NGO %s", donation.donation_id, ngo_id)
        await self.notifier.publish([
            Event(type="DeliveryCompleted", recipient_id=donation.donor_id,
                  donation_id=donation.id, task_id=donation.task_id, actor_id=ngo_id),
        ])
        return donation

    async def cancel_donation(self, donation_id: str, actor_id: str, reason: Optional[str] = None) -> Donation:
        # cancelled is a declared terminal state; no cancellation flow exists yet
        raise NotImplementedError("Donation cancellation is not supported")

    # ---------- tasks ----------
    async def accept_task(self, task_id: str, volunteer_id: str) -> VolunteerTask:
        task = await self._task(task_id)
        async with self.repo.locks.hold(task.id, task.donation_id):
            task = await self._task(task_id)
            if task.volunteer_id != volunteer_id:
                raise ForbiddenError("Task is assigned to another volunteer")
            if not can_transition("task", task.status, "accepted"):
                raise InvalidStateError(f"Task cannot be accepted while {task.status}")
            donation = await self._donation(task.donation_id)

            now = self.clock()
            updated_task = task.model_copy(update={
                "status": "accepted",
                "pickup_time": task.pickup_time or now,
                "updated_at": now,
            })
            updated_donation = self._move(donation, "accepted", volunteer_id,
                                          note="Volunteer accepted the delivery")
            task, donation = await self.repo.commit(updated_task, updated_donation)

        logger.info("Task %s accepted by volunteer %s", task.task_id, volunteer_id)
        data = {"estimated_time": task.estimated_time}
        await self.notifier.publish([
            Event(type="TaskAccepted", recipient_id=donation.donor_id, donation_id=donation.id,
                  task_id=task.id, actor_id=volunteer_id, data=data, audience="donor"),
            Event(type="TaskAccepted", recipient_id=task.ngo_id, donation_id=donation.id,
                  task_id=task.id, actor_id=volunteer_id, data=data, audience="ngo"),
        ])
        return task

    async def reject_task(self, task_id: str, volunteer_id: str) -> VolunteerTask:
        """Hand the task to the next eligible volunteer.

        Never raises for an empty pool: the task comes back unchanged, still
        ``assigned`` and still pointing at the volunteer who rejected it.
        """
        task = await self._task(task_id)
        async with self.repo.locks.hold(task.id, task.donation_id):
            task = await self._task(task_id)
            if task.status != "assigned" or task.volunteer_id != volunteer_id:
                logger.warning("Ignoring reject of task %s (status=%s, owner=%s, by=%s)",
                               task.task_id, task.status, task.volunteer_id, volunteer_id)
                return task

            choice = await self.policy.choose(exclude_id=volunteer_id)
            if not isinstance(choice, Assigned):
                logger.warning("Task %s left with volunteer %s: %s",
                               task.task_id, volunteer_id, choice.reason)
                return task

            async with self.repo.locks.hold(f"volunteer:{choice.volunteer_id}"):
                donation = await self._donation(task.donation_id)
                now = self.clock()
                updated_task = task.model_copy(update={
                    "volunteer_id": choice.volunteer_id,
                    "status": "assigned",
                    "updated_at": now,
                })
                updated_donation = donation.model_copy(update={
                    "assigned_volunteer_id": choice.volunteer_id,
                    "updated_at": now,
                })
                task, donation = await self.repo.commit(updated_task, updated_donation)

        logger.info("Task %s reassigned from %s to %s", task.task_id, volunteer_id, task.volunteer_id)
        await self.notifier.publish([
            Event(type="TaskAssigned", recipient_id=task.volunteer_id,
                  donation_id=donation.id, task_id=task.id),
        ])
        return task

    async def mark_task_delivered(self, task_id: str, volunteer_id: str) -> VolunteerTask:
        task = await self._task(task_id)
        async with self.repo.locks.hold(task.id, task.donation_id, volunteer_id):
            task = await self._task(task_id)
            if task.volunteer_id != volunteer_id:
                raise ForbiddenError("Only the assigned volunteer can deliver this task")
            if not can_transition("task", task.status, "delivered"):
                raise InvalidStateError(f"Task cannot be delivered while {task.status}")
            donation = await self._donation(task.donation_id)
            volunteer = await self.repo.require_user(volunteer_id)

            now = self.clock()
            updated_task = task.model_copy(update={
                "status": "delivered",
                "delivery_time": task.delivery_time or now,
                "updated_at": now,
            })
            updated_donation = self._move(donation, "delivered", volunteer_id,
                                          note="Delivered by volunteer")
            profile = volunteer.volunteer_profile or VolunteerProfile()
            updated_volunteer = volunteer.model_copy(update={
                "volunteer_profile": profile.model_copy(update={
                    "completed_tasks": profile.completed_tasks + 1,
                }),
            })
            task, donation, _ = await self.repo.commit(updated_task, updated_donation, updated_volunteer)

        logger.info("Task %s delivered by volunteer %s", task.task_id, volunteer_id)
        await self.notifier.publish([
            Event(type="DeliveryCompleted", recipient_id=task.ngo_id, donation_id=donation.id,
                  task_id=task.id, actor_id=volunteer_id),
            Event(type="DeliveryCompleted", recipient_id=donation.donor_id, donation_id=donation.id,
                  task_id=task.id, actor_id=volunteer_id),
        ])
        return task
