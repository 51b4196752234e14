import pytest

from foodshare.core.errors import NotFoundError
from foodshare.services.notifications import Event, render

pytestmark = pytest.mark.anyio

def test_render_fills_template_data():
    note = render(Event(type="TaskAccepted", recipient_id="donor-1", donation_id="d1",
                        data={"estimated_time": 30}))
    assert note.type == "task_accepted"
    assert "30 minutes" in note.message
    assert note.related_donation_id == "d1"
    assert note.is_read is False

def test_render_picks_the_recipient_variant():
    donor = render(Event(type="TaskAccepted", recipient_id="donor-1", audience="donor",
                         data={"estimated_time": 30}))
    ngo = render(Event(type="TaskAccepted", recipient_id="ngo-1", audience="ngo",
                       data={"estimated_time": 30}))
    assert donor.title == "Delivery Driver Assigned"
    assert ngo.title == "Driver Assigned for Delivery"
    assert "delivered in approximately 30 minutes" in ngo.message
    assert donor.type == ngo.type == "task_accepted"

def test_render_tolerates_missing_data():
    note = render(Event(type="NewDonationAvailable", recipient_id="ngo-1"))
    assert note.title == "New Donation Available"

async def test_inbox_newest_first(services):
    await services.notifier.publish([
        Event(type="DonationAccepted", recipient_id="donor-1", donation_id="d1"),
        Event(type="DeliveryCompleted", recipient_id="donor-1", donation_id="d1"),
        Event(type="TaskAssigned", recipient_id="vol-1", donation_id="d1"),
    ])
    inbox = await services.notifier.list_for_user("donor-1")
    assert [n.type for n in inbox] == ["delivery_completed", "donation_accepted"]

async def test_mark_as_read_is_idempotent(services):
    (note,) = await services.notifier.publish([
        Event(type="DonationRated", recipient_id="donor-1", data={"rating": 5}),
    ])
    first = await services.notifier.mark_as_read(note.id)
    second = await services.notifier.mark_as_read(note.id)
    assert first.is_read and second.is_read
    assert (await services.repo.get_notification(note.id)).is_read

async def test_mark_missing_notification(services):
    with pytest.raises(NotFoundError):
        await services.notifier.mark_as_read("missing")
