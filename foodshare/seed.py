# foodshare/seed.py
"""Demo directory: one donor, one NGO, two volunteers and an admin.

Only loaded on request (``FOODSHARE_SEED_DEMO=1`` at startup);
nothing in the lifecycle core depends on these rows.
"""
from datetime import timedelta

from foodshare.models.common import Address, utcnow
from foodshare.models.user import DonorProfile, NGOProfile, User, VolunteerProfile
from foodshare.repos.inmemory import InMemoryRepo

def demo_users() -> list[User]:
    base = utcnow() - timedelta(days=30)
    city = Address(street="12 MG Road", city="Bengaluru", state="KA", pincode="560001")
    return [
        User(id="admin-1", full_name="Platform Admin", email="admin@foodshare.example.com",
             role="admin", is_verified=True, created_at=base),
        User(id="donor-1", full_name="Green Bowl Kitchen", email="donor@foodshare.example.com",
             role="donor", is_verified=True, created_at=base + timedelta(minutes=1),
             donor_profile=DonorProfile(business_name="Green Bowl Kitchen",
                                        business_type="restaurant", address=city)),
        User(id="ngo-1", full_name="Annadaan Trust", email="ngo@foodshare.example.com",
             role="ngo", is_verified=True, created_at=base + timedelta(minutes=2),
             ngo_profile=NGOProfile(organization_name="Annadaan Trust",
                                    registration_number="NGO-2291",
                                    address=Address(street="4 Church Street", city="Bengaluru"),
                                    capacity=200)),
        User(id="vol-1", full_name="Ravi Kumar", email="ravi@foodshare.example.com",
             role="volunteer", is_verified=True, created_at=base + timedelta(minutes=3),
             volunteer_profile=VolunteerProfile(vehicle_type="bike")),
        User(id="vol-2", full_name="Meera Shah", email="meera@foodshare.example.com",
             role="volunteer", is_verified=True, created_at=base + timedelta(minutes=4),
             volunteer_profile=VolunteerProfile(vehicle_type="car")),
    ]

async def seed_demo(repo: InMemoryRepo) -> list[User]:
    created = []
    for user in demo_users():
        if await repo.find_user_by_email(user.email):
            continue
        created.append(await repo.create_user(user))
    return created
