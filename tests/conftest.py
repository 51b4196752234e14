# tests/conftest.py
from datetime import timedelta

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from foodshare.deps import Services, reset_services
from foodshare.main import app
from foodshare.models.common import Address, utcnow
from foodshare.models.user import DonorProfile, NGOProfile, User, VolunteerProfile

BASE = utcnow() - timedelta(days=1)

@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"

@pytest.fixture(scope="session")
async def test_client():
    async with LifespanManager(app):
        transport = ASGITransport(app=app, raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

@pytest.fixture
def services() -> Services:
    return Services()

@pytest.fixture
def api_services() -> Services:
    # the app resolves services per request, so swapping them isolates tests
    return reset_services()

def make_user(uid: str, role: str, minutes: int = 0, **kw) -> User:
    profiles = {
        "donor": {"donor_profile": DonorProfile(business_name=f"{uid} kitchen")},
        "ngo": {"ngo_profile": NGOProfile(organization_name=f"{uid} trust",
                                          address=Address(street="4 Church Street", city="Pune"))},
        "volunteer": {"volunteer_profile": VolunteerProfile(vehicle_type="bike")},
    }
    fields = dict(
        id=uid,
        full_name=uid.title(),
        email=f"{uid}@foodshare.example.com",
        role=role,
        is_verified=True,
        created_at=BASE + timedelta(minutes=minutes),
        **profiles.get(role, {}),
    )
    fields.update(kw)
    return User(**fields)

async def add_users(services: Services, *users: User):
    for u in users:
        await services.repo.create_user(u)

def sent(services: Services, kind: str = None):
    """Notifications written so far, oldest first, optionally of one type."""
    return [n for n in services.repo.notifications.values() if kind is None or n.type == kind]

def food(hours: float = 1.0, **kw) -> dict:
    d = {
        "category": "Cooked Meals",
        "name": "Veg Biryani",
        "quantity": 20,
        "unit": "plates",
        "expiry_time": (utcnow() + timedelta(hours=hours)).isoformat(),
        "dietary_info": ["vegetarian"],
    }
    d.update(kw)
    return d

def location(**kw) -> dict:
    d = {
        "address": {"street": "12 MG Road", "city": "Pune", "state": "MH", "pincode": "411001"},
        "coordinates": [73.85, 18.52],
    }
    d.update(kw)
    return d

@pytest.fixture
async def people(services):
    """donor-1, ngo-1 and one volunteer (vol-1)."""
    await add_users(
        services,
        make_user("donor-1", "donor"),
        make_user("ngo-1", "ngo", minutes=1),
        make_user("vol-1", "volunteer", minutes=2),
    )
    return services
