import asyncio

from foodshare.deps import get_repo
from foodshare.seed import seed_demo

async def main():
    # existing demo emails are skipped, so reruns only report new rows
    created = await seed_demo(get_repo())
    for user in created:
        print(f"Seeded: {user.id} ({user.role})")
    if not created:
        print("Seeded: nothing new")
    return created

if __name__ == "__main__":
    asyncio.run(main())
