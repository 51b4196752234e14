from dotenv import load_dotenv
load_dotenv()

from foodshare.repos.inmemory import InMemoryRepo
from foodshare.services.directory import UserDirectory
from foodshare.services.lifecycle import LifecycleEngine
from foodshare.services.notifications import NotificationCenter
from foodshare.services.ratings import RatingAggregator

class Services:
    def __init__(self, repo: InMemoryRepo | None = None):
        self.repo = repo or InMemoryRepo()
        self.notifier = NotificationCenter(self.repo)
        self.engine = LifecycleEngine(self.repo, self.notifier)
        self.ratings = RatingAggregator(self.repo, self.notifier)
        self.directory = UserDirectory(self.repo, self.notifier)

_services = Services()

def reset_services() -> Services:
    """Swap in an empty store (tests, demo resets)."""
    global _services
    _services = Services()
    return _services

def get_services() -> Services:
    return _services

def get_repo() -> InMemoryRepo:
    return _services.repo

def get_engine() -> LifecycleEngine:
    return _services.engine

def get_ratings() -> RatingAggregator:
    return _services.ratings

def get_notifier() -> NotificationCenter:
    return _services.notifier

def get_directory() -> UserDirectory:
    return _services.directory
