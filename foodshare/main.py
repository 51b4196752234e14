# foodshare/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodshare.core.config import settings
from foodshare.core.errors import FoodShareError
from foodshare.deps import get_repo
from foodshare.routers import admin as admin_router
from foodshare.routers import donations as donations_router
from foodshare.routers import notifications as notifications_router
from foodshare.routers import ratings as ratings_router
from foodshare.routers import stats as stats_router
from foodshare.routers import tasks as tasks_router
from foodshare.seed import seed_demo

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_demo:
        created = await seed_demo(get_repo())
        logger.info("Seeded %d demo users", len(created))
    yield

app = FastAPI(lifespan=lifespan, title="FoodShare API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(FoodShareError)
async def foodshare_error(request: Request, exc: FoodShareError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

app.include_router(donations_router.router)      # /api/donations
app.include_router(tasks_router.router)          # /api/tasks
app.include_router(ratings_router.router)        # /api/ratings
app.include_router(notifications_router.router)  # /api/notifications
app.include_router(stats_router.router)          # /api/stats
app.include_router(admin_router.router)          # /api/admin

@app.get("/health")
def health():
    return {"ok": True}
