import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.logging_config import setup_logging
from app.db import database
from app.routers import stat_router
from app.routers import journal_router
from app.routers import media_router
from app.routers import reminder_router
from app.services import reminder_scheduler

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database.ensure_indexes()

    if reminder_scheduler.scheduler_enabled():
        reminder_scheduler.start_scheduler()
    yield
    reminder_scheduler.shutdown_scheduler()
    database.close()


app = FastAPI(
    title="Memory Journal Backend",
    description="Journal entries with moods, media and reminders.",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server Error"})


app.include_router(stat_router.router)
app.include_router(journal_router.router)
app.include_router(media_router.router)
app.include_router(reminder_router.router)
