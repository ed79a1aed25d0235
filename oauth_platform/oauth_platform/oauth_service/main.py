"""
OAuth session service - signup, local and Google login, logout
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import uvicorn

from .config import settings
from .db import init_db
from .middleware import install_pipeline
from .routes import auth, health
from .utils.event_logger import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Configure logging and connect to the database before serving"""
    configure_logging()
    try:
        init_db()
    except Exception:
        logger.exception("Database unavailable, refusing to start")
        raise
    yield


app = FastAPI(
    title="OAuth Session Service",
    description="Cookie-session authentication with local and Google login",
    version="1.0.0",
    lifespan=lifespan
)

install_pipeline(app, settings)

app.mount("/static", StaticFiles(directory=settings.STATIC_DIR, check_dir=False), name="static")

# Include routers
app.include_router(health.router)
app.include_router(auth.router)


def run():
    configure_logging()
    logger.info("Server is running on %s", settings.SERVER_PORT)
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
