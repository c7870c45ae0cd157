"""
Main module for Mindmap API.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
import sentry_sdk
import structlog

from core.config import settings
from core.log_config import configure_logging

from api.mindmap_routes import router as mindmap_router

configure_logging()
logger = structlog.getLogger(__name__)


async def startup_event():
    """Initialize resources on startup."""
    logger.info("Initializing application resources...")

    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            # Enable sending logs to Sentry
            enable_logs=True,
            traces_sample_rate=1.0,
        )
    else:
        logger.info("SENTRY_DSN not set, error reporting disabled")

    if not settings.GOOGLE_API_KEY:
        logger.warning(
            "GOOGLE_API_KEY environment variable not set. "
            "Mind map generation will fail until it is configured."
        )


async def shutdown_event():
    """Cleanup resources on shutdown."""
    logger.info("Shutting down application...")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown events."""
    # Startup event
    await startup_event()

    yield

    # Shutdown event
    await shutdown_event()


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health")
def health():
    return {"status": "ok"}

# Include API routers
app.include_router(mindmap_router, prefix="/api", tags=["mindmaps"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
