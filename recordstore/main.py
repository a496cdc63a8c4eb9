"""
Stream Record Store Application Entry Point

FastAPI application exposing user profiles and stream-session records
stored in MongoDB.
"""

from contextlib import asynccontextmanager
import logging
import sys
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import ORJSONResponse, JSONResponse

from recordstore.config import Settings, get_settings
from recordstore.models import HealthResponse, ReadyResponse
from recordstore.db.mongo import get_store
from recordstore.repos.record_store import RecordStore
from recordstore.routers.streams import router as streams_router
from recordstore.routers.users import router as users_router
from recordstore.utils.errors import ConfigurationError

# Logging configuration
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager

    Builds the record store once per process and closes its MongoDB
    client on shutdown.
    """
    settings: Settings = get_settings()

    # Валидация настроек при старте
    try:
        settings.validate_required()
        logger.info("✅ Configuration validated")
    except ConfigurationError as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        if settings.app_env == "production":
            raise  # Fail fast in production
        logger.warning("⚠️ Continuing with invalid config (development mode)")

    logger.info("📦 Connecting to MongoDB...")
    store = RecordStore.from_settings(settings)
    try:
        await store.ensure_indexes()
        logger.info("✅ MongoDB connected, indexes ensured")
    except Exception as e:
        logger.error(f"❌ MongoDB connection failed: {e}")
        store.close()
        raise

    app.state.store = store
    logger.info("✅ Application ready!")

    try:
        yield
    finally:
        logger.info("🛑 Shutting down...")
        store.close()
        app.state.store = None
        logger.info("✅ Shutdown complete")


app = FastAPI(
    title="Stream Record Store API",
    description="User profiles and stream-session records backed by MongoDB",
    version="1.0.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def global_handler(request: Request, exc: Exception):
    logger.error(f"Global error: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint"""
    return HealthResponse(status="ok", time=_now())


@app.get("/ready", response_model=ReadyResponse)
async def ready(store: RecordStore = Depends(get_store)) -> ReadyResponse:
    """Проверка доступности базы данных"""
    return ReadyResponse(ready=await store.ping(), time=_now())


api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(users_router, prefix="/users", tags=["users"])
api_v1.include_router(streams_router, prefix="/streams", tags=["streams"])
app.include_router(api_v1)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "recordstore.main:app",
        host=settings.app_host,
        port=settings.port,
        reload=settings.app_env == "development",
    )
